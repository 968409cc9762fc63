
from .metadata import MetadataFields
from .watermark import WatermarkSpec

__all__ = [
    "MetadataFields",
    "WatermarkSpec",
]
