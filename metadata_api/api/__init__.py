
from . import metadata, watermark

routers = [
    watermark.router,
    metadata.router,
]

__all__ = [
    "routers",
]
