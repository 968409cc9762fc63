import math
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_SIZE = 50.0
DEFAULT_DEGREES = 45.0
DEFAULT_OPACITY = 0.3
DEFAULT_SCALE = 1.0
DEFAULT_COLOR = "#cccccc"
DEFAULT_POSITION = "center"

_TRUTHY = {"true", "1", "yes", "on"}


def _to_float(raw: Optional[str]) -> Optional[float]:
    if raw is None:
        return None
    try:
        value = float(str(raw).strip())
    except ValueError:
        return None
    return None if math.isnan(value) else value


def coerce_size(raw: Optional[str]) -> float:
    value = _to_float(raw)
    if value is None or math.isinf(value) or value < 1:
        return DEFAULT_SIZE
    return value


def coerce_degrees(raw: Optional[str]) -> float:
    if raw is None:
        return DEFAULT_DEGREES
    value = _to_float(raw)
    if value is None or math.isinf(value):
        return 0.0
    return value


def coerce_opacity(raw: Optional[str]) -> float:
    value = _to_float(raw)
    if value is None:
        return DEFAULT_OPACITY
    return min(max(value, 0.0), 1.0)


def coerce_scale(raw: Optional[str]) -> float:
    value = _to_float(raw)
    if value is None or math.isinf(value) or value <= 0:
        return DEFAULT_SCALE
    return value


def coerce_flag(raw: Optional[str]) -> bool:
    return str(raw or "").strip().lower() in _TRUTHY


def _clean(raw: Optional[str]) -> Optional[str]:
    if raw is None:
        return None
    value = str(raw).strip()
    return value or None


class WatermarkSpec(BaseModel):
    """Watermark parameters for one request, already coerced and immutable."""

    model_config = ConfigDict(frozen=True)

    text: Optional[str] = None
    image_source: Optional[str] = Field(default=None, description="data: URL or http(s) URL.")
    image_bytes: Optional[bytes] = Field(default=None, description="Uploaded image body.")
    image_content_type: Optional[str] = None
    size: float = DEFAULT_SIZE
    color: str = DEFAULT_COLOR
    position: str = DEFAULT_POSITION
    scale: float = DEFAULT_SCALE
    shadow: bool = False
    degrees: float = DEFAULT_DEGREES
    opacity: float = Field(default=DEFAULT_OPACITY, ge=0, le=1)

    @classmethod
    def from_form(
        cls,
        *,
        text: Optional[str] = None,
        image: Optional[str] = None,
        image_bytes: Optional[bytes] = None,
        image_content_type: Optional[str] = None,
        size: Optional[str] = None,
        color: Optional[str] = None,
        position: Optional[str] = None,
        scale: Optional[str] = None,
        shadow: Optional[str] = None,
        degrees: Optional[str] = None,
        opacity: Optional[str] = None,
    ) -> "WatermarkSpec":
        return cls(
            text=text if text else None,
            image_source=_clean(image),
            image_bytes=image_bytes or None,
            image_content_type=_clean(image_content_type),
            size=coerce_size(size),
            color=_clean(color) or DEFAULT_COLOR,
            position=_clean(position) or DEFAULT_POSITION,
            scale=coerce_scale(scale),
            shadow=coerce_flag(shadow),
            degrees=coerce_degrees(degrees),
            opacity=coerce_opacity(opacity),
        )

    @property
    def font_size(self) -> int:
        return int(self.size)

    @property
    def has_content(self) -> bool:
        return bool(self.text or self.image_source or self.image_bytes)
