import re
from typing import Tuple

from metadata_api.core.errors import InvalidColor

DEFAULT_MARGIN = 30
POSITIONS = {"top-left", "top-right", "bottom-left", "bottom-right", "center"}

_HEX_COLOR = re.compile(r"^#?([0-9a-fA-F]{6})$")


def hex_to_rgb(value: str) -> Tuple[float, float, float]:
    """Convert a six digit hex color (``#rrggbb`` or ``rrggbb``) to 0..1 channels."""
    match = _HEX_COLOR.match((value or "").strip())
    if not match:
        raise InvalidColor(f"Invalid hex color: {value!r}")

    packed = int(match.group(1), 16)
    r = ((packed >> 16) & 255) / 255
    g = ((packed >> 8) & 255) / 255
    b = (packed & 255) / 255
    return r, g, b


def anchor_for(
    position: str,
    page_width: float,
    page_height: float,
    margin: float = DEFAULT_MARGIN,
) -> Tuple[float, float]:
    """Page-space anchor point for a named position; unknown names mean center."""
    if position == "top-left":
        return margin, page_height - margin
    if position == "top-right":
        return page_width - margin, page_height - margin
    if position == "bottom-left":
        return margin, margin
    if position == "bottom-right":
        return page_width - margin, margin
    return page_width / 2, page_height / 2
