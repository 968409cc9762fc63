from __future__ import annotations

import base64
import logging
from dataclasses import dataclass
from enum import Enum
from io import BytesIO
from typing import Awaitable, Callable, List, Optional, Tuple, Union

import requests
from PIL import Image
from fastapi.concurrency import run_in_threadpool
from pypdf import PdfReader
from reportlab.lib.colors import Color
from reportlab.lib.utils import ImageReader
from reportlab.pdfgen import canvas

from metadata_api.core.errors import MissingWatermarkContent, UnsupportedImageFormat, UpstreamFetchFailure
from metadata_api.models import WatermarkSpec
from metadata_api.services.document import PdfDocument
from metadata_api.utils.geometry import anchor_for, hex_to_rgb

logger = logging.getLogger(__name__)

FONT_NAME = "Helvetica-Bold"
SHADOW_OFFSET = (2.0, -2.0)
SHADOW_COLOR = (0.0, 0.0, 0.0)


class ImageFormat(str, Enum):
    png = "png"
    jpeg = "jpeg"


_MAGIC = (
    (b"\x89PNG\r\n\x1a\n", ImageFormat.png),
    (b"\xff\xd8\xff", ImageFormat.jpeg),
)


def sniff_image_format(data: bytes) -> Optional[ImageFormat]:
    for signature, image_format in _MAGIC:
        if data.startswith(signature):
            return image_format
    return None


@dataclass(frozen=True)
class ResolvedImage:
    format: ImageFormat
    reader: ImageReader
    width: float
    height: float


@dataclass(frozen=True)
class TextRun:
    text: str
    x: float
    y: float
    size: int
    color: Tuple[float, float, float]
    rotation: float
    opacity: float
    font: str = FONT_NAME


@dataclass(frozen=True)
class ImagePlacement:
    x: float
    y: float
    width: float
    height: float
    rotation: float
    opacity: float


DrawOperation = Union[TextRun, ImagePlacement]
Fetcher = Callable[[str], Awaitable[bytes]]


# ----------------------------------------------------------------------
# Image resolution (once per request)
# ----------------------------------------------------------------------
def decode_image(data: bytes, declared: Optional[str] = None) -> ResolvedImage:
    image_format = sniff_image_format(data)
    if image_format is None:
        raise UnsupportedImageFormat(
            f"Watermark image must be a PNG or JPEG file (declared type: {declared or 'unknown'})"
        )
    if declared and image_format.value not in declared.lower().replace("jpg", "jpeg"):
        logger.debug("Declared image type %s disagrees with content (%s)", declared, image_format.value)

    # Full decode up front; reportlab only reads the header until drawing.
    with Image.open(BytesIO(data)) as decoded:
        decoded.load()

    reader = ImageReader(BytesIO(data))
    width, height = reader.getSize()
    return ResolvedImage(format=image_format, reader=reader, width=float(width), height=float(height))


def decode_data_url(value: str) -> bytes:
    """Body of a ``data:image/...;base64,`` URL."""
    _, _, payload = value.partition(",")
    if not payload:
        raise ValueError("data URL has no payload")
    return base64.b64decode(payload, validate=False)


def make_fetcher(timeout: float) -> Fetcher:
    def _get(url: str) -> bytes:
        try:
            response = requests.get(url, timeout=timeout)
            response.raise_for_status()
        except requests.RequestException as exc:
            raise UpstreamFetchFailure(f"Failed to fetch watermark image: {exc}") from exc
        return response.content

    async def fetch(url: str) -> bytes:
        return await run_in_threadpool(_get, url)

    return fetch


async def resolve_image(spec: WatermarkSpec, fetch: Fetcher) -> Optional[ResolvedImage]:
    """
    Resolve the watermark image: uploaded bytes, then a base64 data URL, then
    a remote URL.

    An uploaded file that is not PNG/JPEG is rejected. Problems with the
    inline or remote image only drop the image.
    """
    if spec.image_bytes:
        try:
            return decode_image(spec.image_bytes, spec.image_content_type)
        except (OSError, ValueError) as exc:
            raise UnsupportedImageFormat(f"Could not decode watermark image: {exc}") from exc

    source = spec.image_source
    if not source:
        return None

    try:
        if source.startswith("data:image"):
            data = decode_data_url(source)
            declared = source[len("data:"):].split(";", 1)[0]
        elif source.startswith("http"):
            data = await fetch(source)
            declared = None
        else:
            logger.warning("Ignoring watermark image that is neither a data URL nor a URL")
            return None
        return decode_image(data, declared)
    except (UpstreamFetchFailure, UnsupportedImageFormat, OSError, ValueError) as exc:
        logger.warning("Watermark image unavailable, continuing without it: %s", exc)
        return None


# ----------------------------------------------------------------------
# Compositing
# ----------------------------------------------------------------------
def plan_page(
    spec: WatermarkSpec,
    width: float,
    height: float,
    image: Optional[ResolvedImage] = None,
) -> List[DrawOperation]:
    """Draw operations for one page, anchored by position and centered on the anchor."""
    x, y = anchor_for(spec.position, width, height)
    operations: List[DrawOperation] = []

    if spec.text:
        half = spec.size / 2
        if spec.shadow:
            operations.append(
                TextRun(
                    text=spec.text,
                    x=x - half + SHADOW_OFFSET[0],
                    y=y - half + SHADOW_OFFSET[1],
                    size=spec.font_size,
                    color=SHADOW_COLOR,
                    rotation=spec.degrees,
                    opacity=spec.opacity * 0.5,
                )
            )
        operations.append(
            TextRun(
                text=spec.text,
                x=x - half,
                y=y - half,
                size=spec.font_size,
                color=hex_to_rgb(spec.color),
                rotation=spec.degrees,
                opacity=spec.opacity,
            )
        )

    if image is not None:
        image_width = image.width * spec.scale
        image_height = image.height * spec.scale
        operations.append(
            ImagePlacement(
                x=x - image_width / 2,
                y=y - image_height / 2,
                width=image_width,
                height=image_height,
                rotation=spec.degrees,
                opacity=spec.opacity,
            )
        )

    return operations


def _render_overlay(
    operations: List[DrawOperation],
    width: float,
    height: float,
    image: Optional[ResolvedImage],
) -> PdfReader:
    packet = BytesIO()
    c = canvas.Canvas(packet, pagesize=(width, height))

    for operation in operations:
        c.saveState()
        c.translate(operation.x, operation.y)
        c.rotate(operation.rotation)
        c.setFillAlpha(operation.opacity)
        if isinstance(operation, TextRun):
            c.setFillColor(Color(*operation.color, alpha=operation.opacity))
            c.setFont(operation.font, operation.size)
            c.drawString(0, 0, operation.text)
        elif image is not None:
            c.drawImage(image.reader, 0, 0, width=operation.width, height=operation.height, mask="auto")
        c.restoreState()

    c.save()
    packet.seek(0)
    return PdfReader(packet)


def apply_watermark(document: PdfDocument, spec: WatermarkSpec, image: Optional[ResolvedImage] = None) -> None:
    """Stamp the watermark onto every page of ``document`` in place."""
    if not spec.has_content:
        raise MissingWatermarkContent()
    if spec.text:
        hex_to_rgb(spec.color)

    for page in document.pages:
        width = float(page.mediabox.width)
        height = float(page.mediabox.height)
        operations = plan_page(spec, width, height, image)
        if not operations:
            continue
        overlay = _render_overlay(operations, width, height, image)
        page.merge_page(overlay.pages[0])
