from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Request, Response
from starlette.datastructures import UploadFile

from metadata_api.core.config import get_settings
from metadata_api.core.errors import MissingFile, MissingWatermarkContent
from metadata_api.core.logging import configure_logging
from metadata_api.core.security import verify_internal_key
from metadata_api.models import WatermarkSpec
from metadata_api.services.document import PdfDocument
from metadata_api.services.provenance import stamp_provenance
from metadata_api.services.watermark_service import apply_watermark, make_fetcher, resolve_image
from metadata_api.utils.file_utils import attachment_headers, read_optional_upload, read_required_pdf
from metadata_api.utils.geometry import hex_to_rgb

router = APIRouter(prefix="/pdf", tags=["PDF Watermark"], dependencies=[Depends(verify_internal_key)])

logger = configure_logging()

FORM_FIELDS = ("text", "size", "color", "position", "scale", "shadow", "degrees", "opacity")


def _form_text(value) -> Optional[str]:
    return value if isinstance(value, str) else None


@router.post("/watermark", summary="Stamp text and/or image watermark on every page")
async def watermark_pdf(request: Request) -> Response:
    form = await request.form()

    pdf_upload = form.get("pdf")
    if not isinstance(pdf_upload, UploadFile):
        raise MissingFile("Upload a PDF file under field 'pdf'")
    pdf_bytes = await read_required_pdf(pdf_upload, "Upload a PDF file under field 'pdf'")

    image_field = form.get("image")
    image_upload = image_field if isinstance(image_field, UploadFile) else None
    image_bytes = await read_optional_upload(image_upload)

    spec = WatermarkSpec.from_form(
        image=_form_text(image_field),
        image_bytes=image_bytes,
        image_content_type=image_upload.content_type if image_upload else None,
        **{name: _form_text(form.get(name)) for name in FORM_FIELDS},
    )
    if not spec.has_content:
        raise MissingWatermarkContent()

    settings = get_settings()
    try:
        if spec.text:
            hex_to_rgb(spec.color)
        image = await resolve_image(spec, make_fetcher(settings.image_fetch_timeout))

        document = PdfDocument.load(pdf_bytes)
        apply_watermark(document, spec, image)
        stamp_provenance(document, settings.provenance())
        output = document.save()
    except HTTPException:
        raise
    except Exception as exc:
        logger.exception("Watermark error")
        raise HTTPException(status_code=500, detail=str(exc))

    logger.info(
        "Watermarked %s (%s pages, text=%s, image=%s)",
        pdf_upload.filename,
        document.page_count,
        bool(spec.text),
        image is not None,
    )
    return Response(
        content=output,
        media_type="application/pdf",
        headers=attachment_headers("watermarked.pdf"),
    )
