from typing import Optional

from fastapi import APIRouter, Depends, File, Form, HTTPException, Response, UploadFile

from metadata_api.core.logging import configure_logging
from metadata_api.core.security import verify_internal_key
from metadata_api.models import MetadataFields
from metadata_api.services.document import PdfDocument
from metadata_api.services.metadata_service import read_metadata, write_metadata
from metadata_api.utils.file_utils import attachment_headers, read_required_pdf

router = APIRouter(prefix="/pdf/metadata", tags=["PDF Metadata"], dependencies=[Depends(verify_internal_key)])

logger = configure_logging()


@router.post("/get", summary="Read document metadata, custom fields and technical facts")
async def get_metadata(pdf: Optional[UploadFile] = File(None)) -> dict:
    data = await read_required_pdf(pdf, "Please upload a PDF file.")

    try:
        document = PdfDocument.load(data)
        result = read_metadata(document, data)
    except HTTPException:
        raise
    except Exception as exc:
        logger.exception("Metadata read error")
        raise HTTPException(status_code=500, detail=str(exc))

    logger.info("Read metadata of %s (%s pages)", pdf.filename, result["technical"]["pageCount"])
    return result


@router.post("/set", summary="Overwrite document metadata fields and return the PDF")
async def set_metadata(
    pdf: Optional[UploadFile] = File(None),
    title: Optional[str] = Form(None),
    author: Optional[str] = Form(None),
    subject: Optional[str] = Form(None),
    keywords: Optional[str] = Form(None),
    creator: Optional[str] = Form(None),
    producer: Optional[str] = Form(None),
    creationDate: Optional[str] = Form(None),
    modDate: Optional[str] = Form(None),
) -> Response:
    data = await read_required_pdf(pdf, "Upload a PDF")
    fields = MetadataFields(
        title=title,
        author=author,
        subject=subject,
        keywords=keywords,
        creator=creator,
        producer=producer,
        creationDate=creationDate,
        modDate=modDate,
    )

    try:
        document = PdfDocument.load(data)
        write_metadata(document, fields)
        output = document.save()
    except HTTPException:
        raise
    except Exception as exc:
        logger.exception("Metadata edit error")
        raise HTTPException(status_code=500, detail=str(exc))

    logger.info(
        "Updated metadata of %s: %s",
        pdf.filename,
        ", ".join(sorted(fields.model_dump(exclude_none=True))) or "no fields",
    )
    return Response(
        content=output,
        media_type="application/pdf",
        headers=attachment_headers("metadata-updated.pdf"),
    )
