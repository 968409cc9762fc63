from __future__ import annotations

from datetime import datetime
from typing import Dict, Optional

from metadata_api.models import MetadataFields
from metadata_api.services.document import PdfDocument
from metadata_api.utils.file_utils import kilobytes
from metadata_api.utils.pdf_dates import parse_input_date, parse_pdf_date, to_iso

CUSTOM_FIELDS = {
    "company": "Company",
    "manager": "Manager",
    "sourceModified": "SourceModified",
    "category": "Category",
    "comments": "Comments",
}


def _compact(values: Dict[str, Optional[str]]) -> Dict[str, str]:
    return {key: value for key, value in values.items() if value}


def _date_field(structured: Optional[datetime], raw: Optional[str]) -> Optional[str]:
    if structured is not None:
        return to_iso(structured)
    parsed = parse_pdf_date(raw)
    return to_iso(parsed) if parsed else None


def read_metadata(document: PdfDocument, raw: bytes) -> dict:
    """
    Collect primary, custom and technical metadata of a loaded document.

    Each primary field comes from the structured accessor first and the raw
    Info dictionary second. Empty fields are dropped from the first two groups.
    """
    metadata = {
        "title": document.title or document.lookup("Title"),
        "author": document.author or document.lookup("Author"),
        "subject": document.subject or document.lookup("Subject"),
        "keywords": document.keywords or document.lookup("Keywords"),
        "creator": document.creator or document.lookup("Creator"),
        "producer": document.producer or document.lookup("Producer"),
        "creationDate": _date_field(document.creation_date, document.lookup("CreationDate")),
        "modificationDate": _date_field(document.modification_date, document.lookup("ModDate")),
    }

    custom_fields = {name: document.lookup(key) for name, key in CUSTOM_FIELDS.items()}

    first_page = document.first_page_size()
    technical = {
        "pageCount": document.page_count,
        "fileSizeKB": kilobytes(len(raw)),
        "pdfVersion": document.header_version,
        "pageSize": f"{first_page[0]:.2f}x{first_page[1]:.2f}" if first_page else "Unknown",
    }

    return {
        "metadata": _compact(metadata),
        "customFields": _compact(custom_fields),
        "technical": technical,
    }


def write_metadata(document: PdfDocument, fields: MetadataFields) -> None:
    """Apply the non-empty overrides; dates are validated before anything is written."""
    creation_date = parse_input_date(fields.creationDate) if fields.creationDate else None
    modification_date = parse_input_date(fields.modDate) if fields.modDate else None

    if fields.title:
        document.set_title(fields.title)
    if fields.author:
        document.set_author(fields.author)
    if fields.subject:
        document.set_subject(fields.subject)
    keywords = fields.keyword_list()
    if keywords:
        document.set_keywords(keywords)
    if fields.creator:
        document.set_creator(fields.creator)
    if fields.producer:
        document.set_producer(fields.producer)
    if creation_date:
        document.set_creation_date(creation_date)
    if modification_date:
        document.set_modification_date(modification_date)
