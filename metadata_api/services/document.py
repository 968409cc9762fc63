from __future__ import annotations

import logging
from datetime import datetime
from io import BytesIO
from typing import Callable, List, Optional, Tuple, TypeVar

from pypdf import PageObject, PdfReader, PdfWriter
from pypdf.errors import PyPdfError
from pypdf.generic import DictionaryObject

from metadata_api.utils.pdf_dates import format_pdf_date

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Failures that can surface while walking a damaged trailer / Info dictionary.
_LOOKUP_ERRORS = (PyPdfError, AttributeError, KeyError, TypeError, ValueError, IndexError)


def _as_text(value: object) -> str:
    if isinstance(value, bytes):
        return value.decode("latin-1")
    return str(value)


def _text_entry(info: DictionaryObject, name: str) -> Optional[str]:
    value = info.get(name)
    if value is None:
        return None
    return _as_text(value.get_object())


class PdfDocument:
    """
    One in-memory PDF owned by a single request.

    Reads (trailer, header, Info lookups, metadata getters) go through the
    ``PdfReader``. Every mutation goes through a ``PdfWriter`` cloned from it
    on first use, which is what ``save()`` serializes.
    """

    def __init__(self, reader: PdfReader) -> None:
        self.reader = reader
        self._writer: Optional[PdfWriter] = None

    @classmethod
    def load(cls, data: bytes) -> "PdfDocument":
        return cls(PdfReader(BytesIO(data), strict=False))

    @property
    def writer(self) -> PdfWriter:
        if self._writer is None:
            writer = PdfWriter(clone_from=self.reader)
            info = self.info_dict()
            if info:
                writer.add_metadata({key: value for key, value in info.items()})
            self._writer = writer
        return self._writer

    # ------------------------------------------------------------------
    # Pages
    # ------------------------------------------------------------------
    @property
    def pages(self) -> List[PageObject]:
        """Output pages; drawing on them changes what ``save()`` returns."""
        return list(self.writer.pages)

    @property
    def page_count(self) -> int:
        return len(self.reader.pages)

    def first_page_size(self) -> Optional[Tuple[float, float]]:
        if not self.page_count:
            return None
        box = self.reader.pages[0].mediabox
        return float(box.width), float(box.height)

    @property
    def header_version(self) -> str:
        try:
            header = self.reader.pdf_header
        except _LOOKUP_ERRORS:
            return "Unknown"
        version = (header or "").replace("%PDF-", "").strip()
        return version or "Unknown"

    # ------------------------------------------------------------------
    # Raw Info dictionary
    # ------------------------------------------------------------------
    def info_dict(self) -> Optional[DictionaryObject]:
        """The source document's Info dictionary, or None if absent or unusable."""
        try:
            ref = self.reader.trailer.get("/Info")
            if ref is None:
                return None
            info = ref.get_object()
        except _LOOKUP_ERRORS as exc:
            logger.debug("Unreadable Info dictionary: %s", exc)
            return None
        return info if isinstance(info, DictionaryObject) else None

    def lookup(self, key: str) -> Optional[str]:
        """Raw Info entry as text; never raises."""
        info = self.info_dict()
        if info is None:
            return None
        name = key if key.startswith("/") else f"/{key}"
        try:
            value = info.get(name)
            if value is None:
                return None
            value = value.get_object()
        except _LOOKUP_ERRORS as exc:
            logger.debug("Unreadable Info entry %s: %s", name, exc)
            return None
        return _as_text(value) or None

    def ensure_info(self) -> None:
        if self.writer.metadata is None:
            self.writer.add_metadata({})

    def set_info(self, key: str, value: str) -> None:
        name = key if key.startswith("/") else f"/{key}"
        self.writer.add_metadata({name: value})

    # ------------------------------------------------------------------
    # Structured accessors
    # ------------------------------------------------------------------
    # Getters describe the document as loaded; setters only affect the output.
    def _structured(self, getter: Callable[..., Optional[T]]) -> Optional[T]:
        try:
            info = self.reader.metadata
            if info is None:
                return None
            return getter(info) or None
        except _LOOKUP_ERRORS as exc:
            logger.debug("Structured metadata accessor failed: %s", exc)
            return None

    @property
    def title(self) -> Optional[str]:
        return self._structured(lambda info: info.title)

    @property
    def author(self) -> Optional[str]:
        return self._structured(lambda info: info.author)

    @property
    def subject(self) -> Optional[str]:
        return self._structured(lambda info: info.subject)

    @property
    def keywords(self) -> Optional[str]:
        return self._structured(lambda info: _text_entry(info, "/Keywords"))

    @property
    def creator(self) -> Optional[str]:
        return self._structured(lambda info: info.creator)

    @property
    def producer(self) -> Optional[str]:
        return self._structured(lambda info: info.producer)

    @property
    def creation_date(self) -> Optional[datetime]:
        return self._structured(lambda info: info.creation_date)

    @property
    def modification_date(self) -> Optional[datetime]:
        return self._structured(lambda info: info.modification_date)

    def set_title(self, value: str) -> None:
        self.set_info("/Title", value)

    def set_author(self, value: str) -> None:
        self.set_info("/Author", value)

    def set_subject(self, value: str) -> None:
        self.set_info("/Subject", value)

    def set_keywords(self, keywords: List[str]) -> None:
        self.set_info("/Keywords", " ".join(keywords))

    def set_creator(self, value: str) -> None:
        self.set_info("/Creator", value)

    def set_producer(self, value: str) -> None:
        self.set_info("/Producer", value)

    def set_creation_date(self, value: datetime) -> None:
        self.set_info("/CreationDate", format_pdf_date(value))

    def set_modification_date(self, value: datetime) -> None:
        self.set_info("/ModDate", format_pdf_date(value))

    # ------------------------------------------------------------------
    def save(self) -> bytes:
        buffer = BytesIO()
        self.writer.write(buffer)
        buffer.seek(0)
        return buffer.getvalue()
