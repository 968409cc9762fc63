from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from metadata_api.services.document import PdfDocument


@dataclass(frozen=True)
class ProvenanceConfig:
    producer_name: str
    creator_name: str
    comment_text: str
    title: str


def stamp_provenance(document: "PdfDocument", config: ProvenanceConfig) -> None:
    """
    Brand an outgoing document with fixed producer, creator, comment and title.

    The Info dictionary is created when the document has none. Any title the
    caller had is overwritten.
    """
    document.ensure_info()
    document.set_info("/Comments", config.comment_text)
    document.set_producer(config.producer_name)
    document.set_creator(config.creator_name)
    document.set_title(config.title)
