from typing import List, Optional

from pydantic import BaseModel, Field, field_validator


class MetadataFields(BaseModel):
    """Metadata overrides sent to /pdf/metadata/set; blank fields are left untouched."""

    title: Optional[str] = None
    author: Optional[str] = None
    subject: Optional[str] = None
    keywords: Optional[str] = Field(default=None, description="Comma separated keywords.")
    creator: Optional[str] = None
    producer: Optional[str] = None
    creationDate: Optional[str] = None
    modDate: Optional[str] = None

    @field_validator("*", mode="before")
    @classmethod
    def _blank_to_none(cls, value):
        if value is None:
            return None
        value = str(value).strip()
        return value or None

    def keyword_list(self) -> List[str]:
        if not self.keywords:
            return []
        return [token.strip() for token in self.keywords.split(",") if token.strip()]
