from functools import lru_cache
from pathlib import Path
from typing import Literal, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from metadata_api.services.provenance import ProvenanceConfig


class Settings(BaseSettings):
    """Application settings, read from the environment and an optional .env file."""

    model_config = SettingsConfigDict(
        env_file=Path(__file__).resolve().parents[2] / ".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    app_name: str = "Metadata-API"
    app_version: str = "0.1.0"

    host: str = "0.0.0.0"
    port: int = 3000

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"

    internal_api_key: Optional[str] = None
    api_key_header: str = "X-Internal-Key"

    image_fetch_timeout: float = Field(default=10.0, gt=0)

    allow_origins: list[str] = Field(default_factory=lambda: ["*"])

    producer_name: str = "Endless Forge PDF API"
    creator_name: str = "Endless Forge"
    comment_text: str = "Processed or generated using Endless Forge Website"
    stamped_title: str = "Generated PDF"

    @field_validator("log_level", mode="before")
    @classmethod
    def _upper_level(cls, value):
        return str(value).strip().upper()

    def provenance(self) -> ProvenanceConfig:
        return ProvenanceConfig(
            producer_name=self.producer_name,
            creator_name=self.creator_name,
            comment_text=self.comment_text,
            title=self.stamped_title,
        )


@lru_cache()
def get_settings() -> Settings:
    return Settings()
