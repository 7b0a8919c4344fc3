"""Application settings loaded from environment or .env."""
from __future__ import annotations

from functools import lru_cache
from typing import List

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Database
    database_url: str = "sqlite:///./assemble.db"
    auto_create_schema: bool = True

    # Filing
    classification_confidence_threshold: float = 0.6
    filing_max_retries: int = 3
    default_extension: str = "PDF"

    # Optional catalog overrides, comma separated. Empty means bundled catalog.
    consultant_disciplines: str = ""
    contractor_trades: str = ""

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        env_prefix = "ASSEMBLE_"
        extra = "ignore"

    def get_disciplines(self) -> List[str]:
        return [item.strip() for item in self.consultant_disciplines.split(",") if item.strip()]

    def get_trades(self) -> List[str]:
        return [item.strip() for item in self.contractor_trades.split(",") if item.strip()]


@lru_cache
def get_settings() -> Settings:
    return Settings()
