"""Centralized configuration for postings-search using Pydantic Settings."""

import re
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from postings_search.search.analyzers import available_analyzers


class Settings(BaseSettings):
    """Strictly typed configuration loaded from ``POSTINGS_SEARCH_*`` environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="POSTINGS_SEARCH_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        validate_default=True,
        extra="ignore",
    )

    # Indexing
    analyzer: str = Field(default="default", description="Analyzer used for both indexing and queries")
    index_workers: int = Field(default=1, ge=1, description="Threads used to tokenize documents during a build")

    # Querying
    missing_term_policy: Literal["skip", "strict"] = Field(
        default="skip",
        description="How AND queries treat terms absent from the index: ignore them, or return nothing",
    )

    # Corpus loading
    corpus_delimiter: str = Field(
        default=r"1[56][0-9]{2}\n",
        description="Regex separating documents inside a single corpus file",
    )
    corpus_encoding: str = Field(default="utf-8", description="Encoding of corpus files")

    # Logging
    log_level: str = Field(default="info", description="Logging level")
    log_json: bool = Field(default=True, description="Emit structured JSON logs")

    @field_validator("analyzer")
    @classmethod
    def _check_analyzer(cls, value: str) -> str:
        normalized = value.lower()
        if normalized not in available_analyzers():
            raise ValueError(f"Unknown analyzer '{value}'. Available: {available_analyzers()}")
        return normalized

    @field_validator("corpus_delimiter")
    @classmethod
    def _check_corpus_delimiter(cls, value: str) -> str:
        if not value:
            raise ValueError("corpus_delimiter must not be empty")
        try:
            re.compile(value)
        except re.error as exc:
            raise ValueError(f"corpus_delimiter is not a valid regular expression: {exc}") from exc
        return value

    def is_strict(self) -> bool:
        """Check whether unknown query terms empty the result."""
        return self.missing_term_policy == "strict"
