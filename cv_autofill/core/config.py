"""
Pipeline configuration using Pydantic Settings.

Every threshold used by validation, timeouts and confidence scoring lives here
so callers can override them per invocation (pass a Settings instance) or per
deployment (CV_AUTOFILL_* environment variables / .env file).
"""
from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Settings loaded from environment variables"""

    model_config = SettingsConfigDict(
        env_prefix="CV_AUTOFILL_",
        env_file=".env",
        case_sensitive=True,
        extra="ignore",
    )

    # Content validation
    MIN_TEXT_LENGTH: int = Field(default=50, ge=0)
    MIN_WORD_COUNT: int = Field(default=10, ge=0)

    # Upload validation (checked before any extraction)
    MAX_FILE_SIZE_BYTES: int = 5 * 1024 * 1024

    # Timeout budgets per source format (seconds)
    PDF_TIMEOUT_SECONDS: float = 15.0
    DOCX_TIMEOUT_SECONDS: float = 10.0
    TEXT_TIMEOUT_SECONDS: float = 5.0
    PARSE_TIMEOUT_SECONDS: float = 5.0

    # Confidence scoring denominators
    PERSONAL_INFO_FIELDS: int = Field(default=6, gt=0)
    EXPECTED_WORK_ENTRIES: int = Field(default=3, gt=0)
    EXPECTED_EDUCATION_ENTRIES: int = Field(default=2, gt=0)
    EXPECTED_SKILLS: int = Field(default=10, gt=0)
    HIGH_CONFIDENCE: float = Field(default=0.8, ge=0.0, le=1.0)

    # Observability
    LOG_LEVEL: str = "INFO"

    def timeout_for(self, file_type: str) -> float:
        if file_type == "pdf":
            return self.PDF_TIMEOUT_SECONDS
        if file_type == "docx":
            return self.DOCX_TIMEOUT_SECONDS
        return self.TEXT_TIMEOUT_SECONDS


@lru_cache
def get_settings() -> Settings:
    return Settings()
