"""
FinePrint Configuration Module
==============================
Centralized configuration management using Pydantic Settings.
Domain constants for term extraction and risk scoring live here too.
"""

from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.
    Uses Pydantic v2 settings management for type safety and validation.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    # === LLM Configuration (OpenAI) ===
    openai_api_key: str = Field(default="", description="OpenAI API key")
    llm_enabled: bool = Field(default=True, description="Use the LLM for clause classification")
    llm_model: str = Field(
        default="gpt-4o-mini",
        description="OpenAI model identifier"
    )
    llm_temperature: float = Field(default=0.3, description="Sampling temperature")
    llm_max_tokens: int = Field(default=1000, description="Maximum completion tokens")
    llm_timeout_seconds: float = Field(
        default=60.0,
        description="Timeout for the clause classification call"
    )

    # === OCR Configuration ===
    tesseract_path: str = Field(
        default="/usr/bin/tesseract",
        description="Path to Tesseract OCR binary"
    )
    ocr_language: str = Field(default="eng", description="Tesseract language pack")

    # === Document Limits ===
    max_file_size_mb: int = Field(default=10, description="Maximum file size in MB")

    # === Server Configuration ===
    api_host: str = Field(default="0.0.0.0", description="API host")
    api_port: int = Field(default=8000, description="API port")
    debug: bool = Field(default=False, description="Debug mode")

    # === Logging ===
    log_level: str = Field(default="INFO", description="Logging level")

    @field_validator("llm_timeout_seconds")
    @classmethod
    def positive_timeout(cls, v: float) -> float:
        """Reject non-positive timeouts."""
        if v <= 0:
            raise ValueError("llm_timeout_seconds must be positive")
        return v

    @property
    def max_file_size_bytes(self) -> int:
        """Get max file size in bytes."""
        return self.max_file_size_mb * 1024 * 1024

    @property
    def llm_configured(self) -> bool:
        """Whether a remote clause classification call can be made."""
        return self.llm_enabled and bool(self.openai_api_key)


@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings instance.
    Uses lru_cache to ensure settings are loaded only once.
    """
    settings = Settings()
    return settings


# Confidence assigned to every extracted contract field
FIELD_CONFIDENCE = 0.85

# Confidence assigned to every fine-grained term
TERM_CONFIDENCE = 0.9

# Clause-like fields are capped at this many characters
CLAUSE_TEXT_LIMIT = 250

# Per-type risk factor taxonomy for classified clauses
CLAUSE_RISK_FACTORS: dict[str, list[str]] = {
    "confidentiality": ["duration", "scope", "exceptions"],
    "indemnification": ["scope", "limitations", "survival"],
    "termination": ["notice period", "causes", "consequences"],
    "jurisdiction": ["venue", "choice of law", "dispute resolution"],
    "force majeure": ["definition", "notice requirements", "consequences"],
    "warranty": ["scope", "disclaimers", "remedies"],
    "limitation of liability": ["caps", "exclusions", "survival"],
    "intellectual property": ["ownership", "licenses", "restrictions"],
}

CLAUSE_TYPES = list(CLAUSE_RISK_FACTORS)

# Score contribution of a single clause, by its risk level
CLAUSE_RISK_WEIGHTS = {
    "high": 0.3,
    "medium": 0.2,
    "low": 0.1,
}

# Lower bounds (inclusive) of the medium and high risk levels
RISK_LEVELS = {
    "low": {"score_range": (0, 33)},
    "medium": {"score_range": (33, 66)},
    "high": {"score_range": (66, 100)},
}

# Keywords that mark a document as a probable contract
CONTRACT_KEYWORDS = [
    "agreement",
    "contract",
    "terms",
    "parties",
    "obligations",
    "hereby agree",
    "legally binding",
    "effective date",
    "termination",
    "governing law",
    "witness whereof",
    "consideration",
    "payment terms",
    "company",
    "appointment",
    "duration",
    "remuneration & benefits",
    "compensation",
    "payment",
    "amount",
    "currency",
    "exchange rate",
    "benefits",
    "dispute resolution",
    "non-disclosure",
    "intellectual property",
    "confidentiality",
    "warranty",
    "indemnification",
    "limitation of liability",
    "non-class action",
    "non-waiver",
    "non-assignable",
    "non-transferable",
    "non-exclusive",
    "non-exclusive license",
    "non-exclusive right",
    "services",
    "performance",
    "performance obligations",
]

CONTRACT_FILENAME_HINTS = ("contract", "agreement", "terms")
