"""
FinePrint API Schemas
=====================
Pydantic models for API request/response validation.
JSON field names are camelCase; Python attributes are snake_case.
"""

from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base model serializing to camelCase."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# === Enums ===

class DocumentTypeEnum(str, Enum):
    """Source format of a document."""
    PDF = "pdf"
    DOCX = "docx"
    IMAGE = "image"


class RiskLevelEnum(str, Enum):
    """Risk level categories."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class TermTypeEnum(str, Enum):
    """Fine-grained term categories."""
    AMOUNT = "amount"
    DATE = "date"
    SECTION = "section"
    REFERENCE = "reference"
    PERCENTAGE = "percentage"
    OTHER = "other"


# === Requests ===

class DocumentTextRequest(CamelModel):
    """Already extracted document text plus its metadata."""
    text: str = Field(..., description="Full plain-text content of the document")
    title: str = Field(default="untitled", description="Document title or filename")
    type: DocumentTypeEnum = Field(default=DocumentTypeEnum.PDF, description="Source format")
    page_count: int | None = Field(default=None, ge=0, description="Number of pages, if known")

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "text": "This Agreement is made between Acme Corp and Jane Doe, "
                        "effective January 5, 2024. Total amount of $10,000.00 is due.",
                "title": "services-agreement.pdf",
                "type": "pdf",
                "pageCount": 1,
            }
        },
    )


# === Term Extraction ===

class ExtractedContractTermsSchema(CamelModel):
    """Contract fields extracted from one document."""
    source: str
    extracted_at: datetime
    effective_date: str | None = None
    expiration_date: str | None = None
    amount: str | None = None
    parties: list[str] | None = None
    payment_terms: str | None = Field(None, max_length=250)
    termination_clause: str | None = Field(None, max_length=250)
    automatic_renewal: str | None = None
    governing_law: str | None = Field(None, max_length=250)
    dispute_resolution: str | None = Field(None, max_length=250)
    confidentiality: str | None = Field(None, max_length=250)
    confidence: dict[str, float] = Field(default_factory=dict)


# === Analysis ===

class TermPositionSchema(BaseModel):
    x: float = 0.0
    y: float = 0.0
    width: float = 0.0
    height: float = 0.0


class ExtractedTermSchema(CamelModel):
    """A single fine-grained term."""
    value: str
    type: TermTypeEnum
    confidence: float = Field(..., ge=0, le=1)
    page: int = Field(..., ge=1)
    position: TermPositionSchema
    context: str
    start_index: int
    end_index: int


class ClauseSchema(CamelModel):
    """A classified clause."""
    type: str
    content: str
    risk_level: RiskLevelEnum
    risk_factors: list[str]


class DocumentAnalysisSchema(CamelModel):
    """Complete analysis of one document."""
    terms: list[ExtractedTermSchema]
    clauses: list[ClauseSchema]
    risk_score: float = Field(..., ge=0, le=100)
    risk_level: RiskLevelEnum
    summary: str
    clause_source: str
    classification_failure: str | None = None
    analyzed_at: datetime


# === Upload ===

class DocumentMetadataSchema(CamelModel):
    """Metadata of an ingested document."""
    title: str
    type: DocumentTypeEnum
    word_count: int
    page_count: int | None = None
    processed_at: datetime
    ocr_confidence: float | None = None


class UploadResponse(CamelModel):
    """Response for a document upload."""
    metadata: DocumentMetadataSchema
    is_likely_contract: bool
    extracted_terms: ExtractedContractTermsSchema | None = None
    message: str


# === Error Schemas ===

class ErrorResponse(BaseModel):
    """Standard error response."""
    error: str = Field(..., description="Error type")
    message: str = Field(..., description="Error message")
    details: dict[str, Any] | None = Field(None, description="Additional error details")

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "error": "NoContent",
                "message": "Document content is required for analysis",
                "details": None
            }
        }
    )


# === Health Check ===

class HealthCheckResponse(BaseModel):
    """API health check response."""
    status: str = Field(..., description="API status")
    version: str = Field(..., description="API version")
    timestamp: datetime = Field(..., description="Current server timestamp")
    services: dict[str, str] = Field(..., description="Status of dependent services")
