"""
FinePrint Document Module
=========================
The plain-text document handed to the extraction and analysis core.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any


class DocumentType(str, Enum):
    """Source format of an ingested document."""
    PDF = "pdf"
    DOCX = "docx"
    IMAGE = "image"


class NoContentError(ValueError):
    """Raised when a document has no text to analyze."""
    pass


@dataclass(frozen=True)
class DocumentMetadata:
    """Metadata captured when the document was ingested."""
    title: str
    type: DocumentType
    word_count: int
    page_count: int | None = None
    processed_at: datetime = field(default_factory=datetime.utcnow)
    ocr_confidence: float | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "title": self.title,
            "type": self.type.value,
            "wordCount": self.word_count,
            "pageCount": self.page_count,
            "processedAt": self.processed_at.isoformat(),
            "ocrConfidence": self.ocr_confidence,
        }


@dataclass(frozen=True)
class RawDocument:
    """Extracted text plus metadata. The text is never modified."""
    text: str
    metadata: DocumentMetadata

    @classmethod
    def from_text(
        cls,
        text: str,
        title: str = "untitled",
        doc_type: DocumentType = DocumentType.PDF,
        page_count: int | None = None,
    ) -> "RawDocument":
        """Build a document from already materialized text."""
        return cls(
            text=text,
            metadata=DocumentMetadata(
                title=title,
                type=doc_type,
                word_count=count_words(text),
                page_count=page_count,
            ),
        )

    @property
    def has_content(self) -> bool:
        return bool(self.text and self.text.strip())


def count_words(text: str) -> int:
    """Count whitespace separated words."""
    return len(text.split())
