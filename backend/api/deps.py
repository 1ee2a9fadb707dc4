"""
FinePrint API Dependencies
==========================
Per-request construction of the core services.
"""

from fastapi import HTTPException, status

from core import (
    ContractExtractor,
    DocumentAnalyzer,
    DocumentIngestor,
    LLMClauseClassifier,
    RawDocument,
    get_settings,
)
from core.document import DocumentType
from schemas import DocumentTextRequest


def get_contract_extractor() -> ContractExtractor:
    return ContractExtractor()


def get_document_analyzer() -> DocumentAnalyzer:
    return DocumentAnalyzer(llm_classifier=LLMClauseClassifier(settings=get_settings()))


def get_document_ingestor() -> DocumentIngestor:
    return DocumentIngestor(settings=get_settings())


def to_raw_document(request: DocumentTextRequest) -> RawDocument:
    """Build a RawDocument from a text request."""
    return RawDocument.from_text(
        request.text,
        title=request.title,
        doc_type=DocumentType(request.type.value),
        page_count=request.page_count,
    )


def error_detail(error: str, message: str, **details) -> dict:
    """Structured HTTPException detail matching ErrorResponse."""
    return {"error": error, "message": message, "details": details or None}


def no_content_exception(message: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        detail=error_detail("NoContent", message),
    )
