"""
FinePrint Analyze API
=====================
Runs term scanning, clause classification and risk scoring on
document text.
"""

import logging
import time
from typing import Annotated

from fastapi import APIRouter, Depends

from api.deps import get_document_analyzer, no_content_exception, to_raw_document
from core import DocumentAnalyzer, NoContentError
from schemas import DocumentAnalysisSchema, DocumentTextRequest, ErrorResponse

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/analyze", tags=["Analyze"])


@router.post(
    "",
    response_model=DocumentAnalysisSchema,
    responses={
        422: {"model": ErrorResponse, "description": "Document has no content"}
    },
    summary="Analyze a document",
    description="""
    Analyze document text and return its risk assessment.

    The pipeline:
    1. **Term Scanning**: amounts, dates, sections, percentages, references
    2. **Clause Classification**: LLM call, with a keyword fallback when the
       LLM is rate limited, times out or is not configured
    3. **Risk Scoring**: 0-100 score mapped to low / medium / high

    A failed classification never fails the request; check
    `clauseSource` and `classificationFailure` for degraded results.
    """
)
async def analyze_document(
    request: DocumentTextRequest,
    analyzer: Annotated[DocumentAnalyzer, Depends(get_document_analyzer)],
) -> dict:
    """Analyze document text and return the risk assessment."""
    start_time = time.time()

    try:
        analysis = await analyzer.analyze_document(to_raw_document(request))
    except NoContentError as e:
        raise no_content_exception(str(e))

    logger.info(
        f"Analyzed '{request.title}' in {time.time() - start_time:.2f}s: "
        f"score {analysis.risk_score:.1f} ({analysis.risk_level.value})"
    )
    return analysis.to_dict()
