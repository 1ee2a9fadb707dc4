"""
FinePrint Extract API
=====================
Contract field extraction from already extracted text, and CSV export.
"""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends
from fastapi.responses import Response

from api.deps import get_contract_extractor, to_raw_document
from core import ContractExtractor, terms_to_csv
from schemas import DocumentTextRequest, ErrorResponse, ExtractedContractTermsSchema

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/extract", tags=["Extract"])


@router.post(
    "",
    response_model=ExtractedContractTermsSchema,
    responses={
        422: {"model": ErrorResponse, "description": "Invalid request"}
    },
    summary="Extract contract terms",
    description="""
    Extract structured contract fields from document text.

    Fields that are not found are returned as `null`. The `confidence`
    map only holds entries for fields that were found.
    """
)
async def extract_terms(
    request: DocumentTextRequest,
    extractor: Annotated[ContractExtractor, Depends(get_contract_extractor)],
) -> dict:
    """Extract contract terms from document text."""
    terms = extractor.extract_contract_terms(to_raw_document(request))
    return terms.to_dict()


@router.post(
    "/csv",
    response_class=Response,
    responses={
        200: {"content": {"text/csv": {}}, "description": "Extracted terms as CSV"}
    },
    summary="Export contract terms as CSV",
    description="Extract terms from each document and return them as one CSV file."
)
async def export_terms_csv(
    requests: list[DocumentTextRequest],
    extractor: Annotated[ContractExtractor, Depends(get_contract_extractor)],
) -> Response:
    """Extract terms from several documents and return CSV."""
    terms = [
        extractor.extract_contract_terms(to_raw_document(request))
        for request in requests
    ]
    logger.info(f"Exporting contract terms for {len(terms)} documents")
    return Response(
        content=terms_to_csv(terms),
        media_type="text/csv",
        headers={"Content-Disposition": 'attachment; filename="contract-terms.csv"'},
    )
