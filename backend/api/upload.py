"""
FinePrint Upload API
====================
Accepts a document file, extracts its text and, when it looks like a
contract, its contract terms. Nothing is stored.
"""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile, status

from api.deps import (
    error_detail,
    get_contract_extractor,
    get_document_ingestor,
    no_content_exception,
)
from core import (
    ContractExtractor,
    DocumentIngestor,
    DocumentTooLargeError,
    IngestionError,
    NoContentError,
    UnsupportedDocumentError,
    get_settings,
    is_likely_contract,
)
from schemas import ErrorResponse, UploadResponse

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/upload", tags=["Upload"])
settings = get_settings()

ACCEPTED_TYPES = [
    "application/pdf",
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    "image/png",
    "image/jpeg",
    "image/tiff",
]


async def read_upload(file: UploadFile) -> bytes:
    """
    Read the upload in chunks, stopping once the size limit is passed.

    Raises:
        HTTPException: If the file is too large
    """
    chunks = []
    size = 0
    while chunk := await file.read(1024 * 1024):  # 1MB chunks
        size += len(chunk)
        if size > settings.max_file_size_bytes:
            raise HTTPException(
                status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
                detail=error_detail(
                    "FileTooLarge",
                    f"File exceeds maximum size of {settings.max_file_size_mb}MB.",
                    max_size_mb=settings.max_file_size_mb,
                ),
            )
        chunks.append(chunk)
    return b"".join(chunks)


@router.post(
    "",
    response_model=UploadResponse,
    responses={
        413: {"model": ErrorResponse, "description": "File too large"},
        415: {"model": ErrorResponse, "description": "Unsupported file type"},
        422: {"model": ErrorResponse, "description": "No text could be extracted"}
    },
    summary="Upload a legal document",
    description="""
    Upload a PDF, DOCX or image document.

    Text is extracted (OCR for images and scanned PDF pages). If the
    document looks like a contract, its contract terms are extracted too.

    **Accepted file types:** PDF, DOCX, PNG, JPEG, TIFF
    **Maximum file size:** 10MB
    """
)
async def upload_document(
    file: Annotated[UploadFile, File(description="Document to upload")],
    ingestor: Annotated[DocumentIngestor, Depends(get_document_ingestor)],
    extractor: Annotated[ContractExtractor, Depends(get_contract_extractor)],
) -> dict:
    """Ingest an uploaded document and extract contract terms."""
    logger.info(f"Received upload request: {file.filename}")
    data = await read_upload(file)

    try:
        document = await ingestor.ingest(data, file.filename or "unknown", file.content_type)
    except UnsupportedDocumentError as e:
        raise HTTPException(
            status_code=status.HTTP_415_UNSUPPORTED_MEDIA_TYPE,
            detail=error_detail(
                "UnsupportedMediaType",
                str(e),
                received_type=file.content_type,
                accepted_types=ACCEPTED_TYPES,
            ),
        )
    except DocumentTooLargeError as e:
        raise HTTPException(
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            detail=error_detail("FileTooLarge", str(e)),
        )
    except NoContentError as e:
        raise no_content_exception(str(e))
    except IngestionError as e:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=error_detail("IngestionError", str(e), filename=file.filename),
        )

    likely_contract = is_likely_contract(document.text, document.metadata.title)
    extracted_terms = None
    if likely_contract:
        logger.info("Document appears to be a contract, extracting terms...")
        extracted_terms = extractor.extract_contract_terms(document).to_dict()

    return {
        "metadata": document.metadata.to_dict(),
        "isLikelyContract": likely_contract,
        "extractedTerms": extracted_terms,
        "message": (
            "Document processed and contract terms extracted."
            if likely_contract else
            "Document processed. It does not appear to be a contract."
        ),
    }
