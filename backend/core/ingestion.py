"""
FinePrint Ingestion Module
==========================
Turns uploaded files into plain-text RawDocuments.

- PDF: text layer via pdfplumber, OCR for pages without one
- DOCX: paragraph text via python-docx
- Images: Tesseract OCR

PDF pages are joined with a form feed so downstream scanners can
recover page numbers.
"""

import asyncio
import io
import logging
from pathlib import PurePath

import docx
import pdfplumber
import pytesseract
from PIL import Image

from core.config import Settings, get_settings
from core.document import (
    DocumentMetadata,
    DocumentType,
    NoContentError,
    RawDocument,
    count_words,
)
from core.text_utils import PAGE_BREAK

logger = logging.getLogger(__name__)

# Pages with less text than this are treated as scanned
MIN_TEXT_LAYER_CHARS = 20

OCR_RESOLUTION = 300

EXTENSION_TYPES = {
    ".pdf": DocumentType.PDF,
    ".docx": DocumentType.DOCX,
    ".png": DocumentType.IMAGE,
    ".jpg": DocumentType.IMAGE,
    ".jpeg": DocumentType.IMAGE,
    ".tif": DocumentType.IMAGE,
    ".tiff": DocumentType.IMAGE,
}


class IngestionError(Exception):
    """Raised when a file cannot be turned into text."""
    pass


class UnsupportedDocumentError(IngestionError):
    """The file type is not one of pdf, docx or image."""
    pass


class DocumentTooLargeError(IngestionError):
    """The file exceeds the configured size limit."""
    pass


def detect_document_type(filename: str, content_type: str | None) -> DocumentType:
    """
    Work out the document type from the MIME type, then the extension.

    Raises:
        UnsupportedDocumentError: If neither identifies a supported type
    """
    mime = (content_type or "").lower()
    if "pdf" in mime:
        return DocumentType.PDF
    if "docx" in mime or "wordprocessingml" in mime:
        return DocumentType.DOCX
    if mime.startswith("image/"):
        return DocumentType.IMAGE

    suffix = PurePath(filename or "").suffix.lower()
    if suffix in EXTENSION_TYPES:
        return EXTENSION_TYPES[suffix]

    raise UnsupportedDocumentError(f"Unsupported file type: {content_type or suffix or 'unknown'}")


class DocumentIngestor:
    """Extracts text and metadata from PDF, DOCX and image files."""

    def __init__(self, settings: Settings | None = None):
        self.settings = settings or get_settings()
        pytesseract.pytesseract.tesseract_cmd = self.settings.tesseract_path

    async def ingest(
        self,
        data: bytes,
        filename: str,
        content_type: str | None = None,
    ) -> RawDocument:
        """
        Extract a document's text.

        Args:
            data: Raw file bytes
            filename: Original filename, used as the document title
            content_type: MIME type reported by the client

        Returns:
            RawDocument with text and metadata

        Raises:
            UnsupportedDocumentError: Unknown file type
            DocumentTooLargeError: File exceeds max_file_size_mb
            NoContentError: No text could be extracted
            IngestionError: The file could not be read
        """
        logger.info(f"Processing document: {filename} ({len(data)} bytes)")

        if len(data) > self.settings.max_file_size_bytes:
            raise DocumentTooLargeError(
                f"File size ({len(data) / (1024 * 1024):.2f}MB) exceeds "
                f"{self.settings.max_file_size_mb}MB limit"
            )
        if not data:
            raise NoContentError("File is empty")

        doc_type = detect_document_type(filename, content_type)
        page_count = None
        ocr_confidence = None

        try:
            if doc_type == DocumentType.PDF:
                text, page_count = await asyncio.to_thread(self._extract_pdf, data)
            elif doc_type == DocumentType.DOCX:
                text = await asyncio.to_thread(self._extract_docx, data)
            else:
                text, ocr_confidence = await asyncio.to_thread(self._extract_image, data)
        except IngestionError:
            raise
        except Exception as e:
            logger.error(f"Error processing document {filename}: {e}")
            raise IngestionError(f"Failed to process {doc_type.value} document: {e}") from e

        if not text.strip():
            raise NoContentError(f"No text could be extracted from {filename}")

        logger.info(f"Extracted text length: {len(text)} characters")

        return RawDocument(
            text=text,
            metadata=DocumentMetadata(
                title=filename,
                type=doc_type,
                word_count=count_words(text),
                page_count=page_count,
                ocr_confidence=ocr_confidence,
            ),
        )

    def _extract_pdf(self, data: bytes) -> tuple[str, int]:
        """Extract text from each PDF page, OCR-ing pages without a text layer."""
        pages = []
        with pdfplumber.open(io.BytesIO(data)) as pdf:
            for page_num, page in enumerate(pdf.pages, start=1):
                text = page.extract_text() or ""
                if len(text.strip()) < MIN_TEXT_LAYER_CHARS:
                    logger.info(f"Page {page_num} has no text layer, applying OCR")
                    image = page.to_image(resolution=OCR_RESOLUTION).original
                    text, _ = self._ocr(image)
                pages.append(text)
        return PAGE_BREAK.join(pages), len(pages)

    def _extract_docx(self, data: bytes) -> str:
        """Extract paragraph and table text from a DOCX file."""
        document = docx.Document(io.BytesIO(data))
        lines = [p.text for p in document.paragraphs]
        for table in document.tables:
            for row in table.rows:
                lines.append(" | ".join(cell.text for cell in row.cells))
        return "\n".join(lines)

    def _extract_image(self, data: bytes) -> tuple[str, float]:
        with Image.open(io.BytesIO(data)) as image:
            return self._ocr(image.convert("RGB"))

    def _ocr(self, image: Image.Image) -> tuple[str, float]:
        """Run Tesseract and return text with a 0-1 confidence."""
        ocr_data = pytesseract.image_to_data(
            image,
            lang=self.settings.ocr_language,
            output_type=pytesseract.Output.DICT,
            config="--oem 3 --psm 6",
        )
        return self._parse_ocr_result(ocr_data)

    def _parse_ocr_result(self, ocr_data: dict) -> tuple[str, float]:
        """Rebuild OCR lines and average the word confidences."""
        lines: dict[tuple[int, int, int], list[str]] = {}
        confidences = []

        for i, word in enumerate(ocr_data["text"]):
            conf = float(ocr_data["conf"][i])
            if conf <= 0 or not word.strip():
                continue
            key = (ocr_data["block_num"][i], ocr_data["par_num"][i], ocr_data["line_num"][i])
            lines.setdefault(key, []).append(word)
            confidences.append(conf)

        text = "\n".join(" ".join(words) for words in lines.values())
        avg_confidence = sum(confidences) / len(confidences) if confidences else 0.0
        return text, avg_confidence / 100.0
