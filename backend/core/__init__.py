"""
FinePrint Core Module
=====================
Contract term extraction and risk analysis.

Modules:
- document: RawDocument model and input errors
- ingestion: PDF/DOCX/image text extraction
- contract_extractor: Contract field extraction
- term_scanner: Fine-grained term scanning
- clause_classifier: LLM and heuristic clause classification
- risk_engine: Risk scoring and summaries
- analyzer: Analysis pipeline
- export: CSV export
- config: Application configuration
"""

from core.analyzer import DocumentAnalyzer
from core.clause_classifier import (
    ClassificationFailure,
    ClassificationOutcome,
    Clause,
    HeuristicClauseClassifier,
    LLMClauseClassifier,
    RiskLevel,
)
from core.config import CLAUSE_RISK_FACTORS, CLAUSE_TYPES, RISK_LEVELS, get_settings
from core.contract_extractor import ContractExtractor, ExtractedContractTerms, is_likely_contract
from core.document import DocumentMetadata, DocumentType, NoContentError, RawDocument
from core.export import parse_parties, read_terms_csv, terms_to_csv
from core.ingestion import (
    DocumentIngestor,
    DocumentTooLargeError,
    IngestionError,
    UnsupportedDocumentError,
)
from core.risk_engine import DocumentAnalysis, RiskEngine
from core.term_scanner import ExtractedTerm, TermScanner, TermType

__all__ = [
    # Documents
    "RawDocument",
    "DocumentMetadata",
    "DocumentType",
    "NoContentError",
    # Ingestion
    "DocumentIngestor",
    "IngestionError",
    "UnsupportedDocumentError",
    "DocumentTooLargeError",
    # Term Extraction
    "ContractExtractor",
    "ExtractedContractTerms",
    "is_likely_contract",
    "TermScanner",
    "ExtractedTerm",
    "TermType",
    # Clause Classification
    "LLMClauseClassifier",
    "HeuristicClauseClassifier",
    "ClassificationOutcome",
    "ClassificationFailure",
    "Clause",
    "RiskLevel",
    # Risk
    "RiskEngine",
    "DocumentAnalysis",
    "DocumentAnalyzer",
    # Export
    "terms_to_csv",
    "read_terms_csv",
    "parse_parties",
    # Config
    "get_settings",
    "CLAUSE_TYPES",
    "CLAUSE_RISK_FACTORS",
    "RISK_LEVELS",
]
