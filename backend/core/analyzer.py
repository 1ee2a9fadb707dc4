"""
FinePrint Document Analyzer
===========================
Runs the analysis pipeline for one document:

1. Reject documents with no text
2. Scan fine-grained terms
3. Classify clauses (LLM, falling back to local heuristics)
4. Score risk and build the summary
"""

import logging

from core.clause_classifier import (
    Clause,
    ClassificationOutcome,
    HeuristicClauseClassifier,
    LLMClauseClassifier,
)
from core.document import NoContentError, RawDocument
from core.risk_engine import DocumentAnalysis, RiskEngine
from core.term_scanner import TermScanner

logger = logging.getLogger(__name__)


class DocumentAnalyzer:
    """
    Orchestrates term scanning, clause classification and risk scoring.

    Collaborators are injected so each request can build its own analyzer
    and tests can substitute the remote classifier.
    """

    def __init__(
        self,
        scanner: TermScanner | None = None,
        llm_classifier: LLMClauseClassifier | None = None,
        heuristic_classifier: HeuristicClauseClassifier | None = None,
        risk_engine: RiskEngine | None = None,
    ):
        self.scanner = scanner or TermScanner()
        self.llm_classifier = llm_classifier or LLMClauseClassifier()
        self.heuristic_classifier = heuristic_classifier or HeuristicClauseClassifier()
        self.risk_engine = risk_engine or RiskEngine()

    async def analyze_document(self, document: RawDocument) -> DocumentAnalysis:
        """
        Analyze a document.

        Raises:
            NoContentError: If the document text is empty or whitespace
        """
        if not document.has_content:
            raise NoContentError("Document content is required for analysis")

        title = document.metadata.title
        logger.info(f"[{title}] Step 1: Term scanning")
        terms = self.scanner.scan(document.text)

        logger.info(f"[{title}] Step 2: Clause classification")
        outcome = await self.llm_classifier.classify(document.text)
        clauses, source = self._resolve_clauses(outcome, document.text)

        logger.info(f"[{title}] Step 3: Risk scoring")
        return self.risk_engine.build_analysis(
            terms,
            clauses,
            page_count=document.metadata.page_count,
            clause_source=source,
            classification_failure=outcome.failure,
        )

    def _resolve_clauses(
        self,
        outcome: ClassificationOutcome,
        text: str,
    ) -> tuple[list[Clause], str]:
        """Pick the clause list for a classification outcome."""
        if outcome.succeeded:
            return outcome.clauses, "llm"

        if outcome.should_fall_back:
            logger.warning(
                f"Clause classification {outcome.failure.value}, using heuristic analysis"
            )
            return self.heuristic_classifier.classify(text), "heuristic"

        logger.warning(
            f"Clause classification failed ({outcome.failure.value}): {outcome.detail}. "
            "Continuing without clauses"
        )
        return [], "none"
