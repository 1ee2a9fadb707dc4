"""
FinePrint Risk Engine Module
============================
Turns extracted terms and classified clauses into a risk score,
a discrete risk level and a plain-language summary.

Scoring is deterministic:
1. 0.1 per extracted term
2. plus min(page_count * 0.05, 1) when the page count is known
3. plus 0.3 / 0.2 / 0.1 per high / medium / low risk clause
4. times 20, clamped to 0-100
"""

import logging
from collections import Counter
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from core.clause_classifier import Clause, ClassificationFailure, RiskLevel
from core.config import CLAUSE_RISK_WEIGHTS, RISK_LEVELS
from core.term_scanner import ExtractedTerm, TermType

logger = logging.getLogger(__name__)

TERM_WEIGHT = 0.1
PAGE_WEIGHT = 0.05
PAGE_CONTRIBUTION_CAP = 1.0
SCORE_SCALE = 20
MAX_SCORE = 100.0

# Term types reported as "legal terms" in the summary
LEGAL_TERM_TYPES = (TermType.SECTION, TermType.REFERENCE)


@dataclass
class DocumentAnalysis:
    """Complete risk analysis of one document."""
    terms: list[ExtractedTerm]
    clauses: list[Clause]
    risk_score: float
    risk_level: RiskLevel
    summary: str
    clause_source: str = "none"
    classification_failure: ClassificationFailure | None = None
    analyzed_at: datetime = field(default_factory=datetime.utcnow)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "terms": [t.to_dict() for t in self.terms],
            "clauses": [c.to_dict() for c in self.clauses],
            "riskScore": round(self.risk_score, 2),
            "riskLevel": self.risk_level.value,
            "summary": self.summary,
            "clauseSource": self.clause_source,
            "classificationFailure": (
                self.classification_failure.value if self.classification_failure else None
            ),
            "analyzedAt": self.analyzed_at.isoformat(),
        }


class RiskEngine:
    """
    Calculates document risk from terms, clauses and page count.

    Pure functions of their inputs; holds no state between calls.
    """

    def __init__(self):
        self.clause_weights = CLAUSE_RISK_WEIGHTS
        self.medium_threshold = RISK_LEVELS["medium"]["score_range"][0]
        self.high_threshold = RISK_LEVELS["high"]["score_range"][0]

    def calculate_risk_score(
        self,
        terms: list[ExtractedTerm],
        clauses: list[Clause],
        page_count: int | None = None,
    ) -> float:
        """
        Compute the 0-100 risk score.

        Args:
            terms: Fine-grained terms found in the document
            clauses: Classified clauses
            page_count: Number of pages, if known

        Returns:
            Score clamped to [0, 100]
        """
        score = len(terms) * TERM_WEIGHT

        if page_count:
            score += min(page_count * PAGE_WEIGHT, PAGE_CONTRIBUTION_CAP)

        for clause in clauses:
            score += self.clause_weights.get(clause.risk_level.value, 0.0)

        return min(max(score * SCORE_SCALE, 0.0), MAX_SCORE)

    def score_to_level(self, score: float) -> RiskLevel:
        """Convert numeric score to risk level."""
        if score < self.medium_threshold:
            return RiskLevel.LOW
        elif score < self.high_threshold:
            return RiskLevel.MEDIUM
        else:
            return RiskLevel.HIGH

    def generate_summary(
        self,
        terms: list[ExtractedTerm],
        clauses: list[Clause],
        risk_score: float,
    ) -> str:
        """Generate human-readable summary of the analysis."""
        term_counts = Counter(term.type for term in terms)
        clause_counts = Counter(clause.risk_level for clause in clauses)
        legal_terms = sum(term_counts[t] for t in LEGAL_TERM_TYPES)

        return (
            f"Document contains {len(terms)} key terms including "
            f"{term_counts[TermType.DATE]} dates, {term_counts[TermType.AMOUNT]} amounts, "
            f"and {legal_terms} legal terms. "
            f"Found {len(clauses)} clauses with {clause_counts[RiskLevel.HIGH]} high-risk, "
            f"{clause_counts[RiskLevel.MEDIUM]} medium-risk, and "
            f"{clause_counts[RiskLevel.LOW]} low-risk clauses. "
            f"Overall risk level: {self.score_to_level(risk_score).value}."
        )

    def build_analysis(
        self,
        terms: list[ExtractedTerm],
        clauses: list[Clause],
        page_count: int | None = None,
        clause_source: str = "none",
        classification_failure: ClassificationFailure | None = None,
    ) -> DocumentAnalysis:
        """Score the inputs and assemble the DocumentAnalysis."""
        score = self.calculate_risk_score(terms, clauses, page_count)
        level = self.score_to_level(score)
        logger.info(
            f"Risk score {score:.1f} ({level.value}) from {len(terms)} terms "
            f"and {len(clauses)} clauses"
        )
        return DocumentAnalysis(
            terms=terms,
            clauses=clauses,
            risk_score=score,
            risk_level=level,
            summary=self.generate_summary(terms, clauses, score),
            clause_source=clause_source,
            classification_failure=classification_failure,
        )
