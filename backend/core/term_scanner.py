"""
FinePrint Term Scanner Module
=============================
Sweeps document text for individual lexical terms: amounts, dates,
section references, percentages, reference numbers and leftover numbers.

Each term records its page, a context window and its character offsets.
A normalized value is kept at most once per term type for the whole
document; the first occurrence wins.
"""

import logging
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable

from core.config import TERM_CONFIDENCE
from core.text_utils import context_window, split_pages

logger = logging.getLogger(__name__)


class TermType(str, Enum):
    """Lexical category of an extracted term."""
    AMOUNT = "amount"
    DATE = "date"
    SECTION = "section"
    REFERENCE = "reference"
    PERCENTAGE = "percentage"
    OTHER = "other"


@dataclass(frozen=True)
class TermPosition:
    """Layout coordinates of a term. Text-only scans leave them at zero."""
    x: float = 0.0
    y: float = 0.0
    width: float = 0.0
    height: float = 0.0

    def to_dict(self) -> dict[str, float]:
        return {"x": self.x, "y": self.y, "width": self.width, "height": self.height}


@dataclass(frozen=True)
class ExtractedTerm:
    """A single matched term."""
    value: str
    type: TermType
    confidence: float
    page: int
    context: str
    start_index: int
    end_index: int
    position: TermPosition = field(default_factory=TermPosition)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "value": self.value,
            "type": self.type.value,
            "confidence": self.confidence,
            "page": self.page,
            "position": self.position.to_dict(),
            "context": self.context,
            "startIndex": self.start_index,
            "endIndex": self.end_index,
        }


_CURRENCY_RE = re.compile(r"[$€£,\s]")


def _normalize_amount(match: re.Match) -> str:
    return _CURRENCY_RE.sub("", match.group(0))


def _whole_match(match: re.Match) -> str:
    return " ".join(match.group(0).split())


def _first_group(match: re.Match) -> str:
    return match.group(1)


@dataclass(frozen=True)
class TermRule:
    """How to find one category of terms and turn a match into a value."""
    type: TermType
    patterns: tuple[re.Pattern, ...]
    normalize: Callable[[re.Match], str]
    context_radius: int


_MONTHS = r"(?:Jan|Feb|Mar|Apr|May|Jun|Jul|Aug|Sep|Sept|Oct|Nov|Dec)[a-z]*\.?"

# Scan order matters: the bare-number rule only sees what the others left.
TERM_RULES: tuple[TermRule, ...] = (
    TermRule(
        type=TermType.AMOUNT,
        patterns=(
            re.compile(
                r"(?<![\w.,/-])"
                r"(?:[$€£]\s?\d+|\d{1,3})(?:,\d{3})*(?:\.\d{2})?"
                r"(?![\w%/-]|[.,]\d)"
                rf"(?!\s+(?i:{_MONTHS})\s+\d{{4}})"  # day of a written date
            ),
        ),
        normalize=_normalize_amount,
        context_radius=100,
    ),
    TermRule(
        type=TermType.DATE,
        patterns=(
            re.compile(r"(?<![\d/])\d{1,2}/\d{1,2}/(?:\d{4}|\d{2})(?![\d/])"),
            re.compile(r"(?<![\d-])\d{4}-\d{2}-\d{2}(?![\d-])"),
            re.compile(rf"\b\d{{1,2}}\s+{_MONTHS}\s+\d{{4}}\b", re.IGNORECASE),
        ),
        normalize=_whole_match,
        context_radius=100,
    ),
    TermRule(
        type=TermType.SECTION,
        patterns=(
            re.compile(r"\b(?:Section|Article|Clause)\s+(\d+(?:\.\d+)*)", re.IGNORECASE),
        ),
        normalize=_first_group,
        context_radius=50,
    ),
    TermRule(
        type=TermType.PERCENTAGE,
        patterns=(
            re.compile(r"(?<![\w.])(\d+(?:\.\d+)?)%"),
        ),
        normalize=_first_group,
        context_radius=50,
    ),
    TermRule(
        type=TermType.REFERENCE,
        patterns=(
            re.compile(r"\b(?:Ref|Reference|No)\b\.?\s*[:#]?\s*(\d+)"),
        ),
        normalize=_first_group,
        context_radius=50,
    ),
)

# Whole numbers, decimals kept together
BARE_NUMBER_RE = re.compile(r"(?<![\w.,])\d+(?:[.,]\d+)*(?!\w)")
BARE_NUMBER_RADIUS = 50


class TermScanner:
    """
    Finds amounts, dates, sections, percentages, references and other
    numbers in document text.

    Stateless between calls; every scan starts with fresh dedup sets.
    """

    def __init__(
        self,
        rules: tuple[TermRule, ...] = TERM_RULES,
        confidence: float = TERM_CONFIDENCE,
    ):
        self.rules = rules
        self.confidence = confidence

    def scan(self, text: str) -> list[ExtractedTerm]:
        """
        Scan the whole document, page by page.

        Args:
            text: Document text, pages separated by form feeds

        Returns:
            Terms in scan order (page, then category, then position)
        """
        terms: list[ExtractedTerm] = []
        seen: dict[TermType, set[str]] = {t: set() for t in TermType}

        offset = 0
        for page_number, page_text in enumerate(split_pages(text), start=1):
            terms.extend(self._scan_page(page_text, page_number, offset, seen))
            offset += len(page_text) + 1

        logger.debug(f"Scanned {offset} characters, found {len(terms)} terms")
        return terms

    def _scan_page(
        self,
        page_text: str,
        page_number: int,
        offset: int,
        seen: dict[TermType, set[str]],
    ) -> list[ExtractedTerm]:
        """Run every rule over one page, then pick up the leftover numbers."""
        terms = []
        covered = bytearray(len(page_text))

        for rule in self.rules:
            for pattern in rule.patterns:
                for match in pattern.finditer(page_text):
                    start, end = match.span()
                    covered[start:end] = b"\x01" * (end - start)
                    value = rule.normalize(match)
                    if not value or value in seen[rule.type]:
                        continue
                    seen[rule.type].add(value)
                    terms.append(self._make_term(
                        value, rule.type, match, page_text, page_number,
                        offset, rule.context_radius,
                    ))

        for match in BARE_NUMBER_RE.finditer(page_text):
            if covered.find(1, *match.span()) != -1:
                continue
            value = match.group(0)
            if value in seen[TermType.OTHER]:
                continue
            seen[TermType.OTHER].add(value)
            terms.append(self._make_term(
                value, TermType.OTHER, match, page_text, page_number,
                offset, BARE_NUMBER_RADIUS,
            ))

        return terms

    def _make_term(
        self,
        value: str,
        term_type: TermType,
        match: re.Match,
        page_text: str,
        page_number: int,
        offset: int,
        radius: int,
    ) -> ExtractedTerm:
        start, end = match.span()
        return ExtractedTerm(
            value=value,
            type=term_type,
            confidence=self.confidence,
            page=page_number,
            context=context_window(page_text, start, end, radius),
            start_index=offset + start,
            end_index=offset + end,
        )
