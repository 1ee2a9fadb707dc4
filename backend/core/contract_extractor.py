"""
FinePrint Contract Extractor Module
===================================
Pulls structured contract fields out of unstructured document text.

Each field has an ordered battery of regular expressions:
- Patterns are tried in priority order
- The first pattern that matches anywhere in the text wins
- A field with no match is simply absent, never an error

Clause-like fields capture the text following their heading and are
capped at CLAUSE_TEXT_LIMIT characters.
"""

import logging
import re
from dataclasses import dataclass, field, fields
from datetime import datetime
from typing import Any

from core.config import (
    CLAUSE_TEXT_LIMIT,
    CONTRACT_FILENAME_HINTS,
    CONTRACT_KEYWORDS,
    FIELD_CONFIDENCE,
)
from core.document import RawDocument

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FieldPattern:
    """One candidate pattern for a field and the group holding its value."""
    regex: re.Pattern
    group: int = 1
    limit: int | None = None

    def match(self, text: str) -> str | None:
        found = self.regex.search(text)
        if not found or not found.group(self.group):
            return None
        value = found.group(self.group).strip()
        if self.limit is not None:
            value = value[:self.limit]
        return value or None


def _compile(pattern: str) -> re.Pattern:
    return re.compile(pattern, re.IGNORECASE)


_DATE = (
    r"[A-Za-z]+\s+\d{1,2},?\s+\d{4}"
    r"|\d{1,2}/\d{1,2}/\d{4}"
    r"|\d{1,2}-\d{1,2}-\d{4}"
    r"|\d{4}-\d{1,2}-\d{1,2}"
)

_AMOUNT = (
    r"\$[\d,]+(?:\.\d{2})?"
    r"|\d[\d,]*(?:\.\d{2})?\s*(?:USD|dollars|EUR|euros|GBP|pounds)"
)

# Heading, rest of the heading line or sentence, then the body up to a blank
# line, a line starting with a capital letter, or the end of the text.
_CLAUSE_BODY = r"[^\n.]{0,200}[.\n]([\s\S]*?)(?:\n\s*\n|\n\s*(?-i:[A-Z])|\Z)"


def _clause(heading: str) -> FieldPattern:
    return FieldPattern(_compile(f"(?:{heading}){_CLAUSE_BODY}"), limit=CLAUSE_TEXT_LIMIT)


FIELD_PATTERNS: dict[str, list[FieldPattern]] = {
    "effective_date": [
        FieldPattern(_compile(
            r"(?:effective\s+date|commencement\s+date|start\s+date|dated)"
            r"(?:\s+is)?(?:\s+of)?(?:\s+on)?(?:\s+as)?(?:\s+from)?:?\s*"
            f"({_DATE})"
        )),
        FieldPattern(_compile(
            r"this\s+agreement\s+is\s+made(?:\s+and\s+entered\s+into)?"
            r"(?:\s+as\s+of|\s+on|\s+dated)?:?\s*"
            f"({_DATE})"
        )),
        FieldPattern(_compile(
            r"\beffective(?:\s+as\s+of|\s+on|\s+from)?:?\s*"
            f"({_DATE})"
        )),
    ],
    "expiration_date": [
        FieldPattern(_compile(
            r"(?:expiration\s+date|termination\s+date|end\s+date|expiry\s+date)"
            r"(?:\s+is)?(?:\s+of)?:?\s*"
            f"({_DATE})"
        )),
        FieldPattern(_compile(
            r"shall\s+(?:terminate|expire|end)(?:\s+on)?:?\s*"
            f"({_DATE})"
        )),
        FieldPattern(_compile(
            r"term\s+of\s+(?:this|the)\s+agreement\s+(?:shall\s+be|is)\s+(?:for\s+)?"
            r"(\d+)\s+(?:year|month|day)s?"
        )),
    ],
    "amount": [
        FieldPattern(_compile(
            r"total\s+(?:amount|sum|price|value|consideration)(?:\s+of)?(?:\s+is)?:?\s*"
            f"({_AMOUNT})"
        )),
        FieldPattern(_compile(
            r"(?:fee|payment|price)(?:\s+is)?:?\s*"
            f"({_AMOUNT})"
        )),
        FieldPattern(_compile(
            r"agree\s+to\s+pay(?:\s+a\s+(?:total|sum|fee|price)\s+of)?:?\s*"
            f"({_AMOUNT})"
        )),
    ],
    "payment_terms": [
        _clause(r"payment\s+terms|payment\s+schedule|payment\s+method|fees\s+and\s+payment"),
    ],
    "termination_clause": [
        _clause(r"termination|term\s+and\s+termination"),
    ],
    "automatic_renewal": [
        FieldPattern(_compile(
            r"((?:this|the)\s+agreement\s+(?:shall|will)\s+"
            r"(?:automatically\s+renew|be\s+automatically\s+renewed)[^.]{0,300}\.)"
        )),
    ],
    "governing_law": [
        _clause(r"governing\s+law|applicable\s+law|law\s+and\s+jurisdiction"),
    ],
    "dispute_resolution": [
        _clause(r"dispute\s+resolution|arbitration|mediation|dispute\s+settlement"),
    ],
    "confidentiality": [
        _clause(r"confidentiality|confidential\s+information|non-disclosure"),
    ],
}

# A party name stays on one line, never contains the CSV party separator
# and is at most PARTY_NAME_LIMIT characters.
PARTY_NAME_LIMIT = 200
_PARTY = rf"[^\n,.;]{{1,{PARTY_NAME_LIMIT}}}"
_PARTY_PAIR = rf"({_PARTY}?)\s+and\s+({_PARTY}?)[,.;]"

# Every match of every pattern contributes its non-empty groups
PARTY_PATTERNS: list[re.Pattern] = [
    _compile(
        r"this\s+agreement\s+is\s+(?:made|entered\s+into)\s+(?:by\s+and\s+)?between\s+"
        + _PARTY_PAIR
    ),
    _compile(
        r"\b(?:party|parties)(?:\s+of\s+the\s+(?:first|second)\s+part)?:?\s*"
        f"({_PARTY})"
    ),
    _compile(r"agreement\s+between\s+" + _PARTY_PAIR),
]


@dataclass(frozen=True)
class ExtractedContractTerms:
    """Contract fields found in one document. Absent fields are None."""
    source: str
    extracted_at: datetime
    effective_date: str | None = None
    expiration_date: str | None = None
    amount: str | None = None
    parties: tuple[str, ...] | None = None
    payment_terms: str | None = None
    termination_clause: str | None = None
    automatic_renewal: str | None = None
    governing_law: str | None = None
    dispute_resolution: str | None = None
    confidentiality: str | None = None
    confidence: dict[str, float] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Convert to a camelCase dictionary for JSON serialization."""
        data: dict[str, Any] = {
            "source": self.source,
            "extractedAt": self.extracted_at.isoformat(),
        }
        for name in TERM_FIELDS:
            value = getattr(self, name)
            if name == "parties" and value is not None:
                value = list(value)
            data[to_camel(name)] = value
        data["confidence"] = {to_camel(k): v for k, v in self.confidence.items()}
        return data


TERM_FIELDS = [
    f.name for f in fields(ExtractedContractTerms)
    if f.name not in ("source", "extracted_at", "confidence")
]


def to_camel(name: str) -> str:
    """effective_date -> effectiveDate"""
    head, *rest = name.split("_")
    return head + "".join(part.capitalize() for part in rest)


class ContractExtractor:
    """
    Extracts contract terms from document text.

    Stateless: construct one wherever it is needed. The pattern tables
    are module-level data so the priority order can be audited and
    tested field by field.
    """

    def __init__(
        self,
        field_patterns: dict[str, list[FieldPattern]] | None = None,
        party_patterns: list[re.Pattern] | None = None,
        confidence: float = FIELD_CONFIDENCE,
    ):
        self.field_patterns = field_patterns or FIELD_PATTERNS
        self.party_patterns = party_patterns or PARTY_PATTERNS
        self.confidence = confidence

    def extract_contract_terms(self, document: RawDocument) -> ExtractedContractTerms:
        """
        Extract all contract fields from a document.

        Args:
            document: Ingested document

        Returns:
            ExtractedContractTerms with a confidence entry per present field
        """
        text = document.text
        values: dict[str, Any] = {
            name: self.extract_field(name, text)
            for name in self.field_patterns
        }
        values["parties"] = self.extract_parties(text)

        confidence = {
            name: self.confidence
            for name in TERM_FIELDS
            if values.get(name)
        }

        terms = ExtractedContractTerms(
            source=document.metadata.title,
            extracted_at=datetime.utcnow(),
            confidence=confidence,
            **values,
        )
        logger.info(
            f"Extracted {len(confidence)} contract fields from "
            f"'{document.metadata.title}': {', '.join(confidence) or 'none'}"
        )
        return terms

    def extract_field(self, name: str, text: str) -> str | None:
        """Return the value of the first matching pattern for a field."""
        for pattern in self.field_patterns[name]:
            value = pattern.match(text)
            if value is not None:
                return value
        return None

    def extract_parties(self, text: str) -> tuple[str, ...] | None:
        """Collect party names across all patterns, deduplicated in first-seen order."""
        parties: dict[str, None] = {}
        for pattern in self.party_patterns:
            for found in pattern.finditer(text):
                for group in found.groups():
                    if group and group.strip():
                        parties.setdefault(group.strip(), None)
        return tuple(parties) if parties else None


def is_likely_contract(text: str, filename: str = "") -> bool:
    """
    Heuristic check for contract documents.

    True when the filename hints at a contract, or when at least three
    contract keywords appear in the text.
    """
    lowered_name = filename.lower()
    if any(hint in lowered_name for hint in CONTRACT_FILENAME_HINTS):
        return True

    lowered = text.lower()
    hits = 0
    for keyword in dict.fromkeys(CONTRACT_KEYWORDS):
        if keyword in lowered:
            hits += 1
            if hits >= 3:
                return True
    return False
