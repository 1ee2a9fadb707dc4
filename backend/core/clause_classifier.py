"""
FinePrint Clause Classifier Module
==================================
Identifies legal clauses in contract text and assigns each a risk level.

Two classifiers:
- LLMClauseClassifier: one OpenAI chat completion returning JSON clauses
- HeuristicClauseClassifier: local keyword patterns, used when the
  remote call is rate limited, timed out or unavailable

The LLM classifier never raises. It reports how it failed through
ClassificationOutcome so the caller can pick the fallback path.
"""

import asyncio
import json
import logging
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from openai import (
    APIConnectionError,
    APIStatusError,
    APITimeoutError,
    AsyncOpenAI,
    OpenAIError,
    RateLimitError,
)
from pydantic import BaseModel, Field, ValidationError

from core.config import CLAUSE_RISK_FACTORS, CLAUSE_TYPES, Settings, get_settings
from core.text_utils import raw_window

logger = logging.getLogger(__name__)


class RiskLevel(str, Enum):
    """Risk level categories."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


@dataclass(frozen=True)
class Clause:
    """A span of contract text tied to a legal-concern category."""
    type: str
    content: str
    risk_level: RiskLevel
    risk_factors: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "type": self.type,
            "content": self.content,
            "riskLevel": self.risk_level.value,
            "riskFactors": list(self.risk_factors),
        }


class ClassificationFailure(str, Enum):
    """Why the remote classification produced no clauses."""
    RATE_LIMITED = "rate_limited"
    TIMEOUT = "timeout"
    UNAVAILABLE = "unavailable"
    MALFORMED_RESPONSE = "malformed_response"
    API_ERROR = "api_error"


# Failures that switch to the local heuristic classifier.
# Anything else leaves the clause list empty.
FALLBACK_FAILURES = frozenset({
    ClassificationFailure.RATE_LIMITED,
    ClassificationFailure.TIMEOUT,
    ClassificationFailure.UNAVAILABLE,
})


@dataclass(frozen=True)
class ClassificationOutcome:
    """Result of a remote classification attempt."""
    clauses: list[Clause] = field(default_factory=list)
    failure: ClassificationFailure | None = None
    detail: str | None = None

    @property
    def succeeded(self) -> bool:
        return self.failure is None

    @property
    def should_fall_back(self) -> bool:
        return self.failure in FALLBACK_FAILURES

    @classmethod
    def failed(cls, failure: ClassificationFailure, detail: str) -> "ClassificationOutcome":
        return cls(clauses=[], failure=failure, detail=detail)


class LLMClause(BaseModel):
    """One clause as returned by the model."""
    type: str
    content: str
    riskLevel: RiskLevel
    riskFactors: list[str] = Field(default_factory=list)


class LLMClauseResponse(BaseModel):
    """Expected JSON shape of the classification response."""
    clauses: list[LLMClause]


# System prompt for clause classification
CLAUSE_CLASSIFICATION_PROMPT = """You are a legal document analyzer. Analyze the following document and identify key clauses, their risk levels, and risk factors.

Use these clause types where they apply: {clause_types}

Risk factors to consider for each clause type:
{risk_factors}

Return the analysis in JSON format with the following structure:
{{
    "clauses": [
        {{
            "type": "string",
            "content": "string",
            "riskLevel": "low" | "medium" | "high",
            "riskFactors": ["string"]
        }}
    ]
}}"""


class LLMClauseClassifier:
    """
    Classifies clauses with a single OpenAI chat completion.

    The caller-imposed timeout is the only cancellation mechanism.
    """

    def __init__(
        self,
        settings: Settings | None = None,
        client: AsyncOpenAI | None = None,
    ):
        self.settings = settings or get_settings()
        self.model = self.settings.llm_model
        self.timeout = self.settings.llm_timeout_seconds
        self.llm_client = client
        if self.llm_client is None and self.settings.llm_configured:
            self._init_llm_client()

    def _init_llm_client(self):
        """Initialize the OpenAI LLM client."""
        self.llm_client = AsyncOpenAI(
            api_key=self.settings.openai_api_key,
            max_retries=0,
        )

    @property
    def available(self) -> bool:
        return self.llm_client is not None

    async def classify(self, text: str) -> ClassificationOutcome:
        """
        Ask the model for the clauses in ``text``.

        Returns:
            ClassificationOutcome holding clauses, or the failure kind
        """
        if not self.available:
            return ClassificationOutcome.failed(
                ClassificationFailure.UNAVAILABLE,
                "LLM clause classification is not configured",
            )

        try:
            logger.info(f"Using OpenAI LLM ({self.model}) to classify clauses...")
            response = await asyncio.wait_for(
                self.llm_client.chat.completions.create(
                    model=self.model,
                    messages=[
                        {"role": "system", "content": self._system_prompt()},
                        {"role": "user", "content": text},
                    ],
                    response_format={"type": "json_object"},
                    temperature=self.settings.llm_temperature,
                    max_tokens=self.settings.llm_max_tokens,
                ),
                timeout=self.timeout,
            )
        except RateLimitError as e:
            logger.warning(f"Rate limit reached, falling back to basic analysis: {e}")
            return ClassificationOutcome.failed(ClassificationFailure.RATE_LIMITED, str(e))
        except (asyncio.TimeoutError, APITimeoutError):
            logger.warning(f"Clause classification timed out after {self.timeout}s")
            return ClassificationOutcome.failed(
                ClassificationFailure.TIMEOUT,
                f"No response within {self.timeout} seconds",
            )
        except APIConnectionError as e:
            logger.warning(f"LLM service unreachable: {e}")
            return ClassificationOutcome.failed(ClassificationFailure.UNAVAILABLE, str(e))
        except (APIStatusError, OpenAIError) as e:
            logger.error(f"Error analyzing clauses with LLM: {e}")
            return ClassificationOutcome.failed(ClassificationFailure.API_ERROR, str(e))

        return self._parse_response(response)

    def _system_prompt(self) -> str:
        risk_factors = "\n".join(
            f"- {clause_type}: {', '.join(factors)}"
            for clause_type, factors in CLAUSE_RISK_FACTORS.items()
        )
        return CLAUSE_CLASSIFICATION_PROMPT.format(
            clause_types=", ".join(CLAUSE_TYPES),
            risk_factors=risk_factors,
        )

    def _parse_response(self, response: Any) -> ClassificationOutcome:
        """Validate the model output against the expected clause shape."""
        try:
            content = response.choices[0].message.content
        except (AttributeError, IndexError) as e:
            return ClassificationOutcome.failed(
                ClassificationFailure.MALFORMED_RESPONSE, f"Unexpected response shape: {e}"
            )

        if not content:
            logger.warning("No content received from LLM")
            return ClassificationOutcome.failed(
                ClassificationFailure.MALFORMED_RESPONSE, "Empty response from LLM"
            )

        try:
            parsed = LLMClauseResponse.model_validate(json.loads(content))
        except json.JSONDecodeError as e:
            logger.error(f"Failed to parse LLM response: {e}")
            return ClassificationOutcome.failed(
                ClassificationFailure.MALFORMED_RESPONSE, f"JSON parsing error: {e}"
            )
        except ValidationError as e:
            logger.error(f"LLM response does not match the clause schema: {e}")
            return ClassificationOutcome.failed(
                ClassificationFailure.MALFORMED_RESPONSE, f"Schema error: {e}"
            )

        clauses = [
            Clause(
                type=item.type,
                content=item.content,
                risk_level=item.riskLevel,
                risk_factors=item.riskFactors,
            )
            for item in parsed.clauses
        ]
        logger.info(f"LLM identified {len(clauses)} clauses")
        return ClassificationOutcome(clauses=clauses)


# Keyword patterns for the local classifier, one per clause type
HEURISTIC_CLAUSE_PATTERNS: list[tuple[str, re.Pattern]] = [
    ("confidentiality", re.compile(r"confidentiality|non-disclosure", re.IGNORECASE)),
    ("indemnification", re.compile(r"indemnification|indemnify", re.IGNORECASE)),
    ("termination", re.compile(r"termination|terminate", re.IGNORECASE)),
    ("jurisdiction", re.compile(r"jurisdiction|governing law", re.IGNORECASE)),
    ("force majeure", re.compile(r"force majeure", re.IGNORECASE)),
    ("warranty", re.compile(r"warranty|warrant", re.IGNORECASE)),
    ("limitation of liability", re.compile(r"limitation of liability|liability cap", re.IGNORECASE)),
    ("intellectual property", re.compile(r"intellectual property|ip rights", re.IGNORECASE)),
]

HEURISTIC_CONTEXT_RADIUS = 100


class HeuristicClauseClassifier:
    """Local keyword classifier. Deterministic for a given text."""

    def __init__(self, patterns: list[tuple[str, re.Pattern]] | None = None):
        self.patterns = patterns or HEURISTIC_CLAUSE_PATTERNS

    def classify(self, text: str) -> list[Clause]:
        """Emit one medium-risk clause per clause type mentioned in the text."""
        clauses = []
        for clause_type, pattern in self.patterns:
            match = pattern.search(text)
            if not match:
                continue
            clauses.append(Clause(
                type=clause_type,
                content=raw_window(text, match.start(), match.end(), HEURISTIC_CONTEXT_RADIUS),
                risk_level=RiskLevel.MEDIUM,
                risk_factors=list(CLAUSE_RISK_FACTORS.get(clause_type, [])),
            ))
        logger.info(f"Heuristic analysis found {len(clauses)} clauses")
        return clauses
