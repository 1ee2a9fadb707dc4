"""
Tests for the document analysis pipeline.
"""
import asyncio
from unittest.mock import Mock

import pytest
from openai import RateLimitError

from core.analyzer import DocumentAnalyzer
from core.clause_classifier import ClassificationFailure, LLMClauseClassifier, RiskLevel
from core.config import Settings
from core.document import NoContentError, RawDocument
from core.term_scanner import TermType


def analyzer_with(client=None, settings=None):
    settings = settings or Settings(openai_api_key="sk-test", llm_enabled=True)
    return DocumentAnalyzer(llm_classifier=LLMClauseClassifier(settings, client=client))


def analyze(analyzer, text, page_count=None):
    document = RawDocument.from_text(text, title="contract.pdf", page_count=page_count)
    return asyncio.run(analyzer.analyze_document(document))


class TestEmptyDocuments:
    @pytest.mark.parametrize("text", ["", "   ", "\n\t\f"])
    def test_no_content_raises(self, text):
        analyzer = analyzer_with(settings=Settings(openai_api_key="", llm_enabled=False))
        with pytest.raises(NoContentError, match="Document content is required for analysis"):
            analyze(analyzer, text)

    def test_llm_not_called_for_empty_document(self, mock_llm_client, llm_clauses):
        client = mock_llm_client(llm_clauses)
        with pytest.raises(NoContentError):
            analyze(analyzer_with(client), "")
        client.chat.completions.create.assert_not_called()


class TestClauseSources:
    def test_llm_clauses_used(self, mock_llm_client, llm_clauses, full_contract_text):
        analysis = analyze(analyzer_with(mock_llm_client(llm_clauses)), full_contract_text)

        assert analysis.clause_source == "llm"
        assert analysis.classification_failure is None
        assert [c.risk_level for c in analysis.clauses] == [RiskLevel.HIGH, RiskLevel.LOW]

    def test_rate_limit_falls_back_to_heuristic(self, mock_llm_client, full_contract_text):
        client = mock_llm_client(side_effect=RateLimitError(
            message="Rate limited",
            response=Mock(status_code=429),
            body=None,
        ))
        analysis = analyze(analyzer_with(client), full_contract_text)

        assert analysis.clause_source == "heuristic"
        assert analysis.classification_failure == ClassificationFailure.RATE_LIMITED
        assert {c.type for c in analysis.clauses} >= {"termination", "confidentiality"}
        assert all(c.risk_level == RiskLevel.MEDIUM for c in analysis.clauses)

    def test_malformed_response_leaves_no_clauses(self, mock_llm_client, full_contract_text):
        analysis = analyze(analyzer_with(mock_llm_client("{oops")), full_contract_text)

        assert analysis.clause_source == "none"
        assert analysis.classification_failure == ClassificationFailure.MALFORMED_RESPONSE
        assert analysis.clauses == []
        assert analysis.terms

    def test_unconfigured_is_deterministic(self, full_contract_text):
        settings = Settings(openai_api_key="", llm_enabled=False)
        first = analyze(analyzer_with(settings=settings), full_contract_text)
        second = analyze(analyzer_with(settings=settings), full_contract_text)

        assert first.clause_source == "heuristic"
        assert first.classification_failure == ClassificationFailure.UNAVAILABLE
        assert [c.to_dict() for c in first.clauses] == [c.to_dict() for c in second.clauses]
        assert first.risk_score == second.risk_score


class TestAnalysisContents:
    def test_terms_and_score(self, mock_llm_client, llm_clauses):
        text = "Fee $750 under Section 5.1."
        analysis = analyze(analyzer_with(mock_llm_client(llm_clauses)), text, page_count=2)

        assert [t.type for t in analysis.terms] == [TermType.AMOUNT, TermType.SECTION]
        # (0.2 terms + 0.1 pages + 0.3 high + 0.1 low) * 20
        assert analysis.risk_score == pytest.approx(14.0)
        assert analysis.risk_level == RiskLevel.LOW
        assert analysis.summary.startswith("Document contains 2 key terms")

    def test_to_dict_shape(self, example_contract_text):
        settings = Settings(openai_api_key="", llm_enabled=False)
        data = analyze(analyzer_with(settings=settings), example_contract_text).to_dict()

        assert set(data) == {
            "terms", "clauses", "riskScore", "riskLevel", "summary",
            "clauseSource", "classificationFailure", "analyzedAt",
        }
        assert data["classificationFailure"] == "unavailable"
