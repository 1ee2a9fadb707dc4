"""
Tests for contract field extraction.
"""
import time

import pytest

from core.config import CLAUSE_TEXT_LIMIT, FIELD_CONFIDENCE
from core.contract_extractor import (
    FIELD_PATTERNS,
    PARTY_NAME_LIMIT,
    TERM_FIELDS,
    ContractExtractor,
    is_likely_contract,
    to_camel,
)
from core.document import RawDocument


@pytest.fixture
def extractor():
    return ContractExtractor()


def extract(extractor, text, title="contract.pdf"):
    return extractor.extract_contract_terms(RawDocument.from_text(text, title=title))


class TestExampleContract:
    """The short services agreement used across the docs."""

    def test_effective_date(self, extractor, example_contract_text):
        terms = extract(extractor, example_contract_text)
        assert terms.effective_date == "January 5, 2024"

    def test_amount(self, extractor, example_contract_text):
        terms = extract(extractor, example_contract_text)
        assert terms.amount == "$10,000.00"

    def test_parties(self, extractor, example_contract_text):
        terms = extract(extractor, example_contract_text)
        assert "Acme Corp" in terms.parties
        assert "Jane Doe" in terms.parties

    def test_confidence_only_for_present_fields(self, extractor, example_contract_text):
        terms = extract(extractor, example_contract_text)
        assert terms.confidence == {
            "effective_date": FIELD_CONFIDENCE,
            "amount": FIELD_CONFIDENCE,
            "parties": FIELD_CONFIDENCE,
        }

    def test_absent_fields_are_none(self, extractor, example_contract_text):
        terms = extract(extractor, example_contract_text)
        assert terms.expiration_date is None
        assert terms.termination_clause is None
        assert terms.governing_law is None

    def test_source_is_document_title(self, extractor, example_contract_text):
        terms = extract(extractor, example_contract_text, title="msa.pdf")
        assert terms.source == "msa.pdf"


class TestFullContract:
    """A contract carrying clause headings."""

    def test_dates(self, extractor, full_contract_text):
        terms = extract(extractor, full_contract_text)
        assert terms.effective_date == "March 1, 2024"
        assert terms.expiration_date == "December 31, 2025"

    def test_amount(self, extractor, full_contract_text):
        assert extract(extractor, full_contract_text).amount == "$25,000.00"

    def test_clause_bodies(self, extractor, full_contract_text):
        terms = extract(extractor, full_contract_text)
        assert terms.payment_terms == "invoices are due within thirty days of receipt."
        assert terms.termination_clause == "either party may terminate with 30 days written notice."
        assert terms.governing_law == (
            "this agreement is governed by the laws of the State of New York."
        )
        assert terms.confidentiality == (
            "each party shall keep the other's confidential information secret."
        )

    def test_automatic_renewal(self, extractor, full_contract_text):
        terms = extract(extractor, full_contract_text)
        assert terms.automatic_renewal == (
            "This Agreement shall automatically renew for successive one year terms."
        )

    def test_parties_from_opening_sentence(self, extractor, full_contract_text):
        terms = extract(extractor, full_contract_text)
        # The generic "party" pattern also picks up clause sentences
        assert terms.parties == (
            "Northwind Traders",
            "Contoso Ltd",
            "may terminate with 30 days written notice",
            "shall keep the other's confidential information secret",
        )

    def test_missing_dispute_resolution(self, extractor, full_contract_text):
        terms = extract(extractor, full_contract_text)
        assert terms.dispute_resolution is None
        assert "dispute_resolution" not in terms.confidence


class TestFieldRules:
    """Priority order, caps and no-match behavior."""

    def test_no_matches(self, extractor):
        terms = extract(extractor, "Hello world. Nothing to see here.")
        for name in TERM_FIELDS:
            assert getattr(terms, name) is None
        assert terms.confidence == {}

    def test_first_pattern_wins_over_earlier_text(self, extractor):
        text = "Effective on March 3, 2024 the work begins. Commencement date: 01/02/2023."
        assert extractor.extract_field("effective_date", text) == "01/02/2023"

    def test_later_pattern_used_when_earlier_fail(self, extractor):
        text = "This agreement is made as of 2024-02-01 by the undersigned."
        assert extractor.extract_field("effective_date", text) == "2024-02-01"

    def test_term_length_as_expiration(self, extractor):
        text = "The term of this agreement shall be for 3 years."
        assert extractor.extract_field("expiration_date", text) == "3"

    def test_amount_with_currency_word(self, extractor):
        text = "The parties agree to pay 5,000 USD on signature."
        assert extractor.extract_field("amount", text) == "5,000 USD"

    def test_clause_capped(self, extractor):
        text = "Termination.\n" + "x" * 400
        value = extractor.extract_field("termination_clause", text)
        assert len(value) == CLAUSE_TEXT_LIMIT

    def test_clause_stops_at_capitalized_line(self, extractor):
        text = "Governing Law.\nthe laws of Ontario apply\nNotices go to the address above."
        assert extractor.extract_field("governing_law", text) == "the laws of Ontario apply"

    def test_every_field_has_patterns(self):
        for name in FIELD_PATTERNS:
            assert FIELD_PATTERNS[name], f"{name} has no patterns"


class TestParties:
    def test_deduplicated_in_first_seen_order(self, extractor):
        text = (
            "This Agreement is made between Acme Corp and Jane Doe, for services. "
            "Any agreement between Acme Corp and Jane Doe; remains in force."
        )
        assert extractor.extract_parties(text) == ("Acme Corp", "Jane Doe")

    def test_party_label(self, extractor):
        text = "Party of the first part: Globex Inc\nParty of the second part: Initech LLC\n"
        assert extractor.extract_parties(text) == ("Globex Inc", "Initech LLC")

    def test_no_parties(self, extractor):
        assert extractor.extract_parties("No names in this text.") is None

    def test_names_never_contain_separator(self, extractor):
        text = (
            "This Agreement is made between Acme; Sons and Jane Doe, for services. "
            "Party: Globex; Initech\n"
        )
        parties = extractor.extract_parties(text)
        assert parties == ("Globex",)
        assert all(";" not in party for party in parties)

    def test_name_length_bounded(self, extractor):
        text = "This Agreement is made between " + "A" * 500 + " and Jane Doe, for services."
        parties = extractor.extract_parties(text) or ()
        assert all(len(party) <= PARTY_NAME_LIMIT for party in parties)

    def test_large_single_line_document(self, extractor):
        text = "The agreement between the buyer and the seller is binding. " * 16000
        start = time.perf_counter()
        parties = extractor.extract_parties(text)
        assert time.perf_counter() - start < 5
        assert parties == ("the buyer", "the seller is binding")

    def test_large_document_without_delimiters(self, extractor):
        text = "agreement between acme and beta and " * 1500
        start = time.perf_counter()
        terms = extract(extractor, text)
        assert time.perf_counter() - start < 5
        assert terms.parties is None


class TestSerialization:
    def test_to_dict_is_camel_case(self, extractor, example_contract_text):
        data = extract(extractor, example_contract_text).to_dict()
        assert data["effectiveDate"] == "January 5, 2024"
        assert data["parties"] == ["Acme Corp", "Jane Doe"]
        assert data["confidence"] == {
            "effectiveDate": FIELD_CONFIDENCE,
            "amount": FIELD_CONFIDENCE,
            "parties": FIELD_CONFIDENCE,
        }
        assert "extractedAt" in data

    @pytest.mark.parametrize("name,expected", [
        ("effective_date", "effectiveDate"),
        ("amount", "amount"),
        ("termination_clause", "terminationClause"),
    ])
    def test_to_camel(self, name, expected):
        assert to_camel(name) == expected


class TestIsLikelyContract:
    def test_filename_hint(self):
        assert is_likely_contract("", "Lease_Agreement.pdf")

    def test_three_keywords(self):
        text = "This agreement sets out the obligations of both parties."
        assert is_likely_contract(text, "scan.png")

    def test_too_few_keywords(self):
        assert not is_likely_contract("Our agreement covers services.", "notes.pdf")

    def test_plain_text(self):
        assert not is_likely_contract("The quick brown fox jumps over the lazy dog.")
