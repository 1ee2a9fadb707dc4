"""
Pytest configuration and fixtures for FinePrint tests.
"""
import io
import json
import os
import sys
from pathlib import Path
from typing import Generator
from unittest.mock import AsyncMock, MagicMock, Mock

import pytest
from fastapi.testclient import TestClient

# Add backend to path
sys.path.insert(0, str(Path(__file__).parent.parent))

# Keep tests off the network: no key, LLM disabled
os.environ["OPENAI_API_KEY"] = ""
os.environ["LLM_ENABLED"] = "false"
os.environ.setdefault("TESSERACT_PATH", "/usr/bin/tesseract")


@pytest.fixture
def test_client() -> Generator[TestClient, None, None]:
    """Create a test client for the FastAPI app."""
    from main import app

    with TestClient(app) as client:
        yield client


@pytest.fixture
def example_contract_text() -> str:
    return (
        "This Agreement is made between Acme Corp and Jane Doe, "
        "effective January 5, 2024. Total amount of $10,000.00 is due."
    )


@pytest.fixture
def full_contract_text() -> str:
    """A contract with most extractable fields present."""
    return (
        "SERVICES AGREEMENT\n"
        "\n"
        "This Agreement is entered into between Northwind Traders and Contoso Ltd, "
        "effective date: March 1, 2024.\n"
        "The total amount of $25,000.00 is payable under Section 3.1.\n"
        "This Agreement shall automatically renew for successive one year terms.\n"
        "\n"
        "Payment Terms.\n"
        "invoices are due within thirty days of receipt.\n"
        "\n"
        "Termination.\n"
        "either party may terminate with 30 days written notice.\n"
        "\n"
        "Governing Law.\n"
        "this agreement is governed by the laws of the State of New York.\n"
        "\n"
        "Confidentiality.\n"
        "each party shall keep the other's confidential information secret.\n"
        "\n"
        "The expiration date is December 31, 2025.\n"
    )


@pytest.fixture
def docx_bytes() -> bytes:
    """A small DOCX contract built with python-docx."""
    import docx

    document = docx.Document()
    document.add_paragraph(
        "This Agreement is made between Acme Corp and Jane Doe, "
        "effective January 5, 2024."
    )
    document.add_paragraph("Total amount of $10,000.00 is due.")
    document.add_paragraph("Both parties accept the terms and obligations of this contract.")
    buffer = io.BytesIO()
    document.save(buffer)
    return buffer.getvalue()


def create_mock_response(content):
    """Create a mock OpenAI chat completion response."""
    mock_message = Mock()
    mock_message.content = content if isinstance(content, str) or content is None else json.dumps(content)

    mock_choice = Mock()
    mock_choice.message = mock_message

    mock_response = Mock()
    mock_response.choices = [mock_choice]

    return mock_response


def create_mock_client(content=None, side_effect=None):
    """Create a mock AsyncOpenAI client."""
    mock_client = MagicMock()

    if side_effect is not None:
        mock_client.chat.completions.create = AsyncMock(side_effect=side_effect)
    else:
        mock_client.chat.completions.create = AsyncMock(
            return_value=create_mock_response(content)
        )

    return mock_client


@pytest.fixture
def llm_clauses() -> dict:
    """A valid clause classification payload."""
    return {
        "clauses": [
            {
                "type": "termination",
                "content": "Either party may terminate with 30 days written notice.",
                "riskLevel": "high",
                "riskFactors": ["notice period"],
            },
            {
                "type": "confidentiality",
                "content": "Each party shall keep confidential information secret.",
                "riskLevel": "low",
                "riskFactors": [],
            },
        ]
    }


@pytest.fixture
def mock_llm_client():
    """Factory fixture for mock AsyncOpenAI clients."""
    return create_mock_client
