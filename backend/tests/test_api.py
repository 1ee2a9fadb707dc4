"""
API endpoint tests for FinePrint.
"""
import io

from fastapi import status

from core.export import CSV_HEADERS

DOCX_TYPE = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"


class TestHealthEndpoint:
    """Tests for health check endpoint."""

    def test_health_check_returns_ok(self, test_client):
        response = test_client.get("/health")

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["status"] == "healthy"
        assert data["version"] == "1.0.0"
        assert data["services"]["llm"] == "not_configured"

    def test_root(self, test_client):
        response = test_client.get("/")

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["name"] == "FinePrint API"


class TestExtractEndpoint:
    """Tests for contract term extraction."""

    def test_extract_example(self, test_client, example_contract_text):
        response = test_client.post(
            "/extract",
            json={"text": example_contract_text, "title": "msa.pdf"},
        )

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["source"] == "msa.pdf"
        assert data["effectiveDate"] == "January 5, 2024"
        assert data["amount"] == "$10,000.00"
        assert data["parties"] == ["Acme Corp", "Jane Doe"]
        assert data["expirationDate"] is None
        assert set(data["confidence"]) == {"effectiveDate", "amount", "parties"}

    def test_extract_no_matches(self, test_client):
        response = test_client.post("/extract", json={"text": "Nothing here."})

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["confidence"] == {}

    def test_extract_requires_text(self, test_client):
        response = test_client.post("/extract", json={"title": "x.pdf"})
        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY

    def test_extract_csv(self, test_client, example_contract_text, full_contract_text):
        response = test_client.post(
            "/extract/csv",
            json=[
                {"text": example_contract_text, "title": "a.pdf"},
                {"text": full_contract_text, "title": "b.pdf"},
            ],
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.headers["content-type"].startswith("text/csv")
        assert "contract-terms.csv" in response.headers["content-disposition"]
        assert response.text.startswith(",".join(CSV_HEADERS) + "\n")
        assert '"Acme Corp; Jane Doe"' not in response.text
        assert "Acme Corp; Jane Doe" in response.text

    def test_extract_csv_empty_list(self, test_client):
        response = test_client.post("/extract/csv", json=[])

        assert response.status_code == status.HTTP_200_OK
        assert response.text == ",".join(CSV_HEADERS) + "\n"


class TestAnalyzeEndpoint:
    """Tests for document analysis."""

    def test_analyze_uses_heuristics_without_llm(self, test_client, full_contract_text):
        response = test_client.post(
            "/analyze",
            json={"text": full_contract_text, "title": "msa.pdf", "pageCount": 3},
        )

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["clauseSource"] == "heuristic"
        assert data["classificationFailure"] == "unavailable"
        assert 0 <= data["riskScore"] <= 100
        assert data["riskLevel"] in ("low", "medium", "high")
        assert data["summary"].startswith("Document contains")
        assert all(clause["riskLevel"] == "medium" for clause in data["clauses"])
        assert {"startIndex", "endIndex", "position"} <= set(data["terms"][0])

    def test_analyze_empty_text(self, test_client):
        response = test_client.post("/analyze", json={"text": "   "})

        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY
        detail = response.json()["detail"]
        assert detail["error"] == "NoContent"
        assert detail["message"] == "Document content is required for analysis"


class TestUploadEndpoint:
    """Tests for document upload."""

    def test_upload_docx_contract(self, test_client, docx_bytes):
        files = {"file": ("service_contract.docx", io.BytesIO(docx_bytes), DOCX_TYPE)}

        response = test_client.post("/upload", files=files)

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["metadata"]["type"] == "docx"
        assert data["metadata"]["title"] == "service_contract.docx"
        assert data["metadata"]["wordCount"] > 0
        assert data["isLikelyContract"] is True
        assert data["extractedTerms"]["effectiveDate"] == "January 5, 2024"
        assert data["extractedTerms"]["amount"] == "$10,000.00"

    def test_upload_unsupported_type(self, test_client):
        files = {"file": ("notes.txt", io.BytesIO(b"Plain text notes"), "text/plain")}

        response = test_client.post("/upload", files=files)

        assert response.status_code == status.HTTP_415_UNSUPPORTED_MEDIA_TYPE
        assert response.json()["detail"]["error"] == "UnsupportedMediaType"

    def test_upload_empty_file(self, test_client):
        files = {"file": ("empty.pdf", io.BytesIO(b""), "application/pdf")}

        response = test_client.post("/upload", files=files)

        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY
        assert response.json()["detail"]["error"] == "NoContent"

    def test_upload_corrupt_docx(self, test_client):
        files = {"file": ("broken.docx", io.BytesIO(b"not a zip archive"), DOCX_TYPE)}

        response = test_client.post("/upload", files=files)

        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY
        assert response.json()["detail"]["error"] == "IngestionError"


class TestErrorHandling:
    """Tests for error handling."""

    def test_404_for_unknown_endpoint(self, test_client):
        response = test_client.get("/unknown/endpoint")
        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_method_not_allowed(self, test_client):
        response = test_client.get("/analyze")
        assert response.status_code == status.HTTP_405_METHOD_NOT_ALLOWED
