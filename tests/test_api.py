"""
Tests for the XML Validation REST API.

Run with: pytest tests/test_api.py -v
"""

import sys
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

sys.path.insert(0, str(Path(__file__).parent.parent))
sys.path.insert(0, str(Path(__file__).parent))

from api import APIConfig, app, create_app
from xxe_core.config import ValidatorConfig
from payloads import (
    GOOD_XML,
    GOOD_XML_PATH,
    GOOD_XSD_PATH,
    INVALID_XML,
    NAMESPACED_XML,
    SECRET,
    file_disclosure_xml,
)


@pytest.fixture
def client():
    """Create test client."""
    return TestClient(app)


@pytest.fixture
def xml_files(tmp_path):
    """Good, invalid, namespaced and hostile documents on disk."""
    secret = tmp_path / "secret.txt"
    secret.write_text(SECRET)

    files = {
        "good": GOOD_XML,
        "invalid": INVALID_XML,
        "namespaced": NAMESPACED_XML,
        "xxe": file_disclosure_xml(secret.as_uri()),
    }
    paths = {}
    for name, data in files.items():
        path = tmp_path / f"{name}.xml"
        path.write_bytes(data)
        paths[name] = str(path)
    return paths


def params(xml, xsd=GOOD_XSD_PATH):
    return {"xml": str(xml), "xsd": str(xsd)}


class TestPlainTextEndpoint:
    """Tests for GET /."""

    def test_success(self, client):
        """A valid pair returns the success line."""
        response = client.get("/", params=params(GOOD_XML_PATH))
        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/plain")
        assert response.text == "Validation result: success!"

    def test_invalid_document(self, client, xml_files):
        """An invalid document returns the failure line."""
        response = client.get("/", params=params(xml_files["invalid"]))
        assert response.status_code == 200
        assert response.text == "Validation result: failed."

    def test_xxe_document(self, client, xml_files):
        """A hostile document returns the failure line and nothing else."""
        response = client.get("/", params=params(xml_files["xxe"]))
        assert response.text == "Validation result: failed."
        assert SECRET not in response.text

    def test_missing_parameters(self, client):
        """Missing parameters are a failure, not a server error."""
        response = client.get("/")
        assert response.status_code == 200
        assert response.text == "Validation result: failed."


class TestValidateEndpoint:
    """Tests for GET /api/v1/validate."""

    def test_success(self, client):
        """A valid pair returns a structured success."""
        response = client.get("/api/v1/validate", params=params(GOOD_XML_PATH))
        assert response.status_code == 200
        data = response.json()
        assert data["valid"] is True
        assert data["kind"] is None
        assert data["errors"] == []

    def test_schema_violation(self, client, xml_files):
        """A schema violation is tagged and carries error entries."""
        data = client.get("/api/v1/validate", params=params(xml_files["invalid"])).json()
        assert data["valid"] is False
        assert data["kind"] == "schema_violation"
        assert data["errors"]

    def test_security_failure(self, client, xml_files):
        """An XXE attempt is tagged as a security failure."""
        response = client.get("/api/v1/validate", params=params(xml_files["xxe"]))
        data = response.json()
        assert data["kind"] == "security_policy"
        assert SECRET not in response.text

    def test_missing_file(self, client, tmp_path):
        """A nonexistent document is an I/O failure."""
        data = client.get("/api/v1/validate", params=params(tmp_path / "missing.xml")).json()
        assert data["kind"] == "io"

    def test_missing_parameter(self, client):
        """A missing xsd parameter is reported."""
        data = client.get("/api/v1/validate", params={"xml": str(GOOD_XML_PATH)}).json()
        assert data["kind"] == "io"
        assert "xsd" in data["detail"]


class TestConfiguredApp:
    """Tests for create_app with an explicit configuration."""

    def test_required_namespace_from_config(self, xml_files):
        """The configured namespace is applied to every request."""
        config = ValidatorConfig()
        config.namespace.required_namespace = "http://a"
        client = TestClient(create_app(config))

        response = client.get("/", params=params(xml_files["namespaced"]))
        assert response.text == "Validation result: failed."

        health = client.get("/api/v1/health").json()
        assert health["required_namespace"] == "http://a"

    def test_environment_override(self, monkeypatch):
        """XXEDEMO_REQUIRED_NAMESPACE overrides the config file value."""
        monkeypatch.setattr(APIConfig, "REQUIRED_NAMESPACE", "urn:example:person")
        config = APIConfig.load_validator_config()
        assert config.namespace.required_namespace == "urn:example:person"


class TestHealthEndpoint:
    """Tests for health check endpoint."""

    def test_health_check(self, client):
        """Test health endpoint returns status."""
        response = client.get("/api/v1/health")
        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert "version" in data


class TestOpenAPIDocumentation:
    """Tests for API documentation."""

    def test_openapi_schema(self, client):
        """Test OpenAPI schema is available."""
        response = client.get("/openapi.json")
        assert response.status_code == 200
        paths = response.json()["paths"]
        assert "/" in paths
        assert "/api/v1/validate" in paths
        assert "/api/v1/health" in paths
