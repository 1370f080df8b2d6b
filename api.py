#!/usr/bin/env python3
"""
XML Validation REST API

FastAPI front end for the secure validation pipeline.

Endpoints:
1. GET / ?xml=<path>&xsd=<path> - Plain text "Validation result: success!" or
   "Validation result: failed."
2. GET /api/v1/validate ?xml=<path>&xsd=<path> - Structured verdict as JSON
3. GET /api/v1/health - Service status

The ``xml`` and ``xsd`` parameters are filesystem paths the caller has
already resolved; this API does not fetch URLs.

Usage:
    # Start the API server
    uvicorn api:app --host 0.0.0.0 --port 8000

    # Or programmatically
    from api import create_app
    app = create_app()
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any, Dict, List, Optional

from fastapi import FastAPI, Query
from fastapi.responses import PlainTextResponse
from pydantic import BaseModel, Field

from xxe_core import __version__
from xxe_core.config import ValidatorConfig, get_default_config, load_config
from xxe_core.errors import InputIOError
from xxe_core.validation import ValidationVerdict, validate

logger = logging.getLogger(__name__)


# ============================================================================
# CONFIGURATION
# ============================================================================

class APIConfig:
    """API Configuration settings."""

    # Optional JSON/YAML validator configuration file
    CONFIG_PATH: str = os.environ.get("XXEDEMO_CONFIG", "")

    # Overrides namespace.required_namespace from the config file when set
    REQUIRED_NAMESPACE: Optional[str] = os.environ.get("XXEDEMO_REQUIRED_NAMESPACE")

    @classmethod
    def load_validator_config(cls) -> ValidatorConfig:
        """Load the validator configuration and apply environment overrides."""
        config = load_config(Path(cls.CONFIG_PATH)) if cls.CONFIG_PATH else get_default_config()
        if cls.REQUIRED_NAMESPACE is not None:
            config.namespace.required_namespace = cls.REQUIRED_NAMESPACE
        return config


# ============================================================================
# RESPONSE MODELS
# ============================================================================

class ErrorEntry(BaseModel):
    """A single validation error."""
    file: str = ""
    line: Optional[int] = None
    column: Optional[int] = None
    type: str
    message: str
    severity: str = "Error"


class VerdictInfo(BaseModel):
    """Structured validation verdict."""
    valid: bool
    kind: Optional[str] = Field(default=None, description="Failure kind, null on success")
    message: str
    detail: Optional[str] = None
    errors: List[ErrorEntry] = Field(default_factory=list)


class HealthInfo(BaseModel):
    """Service health."""
    status: str
    version: str
    required_namespace: str


# ============================================================================
# HELPERS
# ============================================================================

def run_validation(xml_path: Optional[str], xsd_path: Optional[str],
                   config: ValidatorConfig) -> ValidationVerdict:
    """Validate with the secure pipeline; a missing parameter is an input failure."""
    if not xml_path or not xsd_path:
        missing = "xml" if not xml_path else "xsd"
        return ValidationVerdict.failure(InputIOError(f"Missing '{missing}' parameter"))

    return validate(
        xsd_path,
        xml_path,
        required_namespace=config.namespace.required_namespace,
        limits=config.security.to_limits(),
    )


# ============================================================================
# API ENDPOINTS
# ============================================================================

def create_app(config: Optional[ValidatorConfig] = None) -> FastAPI:
    """Create and configure the FastAPI application."""

    validator_config = config or APIConfig.load_validator_config()

    app = FastAPI(
        title="XML Validation API",
        description="""
Validates XML documents against XSD schemas without resolving external
entities, external DTDs, or external schema references.

- `GET /` returns a one-line plain text result
- `GET /api/v1/validate` returns the structured verdict, distinguishing
  security-policy failures from schema violations
        """,
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
    )

    @app.get("/", response_class=PlainTextResponse, tags=["Validation"])
    def test_xml(
        xml: Optional[str] = Query(default=None, description="Path to the XML document"),
        xsd: Optional[str] = Query(default=None, description="Path to the XSD schema"),
    ) -> str:
        """Validate and return the plain text result."""
        verdict = run_validation(xml, xsd, validator_config)
        return verdict.message

    @app.get("/api/v1/validate", response_model=VerdictInfo, tags=["Validation"])
    def validate_documents(
        xml: Optional[str] = Query(default=None, description="Path to the XML document"),
        xsd: Optional[str] = Query(default=None, description="Path to the XSD schema"),
    ) -> Dict[str, Any]:
        """Validate and return the structured verdict."""
        verdict = run_validation(xml, xsd, validator_config)
        return verdict.to_dict()

    @app.get("/api/v1/health", response_model=HealthInfo, tags=["Health"])
    def health() -> Dict[str, Any]:
        """Health check."""
        return {
            "status": "healthy",
            "version": __version__,
            "required_namespace": validator_config.namespace.required_namespace,
        }

    return app


# Create default app instance
app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
