"""
Pipeline Errors
===============

Exception hierarchy for the secure validation pipeline. Every error carries
a ``kind`` so callers can tell an attack (security policy) apart from an
ordinary data-quality problem (schema violation) without string matching.
"""

from enum import Enum
from typing import Any, Dict, List, Optional


class FailureKind(str, Enum):
    """Category of a validation failure."""
    CONFIGURATION = "configuration"
    SCHEMA_COMPILATION = "schema_compilation"
    SECURITY_POLICY = "security_policy"
    SCHEMA_VIOLATION = "schema_violation"
    IO = "io"


class ValidationPipelineError(Exception):
    """Base class for all pipeline errors."""

    kind: FailureKind = FailureKind.SCHEMA_VIOLATION

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class ConfigurationError(ValidationPipelineError):
    """A restrictive parser feature could not be applied. Never proceed unsecured."""

    kind = FailureKind.CONFIGURATION


class SchemaCompilationError(ValidationPipelineError):
    """The XSD is malformed or inconsistent."""

    kind = FailureKind.SCHEMA_COMPILATION


class SecurityPolicyError(ValidationPipelineError):
    """A DOCTYPE, entity declaration or external reference was blocked."""

    kind = FailureKind.SECURITY_POLICY


class ResourceLimitError(SecurityPolicyError):
    """Input exceeded a size, depth, element-count or time limit."""


class SchemaViolationError(ValidationPipelineError):
    """The document does not conform to the schema."""

    kind = FailureKind.SCHEMA_VIOLATION

    def __init__(self, message: str,
                 errors: Optional[List[Dict[str, Any]]] = None,
                 details: Optional[Dict[str, Any]] = None):
        super().__init__(message, details)
        self.errors = errors or []


class MalformedDocumentError(SchemaViolationError):
    """The document is not well-formed XML."""


class InputIOError(ValidationPipelineError, OSError):
    """An XML or XSD resource could not be read."""

    kind = FailureKind.IO
