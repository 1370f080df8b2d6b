"""
Validation Framework
====================

Schema compilation and the hardened validation paths.

Components:
- ValidationVerdict: Tagged validation result
- BaseValidator: Abstract base class for validators
- build_schema / compile_schema: Secure XSD compilation
- validate / SecureXSDValidator: Secure validation pipeline
- validate_owasp: Access-policy hardened variant
"""

from xxe_core.validation.base import (
    BaseValidator,
    ValidationVerdict,
    SUCCESS_MESSAGE,
    FAILURE_MESSAGE,
)

from xxe_core.validation.schema_builder import (
    CompiledSchema,
    build_schema,
    compile_schema,
    check_schema_references,
)

from xxe_core.validation.secure_validator import (
    SecureXSDValidator,
    parse_document,
    validate,
    validate_with_schema,
)

from xxe_core.validation.owasp_validator import validate_owasp

__all__ = [
    "BaseValidator",
    "ValidationVerdict",
    "SUCCESS_MESSAGE",
    "FAILURE_MESSAGE",
    "CompiledSchema",
    "build_schema",
    "compile_schema",
    "check_schema_references",
    "SecureXSDValidator",
    "parse_document",
    "validate",
    "validate_with_schema",
    "validate_owasp",
]
