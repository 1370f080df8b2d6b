"""
XXE Demo Core Library
=====================

Secure XML Schema validation for untrusted documents:

- Parser configuration that disallows DOCTYPEs and external entities
- SAX reader locked to that configuration
- Namespace normalizing filter
- Secure schema compilation and validation with tagged verdicts
- OWASP-style access-policy variant

Architecture
------------

    xxe_core/
    ├── parsing/      - Parser configuration, secured reader, namespace filter
    ├── validation/   - Schema builder, validators, verdicts
    ├── xml/          - Namespace helpers and access policy resolver
    ├── config/       - Configuration management
    ├── errors.py     - Error taxonomy
    └── person.py     - Person document loader

Usage
-----

    from xxe_core import validate

    verdict = validate("GoodSchema.xsd", "GoodXml.xml", required_namespace="")
    if not verdict.is_valid:
        print(verdict.kind, verdict.summary())

The deliberately vulnerable reference implementation is kept in the test
corpus only (``tests/corpus``).
"""

__version__ = "1.0.0"

from xxe_core.errors import (
    FailureKind,
    ValidationPipelineError,
    ConfigurationError,
    SchemaCompilationError,
    SecurityPolicyError,
    ResourceLimitError,
    SchemaViolationError,
    MalformedDocumentError,
    InputIOError,
)

from xxe_core.parsing import (
    ParserConfiguration,
    ResourceLimits,
    SecuredReader,
    NamespaceFilter,
    build_secure_parser_factory,
    build_secure_reader,
)

from xxe_core.validation import (
    CompiledSchema,
    SecureXSDValidator,
    ValidationVerdict,
    build_schema,
    compile_schema,
    validate,
    validate_owasp,
)

from xxe_core.person import Person, load_person

__all__ = [
    "__version__",
    # Errors
    "FailureKind",
    "ValidationPipelineError",
    "ConfigurationError",
    "SchemaCompilationError",
    "SecurityPolicyError",
    "ResourceLimitError",
    "SchemaViolationError",
    "MalformedDocumentError",
    "InputIOError",
    # Parsing
    "ParserConfiguration",
    "ResourceLimits",
    "SecuredReader",
    "NamespaceFilter",
    "build_secure_parser_factory",
    "build_secure_reader",
    # Validation
    "CompiledSchema",
    "SecureXSDValidator",
    "ValidationVerdict",
    "build_schema",
    "compile_schema",
    "validate",
    "validate_owasp",
    # Person documents
    "Person",
    "load_person",
]
