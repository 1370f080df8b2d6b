"""
Secure XSD Validator
====================

Orchestrates the hardened validation path:

1. Compile the schema through its own secured reader
2. Build a fresh secured configuration and reader for the document
3. Wrap the reader in a NamespaceFilter with the caller's required namespace
4. Parse into an lxml tree and validate against the compiled schema

Each phase builds its own configuration so a defect in one cannot weaken
the other. Every failure comes back as a ``ValidationVerdict`` tagged with
its FailureKind; only programming errors propagate.

Resource limits, the time budget included, are enforced while the secured
reader parses the schema and the document. Schema compilation and tree
validation (step 4) run inside libxml2 and are not covered by the time
budget; they only see trees the depth, element and size limits have
already bounded.
"""

from pathlib import Path
from typing import Any, Optional
import logging

from xxe_core.errors import FailureKind, InputIOError, ValidationPipelineError
from xxe_core.parsing.factory import ResourceLimits, build_secure_parser_factory
from xxe_core.parsing.handlers import ElementTreeBuilder
from xxe_core.parsing.namespace_filter import NamespaceFilter
from xxe_core.parsing.reader import build_secure_reader
from xxe_core.parsing.sources import Source, describe_source, encode_text, named_stream
from xxe_core.validation.base import BaseValidator, ValidationVerdict
from xxe_core.validation.schema_builder import CompiledSchema, compile_schema

logger = logging.getLogger(__name__)


def parse_document(xml_source: Source, required_namespace: str,
                   limits: Optional[ResourceLimits] = None) -> Any:
    """
    Parse a document through a fresh secured reader and namespace filter.

    Returns:
        lxml ElementTree
    """
    config = build_secure_parser_factory(limits)
    reader = build_secure_reader(config)
    filtered = NamespaceFilter(reader, required_namespace)

    builder = ElementTreeBuilder()
    filtered.setContentHandler(builder)
    filtered.parse(xml_source)
    return builder.etree


def log_failure(error: ValidationPipelineError, source_name: str) -> None:
    """Log a failure; security-policy failures get their own warning."""
    if error.kind == FailureKind.SECURITY_POLICY:
        logger.warning(f"Possible XXE attempt blocked in {source_name}: {error.message}")
    elif error.kind == FailureKind.CONFIGURATION:
        logger.error(f"Refusing to validate {source_name} unsecured: {error.message}")
    else:
        logger.info(f"Validation of {source_name} failed ({error.kind.value}): {error.message}")


def validate_with_schema(schema: CompiledSchema, xml_source: Source, *,
                         required_namespace: str,
                         limits: Optional[ResourceLimits] = None) -> ValidationVerdict:
    """Validate one document against an already compiled schema."""
    source_name = describe_source(xml_source)
    try:
        document = parse_document(xml_source, required_namespace, limits)
        schema.assert_valid(document, file_context=source_name)
    except ValidationPipelineError as e:
        log_failure(e, source_name)
        return ValidationVerdict.failure(e, file=source_name, schema=schema.source_name)

    logger.info(f"{source_name} is valid against {schema.source_name}")
    return ValidationVerdict.success(schema=schema.source_name, document=source_name)


def validate(xsd_source: Source, xml_source: Source, *,
             required_namespace: str,
             limits: Optional[ResourceLimits] = None) -> ValidationVerdict:
    """
    Validate an untrusted document against an XSD without resolving any
    external entity, external DTD or external schema reference.

    Args:
        xsd_source: XSD path, bytes, or binary stream
        xml_source: XML path, bytes, or binary stream
        required_namespace: Namespace forced onto every element ("" = no namespace)
        limits: Resource limits for both parses

    Returns:
        ValidationVerdict
    """
    try:
        schema = compile_schema(xsd_source, limits)
    except ValidationPipelineError as e:
        source_name = describe_source(xsd_source)
        log_failure(e, source_name)
        return ValidationVerdict.failure(e, file=source_name, schema=source_name)

    return validate_with_schema(schema, xml_source,
                                required_namespace=required_namespace, limits=limits)


class SecureXSDValidator(BaseValidator):
    """
    Secure validator holding one compiled schema.

    Example:
        validator = SecureXSDValidator(Path("GoodSchema.xsd"), required_namespace="")
        verdict = validator.validate_file(Path("GoodXml.xml"))
        if not verdict.is_valid:
            print(verdict.summary())

    Raises (from the constructor):
        ValidationPipelineError: If the schema cannot be compiled securely
    """

    def __init__(self, xsd_path: Path, required_namespace: str,
                 limits: Optional[ResourceLimits] = None):
        self._xsd_path = Path(xsd_path)
        self.required_namespace = required_namespace
        self.limits = limits
        self._schema = compile_schema(self._xsd_path, limits)

    @property
    def schema_path(self) -> Path:
        return self._xsd_path

    @property
    def schema(self) -> CompiledSchema:
        return self._schema

    def validate_file(self, file_path: Path, **kwargs) -> ValidationVerdict:
        return validate_with_schema(self._schema, Path(file_path),
                                    required_namespace=self.required_namespace,
                                    limits=self.limits)

    def validate_bytes(self, data: bytes, file_context: str = "<bytes>") -> ValidationVerdict:
        return validate_with_schema(self._schema, named_stream(data, file_context),
                                    required_namespace=self.required_namespace,
                                    limits=self.limits)

    def validate_string(self, xml_string: str, file_context: str = "string") -> ValidationVerdict:
        """
        Validate XML text.

        The text is encoded with the encoding named in its XML declaration
        (UTF-8 when none is named), so the parser decodes it as written.
        ``file_context`` names the document in error entries.
        """
        try:
            data = encode_text(xml_string)
        except InputIOError as e:
            log_failure(e, file_context)
            return ValidationVerdict.failure(e, file=file_context, schema=self._schema.source_name)
        return self.validate_bytes(data, file_context)
