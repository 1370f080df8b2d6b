"""
Schema Builder
==============

Compiles an XSD into a reusable ``CompiledSchema``. The schema document is
read through a secured reader, so the XSD itself cannot declare entities or
pull in external resources, and external ``schemaLocation`` references are
checked against the configuration's schema access policy before lxml sees
them.
"""

from typing import Any, Dict, List, Optional
import logging

from lxml import etree

from xxe_core.errors import (
    ConfigurationError,
    MalformedDocumentError,
    SchemaCompilationError,
    SchemaViolationError,
    SecurityPolicyError,
)
from xxe_core.parsing.factory import ParserConfiguration, ResourceLimits, build_secure_parser_factory
from xxe_core.parsing.handlers import ElementTreeBuilder
from xxe_core.parsing.reader import SecuredReader, build_secure_reader
from xxe_core.parsing.sources import Source, describe_source
from xxe_core.xml.utils import error_log_entries, is_access_allowed, iter_schema_references

logger = logging.getLogger(__name__)


class CompiledSchema:
    """
    Immutable compiled XSD rule-set.

    Example:
        schema = compile_schema("GoodSchema.xsd")
        schema.assert_valid(tree, file_context="GoodXml.xml")
    """

    __slots__ = ("_schema", "_source_name", "_configuration")

    def __init__(self, schema: Any, source_name: str, configuration: ParserConfiguration):
        object.__setattr__(self, "_schema", schema)
        object.__setattr__(self, "_source_name", source_name)
        object.__setattr__(self, "_configuration", configuration)

    def __setattr__(self, name, value):
        raise AttributeError("CompiledSchema is immutable")

    @property
    def source_name(self) -> str:
        return self._source_name

    @property
    def configuration(self) -> ParserConfiguration:
        return self._configuration

    def errors_for(self, document: Any, file_context: str = "document") -> List[Dict[str, Any]]:
        """Validate ``document`` and return its error entries (empty when valid)."""
        if self._schema.validate(document):
            return []
        return error_log_entries(self._schema.error_log, file_context)

    def assert_valid(self, document: Any, file_context: str = "document") -> None:
        """
        Raise SchemaViolationError unless ``document`` conforms.

        Args:
            document: lxml ElementTree or Element
            file_context: Name used in error entries
        """
        errors = self.errors_for(document, file_context)
        if errors:
            first = errors[0]
            raise SchemaViolationError(
                f"{file_context} does not conform to {self._source_name}: {first['message']}",
                errors=errors,
            )

    def __repr__(self) -> str:
        return f"<CompiledSchema {self._source_name}>"


def _require_schema_factory_flags(config: ParserConfiguration) -> None:
    """Schema-factory level checks: doctype disallowed and secure processing on."""
    if not config.disallow_doctype or not config.secure_processing:
        raise ConfigurationError(
            "Schema compilation requires disallow_doctype and secure_processing",
            details={'disallow_doctype': config.disallow_doctype,
                     'secure_processing': config.secure_processing},
        )
    config.require_secured()


def check_schema_references(tree: Any, policy: str, source_name: str) -> None:
    """
    Refuse external schema references the access policy does not allow.

    Raises:
        SecurityPolicyError: On the first disallowed schemaLocation
    """
    for construct, location in iter_schema_references(tree):
        if not is_access_allowed(location, policy):
            logger.warning(
                f"Blocked external schema reference xs:{construct} {location!r} in {source_name}"
            )
            raise SecurityPolicyError(
                f"External schema reference xs:{construct} {location!r} is not allowed",
                details={'reason': 'external_schema_forbidden',
                         'construct': construct, 'location': location},
            )


def build_schema(xsd_source: Source, secured_reader: SecuredReader) -> CompiledSchema:
    """
    Compile an XSD read through ``secured_reader``.

    The configuration's resource limits apply while the XSD is parsed.
    ``etree.XMLSchema`` then compiles the bounded tree inside libxml2, outside
    the time budget.

    Args:
        xsd_source: XSD path, bytes, or binary stream
        secured_reader: Reader bound to a secured configuration

    Returns:
        CompiledSchema

    Raises:
        ConfigurationError: If the reader's configuration is not secured
        SecurityPolicyError: If the XSD declares a DOCTYPE/entity or references
            an external schema
        SchemaCompilationError: If the XSD is malformed or inconsistent
        InputIOError: If the XSD cannot be read or is empty
    """
    config = secured_reader.configuration
    _require_schema_factory_flags(config)
    source_name = describe_source(xsd_source)

    builder = ElementTreeBuilder()
    secured_reader.setContentHandler(builder)
    try:
        secured_reader.parse(xsd_source)
    except MalformedDocumentError as e:
        raise SchemaCompilationError(
            f"Schema {source_name} is not well-formed: {e.message}",
            details={'errors': e.errors},
        ) from e

    tree = builder.etree
    check_schema_references(tree, config.access_external_schema, source_name)

    try:
        schema = etree.XMLSchema(tree)
    except etree.XMLSchemaParseError as e:
        raise SchemaCompilationError(
            f"Schema {source_name} could not be compiled: {e}",
            details={'errors': error_log_entries(e.error_log, source_name)},
        ) from e

    logger.debug(f"Compiled schema {source_name}")
    return CompiledSchema(schema, source_name, config)


def compile_schema(xsd_source: Source, limits: Optional[ResourceLimits] = None) -> CompiledSchema:
    """Compile an XSD with its own freshly built secured configuration and reader."""
    config = build_secure_parser_factory(limits)
    reader = build_secure_reader(config)
    return build_schema(xsd_source, reader)
