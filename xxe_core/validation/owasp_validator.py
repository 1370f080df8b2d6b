"""
OWASP-Style Validator
=====================

Validation hardened the way the OWASP XXE cheat sheet hardens a schema
factory and validator: DOCTYPEs are still accepted and internal entities
still expand, but every external DTD, entity or schema fetch must pass an
access policy, and network access is off.

Compared with the secure path this variant is permissive about DTDs, so a
blocked fetch surfaces while parsing instead of at the DOCTYPE.
"""

from typing import Any, Optional, Tuple
import logging

from lxml import etree

from xxe_core.errors import (
    MalformedDocumentError,
    ResourceLimitError,
    SchemaCompilationError,
    SchemaViolationError,
    SecurityPolicyError,
    ValidationPipelineError,
)
from xxe_core.parsing.factory import ResourceLimits
from xxe_core.parsing.sources import LoadedSource, Source, describe_source, load_source
from xxe_core.validation.base import ValidationVerdict
from xxe_core.validation.schema_builder import check_schema_references
from xxe_core.validation.secure_validator import log_failure
from xxe_core.xml.resolvers import AccessPolicyResolver
from xxe_core.xml.utils import error_log_entries

logger = logging.getLogger(__name__)

# libxml2 messages for its built-in entity expansion guards
_EXPANSION_MARKERS = ("amplification", "entity reference loop", "entities loop")


def _policy_parser(access_external_dtd: str) -> Tuple[Any, AccessPolicyResolver]:
    resolver = AccessPolicyResolver(access_external_dtd)
    parser = etree.XMLParser(
        load_dtd=True,
        resolve_entities=True,
        no_network=True,
        dtd_validation=False,
        huge_tree=False,
    )
    parser.resolvers.add(resolver)
    return parser, resolver


def _parse_with_policy(loaded: LoadedSource, access_external_dtd: str) -> Any:
    """
    Parse bytes with the access-policy parser.

    The bytes are read by us, so only DTD/entity loads reach the resolver.
    """
    parser, resolver = _policy_parser(access_external_dtd)
    try:
        root = etree.fromstring(loaded.data, parser)
    except etree.XMLSyntaxError as e:
        if resolver.blocked:
            raise SecurityPolicyError(
                f"External access blocked while parsing {loaded.system_id}: {', '.join(resolver.blocked)}",
                details={'blocked': list(resolver.blocked)},
            ) from e
        message = str(e)
        if any(marker in message.lower() for marker in _EXPANSION_MARKERS):
            raise ResourceLimitError(
                f"Entity expansion limit hit in {loaded.system_id}: {message}",
                details={'limit': 'entity_expansion'},
            ) from e
        raise MalformedDocumentError(
            f"{loaded.system_id} is not well-formed: {message}",
            errors=error_log_entries(e.error_log, loaded.system_id),
        ) from e

    resolver.raise_if_blocked()
    return root


def validate_owasp(xsd_source: Source, xml_source: Source, *,
                   access_external_dtd: str = "",
                   access_external_schema: str = "",
                   limits: Optional[ResourceLimits] = None) -> ValidationVerdict:
    """
    Validate with access-policy hardening only.

    Args:
        xsd_source: XSD path, bytes, or binary stream
        xml_source: XML path, bytes, or binary stream
        access_external_dtd: Protocols allowed for DTDs/entities ("" = none)
        access_external_schema: Protocols allowed for schema documents ("" = none)
        limits: Resource limits (only max_document_bytes applies here)

    Returns:
        ValidationVerdict
    """
    limits = limits or ResourceLimits()
    xsd_name = describe_source(xsd_source)
    xml_name = describe_source(xml_source)
    current = xsd_name

    try:
        xsd_loaded = load_source(xsd_source, limits.max_document_bytes)
        try:
            xsd_root = _parse_with_policy(xsd_loaded, access_external_dtd)
        except MalformedDocumentError as e:
            raise SchemaCompilationError(f"Schema {xsd_name} is not well-formed: {e.message}") from e
        check_schema_references(xsd_root, access_external_schema, xsd_name)
        try:
            schema = etree.XMLSchema(xsd_root)
        except etree.XMLSchemaParseError as e:
            raise SchemaCompilationError(f"Schema {xsd_name} could not be compiled: {e}") from e

        current = xml_name
        xml_loaded = load_source(xml_source, limits.max_document_bytes)
        document = _parse_with_policy(xml_loaded, access_external_dtd)

        if not schema.validate(document):
            entries = error_log_entries(schema.error_log, xml_name)
            raise SchemaViolationError(
                f"{xml_name} does not conform to {xsd_name}: {entries[0]['message'] if entries else ''}",
                errors=entries,
            )
    except ValidationPipelineError as e:
        log_failure(e, current)
        return ValidationVerdict.failure(e, file=current, schema=xsd_name, variant='owasp')

    logger.info(f"{xml_name} is valid against {xsd_name} (owasp)")
    return ValidationVerdict.success(schema=xsd_name, document=xml_name, variant='owasp')
