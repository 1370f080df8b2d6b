"""
Secure Parser Factory
=====================

Builds the ``ParserConfiguration`` every secured reader is bound to, and
applies it to a SAX parser. A configuration either has every restrictive
flag in its safe state or it is refused; there is no degraded mode.
"""

from dataclasses import dataclass, field, fields
from typing import Any, Dict, List, Optional, Type
import logging

from xml.sax import SAXNotRecognizedException, SAXNotSupportedException
from xml.sax.handler import (
    feature_external_ges,
    feature_external_pes,
    feature_namespaces,
    feature_validation,
)

from defusedxml.expatreader import DefusedExpatParser

from xxe_core.errors import ConfigurationError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ResourceLimits:
    """
    Bounded-time / bounded-memory guard for a single SAX parse.

    The time budget covers reading and parsing only; libxml2 schema
    compilation and validation of the resulting tree are not interrupted.
    """

    max_document_bytes: int = 10 * 1024 * 1024
    max_depth: int = 256
    max_elements: int = 1_000_000
    time_budget_seconds: float = 10.0


@dataclass(frozen=True)
class ParserConfiguration:
    """
    Named parser flags plus the resource limits enforced under secure processing.

    Attributes:
        namespace_aware: Report namespace URIs on element events
        disallow_doctype: Reject any DOCTYPE declaration
        external_general_entities: Resolve external general entities
        external_parameter_entities: Resolve external parameter entities
        secure_processing: Reject entity declarations and enforce ``limits``
        load_external_dtd: Load the external DTD subset on non-validating parses
        access_external_dtd: Protocols allowed for external DTDs ("" = none)
        access_external_schema: Protocols allowed for external schemas ("" = none)
        limits: Resource limits
    """
    namespace_aware: bool = True
    disallow_doctype: bool = True
    external_general_entities: bool = False
    external_parameter_entities: bool = False
    secure_processing: bool = True
    load_external_dtd: bool = False
    access_external_dtd: str = ""
    access_external_schema: str = ""
    limits: ResourceLimits = field(default_factory=ResourceLimits)

    def insecure_flags(self) -> List[str]:
        """Names of flags not in their restrictive state."""
        return [
            f.name for f in fields(self)
            if f.name in RESTRICTIVE_STATE and getattr(self, f.name) != RESTRICTIVE_STATE[f.name]
        ]

    @property
    def is_secured(self) -> bool:
        return not self.insecure_flags()

    def require_secured(self) -> None:
        """Raise ConfigurationError unless every restrictive flag is set."""
        insecure = self.insecure_flags()
        if insecure:
            raise ConfigurationError(
                f"Parser configuration is not secured: {', '.join(insecure)}",
                details={'insecure_flags': insecure},
            )

    def sax_features(self) -> Dict[str, bool]:
        """SAX feature values to assert directly on a reader."""
        return {
            feature_namespaces: self.namespace_aware,
            feature_external_ges: self.external_general_entities,
            feature_external_pes: self.external_parameter_entities,
            feature_validation: False,
        }


RESTRICTIVE_STATE: Dict[str, Any] = {
    'namespace_aware': True,
    'disallow_doctype': True,
    'external_general_entities': False,
    'external_parameter_entities': False,
    'secure_processing': True,
    'load_external_dtd': False,
    'access_external_dtd': "",
    'access_external_schema': "",
}


def new_parser(config: ParserConfiguration,
               parser_class: Type[DefusedExpatParser] = DefusedExpatParser) -> DefusedExpatParser:
    """
    Instantiate a SAX parser and apply ``config`` to it.

    The defusedxml guards are constructor arguments; the SAX features are set
    afterwards and read back so an engine that ignores a feature is caught.

    Raises:
        ConfigurationError: If the engine refuses or ignores a feature
    """
    parser = parser_class(
        forbid_dtd=config.disallow_doctype,
        forbid_entities=config.secure_processing,
        forbid_external=not (config.external_general_entities
                             or config.external_parameter_entities
                             or config.load_external_dtd),
    )

    guards = {
        'forbid_dtd': config.disallow_doctype,
        'forbid_entities': config.secure_processing,
    }
    for attribute, expected in guards.items():
        if getattr(parser, attribute, None) != expected:
            raise ConfigurationError(
                f"{parser_class.__name__} does not support {attribute}={expected}",
                details={'feature': attribute},
            )

    for feature, value in config.sax_features().items():
        try:
            parser.setFeature(feature, value)
            applied = parser.getFeature(feature)
        except (SAXNotRecognizedException, SAXNotSupportedException) as e:
            raise ConfigurationError(
                f"XML engine does not support {feature}={value}: {e}",
                details={'feature': feature},
            ) from e
        if bool(applied) != value:
            raise ConfigurationError(
                f"XML engine ignored {feature}={value}",
                details={'feature': feature},
            )

    return parser


def build_secure_parser_factory(limits: Optional[ResourceLimits] = None,
                                parser_class: Type[DefusedExpatParser] = DefusedExpatParser
                                ) -> ParserConfiguration:
    """
    Build a fully secured parser configuration.

    The XML engine is checked with a throwaway parser so that an unsupported
    restrictive feature fails here, before any document is read.

    Args:
        limits: Resource limits (defaults apply when omitted)
        parser_class: SAX parser class to check

    Returns:
        Secured ParserConfiguration

    Raises:
        ConfigurationError: If the engine cannot honour a restrictive flag
    """
    config = ParserConfiguration(limits=limits or ResourceLimits())
    config.require_secured()
    new_parser(config, parser_class)
    logger.debug(f"Built secured parser configuration with {parser_class.__name__}")
    return config
