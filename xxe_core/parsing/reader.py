"""
Secure Reader
=============

A SAX reader bound to one secured ``ParserConfiguration``. The restrictive
flags are applied on the reader itself, not only recorded on the
configuration, since factory-level settings are not guaranteed to reach
every reader created from them.
"""

from typing import Type
import logging

from defusedxml.common import DTDForbidden, EntitiesForbidden, ExternalReferenceForbidden
from defusedxml.expatreader import DefusedExpatParser
from xml.sax import SAXParseException
from xml.sax.handler import ContentHandler, ErrorHandler
from xml.sax.xmlreader import XMLReader

from xxe_core.errors import ConfigurationError, MalformedDocumentError, SecurityPolicyError
from xxe_core.parsing.factory import ParserConfiguration, new_parser
from xxe_core.parsing.handlers import ResourceGuard
from xxe_core.parsing.sources import Source, load_source

logger = logging.getLogger(__name__)


class SecuredReader(XMLReader):
    """
    SAX reader locked to a secured configuration.

    Features cannot be changed after construction; build a new reader for a
    new configuration. ``parse`` accepts a path, bytes or binary stream and
    raises pipeline errors instead of raw SAX/defusedxml exceptions.
    """

    def __init__(self, config: ParserConfiguration,
                 parser_class: Type[DefusedExpatParser] = DefusedExpatParser):
        super().__init__()
        config.require_secured()
        self._config = config
        self._parser_class = parser_class
        # Probe once so an unsupported feature fails at construction
        new_parser(config, parser_class)

    @property
    def configuration(self) -> ParserConfiguration:
        return self._config

    def getFeature(self, name):
        return self._config.sax_features().get(name, False)

    def setFeature(self, name, state):
        raise ConfigurationError(
            f"Secured reader cannot be reconfigured ({name}={state}); build a new reader",
            details={'feature': name},
        )

    def setProperty(self, name, value):
        raise ConfigurationError(f"Secured reader cannot be reconfigured ({name})")

    def parse(self, source: Source):
        """
        Parse ``source`` and deliver events to the content handler.

        Raises:
            SecurityPolicyError: On a DOCTYPE, entity declaration or external reference
            ResourceLimitError: When a resource limit is exceeded
            MalformedDocumentError: If the input is not well-formed XML
            InputIOError: If the input cannot be read or is empty
        """
        limits = self._config.limits
        loaded = load_source(source, limits.max_document_bytes)

        # Fresh expat parser per parse; expat parsers are single use
        parser = new_parser(self._config, self._parser_class)
        parser.setContentHandler(ResourceGuard(self.getContentHandler(), limits))
        parser.setErrorHandler(self.getErrorHandler())

        try:
            parser.parse(loaded.input_source())
        except DTDForbidden as e:
            raise SecurityPolicyError(
                f"DOCTYPE declaration is not allowed in {loaded.system_id}",
                details={'reason': 'dtd_forbidden', 'name': e.name, 'sysid': e.sysid},
            ) from e
        except EntitiesForbidden as e:
            raise SecurityPolicyError(
                f"Entity declaration {e.name!r} is not allowed in {loaded.system_id}",
                details={'reason': 'entities_forbidden', 'name': e.name},
            ) from e
        except ExternalReferenceForbidden as e:
            raise SecurityPolicyError(
                f"External reference {e.sysid!r} is not allowed in {loaded.system_id}",
                details={'reason': 'external_reference_forbidden', 'sysid': e.sysid},
            ) from e
        except SAXParseException as e:
            raise MalformedDocumentError(
                f"{loaded.system_id} is not well-formed: {e.getMessage()}",
                errors=[{
                    'file': loaded.system_id,
                    'line': e.getLineNumber(),
                    'column': e.getColumnNumber(),
                    'type': 'XML Syntax Error',
                    'message': e.getMessage(),
                    'severity': 'Error',
                }],
            ) from e


def build_secure_reader(config: ParserConfiguration,
                        parser_class: Type[DefusedExpatParser] = DefusedExpatParser) -> SecuredReader:
    """
    Build a SecuredReader for ``config``.

    Raises:
        ConfigurationError: If ``config`` is not fully secured or the engine
            cannot apply one of its features
    """
    reader = SecuredReader(config, parser_class)
    reader.setContentHandler(ContentHandler())
    reader.setErrorHandler(ErrorHandler())
    return reader
