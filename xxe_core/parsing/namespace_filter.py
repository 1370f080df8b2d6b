"""
Namespace Normalizing Filter
============================

Wraps a reader and forces a required namespace onto every element.

This is a normalization device, not a namespace check: a document in the
wrong namespace is silently moved into ``required_namespace`` before the
schema sees it, which hides a mismatch the raw document would have surfaced.
"""

import logging

from xml.sax.handler import ContentHandler
from xml.sax.xmlreader import XMLReader

from xxe_core.parsing.handlers import ForwardingHandler
from xxe_core.parsing.sources import Source

logger = logging.getLogger(__name__)


class NamespaceRewritingHandler(ForwardingHandler):
    """Substitutes ``required_namespace`` in start-of-element events."""

    def __init__(self, downstream: ContentHandler, required_namespace: str):
        super().__init__(downstream)
        self.required_namespace = required_namespace
        self.rewrites = 0

    def startElementNS(self, name, qname, attrs):
        uri, localname = name
        if uri != self.required_namespace:
            uri = self.required_namespace
            self.rewrites += 1
        super().startElementNS((uri, localname), qname, attrs)


class NamespaceFilter(XMLReader):
    """
    Reader adapter holding a reference to the wrapped reader.

    Only start-element events are rewritten; every other event, including
    end-element, reaches the content handler unmodified. Features, properties
    and the error handler are delegated to the wrapped reader.

    Example:
        reader = build_secure_reader(build_secure_parser_factory())
        filtered = NamespaceFilter(reader, "urn:example:person")
        filtered.setContentHandler(ElementTreeBuilder())
        filtered.parse("person.xml")
    """

    def __init__(self, reader: XMLReader, required_namespace: str):
        super().__init__()
        if required_namespace is None:
            raise ValueError("required_namespace must be a string")
        self._reader = reader
        self.required_namespace = required_namespace
        self.last_rewrite_count = 0

    @property
    def reader(self) -> XMLReader:
        return self._reader

    @property
    def configuration(self):
        return getattr(self._reader, "configuration", None)

    def getFeature(self, name):
        return self._reader.getFeature(name)

    def setFeature(self, name, state):
        self._reader.setFeature(name, state)

    def getProperty(self, name):
        return self._reader.getProperty(name)

    def setProperty(self, name, value):
        self._reader.setProperty(name, value)

    def getErrorHandler(self):
        return self._reader.getErrorHandler()

    def setErrorHandler(self, handler):
        self._reader.setErrorHandler(handler)

    def parse(self, source: Source):
        rewriter = NamespaceRewritingHandler(self.getContentHandler(), self.required_namespace)
        self._reader.setContentHandler(rewriter)
        self._reader.parse(source)

        self.last_rewrite_count = rewriter.rewrites
        if rewriter.rewrites:
            logger.debug(
                f"Rewrote namespace of {rewriter.rewrites} element(s) to {self.required_namespace!r}"
            )
