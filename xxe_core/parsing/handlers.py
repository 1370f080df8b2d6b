"""
SAX Content Handlers
====================

Building blocks placed between a SAX reader and its consumer:

- ForwardingHandler: passes every event to a downstream handler unchanged
- ResourceGuard: enforces depth, element-count and time limits
- ElementTreeBuilder: collects events into an lxml tree for schema validation
"""

from typing import Any, Dict, List, Optional
import logging
import time

from lxml import etree
from xml.sax.handler import ContentHandler

from xxe_core.errors import ResourceLimitError
from xxe_core.parsing.factory import ResourceLimits
from xxe_core.xml.utils import clark_tag

logger = logging.getLogger(__name__)


class ForwardingHandler(ContentHandler):
    """Content handler that forwards every event to ``downstream``."""

    def __init__(self, downstream: ContentHandler):
        super().__init__()
        self.downstream = downstream

    def setDocumentLocator(self, locator):
        self.downstream.setDocumentLocator(locator)

    def startDocument(self):
        self.downstream.startDocument()

    def endDocument(self):
        self.downstream.endDocument()

    def startPrefixMapping(self, prefix, uri):
        self.downstream.startPrefixMapping(prefix, uri)

    def endPrefixMapping(self, prefix):
        self.downstream.endPrefixMapping(prefix)

    def startElement(self, name, attrs):
        self.downstream.startElement(name, attrs)

    def endElement(self, name):
        self.downstream.endElement(name)

    def startElementNS(self, name, qname, attrs):
        self.downstream.startElementNS(name, qname, attrs)

    def endElementNS(self, name, qname):
        self.downstream.endElementNS(name, qname)

    def characters(self, content):
        self.downstream.characters(content)

    def ignorableWhitespace(self, whitespace):
        self.downstream.ignorableWhitespace(whitespace)

    def processingInstruction(self, target, data):
        self.downstream.processingInstruction(target, data)

    def skippedEntity(self, name):
        self.downstream.skippedEntity(name)


class ResourceGuard(ForwardingHandler):
    """
    Forwards events while enforcing ``ResourceLimits``.

    Disallowing entities removes expansion attacks, but a deeply nested or
    very large document can still exhaust memory or time.
    """

    def __init__(self, downstream: ContentHandler, limits: ResourceLimits):
        super().__init__(downstream)
        self.limits = limits
        self.depth = 0
        self.element_count = 0
        self._deadline = time.monotonic() + limits.time_budget_seconds

    def _check_deadline(self) -> None:
        if time.monotonic() > self._deadline:
            raise ResourceLimitError(
                f"Parse exceeded time budget of {self.limits.time_budget_seconds}s",
                details={'limit': 'time_budget_seconds'},
            )

    def _enter(self) -> None:
        self.depth += 1
        self.element_count += 1
        if self.depth > self.limits.max_depth:
            raise ResourceLimitError(
                f"Element nesting exceeds {self.limits.max_depth} levels",
                details={'limit': 'max_depth'},
            )
        if self.element_count > self.limits.max_elements:
            raise ResourceLimitError(
                f"Document has more than {self.limits.max_elements} elements",
                details={'limit': 'max_elements'},
            )
        self._check_deadline()

    def startElement(self, name, attrs):
        self._enter()
        super().startElement(name, attrs)

    def endElement(self, name):
        self.depth -= 1
        super().endElement(name)

    def startElementNS(self, name, qname, attrs):
        self._enter()
        super().startElementNS(name, qname, attrs)

    def endElementNS(self, name, qname):
        self.depth -= 1
        super().endElementNS(name, qname)

    def characters(self, content):
        self._check_deadline()
        super().characters(content)


class ElementTreeBuilder(ContentHandler):
    """
    Builds an lxml tree from namespace-aware SAX events.

    The element tag comes from the reported URI only, so a namespace rewritten
    upstream is what ends up in the tree. End events close the innermost open
    element whatever name they carry. Source line numbers are kept for error
    reporting.

    Example:
        builder = ElementTreeBuilder()
        reader.setContentHandler(builder)
        reader.parse(source)
        tree = builder.etree
    """

    def __init__(self):
        super().__init__()
        self._locator = None
        self._root: Optional[Any] = None
        self._stack: List[Any] = []
        self._pending_nsmap: Dict[Optional[str], str] = {}

    @property
    def etree(self) -> Any:
        """The generated ElementTree after parsing is finished."""
        if self._root is None:
            raise ValueError("No document has been parsed")
        return etree.ElementTree(self._root)

    def setDocumentLocator(self, locator):
        self._locator = locator

    def startPrefixMapping(self, prefix, uri):
        # xmlns="" undeclares the default namespace; lxml cannot map to ""
        if uri:
            self._pending_nsmap[prefix] = uri

    def startElementNS(self, name, qname, attrs):
        uri, localname = name
        tag = clark_tag(uri, localname)
        attrib = {clark_tag(a_uri, a_name): value for (a_uri, a_name), value in attrs.items()}

        nsmap = self._pending_nsmap
        self._pending_nsmap = {}
        if not uri and None in nsmap:
            nsmap = {prefix: ns for prefix, ns in nsmap.items() if prefix is not None}

        if self._stack:
            element = etree.SubElement(self._stack[-1], tag, attrib, nsmap=nsmap or None)
        else:
            element = etree.Element(tag, attrib, nsmap=nsmap or None)
            self._root = element

        line = self._locator.getLineNumber() if self._locator is not None else None
        if line:
            element.sourceline = line
        self._stack.append(element)

    def endElementNS(self, name, qname):
        self._stack.pop()

    def characters(self, content):
        if not self._stack:
            return
        current = self._stack[-1]
        if len(current):
            last = current[-1]
            last.tail = (last.tail or "") + content
        else:
            current.text = (current.text or "") + content

    def ignorableWhitespace(self, whitespace):
        self.characters(whitespace)
