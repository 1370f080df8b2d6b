"""
Person documents: load a ``<person>`` record through a secured reader to
show what a parser actually extracted from a document.
"""

from dataclasses import dataclass
from typing import Optional
import logging

from xml.sax.handler import ContentHandler

from xxe_core.parsing.factory import ParserConfiguration, build_secure_parser_factory
from xxe_core.parsing.reader import build_secure_reader
from xxe_core.parsing.sources import Source

logger = logging.getLogger(__name__)


@dataclass
class Person:
    name: Optional[str] = None
    age: Optional[int] = None
    valid: bool = False

    def __str__(self) -> str:
        return f"[+] Person name={self.name}, age={self.age}, valid={self.valid}"


class PersonHandler(ContentHandler):
    """Collects the text of ``name`` and ``age`` elements, ignoring namespaces."""

    def __init__(self):
        super().__init__()
        self.person = Person()
        self._field: Optional[str] = None
        self._text = []
        self._age_text: Optional[str] = None

    def startElementNS(self, name, qname, attrs):
        localname = name[1]
        if localname in ("name", "age"):
            self._field = localname
            self._text = []

    def endElementNS(self, name, qname):
        if self._field != name[1]:
            return
        text = "".join(self._text).strip()
        if self._field == "name":
            self.person.name = text
        else:
            self._age_text = text
        self._field = None

    def characters(self, content):
        if self._field:
            self._text.append(content)

    def endDocument(self):
        if self._age_text is not None and self._age_text.isdigit():
            self.person.age = int(self._age_text)
        self.person.valid = bool(self.person.name) and self.person.age is not None


def load_person(xml_source: Source, config: Optional[ParserConfiguration] = None) -> Person:
    """
    Parse a person document with a secured reader.

    Raises:
        ValidationPipelineError: If the document is blocked, malformed or unreadable
    """
    reader = build_secure_reader(config or build_secure_parser_factory())
    handler = PersonHandler()
    reader.setContentHandler(handler)
    reader.parse(xml_source)
    logger.debug(f"Loaded {handler.person}")
    return handler.person
