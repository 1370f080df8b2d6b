"""
XML Utility Functions
=====================

Namespace, tag and URL helpers shared by the secure and OWASP pipelines.
These functions work with lxml elements and SAX ``(uri, localname)`` pairs.
"""

from typing import Any, Iterator, List, Optional, Tuple
from urllib.parse import urlsplit
import logging

from lxml import etree

logger = logging.getLogger(__name__)

XSD_NAMESPACE = "http://www.w3.org/2001/XMLSchema"

# Schema constructs that pull in another schema document
SCHEMA_REFERENCE_TAGS: Tuple[str, ...] = tuple(
    f"{{{XSD_NAMESPACE}}}{name}" for name in ("include", "import", "redefine", "override")
)


def clark_tag(uri: Optional[str], name: str) -> str:
    """
    Build an lxml tag in Clark notation from a SAX namespace pair.

    Example:
        >>> clark_tag("http://a", "person")
        '{http://a}person'
        >>> clark_tag(None, "person")
        'person'
    """
    if uri:
        return f"{{{uri}}}{name}"
    return name


def local_name(element: Any) -> str:
    """
    Extract local name from element tag, stripping any namespace.

    Example:
        >>> elem = etree.Element("{http://a}person")
        >>> local_name(elem)
        'person'
    """
    tag = element.tag
    if not isinstance(tag, str):
        return ""
    if tag.startswith("{"):
        return tag.split("}", 1)[1]
    return tag


def url_protocol(url: str) -> str:
    """
    Return the access protocol of a system identifier.

    Relative references and bare paths are local file accesses.
    Windows drive letters are not URL schemes.
    """
    scheme = urlsplit(url).scheme.lower()
    if not scheme or len(scheme) == 1:
        return "file"
    return scheme


def parse_access_policy(policy: str) -> List[str]:
    """Split a comma-separated protocol list. ``"all"`` allows everything."""
    return [p.strip().lower() for p in policy.split(",") if p.strip()]


def is_access_allowed(url: str, policy: str) -> bool:
    """
    Check a system identifier against an access policy.

    An empty policy allows nothing; ``"all"`` allows every protocol.
    """
    allowed = parse_access_policy(policy)
    if "all" in allowed:
        return True
    return url_protocol(url) in allowed


def iter_schema_references(tree: Any) -> Iterator[Tuple[str, str]]:
    """
    Yield ``(construct, schemaLocation)`` for every external schema reference.

    ``xs:import`` without a schemaLocation only names a namespace and is skipped.
    """
    root = tree.getroot() if hasattr(tree, "getroot") else tree
    for element in root.iter(*SCHEMA_REFERENCE_TAGS):
        location = element.get("schemaLocation")
        if location:
            yield local_name(element), location


def error_log_entries(error_log: Any, file_context: str) -> List[dict]:
    """Convert an lxml error log to error entry dictionaries."""
    entries = []
    for error in error_log:
        entries.append({
            'file': file_context,
            'line': error.line or None,
            'column': error.column or None,
            'type': error.type_name,
            'message': str(error.message),
            'severity': "Error",
        })
    return entries
