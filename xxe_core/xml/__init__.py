"""
XML Processing Utilities
========================

Namespace/tag helpers and the external access policy resolver.
"""

from xxe_core.xml.utils import (
    XSD_NAMESPACE,
    SCHEMA_REFERENCE_TAGS,
    clark_tag,
    local_name,
    url_protocol,
    parse_access_policy,
    is_access_allowed,
    iter_schema_references,
    error_log_entries,
)

from xxe_core.xml.resolvers import AccessPolicyResolver

__all__ = [
    "XSD_NAMESPACE",
    "SCHEMA_REFERENCE_TAGS",
    "clark_tag",
    "local_name",
    "url_protocol",
    "parse_access_policy",
    "is_access_allowed",
    "iter_schema_references",
    "error_log_entries",
    "AccessPolicyResolver",
]
