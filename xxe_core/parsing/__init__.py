"""
Secure Parsing
==============

Configuration, reader and filter building blocks of the secure pipeline.

Components:
- build_secure_parser_factory: Secured ParserConfiguration
- build_secure_reader: SAX reader locked to a configuration
- NamespaceFilter: Forces a required namespace onto every element
- ElementTreeBuilder: SAX events to lxml tree
"""

from xxe_core.parsing.factory import (
    ParserConfiguration,
    ResourceLimits,
    RESTRICTIVE_STATE,
    build_secure_parser_factory,
    new_parser,
)

from xxe_core.parsing.handlers import (
    ForwardingHandler,
    ResourceGuard,
    ElementTreeBuilder,
)

from xxe_core.parsing.reader import (
    SecuredReader,
    build_secure_reader,
)

from xxe_core.parsing.namespace_filter import (
    NamespaceFilter,
    NamespaceRewritingHandler,
)

from xxe_core.parsing.sources import (
    LoadedSource,
    load_source,
    describe_source,
    encode_text,
    named_stream,
)

__all__ = [
    "ParserConfiguration",
    "ResourceLimits",
    "RESTRICTIVE_STATE",
    "build_secure_parser_factory",
    "new_parser",
    "ForwardingHandler",
    "ResourceGuard",
    "ElementTreeBuilder",
    "SecuredReader",
    "build_secure_reader",
    "NamespaceFilter",
    "NamespaceRewritingHandler",
    "LoadedSource",
    "load_source",
    "describe_source",
    "encode_text",
    "named_stream",
]
