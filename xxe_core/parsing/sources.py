"""
Input Sources
=============

Bounded reading of XML/XSD inputs given as paths, bytes or binary streams,
and encoding of XML text for the byte-oriented parser.
"""

from dataclasses import dataclass
from io import BytesIO
from pathlib import Path
from typing import BinaryIO, Optional, Union
import logging
import os
import re

from xml.sax.xmlreader import InputSource

from xxe_core.errors import InputIOError, ResourceLimitError

logger = logging.getLogger(__name__)

Source = Union[str, os.PathLike, bytes, bytearray, BinaryIO]


@dataclass
class LoadedSource:
    """Raw bytes of an input plus the name used in error reports."""
    data: bytes
    system_id: str

    def input_source(self) -> InputSource:
        """Wrap the bytes in a SAX InputSource."""
        src = InputSource(self.system_id)
        src.setByteStream(BytesIO(self.data))
        return src


def describe_source(source: Source) -> str:
    """Short display name for a source."""
    if isinstance(source, (bytes, bytearray)):
        return "<bytes>"
    if isinstance(source, (str, os.PathLike)):
        return Path(source).name
    return getattr(source, "name", None) or "<stream>"


def load_source(source: Source, max_bytes: int, system_id: Optional[str] = None) -> LoadedSource:
    """
    Read a source into memory, reading at most ``max_bytes`` + 1 bytes.

    Args:
        source: Filesystem path, raw bytes, or a binary stream
        max_bytes: Size limit for the document
        system_id: Name for error reports (defaults to the path or stream name)

    Returns:
        LoadedSource

    Raises:
        InputIOError: If the source is missing, unreadable, or empty
        ResourceLimitError: If the source is larger than ``max_bytes``
    """
    if source is None:
        raise InputIOError("No input source given")

    if isinstance(source, (bytes, bytearray)):
        data = bytes(source[:max_bytes + 1])
        name = system_id or "<bytes>"
    elif isinstance(source, (str, os.PathLike)):
        path = Path(source)
        name = system_id or str(path)
        try:
            with open(path, "rb") as fh:
                data = fh.read(max_bytes + 1)
        except OSError as e:
            raise InputIOError(
                f"Cannot read {path}: {e.strerror or e}",
                details={'path': str(path)},
            ) from e
    elif hasattr(source, "read"):
        name = system_id or getattr(source, "name", None) or "<stream>"
        try:
            data = source.read(max_bytes + 1)
        except OSError as e:
            raise InputIOError(f"Cannot read {name}: {e}") from e
        if isinstance(data, str):
            raise InputIOError(f"{name} is a text stream; a binary stream is required")
    else:
        raise InputIOError(f"Unsupported input source type: {type(source).__name__}")

    if len(data) > max_bytes:
        raise ResourceLimitError(
            f"{name} is larger than {max_bytes} bytes",
            details={'limit': 'max_document_bytes'},
        )
    if not data.strip():
        raise InputIOError(f"{name} is empty", details={'source': str(name)})

    logger.debug(f"Loaded {len(data)} bytes from {name}")
    return LoadedSource(data=data, system_id=str(name))


_DECLARED_ENCODING = re.compile(
    r"""^\ufeff?<\?xml[^>]*?\sencoding\s*=\s*["']([A-Za-z][A-Za-z0-9._-]*)["']"""
)


def encode_text(text: str) -> bytes:
    """
    Encode XML text with the encoding its XML declaration names.

    Text without a declared encoding is encoded as UTF-8, the XML default.

    Raises:
        InputIOError: If the declared encoding is unknown or cannot
            represent the text
    """
    match = _DECLARED_ENCODING.match(text)
    encoding = match.group(1) if match else "utf-8"
    try:
        return text.encode(encoding)
    except LookupError as e:
        raise InputIOError(f"Unknown declared encoding {encoding!r}") from e
    except UnicodeEncodeError as e:
        raise InputIOError(
            f"Text cannot be encoded as its declared encoding {encoding!r}: {e.reason}",
            details={'encoding': encoding},
        ) from e


def named_stream(data: bytes, name: str) -> BinaryIO:
    """In-memory binary stream reported as ``name`` in error entries."""
    stream = BytesIO(data)
    stream.name = name
    return stream
