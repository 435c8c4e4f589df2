"""zlib-style container framing.

Layout::

    +------+------+=================+----+----+----+----+
    | 0x78 | 0x5e | deflate body... |  Adler-32 (BE)    |
    +------+------+=================+----+----+----+----+

The body comes from an external DEFLATE compressor and is copied verbatim;
the trailer is the checksum of the uncompressed data. A container is built
in one pass and returned whole, or not at all.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Optional

from .codec import Codec
from .config import EngineConfig
from .constants import (
    HEADER_SIZE,
    TRAILER_SIZE,
    ZLIB_CM_DEFLATE,
    ZLIB_FLAG_FDICT,
    ZLIB_HEADER,
    ZLIB_MAX_CINFO,
)
from .engine import checksum
from .errors import ChecksumMismatch, ContainerHeaderError, ContainerTruncatedError
from .scalar import as_byte_view
from .state import checksum_from_bytes, checksum_to_bytes


log = logging.getLogger(__name__)

Transform = Callable[[bytes], bytes]


@dataclass(frozen=True)
class Container:
    header: bytes
    body: bytes
    checksum: int

    def to_bytes(self) -> bytes:
        return self.header + self.body + checksum_to_bytes(self.checksum)


def frame(compressed_body, original_data_checksum: int) -> bytes:
    """Wrap an already-compressed body: header, body verbatim, big-endian checksum."""
    if not 0 <= original_data_checksum <= 0xFFFFFFFF:
        raise ValueError("checksum must fit in 32 bits")
    out = bytearray(ZLIB_HEADER)
    out += compressed_body
    out += checksum_to_bytes(original_data_checksum)
    return bytes(out)


def pack(
    data,
    compress: Optional[Transform] = None,
    *,
    engine: Optional[str] = None,
    config: Optional[EngineConfig] = None,
) -> bytes:
    """Compress ``data`` and frame it. Compressor errors propagate unchanged."""
    view = as_byte_view(data)
    compress = compress if compress is not None else Codec()
    body = compress(view.tobytes())
    value = checksum(view, engine, config=config)
    log.debug("framing %d-byte body for %d input bytes, adler32=%08x", len(body), len(view), value)
    return frame(body, value)


def _check_header(header: bytes) -> None:
    cmf, flg = header[0], header[1]
    if ((cmf << 8) | flg) % 31 != 0:
        raise ContainerHeaderError(f"header check bits invalid: {header.hex()}")
    if cmf & 0x0F != ZLIB_CM_DEFLATE:
        raise ContainerHeaderError(f"unsupported compression method {cmf & 0x0F}")
    if cmf >> 4 > ZLIB_MAX_CINFO:
        raise ContainerHeaderError(f"window size field {cmf >> 4} out of range")
    if flg & ZLIB_FLAG_FDICT:
        raise ContainerHeaderError("preset dictionaries are not supported")


def unframe(container) -> Container:
    """Split a container into header, body and trailer checksum.

    Any valid zlib header is accepted, not only the one :func:`frame` writes.
    The body is not inspected.
    """
    raw = bytes(container)
    if len(raw) < HEADER_SIZE + TRAILER_SIZE:
        raise ContainerTruncatedError(f"container too short: {len(raw)} bytes")
    header = raw[:HEADER_SIZE]
    _check_header(header)
    return Container(
        header=header,
        body=raw[HEADER_SIZE:-TRAILER_SIZE],
        checksum=checksum_from_bytes(raw[-TRAILER_SIZE:]),
    )


def unpack(
    container,
    decompress: Optional[Transform] = None,
    *,
    engine: Optional[str] = None,
    config: Optional[EngineConfig] = None,
) -> bytes:
    """Inverse of :func:`pack`; raises ChecksumMismatch if the trailer disagrees."""
    parts = unframe(container)
    decompress = decompress if decompress is not None else Codec().decompress
    data = decompress(parts.body)
    actual = checksum(data, engine, config=config)
    if actual != parts.checksum:
        raise ChecksumMismatch(parts.checksum, actual)
    return data
