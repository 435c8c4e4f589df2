from __future__ import annotations

from typing import Optional

import zlib

from .constants import DEFAULT_LEVEL, RAW_DEFLATE_WBITS


class Codec:
    """Raw DEFLATE transform backed by zlib.

    Produces and consumes bare DEFLATE streams (no zlib header or trailer);
    framing is added by :mod:`adlerz.container`. zlib errors propagate.
    """

    def __init__(self, level: Optional[int] = None):
        if level is not None and not -1 <= level <= 9:
            raise ValueError(f"deflate level out of range: {level}")
        self.level = level if level is not None else DEFAULT_LEVEL

    def compress(self, data: bytes) -> bytes:
        c = zlib.compressobj(self.level, zlib.DEFLATED, RAW_DEFLATE_WBITS)
        return c.compress(data) + c.flush()

    def decompress(self, data: bytes) -> bytes:
        d = zlib.decompressobj(RAW_DEFLATE_WBITS)
        out = d.decompress(data) + d.flush()
        if not d.eof:
            raise zlib.error("incomplete deflate stream")
        return out

    def __call__(self, data: bytes) -> bytes:
        return self.compress(data)
