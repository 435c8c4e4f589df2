"""
adlerz — Adler-32 checksums and zlib-style container framing.

Features:

- Scalar Adler-32 engine with NMAX-bounded blocks and 16-byte strides.
- NumPy data-parallel engine, bit-identical to the scalar engine, selected
  at runtime (ADLERZ_ENGINE / ADLERZ_VECTOR).
- Streaming ``Adler32`` hasher, file checksums, and partial-checksum
  combination for split or parallel computation.
- Container framing: ``78 5e`` header, raw DEFLATE body from zlib (or any
  other compressor), big-endian Adler-32 trailer.
"""

__version__ = "0.1"

from .combine import checksum_parallel, combine
from .container import Container, frame, pack, unframe, unpack
from .engine import Adler32, checksum, checksum_file, select_engine
from .state import ChecksumState

__all__ = [
    "Adler32",
    "ChecksumState",
    "Container",
    "checksum",
    "checksum_file",
    "checksum_parallel",
    "combine",
    "frame",
    "pack",
    "select_engine",
    "unframe",
    "unpack",
]
