from __future__ import annotations

import concurrent.futures as _fut
import logging
from typing import List, Optional

from .config import EngineConfig, current_config
from .constants import MODULUS, NMAX
from .engine import checksum
from .scalar import as_byte_view


log = logging.getLogger(__name__)

DEFAULT_SPLIT_SIZE = 256 * NMAX  # ~1.4 MB per partial


def combine(adler_a: int, adler_b: int, len_b: int) -> int:
    """Checksum of ``a ++ b`` from the checksums of ``a`` and ``b`` and ``len(b)``.

    Every byte of ``a`` contributes to ``s2`` once more for each byte of
    ``b``, which is what the ``len_b * (s1_a - 1)`` term restores.
    """
    if len_b < 0:
        raise ValueError("len_b must be >= 0")
    s1_a, s2_a = adler_a & 0xFFFF, (adler_a >> 16) & 0xFFFF
    s1_b, s2_b = adler_b & 0xFFFF, (adler_b >> 16) & 0xFFFF
    s1 = (s1_a + s1_b - 1) % MODULUS
    s2 = (s2_a + s2_b + (len_b % MODULUS) * (s1_a - 1)) % MODULUS
    return (s2 << 16) | s1


def split_ranges(length: int, split_size: int) -> List[range]:
    if split_size <= 0:
        raise ValueError("split_size must be positive")
    return [range(start, min(start + split_size, length)) for start in range(0, length, split_size)]


def checksum_parallel(
    data,
    *,
    workers: Optional[int] = None,
    split_size: int = DEFAULT_SPLIT_SIZE,
    engine: Optional[str] = None,
    config: Optional[EngineConfig] = None,
) -> int:
    """Adler-32 of ``data`` computed over non-overlapping ranges in a thread pool.

    Partials are folded left to right with :func:`combine`, so the result is
    the same as the sequential checksum.
    """
    view = as_byte_view(data)
    ranges = split_ranges(len(view), split_size)
    if len(ranges) <= 1:
        return checksum(view, engine, config=config)
    config = config if config is not None else current_config()

    log.debug("adler32 over %d bytes in %d ranges", len(view), len(ranges))
    with _fut.ThreadPoolExecutor(max_workers=workers) as pool:
        futures = [pool.submit(checksum, view[r.start : r.stop], engine, config=config) for r in ranges]
        partials = [f.result() for f in futures]

    result = partials[0]
    for r, partial in zip(ranges[1:], partials[1:]):
        result = combine(result, partial, len(r))
    return result
