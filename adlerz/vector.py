"""Data-parallel Adler-32 engine built on NumPy.

Input is viewed as 32-byte lanes grouped into blocks of at most
``NMAX // 32`` lanes. For a block of ``n`` lanes starting from sums
``(s1, s2)``, byte ``j`` of lane ``k`` is added to ``s2`` exactly
``32 * (n - 1 - k) + (32 - j)`` times, so the whole block reduces to:

- the lane sums (horizontal add), whose total goes to ``s1``;
- the running total of earlier lanes added once per lane (the prefix
  term), scaled by the lane width;
- the per-column sums weighted by ``32, 31, ..., 1``;
- ``n * 32 * s1`` carried in from before the block.

Both sums are reduced once per block. Bytes past the last whole lane are
handed to the scalar engine, so results are identical to it.
"""

from __future__ import annotations

from typing import Tuple

import numpy as np

from . import scalar
from .constants import INITIAL_VALUE, LANE_WIDTH, LANES_PER_BLOCK, MODULUS


_LANE_SHIFT = LANE_WIDTH.bit_length() - 1
_COLUMN_WEIGHTS = np.arange(LANE_WIDTH, 0, -1, dtype=np.uint64)  # 32, 31, ..., 1


def _block_terms(blocks: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
    """Return ``(s1_terms, s2_terms)`` for an array of shape (blocks, lanes, LANE_WIDTH)."""
    lane_sums = blocks.sum(axis=2, dtype=np.uint64)
    s1_terms = lane_sums.sum(axis=1)

    # Each lane first adds the bytes summed by earlier lanes of the block.
    prefix = np.cumsum(lane_sums, axis=1, dtype=np.uint64) - lane_sums
    prefix_terms = prefix.sum(axis=1) << np.uint64(_LANE_SHIFT)

    # Columns widen past uint8: up to 255 * LANES_PER_BLOCK per column.
    columns = blocks.sum(axis=1, dtype=np.uint64)
    column_terms = columns @ _COLUMN_WEIGHTS

    return s1_terms, prefix_terms + column_terms


def update(s1: int, s2: int, data) -> Tuple[int, int]:
    """Fold ``data`` into the sums ``(s1, s2)`` and return the reduced pair."""
    buf = scalar.as_byte_view(data)
    lanes = len(buf) // LANE_WIDTH
    if lanes == 0:
        return scalar.update(s1, s2, buf)

    body = np.frombuffer(buf, dtype=np.uint8, count=lanes * LANE_WIDTH).reshape(lanes, LANE_WIDTH)
    full, rest = divmod(lanes, LANES_PER_BLOCK)
    groups = []
    if full:
        groups.append(body[: full * LANES_PER_BLOCK].reshape(full, LANES_PER_BLOCK, LANE_WIDTH))
    if rest:
        groups.append(body[full * LANES_PER_BLOCK :].reshape(1, rest, LANE_WIDTH))

    for blocks in groups:
        block_bytes = blocks.shape[1] * LANE_WIDTH
        s1_terms, s2_terms = _block_terms(blocks)
        for s1_term, s2_term in zip(s1_terms.tolist(), s2_terms.tolist()):
            s2 = (s2 + block_bytes * s1 + s2_term) % MODULUS
            s1 = (s1 + s1_term) % MODULUS

    return scalar.update(s1, s2, buf[lanes * LANE_WIDTH :])


def adler32(data, value: int = INITIAL_VALUE) -> int:
    s1, s2 = update(value & 0xFFFF, (value >> 16) & 0xFFFF, data)
    return (s2 << 16) | s1
