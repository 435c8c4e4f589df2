"""Scalar Adler-32 engine.

Reference implementation used by every other engine for its tail bytes and
as the equivalence baseline. Sums are reduced often enough that neither ever
reaches 2**32, so the same code is correct for fixed-width arithmetic.
"""

from __future__ import annotations

from typing import Tuple

from .constants import INITIAL_VALUE, MODULUS, NMAX, STRIDE


def as_byte_view(data) -> memoryview:
    """Return a flat, C-contiguous unsigned-byte view over any buffer.

    Strided buffers are copied so every engine sees the same bytes.
    """
    view = memoryview(data)
    if not view.c_contiguous:
        view = memoryview(view.tobytes())
    if view.format != "B" or view.ndim != 1:
        view = view.cast("B")
    return view


def _stride(s1: int, s2: int, chunk: memoryview) -> Tuple[int, int]:
    for b in chunk:
        s1 += b
        s2 += s1
    return s1 % MODULUS, s2 % MODULUS


def update(s1: int, s2: int, data) -> Tuple[int, int]:
    """Fold ``data`` into the sums ``(s1, s2)`` and return the reduced pair."""
    buf = as_byte_view(data)
    remaining = len(buf)
    if remaining == 0:
        return s1, s2

    # Fewer than 16 bytes cannot overflow before a single reduction.
    if remaining < STRIDE:
        for b in buf:
            s1 += b
            s2 += s1
        return s1 % MODULUS, s2 % MODULUS

    pos = 0
    while remaining >= NMAX:
        remaining -= NMAX
        end = pos + NMAX  # NMAX is a multiple of STRIDE
        while pos < end:
            s1, s2 = _stride(s1, s2, buf[pos : pos + STRIDE])
            pos += STRIDE

    while remaining >= STRIDE:
        s1, s2 = _stride(s1, s2, buf[pos : pos + STRIDE])
        pos += STRIDE
        remaining -= STRIDE

    for b in buf[pos:]:
        s1 += b
        s2 += s1
    return s1 % MODULUS, s2 % MODULUS


def adler32(data, value: int = INITIAL_VALUE) -> int:
    """Adler-32 of ``data``, continuing from ``value`` (same contract as ``zlib.adler32``)."""
    s1, s2 = update(value & 0xFFFF, (value >> 16) & 0xFFFF, data)
    return (s2 << 16) | s1
