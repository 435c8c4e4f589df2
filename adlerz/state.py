from __future__ import annotations

import struct
from dataclasses import dataclass

from .constants import INITIAL_VALUE, MODULUS


_CHECKSUM_STRUCT = struct.Struct(">I")


@dataclass
class ChecksumState:
    """The two running Adler-32 sums.

    After every reduction both sums are below ``MODULUS``. A state belongs to
    a single computation; use :meth:`copy` to fork it.
    """

    s1: int = INITIAL_VALUE & 0xFFFF
    s2: int = (INITIAL_VALUE >> 16) & 0xFFFF

    @classmethod
    def from_checksum(cls, value: int) -> "ChecksumState":
        if not 0 <= value <= 0xFFFFFFFF:
            raise ValueError("Adler-32 value must fit in 32 bits")
        return cls(s1=value & 0xFFFF, s2=(value >> 16) & 0xFFFF)

    def reduce(self) -> None:
        self.s1 %= MODULUS
        self.s2 %= MODULUS

    def finalize(self) -> int:
        return (self.s2 << 16) | self.s1

    @property
    def value(self) -> int:
        return self.finalize()

    def to_bytes(self) -> bytes:
        return checksum_to_bytes(self.finalize())

    def copy(self) -> "ChecksumState":
        return ChecksumState(self.s1, self.s2)


def checksum_to_bytes(value: int) -> bytes:
    """Serialize a finalized checksum big-endian, as stored in a container trailer."""
    return _CHECKSUM_STRUCT.pack(value)


def checksum_from_bytes(raw: bytes) -> int:
    if len(raw) != _CHECKSUM_STRUCT.size:
        raise ValueError("Adler-32 trailer must be 4 bytes")
    return _CHECKSUM_STRUCT.unpack(raw)[0]
