from __future__ import annotations

import logging
import os
import zlib
from typing import BinaryIO, Callable, Dict, Optional, Tuple, Union

from . import scalar, vector
from .config import ENGINE_NAMES, EngineConfig, current_config
from .constants import (
    DEFAULT_READ_SIZE,
    ENGINE_AUTO,
    ENGINE_SCALAR,
    ENGINE_VECTOR,
    ENGINE_ZLIB,
    INITIAL_VALUE,
    NMAX,
)
from .errors import UnknownEngineError
from .state import ChecksumState


log = logging.getLogger(__name__)

UpdateFn = Callable[[int, int, bytes], Tuple[int, int]]


def _zlib_update(s1: int, s2: int, data) -> Tuple[int, int]:
    value = zlib.adler32(data, (s2 << 16) | s1)
    return value & 0xFFFF, (value >> 16) & 0xFFFF


ENGINES: Dict[str, UpdateFn] = {
    ENGINE_SCALAR: scalar.update,
    ENGINE_VECTOR: vector.update,
    ENGINE_ZLIB: _zlib_update,
}


def vector_available(config: Optional[EngineConfig] = None) -> bool:
    """Whether the data-parallel engine is enabled for this process."""
    config = config if config is not None else current_config()
    return config.vector


def select_engine(name: Optional[str] = None, size: Optional[int] = None, config: Optional[EngineConfig] = None) -> str:
    """Resolve an engine name (or the configured default) to a concrete engine.

    ``auto`` picks the vector engine for inputs of at least
    ``config.vector_threshold`` bytes when vectors are enabled, and the scalar
    engine otherwise. Requesting ``vector`` while it is disabled resolves to
    the scalar engine, which gives the same result.
    """
    config = config if config is not None else current_config()
    chosen = (name or config.engine).lower()
    if chosen not in ENGINE_NAMES:
        raise UnknownEngineError(f"unknown checksum engine: {chosen!r}")
    if chosen == ENGINE_AUTO:
        if config.vector and size is not None and size >= config.vector_threshold:
            chosen = ENGINE_VECTOR
        else:
            chosen = ENGINE_SCALAR
    elif chosen == ENGINE_VECTOR and not config.vector:
        log.debug("vector engine disabled (ADLERZ_VECTOR=0), using scalar")
        chosen = ENGINE_SCALAR
    return chosen


def checksum(data, engine: Optional[str] = None, *, value: int = INITIAL_VALUE, config: Optional[EngineConfig] = None) -> int:
    """Adler-32 of ``data``. Deterministic and total over byte buffers."""
    view = scalar.as_byte_view(data)
    chosen = select_engine(engine, len(view), config)
    log.debug("adler32 over %d bytes using %s engine", len(view), chosen)
    s1, s2 = ENGINES[chosen](value & 0xFFFF, (value >> 16) & 0xFFFF, view)
    return (s2 << 16) | s1


class Adler32:
    """Incremental Adler-32 with a hashlib-style interface.

    ``digest()`` is the big-endian trailer encoding; ``value`` is the
    checksum as an integer.
    """

    name = "adler32"
    digest_size = 4
    block_size = NMAX

    def __init__(self, data=b"", *, engine: Optional[str] = None, value: int = INITIAL_VALUE, config: Optional[EngineConfig] = None):
        self._config = config if config is not None else current_config()
        self._engine = engine
        # Fail early on bad engine names instead of on first update.
        select_engine(engine, None, self._config)
        self._state = ChecksumState.from_checksum(value)
        self.length = 0
        self.update(data)

    def update(self, data) -> None:
        view = scalar.as_byte_view(data)
        if not len(view):
            return
        chosen = select_engine(self._engine, len(view), self._config)
        st = self._state
        st.s1, st.s2 = ENGINES[chosen](st.s1, st.s2, view)
        self.length += len(view)

    @property
    def value(self) -> int:
        return self._state.finalize()

    @property
    def state(self) -> ChecksumState:
        return self._state.copy()

    def digest(self) -> bytes:
        return self._state.to_bytes()

    def hexdigest(self) -> str:
        return self.digest().hex()

    def copy(self) -> "Adler32":
        other = Adler32(engine=self._engine, value=self.value, config=self._config)
        other.length = self.length
        return other


def checksum_file(
    source: Union[str, "os.PathLike[str]", BinaryIO],
    *,
    chunk_size: int = DEFAULT_READ_SIZE,
    engine: Optional[str] = None,
    config: Optional[EngineConfig] = None,
) -> int:
    """Adler-32 of a file's contents, read ``chunk_size`` bytes at a time."""
    if chunk_size <= 0:
        raise ValueError("chunk_size must be positive")
    hasher = Adler32(engine=engine, config=config)
    if hasattr(source, "read"):
        for chunk in iter(lambda: source.read(chunk_size), b""):
            hasher.update(chunk)
    else:
        with open(source, "rb") as fh:
            for chunk in iter(lambda: fh.read(chunk_size), b""):
                hasher.update(chunk)
    log.debug("checksummed %d bytes from %r", hasher.length, source)
    return hasher.value
