"""Module to provide configuration support."""

import os
from dataclasses import dataclass
from typing import cast, Dict, Mapping, Optional, Sequence, Union

from .constants import (
    DEFAULT_VECTOR_THRESHOLD,
    ENGINE_AUTO,
    ENGINE_SCALAR,
    ENGINE_VECTOR,
    ENGINE_ZLIB,
)
from .errors import ConfigError

OptionalDict = Mapping[str, Optional[str]]
KeySpec = Union[str, Sequence[str], OptionalDict]

ENGINE_NAMES = (ENGINE_AUTO, ENGINE_SCALAR, ENGINE_VECTOR, ENGINE_ZLIB)

DEFAULT_CONFIG: Dict[str, Optional[str]] = {
    "ADLERZ_ENGINE": ENGINE_AUTO,
    "ADLERZ_VECTOR": "1",
    "ADLERZ_VECTOR_THRESHOLD": str(DEFAULT_VECTOR_THRESHOLD),
}

_TRUE = ("1", "true", "yes", "on")
_FALSE = ("0", "false", "no", "off")


def from_environment(keys: KeySpec) -> Dict[str, str]:
    """
    Obtain configuration values from the OS environment.

    keys - Specify the configuration values to obtain.

           This can be a string, specifying a single key, such as:

               config_dict = from_environment("ADLERZ_ENGINE")

           This can be a list or tuple of strings, specifying multiple keys.

           This can be a dictionary that provides some default values,
           and will accept overrides from the environment:

               config_dict = from_environment(DEFAULT_CONFIG)

           A default of None means the value MUST come from the
           environment.

    Returns a dictionary mapping configuration keys to configuration values.

    Raises ConfigError if a key without a default is missing from the
    environment.
    """
    if isinstance(keys, str):
        keys = {keys: None}
    elif isinstance(keys, (list, tuple)):
        keys = dict.fromkeys(keys, None)
    elif not isinstance(keys, dict):
        raise TypeError("keys: Expected string, list, tuple or dict")
    config = dict(keys)
    for key in config:
        if key in os.environ:
            config[key] = os.environ[key]
        elif config[key] is None:
            raise ConfigError(f"Missing environment variable '{key}'")
    return cast(Dict[str, str], config)


@dataclass(frozen=True)
class EngineConfig:
    engine: str = ENGINE_AUTO
    vector: bool = True
    vector_threshold: int = DEFAULT_VECTOR_THRESHOLD


def _parse_bool(key: str, raw: str) -> bool:
    value = raw.strip().lower()
    if value in _TRUE:
        return True
    if value in _FALSE:
        return False
    raise ConfigError(f"{key}: expected a boolean, got {raw!r}")


def load_config() -> EngineConfig:
    """Build an EngineConfig from ADLERZ_* environment variables."""
    config = from_environment(DEFAULT_CONFIG)
    engine = config["ADLERZ_ENGINE"].strip().lower()
    if engine not in ENGINE_NAMES:
        raise ConfigError(f"ADLERZ_ENGINE: unknown engine {engine!r}")
    try:
        threshold = int(config["ADLERZ_VECTOR_THRESHOLD"])
    except ValueError:
        raise ConfigError(f"ADLERZ_VECTOR_THRESHOLD: expected an integer, got {config['ADLERZ_VECTOR_THRESHOLD']!r}")
    if threshold < 0:
        raise ConfigError("ADLERZ_VECTOR_THRESHOLD must be >= 0")
    return EngineConfig(
        engine=engine,
        vector=_parse_bool("ADLERZ_VECTOR", config["ADLERZ_VECTOR"]),
        vector_threshold=threshold,
    )


_current: Optional[EngineConfig] = None


def current_config() -> EngineConfig:
    """The process-wide EngineConfig, read from the environment on first use."""
    global _current
    if _current is None:
        _current = load_config()
    return _current


def reload_config() -> EngineConfig:
    """Re-read ADLERZ_* variables, e.g. after the environment changed."""
    global _current
    _current = load_config()
    return _current
