class AdlerzError(Exception):
    """Base class for adlerz-specific errors."""


# Container related
class ContainerError(AdlerzError):
    pass


class ContainerTruncatedError(ContainerError):
    pass


class ContainerHeaderError(ContainerError):
    pass


class ChecksumMismatch(ContainerError):
    def __init__(self, expected: int, actual: int):
        super().__init__(f"Adler-32 mismatch: trailer {expected:08x}, computed {actual:08x}")
        self.expected = expected
        self.actual = actual


# Engine selection
class UnknownEngineError(AdlerzError):
    pass


class ConfigError(AdlerzError):
    pass
