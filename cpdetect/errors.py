"""
Exceptions raised by cpdetect.
"""


class CpdetectError(Exception):
    """Base exception for cpdetect."""


class ConfigError(CpdetectError):
    """Invalid scan configuration."""


class SourceReadError(CpdetectError):
    """A source file could not be read."""

    def __init__(self, path: str, reason: str):
        super().__init__(f"{path}: {reason}")
        self.path = path
        self.reason = reason
