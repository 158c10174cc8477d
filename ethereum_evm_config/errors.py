"""Exceptions raised while building, merging and extracting configurations."""

from typing import Any


class ConfigError(Exception):
    """Base class for configuration errors."""

    pass


class MissingFieldError(ConfigError):
    """A value required by the caller was not configured."""

    def __init__(self, field: str, message: str | None = None):
        """Initialize the exception with the name of the missing field."""
        self.field = field
        super().__init__(message or f"Missing `{field}` field.")


class InvalidTypeError(ConfigError):
    """A provider produced a value of a different shape than expected."""

    def __init__(self, actual: Any, expected: str):
        """Initialize the exception with the offending value and the expected kind."""
        self.actual = actual
        self.expected = expected
        super().__init__(
            f"invalid type: found {type(actual).__name__} `{actual!r}`, expected {expected}"
        )
