"""Exception types raised by the horizon package."""

from __future__ import annotations


class HorizonError(Exception):
    """Base class for all horizon errors."""


class ConfigError(HorizonError):
    """A configuration candidate failed validation.

    ``field`` names the offending setting so callers can point the user at it.
    """

    def __init__(self, field: str, message: str) -> None:
        super().__init__(f"{field}: {message}")
        self.field = field
        self.message = message


class StoreError(HorizonError):
    """The persistence backend could not read or write a value."""
