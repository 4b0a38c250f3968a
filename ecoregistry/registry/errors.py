"""Errors specific to the registry file."""

from __future__ import annotations


class RegistryError(Exception):
    """Base class for registry errors."""


class RegistryLoadError(RegistryError):
    """Raised when the existing registry cannot be read or decoded."""

    def __init__(self, path: object, reason: str) -> None:
        """Initialise with the registry path and failure reason."""
        self.path = path
        self.reason = reason
        super().__init__(f"Cannot load registry {path}: {reason}")
