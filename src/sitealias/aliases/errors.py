"""
Exceptions raised by the alias subsystem.

Lookup failures (not found, no bootstrapped site) are user-facing and
fatal to the command being run. File-level failures (malformed or
unrecognized alias files) are raised by the loader and turned into
warnings by the registry build, which then continues with the
remaining files.
"""

from __future__ import annotations

import pathlib as _pathlib


class AliasError(Exception):
    """Base class for all alias errors."""


class InvalidAliasReferenceError(AliasError, ValueError):
    """Raised when a reference string is not valid alias syntax."""

    def __init__(self, reference: str, reason: str) -> None:
        self.reference = reference
        self.reason = reason
        super().__init__(f"Invalid alias reference '{reference}': {reason}")


class AliasNotFoundError(AliasError, LookupError):
    """Raised when a reference does not match any known alias."""

    def __init__(self, reference: str) -> None:
        self.reference = reference
        super().__init__(f"Alias not found: {reference}")


class NoBootstrappedSiteError(AliasError):
    """Raised when @self is used without an active local site."""

    def __init__(self) -> None:
        super().__init__(
            "@self requires a bootstrapped site: run from inside a site root "
            "or pass --root"
        )


class MalformedAliasFileError(AliasError):
    """An alias file could not be read or parsed."""

    def __init__(self, path: _pathlib.Path, message: str) -> None:
        self.path = path
        super().__init__(f"Malformed alias file {path}: {message}")


class AmbiguousAliasFileError(AliasError):
    """An alias file matches no recognized naming or content convention."""

    def __init__(self, path: _pathlib.Path, message: str) -> None:
        self.path = path
        super().__init__(f"Unrecognized alias file {path}: {message}")


class RegistryFrozenError(AliasError, RuntimeError):
    """Raised when registering into a registry after the load phase."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Cannot register '{name}': alias registry is frozen")
