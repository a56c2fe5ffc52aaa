"""Failures that abort a collection pass."""

from __future__ import annotations

from typing import Any, Dict, Optional


class CollectionError(RuntimeError):
    """Base class for fatal collection failures.

    ``registry`` is filled in by the mapper with the function registry as it
    stood before the failing record, so callers can keep earlier entries.
    """

    def __init__(self, message: str, *, registry: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(message)
        self.registry = registry


class UnresolvedSymbol(CollectionError):
    """A decorator's leading identifier has no declaration in scope."""

    def __init__(self, name: str, source_file: str, line: int) -> None:
        super().__init__(f"Could not resolve decorator '{name}' at {source_file}:{line}")
        self.name = name
        self.source_file = source_file
        self.line = line


class MissingOptions(CollectionError):
    """A handler decorator produced no literal options."""

    def __init__(self, decorator: str, source_file: str) -> None:
        super().__init__(f"Could not get handler options for @{decorator} in {source_file}")
        self.decorator = decorator
        self.source_file = source_file


class MissingName(CollectionError):
    """A handler decorator's options lack the ``name`` key."""

    def __init__(self, decorator: str, source_file: str) -> None:
        super().__init__(f"Handler name has to be provided for @{decorator} in {source_file}")
        self.decorator = decorator
        self.source_file = source_file


class DuplicateName(CollectionError):
    """A handler name is already present in the function registry."""

    def __init__(self, name: str, source_file: str) -> None:
        super().__init__(f"Handler with name {name} already exists ({source_file})")
        self.name = name
        self.source_file = source_file


__all__ = [
    "CollectionError",
    "DuplicateName",
    "MissingName",
    "MissingOptions",
    "UnresolvedSymbol",
]
