"""Mapping of serialized handler decorators onto the function registry."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping

from .errors import CollectionError, DuplicateName, MissingName, MissingOptions
from .logging import get_logger
from .models import ConfigEntry, DecoratorRecord, HandlerReference

logger = get_logger("mapper")

# Exported symbol the runtime invokes in each handler module.
_ENTRY_SYMBOL = "default"
_SOURCE_SUFFIXES = (".ts", ".tsx")
_NAME_KEY = "name"
_COMPUTED_KEYS = ("handler", "name")


class HandlerMapper:
    """Turns handler decorators into uniquely named registry entries."""

    def __init__(
        self,
        handlers: Mapping[str, Mapping[str, Any]],
        *,
        root: Path,
        service: str,
        stage: str,
    ) -> None:
        self._handlers = {name: dict(bag) for name, bag in handlers.items()}
        self._root = Path(root)
        self._service = service
        self._stage = stage

    def select(self, records: Iterable[DecoratorRecord]) -> List[DecoratorRecord]:
        """Keep top-level records whose decorator is a configured handler."""
        return [record for record in records if record.name in self._handlers]

    def build_entry(self, record: DecoratorRecord) -> ConfigEntry:
        options = record.options()
        if not options:
            raise MissingOptions(record.name, record.source_file)
        if _NAME_KEY not in options:
            raise MissingName(record.name, record.source_file)

        name = str(options[_NAME_KEY])
        merged: Dict[str, Any] = {
            key: value
            for key, value in self._handlers.get(record.name, {}).items()
            if key not in _COMPUTED_KEYS
        }
        merged.update((key, value) for key, value in options.items() if key != _NAME_KEY)

        return ConfigEntry(
            name=name,
            handler_path=self.handler_path(record.source_file),
            display_name=self.display_name(name),
            options=merged,
            handlers=[HandlerReference(name=child.name, options=child.options()) for child in record.children],
        )

    def handler_path(self, source_file: str) -> str:
        """``<root>/src/a/b.ts`` becomes ``src/a/b.default``."""
        # Symlinks are not resolved.
        path = os.path.abspath(source_file)
        root = os.path.abspath(self._root)
        if os.path.commonpath([path, root]) == root:
            path = os.path.relpath(path, root)
        text = Path(path).as_posix()
        for suffix in _SOURCE_SUFFIXES:
            if text.endswith(suffix):
                text = text[: -len(suffix)]
                break
        return f"{text}.{_ENTRY_SYMBOL}"

    def display_name(self, name: str) -> str:
        return f"{self._service}-{self._stage}-{name}"

    def apply(
        self, records: Iterable[DecoratorRecord], registry: Mapping[str, Any]
    ) -> Dict[str, Any]:
        """Return ``registry`` extended with one entry per handler record.

        The input mapping is never modified. On failure the raised
        :class:`CollectionError` carries the registry built so far, without
        the failing record.
        """
        updated: Dict[str, Any] = dict(registry)
        for record in self.select(records):
            try:
                entry = self.build_entry(record)
                if entry.name in updated:
                    raise DuplicateName(entry.name, record.source_file)
            except CollectionError as exc:
                exc.registry = dict(updated)
                raise
            updated[entry.name] = entry.as_function()
            logger.debug("Registered handler %s -> %s", entry.name, entry.handler_path)
        return updated


__all__ = ["HandlerMapper"]
