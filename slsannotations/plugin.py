"""Deployment lifecycle integration for the annotation collector."""

from __future__ import annotations

import json
from typing import Any, Callable, Dict, List, Mapping, Optional

from .compiler import CompilerOptions, ModuleKind, ScriptTarget, compile_program
from .config import ServiceConfig
from .decorators import resolve_decorators
from .discovery import discover
from .errors import CollectionError
from .logging import get_logger
from .mapper import HandlerMapper
from .models import DecoratorRecord

logger = get_logger("plugin")

COMPILER_OPTIONS = CompilerOptions(target=ScriptTarget.ES5, module=ModuleKind.COMMONJS)

_DEFAULT_STAGE = "dev"


class AnnotationsPlugin:
    """Collects decorated handler classes into the service function registry."""

    def __init__(self, service: ServiceConfig, options: Optional[Mapping[str, Any]] = None) -> None:
        self.service = service
        self.options: Dict[str, Any] = dict(options or {})

        self.commands: Dict[str, Dict[str, Any]] = {
            "collect": {
                "usage": "Collects all lambda entry modules",
                "lifecycle_events": ["init"],
            }
        }

        self.hooks: Dict[str, Callable[[], Dict[str, Any]]] = {
            "before:package:initialize": self.collect_handlers,
            "before:invoke:invoke": self.collect_handlers,
            "before:deploy:function:initialize": self.collect_handlers,
            "collect:init": self.collect_handlers,
        }

    @property
    def stage(self) -> str:
        """Explicit ``stage`` option, else the provider stage, else ``dev``."""
        return self.options.get("stage") or self.service.provider_stage or _DEFAULT_STAGE

    def run_hook(self, event: str) -> Dict[str, Any]:
        try:
            hook = self.hooks[event]
        except KeyError:
            raise ValueError(f"Unknown lifecycle event: {event}") from None
        return hook()

    def resolve_records(self) -> List[DecoratorRecord]:
        """Discover and compile the sources and serialize their decorators."""
        annotations = self.service.annotations
        files = discover(self.service.root, annotations.pattern, annotations.ignore)
        program = compile_program(files, COMPILER_OPTIONS)
        return resolve_decorators(program, invocation_site=annotations.invocation_site)

    def collect_handlers(self) -> Dict[str, Any]:
        """Run a full collection pass and store the result on the service.

        Entries registered before a failing record stay in the registry; the
        failure is re-raised to the caller.
        """
        records = self.resolve_records()
        mapper = HandlerMapper(
            self.service.annotations.handlers,
            root=self.service.root,
            service=self.service.service,
            stage=self.stage,
        )
        try:
            functions = mapper.apply(records, self.service.functions)
        except CollectionError as exc:
            if exc.registry is not None:
                self.service.functions = exc.registry
            raise

        self.service.functions = functions
        logger.info(
            "Collected %d handler(s) from %d decorator(s)",
            len(mapper.select(records)),
            len(records),
        )
        logger.info(json.dumps(functions, default=str))
        return functions


__all__ = ["AnnotationsPlugin", "COMPILER_OPTIONS"]
