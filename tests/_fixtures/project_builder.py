"""Helper utilities for constructing temporary serverless services in tests."""

from __future__ import annotations

import textwrap
from pathlib import Path
from typing import Iterable, Mapping

from slsannotations.compiler import Program, compile_program
from slsannotations.config import ServiceConfig, load_config


class ProjectBuilder:
    """Writes TypeScript sources and serverless.yml into a throwaway service."""

    def __init__(self, tmp_path: Path) -> None:
        self.root = tmp_path / "service"
        self.root.mkdir()

    def write(self, files: Mapping[str, str]) -> None:
        """Write `path -> contents` entries into the service directory."""
        for relative, content in files.items():
            path = self.root / relative
            path.parent.mkdir(parents=True, exist_ok=True)
            normalised = textwrap.dedent(content).lstrip("\n")
            path.write_text(normalised, encoding="utf-8")

    def path(self, relative: str = "") -> Path:
        return self.root / relative if relative else self.root

    def compile(self, relatives: Iterable[str]) -> Program:
        """Compile the given service-relative files into a program."""
        return compile_program([str(self.root / relative) for relative in relatives])

    def config(self) -> ServiceConfig:
        return load_config(self.root)


__all__ = ["ProjectBuilder"]
