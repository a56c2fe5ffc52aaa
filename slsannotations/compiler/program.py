"""Parsing a set of TypeScript files into a program."""

from __future__ import annotations

import os
from dataclasses import dataclass
from enum import Enum
from functools import lru_cache
from pathlib import Path
from typing import Dict, Iterable, List, Optional

import tree_sitter_typescript
from tree_sitter import Language, Node, Parser, Tree

from ..logging import get_logger
from .checker import TypeChecker

logger = get_logger("compiler")

_TSX_SUFFIXES = (".tsx",)


class ScriptTarget(str, Enum):
    ES3 = "es3"
    ES5 = "es5"
    ES2015 = "es2015"
    ESNEXT = "esnext"


class ModuleKind(str, Enum):
    NONE = "none"
    COMMONJS = "commonjs"
    ES2015 = "es2015"
    ESNEXT = "esnext"


@dataclass(frozen=True)
class CompilerOptions:
    target: ScriptTarget = ScriptTarget.ES5
    module: ModuleKind = ModuleKind.COMMONJS


@dataclass
class SourceFile:
    """A parsed file of the program."""

    file_name: str
    tree: Tree

    @property
    def root(self) -> Node:
        return self.tree.root_node

    @property
    def has_errors(self) -> bool:
        return self.tree.root_node.has_error


class Program:
    """Parsed source files plus the type checker built over them."""

    def __init__(self, source_files: Iterable[SourceFile], options: CompilerOptions) -> None:
        self._source_files = list(source_files)
        self._options = options
        self._by_path: Dict[str, SourceFile] = {
            _normalise(source.file_name): source for source in self._source_files
        }
        self._by_root: Dict[int, SourceFile] = {
            source.root.id: source for source in self._source_files
        }
        self._checker: Optional[TypeChecker] = None

    @property
    def options(self) -> CompilerOptions:
        return self._options

    def get_source_files(self) -> List[SourceFile]:
        return list(self._source_files)

    def get_source_file(self, file_name: str) -> Optional[SourceFile]:
        return self._by_path.get(_normalise(file_name))

    def source_file_of(self, node: Node) -> Optional[SourceFile]:
        root = node
        while root.parent is not None:
            root = root.parent
        return self._by_root.get(root.id)

    def get_type_checker(self) -> TypeChecker:
        if self._checker is None:
            self._checker = TypeChecker(self)
        return self._checker


def compile_program(file_names: Iterable[str], options: CompilerOptions | None = None) -> Program:
    """Parse ``file_names`` into a :class:`Program`.

    Unreadable files are left out with a warning. Files with syntax errors are
    kept; tree-sitter recovers around the broken region.
    """
    options = options or CompilerOptions()
    source_files: List[SourceFile] = []
    seen: set[str] = set()
    for file_name in file_names:
        key = _normalise(file_name)
        if key in seen:
            continue
        seen.add(key)
        try:
            source = Path(file_name).read_bytes()
        except OSError as exc:
            logger.warning("Skipping unreadable source %s: %s", file_name, exc)
            continue
        tree = _parser_for(_dialect(file_name)).parse(source)
        source_file = SourceFile(file_name=file_name, tree=tree)
        if source_file.has_errors:
            logger.warning("Syntax errors in %s; continuing with recovered tree", file_name)
        logger.debug("Parsed %s", file_name)
        source_files.append(source_file)

    logger.debug(
        "Compiled %d file(s) (target=%s, module=%s)",
        len(source_files),
        options.target.value,
        options.module.value,
    )
    return Program(source_files, options)


def _dialect(file_name: str) -> str:
    return "tsx" if file_name.lower().endswith(_TSX_SUFFIXES) else "typescript"


@lru_cache(maxsize=None)
def _parser_for(dialect: str) -> Parser:
    if dialect == "tsx":
        language = Language(tree_sitter_typescript.language_tsx())
    else:
        language = Language(tree_sitter_typescript.language_typescript())
    return Parser(language)


def _normalise(file_name: str) -> str:
    return os.path.normcase(os.path.normpath(os.path.abspath(file_name)))


__all__ = [
    "CompilerOptions",
    "ModuleKind",
    "Program",
    "ScriptTarget",
    "SourceFile",
    "compile_program",
]
