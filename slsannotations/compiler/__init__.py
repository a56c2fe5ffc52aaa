"""Minimal TypeScript front end built on tree-sitter."""

from .checker import Signature, SignatureParameter, Symbol, Type, TypeChecker
from .program import (
    CompilerOptions,
    ModuleKind,
    Program,
    ScriptTarget,
    SourceFile,
    compile_program,
)
from .syntax import Declaration

__all__ = [
    "CompilerOptions",
    "Declaration",
    "ModuleKind",
    "Program",
    "ScriptTarget",
    "Signature",
    "SignatureParameter",
    "SourceFile",
    "Symbol",
    "Type",
    "TypeChecker",
    "compile_program",
]
