"""Traversal of program source files for decorated class declarations."""

from __future__ import annotations

from typing import Iterator

from tree_sitter import Node

from ..compiler import Program
from ..compiler.syntax import CLASS_LIKE_TYPES, CONTAINER_TYPES, Declaration, class_declaration


def walk_declarations(program: Program) -> Iterator[Declaration]:
    """Yield every decorated class declaration, file by file, in source order.

    Namespaces, ``declare`` blocks and ``export`` wrappers are descended into
    but never yielded. Undecorated classes are skipped along with their
    members; nested decorators are reached through the serializer instead.
    """
    for source_file in program.get_source_files():
        yield from _visit(source_file.root, source_file.file_name)


def _visit(node: Node, file_name: str) -> Iterator[Declaration]:
    for child in node.named_children:
        if child.type in CLASS_LIKE_TYPES:
            declaration = class_declaration(child, file_name)
            if declaration.decorators:
                yield declaration
        elif child.type in CONTAINER_TYPES:
            yield from _visit(child, file_name)


__all__ = ["walk_declarations"]
