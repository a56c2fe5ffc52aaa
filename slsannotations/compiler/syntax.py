"""Helpers over tree-sitter TypeScript syntax trees."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Iterator, List, Optional, Union

from tree_sitter import Node

# "class" covers `export default class ...` parsed as a class expression.
CLASS_LIKE_TYPES = frozenset({"class_declaration", "abstract_class_declaration", "class"})

# Nodes the declaration walker descends through without yielding them.
CONTAINER_TYPES = frozenset(
    {
        "internal_module",
        "module",
        "ambient_declaration",
        "statement_block",
        "expression_statement",
        "export_statement",
    }
)

NUMERIC_LITERAL_TYPES = frozenset({"number"})
TEXTUAL_LITERAL_TYPES = frozenset({"string", "template_string"})

_ESCAPE_RE = re.compile(r"\\(u\{[0-9a-fA-F]+\}|u[0-9a-fA-F]{4}|x[0-9a-fA-F]{2}|\r\n|[\s\S])")
_SIMPLE_ESCAPES = {
    "n": "\n",
    "t": "\t",
    "r": "\r",
    "b": "\b",
    "f": "\f",
    "v": "\v",
    "0": "\0",
    "\n": "",
    "\r\n": "",
}
_INTEGER_PREFIX = re.compile(r"\s*([+-]?)(0[xX][0-9a-fA-F]+|\d+)")
_RADIX_PREFIXES = {"0x": 16, "0o": 8, "0b": 2}


@dataclass
class Declaration:
    """A class or class member together with the decorators attached to it.

    ``node`` is the outermost node of the declaration (the ``export`` wrapper
    when there is one) and ``target`` the class or member itself. Method
    decorators are siblings of the method in the class body rather than
    children, so they are kept in ``detached`` as well as ``decorators``.
    """

    node: Node
    target: Node
    decorators: List[Node]
    source_file: str
    detached: List[Node] = field(default_factory=list)

    @property
    def name(self) -> str:
        name_node = self.target.child_by_field_name("name")
        if name_node is None:
            name_node = self.target.child_by_field_name("pattern")
        return node_text(name_node) if name_node is not None else "<anonymous>"

    def syntax_roots(self) -> List[Node]:
        """Nodes covering the whole declaration, in source order."""
        return [*self.detached, self.node]


def node_text(node: Node) -> str:
    raw = node.text
    if raw is None:
        return ""
    return raw.decode("utf-8", errors="ignore")


def line_of(node: Node) -> int:
    return node.start_point[0] + 1


def iter_preorder(node: Node) -> Iterator[Node]:
    """Yield ``node`` and its descendants depth-first, parents before children."""
    stack = [node]
    while stack:
        current = stack.pop()
        yield current
        stack.extend(reversed(current.children))


def find_first(node: Node, type_name: str) -> Optional[Node]:
    for candidate in iter_preorder(node):
        if candidate.type == type_name:
            return candidate
    return None


def decorators_of(node: Node) -> List[Node]:
    return [child for child in node.children if child.type == "decorator"]


def decorator_expression(decorator: Node) -> Node:
    """Return the expression following ``@`` in a decorator."""
    for child in decorator.named_children:
        if child.type != "comment":
            return child
    return decorator


def leading_identifier(node: Node) -> Optional[Node]:
    """First identifier token of an expression (``ns`` in ``ns.Handler()``)."""
    return find_first(node, "identifier")


def class_declaration(node: Node, source_file: str) -> Declaration:
    """Build the declaration view of a class, merging ``export`` wrapper decorators."""
    decorators = decorators_of(node)
    outer = node
    parent = node.parent
    if parent is not None and parent.type == "export_statement":
        decorators = decorators_of(parent) + decorators
        outer = parent
    return Declaration(node=outer, target=node, decorators=decorators, source_file=source_file)


def member_declarations(declaration: Declaration) -> List[Declaration]:
    """Return the decoratable children of a declaration in source order.

    Classes yield their members and methods or constructors their parameters.
    """
    if declaration.target.type not in CLASS_LIKE_TYPES:
        return _parameter_declarations(declaration)
    body = declaration.target.child_by_field_name("body")
    if body is None:
        return []

    members: List[Declaration] = []
    pending: List[Node] = []
    for child in body.named_children:
        if child.type == "decorator":
            pending.append(child)
            continue
        if child.type == "comment":
            continue
        members.append(
            Declaration(
                node=child,
                target=child,
                decorators=pending + decorators_of(child),
                source_file=declaration.source_file,
                detached=pending,
            )
        )
        pending = []
    return members


def _parameter_declarations(declaration: Declaration) -> List[Declaration]:
    parameters = declaration.target.child_by_field_name("parameters")
    if parameters is None or parameters.type != "formal_parameters":
        return []
    return [
        Declaration(
            node=parameter,
            target=parameter,
            decorators=decorators_of(parameter),
            source_file=declaration.source_file,
        )
        for parameter in parameters.named_children
        if parameter.type != "comment"
    ]


def literal_text(node: Node) -> str:
    """Return the cooked value of a string or template literal."""
    raw = node_text(node)[1:-1]
    return _ESCAPE_RE.sub(_unescape, raw)


def parse_integer(text: str) -> Optional[int]:
    """Parse the leading integer of a numeric literal; None when there is none.

    Mirrors JavaScript ``parseInt``: ``"1.5"`` gives 1, ``"0x10"`` gives 16
    and ``".5"`` gives None.
    """
    match = _INTEGER_PREFIX.match(text)
    if match is None:
        return None
    sign, digits = match.groups()
    value = int(digits, 16) if digits[:2].lower() == "0x" else int(digits)
    return -value if sign == "-" else value


def numeric_text(raw: str) -> str:
    """Render a numeric literal the way JavaScript prints its value.

    Separators are removed, radix prefixes are converted to decimal and
    exponents are expanded: ``1_024`` gives ``"1024"``, ``0b11`` gives ``"3"``
    and ``1e3`` gives ``"1000"``.
    """
    text = raw.strip().replace("_", "")
    base = _RADIX_PREFIXES.get(text[:2].lower())
    try:
        if base is not None:
            return str(int(text[2:], base))
        if len(text) > 1 and text[0] == "0" and text.isdigit() and "8" not in text and "9" not in text:
            # Legacy octal, as in sloppy-mode JavaScript.
            return str(int(text, 8))
        value = float(text)
    except ValueError:
        return text
    if value.is_integer() and abs(value) < 1e21:
        return str(int(value))
    return repr(value)


def literal_value(node: Node) -> tuple[bool, Union[int, str, None]]:
    """Return ``(is_literal, value)`` for numeric and textual literal nodes."""
    if node.type in NUMERIC_LITERAL_TYPES:
        return True, parse_integer(numeric_text(node_text(node)))
    if node.type in TEXTUAL_LITERAL_TYPES:
        if node.type == "template_string" and find_first(node, "template_substitution"):
            return False, None
        return True, literal_text(node)
    return False, None


def property_key(pair: Node) -> str:
    key = pair.child_by_field_name("key")
    if key is None:
        return ""
    if key.type in TEXTUAL_LITERAL_TYPES:
        return literal_text(key)
    return node_text(key)


def _unescape(match: re.Match) -> str:
    body = match.group(1)
    if body.startswith("u{"):
        return chr(int(body[2:-1], 16))
    if len(body) > 1 and body[0] in "ux":
        return chr(int(body[1:], 16))
    return _SIMPLE_ESCAPES.get(body, body)


__all__ = [
    "CLASS_LIKE_TYPES",
    "CONTAINER_TYPES",
    "Declaration",
    "class_declaration",
    "decorator_expression",
    "decorators_of",
    "find_first",
    "iter_preorder",
    "leading_identifier",
    "line_of",
    "literal_text",
    "literal_value",
    "member_declarations",
    "node_text",
    "numeric_text",
    "parse_integer",
    "property_key",
]
