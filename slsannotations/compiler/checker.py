"""Symbol and type resolution over a parsed TypeScript program.

This is deliberately a small slice of what ``tsc`` does: identifiers are
resolved lexically through block and file scopes, relative imports are
followed into other files of the same program, and types are rendered from
the annotations written in the source rather than inferred.
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Dict, List, Optional, Tuple

from tree_sitter import Node

from .jsdoc import DocComment, parse_doc_comment
from .syntax import CLASS_LIKE_TYPES, literal_text, node_text

if TYPE_CHECKING:  # pragma: no cover - import cycle guard
    from .program import Program, SourceFile

_FUNCTION_TYPES = frozenset({"function_declaration", "generator_function_declaration"})
_OVERLOAD_TYPES = frozenset({"function_signature"})
_VARIABLE_TYPES = frozenset({"lexical_declaration", "variable_declaration"})
_NAMESPACE_TYPES = frozenset({"internal_module", "module"})
_FUNCTION_VALUE_TYPES = frozenset({"arrow_function", "function_expression", "function"})
_PARAMETER_TYPES = frozenset({"required_parameter", "optional_parameter"})
_SCOPE_TYPES = frozenset({"program", "statement_block"})
_WRAPPER_TYPES = frozenset({"export_statement", "ambient_declaration"})

_MODULE_SUFFIXES = (".ts", ".tsx", ".d.ts")
_JS_SUFFIXES = (".js", ".jsx", ".mjs", ".cjs")

_LITERAL_TYPES = {
    "number": "number",
    "string": "string",
    "template_string": "string",
    "true": "boolean",
    "false": "boolean",
}


@dataclass(frozen=True)
class ImportReference:
    importer: str
    specifier: str
    imported: str


@dataclass
class Symbol:
    """A named declaration visible in some scope."""

    name: str
    kind: str
    declarations: List[Node] = field(default_factory=list)
    documentation: str = ""
    source_file: Optional[str] = None
    import_ref: Optional[ImportReference] = None

    @property
    def value_declaration(self) -> Optional[Node]:
        return self.declarations[-1] if self.declarations else None


@dataclass
class SignatureParameter:
    name: str
    type: str
    documentation: str = ""
    optional: bool = False
    rest: bool = False

    def render(self) -> str:
        prefix = "..." if self.rest else ""
        marker = "?" if self.optional else ""
        return f"{prefix}{self.name}{marker}: {self.type}"


@dataclass
class Signature:
    parameters: List[SignatureParameter]
    return_type: str
    documentation: str = ""

    def render_parameters(self) -> str:
        return ", ".join(parameter.render() for parameter in self.parameters)


@dataclass
class Type:
    text: str
    call_signatures: List[Signature] = field(default_factory=list)
    construct_signatures: List[Signature] = field(default_factory=list)

    def signatures(self) -> List[Signature]:
        return [*self.call_signatures, *self.construct_signatures]


ANY_TYPE = Type("any")


class TypeChecker:
    """Resolves identifiers to symbols and symbols to display types."""

    def __init__(self, program: "Program") -> None:
        self._program = program
        self._scopes: Dict[Tuple[str, int], Dict[str, Symbol]] = {}
        self._exports: Dict[str, Dict[str, Symbol]] = {}

    # ------------------------------------------------------------------
    # Symbols

    def get_symbol_at_location(self, node: Node) -> Optional[Symbol]:
        """Return the symbol an identifier refers to, or None when undeclared."""
        if node.type != "identifier":
            return None
        source_file = self._program.source_file_of(node)
        if source_file is None:
            return None

        name = node_text(node)
        scope = node.parent
        while scope is not None:
            if scope.type in _SCOPE_TYPES:
                symbol = self._scope_symbols(scope, source_file).get(name)
                if symbol is not None:
                    return self._resolve_alias(symbol)
            scope = scope.parent
        return None

    def _scope_symbols(self, scope: Node, source_file: "SourceFile") -> Dict[str, Symbol]:
        key = (source_file.file_name, scope.id)
        symbols = self._scopes.get(key)
        if symbols is None:
            symbols = {}
            for statement in scope.named_children:
                for declaration in _unwrap_statement(statement):
                    self._declare(symbols, declaration, source_file)
            self._scopes[key] = symbols
        return symbols

    def _declare(self, symbols: Dict[str, Symbol], node: Node, source_file: "SourceFile") -> None:
        kind = node.type
        if kind in _FUNCTION_TYPES or kind in _OVERLOAD_TYPES:
            name = _field_text(node, "name")
            if not name:
                return
            existing = symbols.get(name)
            if existing is not None and existing.kind == "function":
                existing.declarations.append(node)
                if not existing.documentation:
                    existing.documentation = _doc_comment(node).description
                return
            symbols[name] = self._symbol(name, "function", node, source_file)
        elif kind in CLASS_LIKE_TYPES:
            name = _field_text(node, "name")
            if name:
                symbols[name] = self._symbol(name, "class", node, source_file)
        elif kind in _VARIABLE_TYPES:
            for declarator in node.named_children:
                if declarator.type != "variable_declarator":
                    continue
                name_node = declarator.child_by_field_name("name")
                if name_node is not None and name_node.type == "identifier":
                    name = node_text(name_node)
                    symbols[name] = self._symbol(name, "variable", declarator, source_file)
        elif kind in _NAMESPACE_TYPES:
            name = _field_text(node, "name")
            if name:
                symbols[name] = self._symbol(name, "namespace", node, source_file)
        elif kind == "import_statement":
            self._declare_imports(symbols, node, source_file)

    @staticmethod
    def _symbol(name: str, kind: str, node: Node, source_file: "SourceFile") -> Symbol:
        return Symbol(
            name=name,
            kind=kind,
            declarations=[node],
            documentation=_doc_comment(node).description,
            source_file=source_file.file_name,
        )

    def _declare_imports(
        self, symbols: Dict[str, Symbol], statement: Node, source_file: "SourceFile"
    ) -> None:
        source = statement.child_by_field_name("source")
        clause = next((child for child in statement.named_children if child.type == "import_clause"), None)
        if source is None or clause is None:
            return
        specifier = literal_text(source)

        def _alias(local: str, imported: str, node: Node) -> None:
            symbols[local] = Symbol(
                name=local,
                kind="alias",
                declarations=[node],
                source_file=source_file.file_name,
                import_ref=ImportReference(source_file.file_name, specifier, imported),
            )

        for item in clause.named_children:
            if item.type == "identifier":
                _alias(node_text(item), "default", item)
            elif item.type == "namespace_import":
                identifier = next((c for c in item.named_children if c.type == "identifier"), None)
                if identifier is not None:
                    _alias(node_text(identifier), "*", item)
            elif item.type == "named_imports":
                for spec in item.named_children:
                    if spec.type != "import_specifier":
                        continue
                    name_node = spec.child_by_field_name("name")
                    alias_node = spec.child_by_field_name("alias")
                    if name_node is None:
                        continue
                    local_node = alias_node or name_node
                    _alias(node_text(local_node), node_text(name_node), spec)

    def _resolve_alias(self, symbol: Symbol) -> Symbol:
        """Follow import bindings to the declaration they name.

        The returned symbol keeps the local name. Imports that leave the
        program stay aliases and later render as ``any``.
        """
        local_name = symbol.name
        seen: set[ImportReference] = set()
        current = symbol
        while current.kind == "alias" and current.import_ref is not None:
            reference = current.import_ref
            if reference in seen:
                break
            seen.add(reference)
            target = self._lookup_export(reference)
            if target is None:
                break
            current = target
        if current is symbol:
            return symbol
        return dataclasses.replace(current, name=local_name, declarations=list(current.declarations))

    def _lookup_export(self, reference: ImportReference) -> Optional[Symbol]:
        target = self._resolve_module(reference.importer, reference.specifier)
        if target is None:
            return None
        if reference.imported == "*":
            return Symbol(
                name=Path(target.file_name).stem,
                kind="namespace",
                declarations=[target.root],
                source_file=target.file_name,
            )
        return self._export_symbols(target).get(reference.imported)

    def _resolve_module(self, importer: str, specifier: str) -> Optional["SourceFile"]:
        if not specifier.startswith("."):
            return None
        base = Path(importer).parent / specifier
        candidates = [Path(f"{base}{suffix}") for suffix in _MODULE_SUFFIXES]
        if base.suffix in _JS_SUFFIXES:
            candidates.extend(base.with_suffix(suffix) for suffix in (".ts", ".tsx"))
        candidates.append(base)
        candidates.extend(base / f"index{suffix}" for suffix in _MODULE_SUFFIXES)
        for candidate in candidates:
            source_file = self._program.get_source_file(str(candidate))
            if source_file is not None:
                return source_file
        return None

    def _export_symbols(self, source_file: "SourceFile") -> Dict[str, Symbol]:
        exports = self._exports.get(source_file.file_name)
        if exports is not None:
            return exports

        exports = {}
        self._exports[source_file.file_name] = exports
        local = self._scope_symbols(source_file.root, source_file)
        for statement in source_file.root.named_children:
            if statement.type != "export_statement":
                continue
            is_default = any(child.type == "default" for child in statement.children)
            declaration = statement.child_by_field_name("declaration")
            if declaration is not None:
                for name in _declared_names(declaration):
                    if name in local:
                        exports["default" if is_default else name] = local[name]
                continue
            value = statement.child_by_field_name("value")
            if is_default and value is not None and value.type == "identifier":
                symbol = local.get(node_text(value))
                if symbol is not None:
                    exports["default"] = symbol
                continue
            source = statement.child_by_field_name("source")
            clause = next((c for c in statement.named_children if c.type == "export_clause"), None)
            if clause is None:
                continue
            for spec in clause.named_children:
                if spec.type != "export_specifier":
                    continue
                name = _field_text(spec, "name")
                exported = _field_text(spec, "alias") or name
                if source is not None:
                    exports[exported] = Symbol(
                        name=exported,
                        kind="alias",
                        declarations=[spec],
                        source_file=source_file.file_name,
                        import_ref=ImportReference(
                            source_file.file_name, literal_text(source), name
                        ),
                    )
                elif name in local:
                    exports[exported] = local[name]
        return exports

    # ------------------------------------------------------------------
    # Types

    def get_type_of_symbol(self, symbol: Symbol) -> Type:
        declaration = symbol.value_declaration
        if declaration is None:
            return ANY_TYPE

        if symbol.kind == "function":
            overloads = [node for node in symbol.declarations if node.type in _OVERLOAD_TYPES]
            nodes = overloads or [declaration]
            signatures = [_signature(node) for node in nodes]
            return Type(_render_call_signatures(signatures), call_signatures=signatures)

        if symbol.kind == "class":
            return Type(
                f"typeof {symbol.name}",
                construct_signatures=_constructor_signatures(declaration, symbol.name),
            )

        if symbol.kind == "namespace":
            return Type(f"typeof {symbol.name}")

        if symbol.kind == "variable":
            annotation = declaration.child_by_field_name("type")
            value = declaration.child_by_field_name("value")
            signatures: List[Signature] = []
            if value is not None and value.type in _FUNCTION_VALUE_TYPES:
                signatures = [_signature(value, _doc_comment(declaration))]
            if annotation is not None:
                text = _annotation_text(annotation)
            elif signatures:
                text = _render_call_signatures(signatures)
            else:
                text = _LITERAL_TYPES.get(value.type, "any") if value is not None else "any"
            return Type(text, call_signatures=signatures)

        return ANY_TYPE

    @staticmethod
    def type_to_string(symbol_type: Type) -> str:
        return symbol_type.text


def _unwrap_statement(statement: Node) -> List[Node]:
    if statement.type in _WRAPPER_TYPES:
        declaration = statement.child_by_field_name("declaration")
        if declaration is not None:
            return [declaration]
        return [
            child for child in statement.named_children if child.type not in {"decorator", "comment"}
        ]
    if statement.type == "expression_statement":
        return [child for child in statement.named_children if child.type in _NAMESPACE_TYPES]
    return [statement]


def _declared_names(node: Node) -> List[str]:
    if node.type in _VARIABLE_TYPES:
        names = []
        for declarator in node.named_children:
            name_node = declarator.child_by_field_name("name") if declarator.type == "variable_declarator" else None
            if name_node is not None and name_node.type == "identifier":
                names.append(node_text(name_node))
        return names
    name = _field_text(node, "name")
    return [name] if name else []


def _field_text(node: Node, field_name: str) -> str:
    child = node.child_by_field_name(field_name)
    return node_text(child) if child is not None else ""


def _annotation_text(node: Optional[Node]) -> str:
    if node is None:
        return ""
    text = node_text(node).strip()
    if text.startswith(":"):
        text = text[1:]
    return text.strip()


def _doc_comment(node: Node) -> DocComment:
    anchor = node
    if anchor.type == "variable_declarator" and anchor.parent is not None:
        anchor = anchor.parent
    if anchor.parent is not None and anchor.parent.type in _WRAPPER_TYPES:
        anchor = anchor.parent
    previous = anchor.prev_sibling
    if previous is not None and previous.type == "comment":
        text = node_text(previous)
        if text.startswith("/**"):
            return parse_doc_comment(text)
    return DocComment()


def _signature(node: Node, doc: Optional[DocComment] = None) -> Signature:
    doc = doc if doc is not None else _doc_comment(node)
    parameters: List[SignatureParameter] = []
    params_node = node.child_by_field_name("parameters")
    if params_node is not None:
        index = 0
        for param in params_node.named_children:
            if param.type not in _PARAMETER_TYPES:
                continue
            pattern = param.child_by_field_name("pattern")
            if pattern is None or pattern.type == "this":
                continue
            rest = pattern.type == "rest_pattern"
            if pattern.type == "identifier":
                name = node_text(pattern)
            elif rest:
                name = node_text(pattern).lstrip(".").strip()
            else:
                name = f"__{index}"
            parameters.append(
                SignatureParameter(
                    name=name,
                    type=_annotation_text(param.child_by_field_name("type")) or "any",
                    documentation=doc.params.get(name, ""),
                    optional=param.type == "optional_parameter",
                    rest=rest,
                )
            )
            index += 1
    else:
        single = node.child_by_field_name("parameter")
        if single is not None:
            name = node_text(single)
            parameters.append(SignatureParameter(name, "any", doc.params.get(name, "")))

    return_type = _annotation_text(node.child_by_field_name("return_type")) or "any"
    return Signature(parameters=parameters, return_type=return_type, documentation=doc.description)


def _constructor_signatures(declaration: Node, class_name: str) -> List[Signature]:
    body = declaration.child_by_field_name("body")
    overloads: List[Node] = []
    implementation: Optional[Node] = None
    if body is not None:
        for member in body.named_children:
            if _field_text(member, "name") != "constructor":
                continue
            if member.type == "method_signature":
                overloads.append(member)
            elif member.type == "method_definition":
                implementation = member
    nodes = overloads or ([implementation] if implementation is not None else [])
    if not nodes:
        return [Signature(parameters=[], return_type=class_name)]
    signatures = []
    for node in nodes:
        signature = _signature(node)
        signature.return_type = class_name
        signatures.append(signature)
    return signatures


def _render_call_signatures(signatures: List[Signature]) -> str:
    if len(signatures) == 1:
        signature = signatures[0]
        return f"({signature.render_parameters()}) => {signature.return_type}"
    members = " ".join(
        f"({signature.render_parameters()}): {signature.return_type};" for signature in signatures
    )
    return f"{{ {members} }}"


__all__ = [
    "ANY_TYPE",
    "Signature",
    "SignatureParameter",
    "Symbol",
    "Type",
    "TypeChecker",
]
