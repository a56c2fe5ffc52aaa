"""Serialization of decorators into :class:`DecoratorRecord` trees."""

from __future__ import annotations

from typing import Optional

from tree_sitter import Node

from ..compiler import Program, Signature
from ..compiler.syntax import (
    Declaration,
    decorator_expression,
    find_first,
    iter_preorder,
    leading_identifier,
    line_of,
    member_declarations,
    node_text,
)
from ..errors import UnresolvedSymbol
from ..logging import get_logger
from ..models import DecoratorRecord, InvocationSite, SignatureRecord, SymbolRecord
from .parameters import extract_parameters

logger = get_logger("decorators")


class DecoratorSerializer:
    """Resolves decorators against the program and captures their options."""

    def __init__(
        self,
        program: Program,
        *,
        invocation_site: InvocationSite = InvocationSite.DECLARATION,
    ) -> None:
        self._checker = program.get_type_checker()
        self._invocation_site = invocation_site

    def serialize(self, declaration: Declaration, decorator: Node) -> DecoratorRecord:
        expression = decorator_expression(decorator)
        head = leading_identifier(expression)
        symbol = self._checker.get_symbol_at_location(head) if head is not None else None
        if symbol is None:
            name = node_text(head) if head is not None else node_text(expression)
            raise UnresolvedSymbol(name, declaration.source_file, line_of(decorator))

        symbol_type = self._checker.get_type_of_symbol(symbol)
        record = DecoratorRecord(
            name=symbol.name,
            documentation=symbol.documentation,
            type=self._checker.type_to_string(symbol_type),
            source_file=declaration.source_file,
            constructors=[_serialize_signature(signature) for signature in symbol_type.signatures()],
        )

        call = self._find_invocation(declaration, decorator)
        if call is not None:
            record.parameters = extract_parameters(call)

        for member in member_declarations(declaration):
            for child_decorator in member.decorators:
                record.children.append(self.serialize(member, child_decorator))

        logger.debug(
            "Serialized @%s on %s (%s) with %d parameter(s)",
            record.name,
            declaration.name,
            declaration.source_file,
            len(record.parameters),
        )
        return record

    def _find_invocation(self, declaration: Declaration, decorator: Node) -> Optional[Node]:
        if self._invocation_site is InvocationSite.DECORATOR:
            own = find_first(decorator, "call_expression")
            if own is not None:
                return own
        # The first call anywhere under the declaration, which need not be
        # this decorator's own call when an earlier decorator has one.
        for root in declaration.syntax_roots():
            for node in iter_preorder(root):
                if node.type == "call_expression":
                    return node
        return None


def _serialize_signature(signature: Signature) -> SignatureRecord:
    return SignatureRecord(
        parameters=[
            SymbolRecord(name=parameter.name, documentation=parameter.documentation, type=parameter.type)
            for parameter in signature.parameters
        ],
        return_type=signature.return_type,
        documentation=signature.documentation,
    )


__all__ = ["DecoratorSerializer"]
