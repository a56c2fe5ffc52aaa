"""Decorator discovery, resolution and parameter extraction."""

from __future__ import annotations

from typing import List

from ..compiler import Program
from ..models import DecoratorRecord, InvocationSite
from .parameters import extract_parameters, is_retained_value
from .serializer import DecoratorSerializer
from .walker import walk_declarations


def resolve_decorators(
    program: Program, *, invocation_site: InvocationSite = InvocationSite.DECLARATION
) -> List[DecoratorRecord]:
    """Serialize every decorator on every decorated class of ``program``."""
    serializer = DecoratorSerializer(program, invocation_site=invocation_site)
    records: List[DecoratorRecord] = []
    for declaration in walk_declarations(program):
        for decorator in declaration.decorators:
            records.append(serializer.serialize(declaration, decorator))
    return records


__all__ = [
    "DecoratorSerializer",
    "extract_parameters",
    "is_retained_value",
    "resolve_decorators",
    "walk_declarations",
]
