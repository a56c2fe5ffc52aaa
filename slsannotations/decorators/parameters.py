"""Extraction of literal option values from decorator invocations."""

from __future__ import annotations

from typing import List, Optional

from tree_sitter import Node

from ..compiler.syntax import iter_preorder, literal_value, property_key
from ..models import ParameterRecord, ParameterValue

_PROPERTY_TYPES = frozenset({"pair"})


def is_retained_value(value: Optional[ParameterValue]) -> bool:
    """Decide whether an extracted literal becomes a parameter.

    Zero, the empty string and numbers without a leading integer are dropped,
    so ``{timeout: 0}`` yields no parameter at all rather than a zero value.
    """
    if value is None:
        return False
    if isinstance(value, int):
        return value != 0
    return value != ""


def extract_parameters(node: Node) -> List[ParameterRecord]:
    """Collect ``key: literal`` properties found anywhere under ``node``.

    Nested object literals are flattened into the same list, in source order.
    """
    parameters: List[ParameterRecord] = []
    for candidate in iter_preorder(node):
        if candidate.type not in _PROPERTY_TYPES:
            continue
        record = _property_parameter(candidate)
        if record is not None:
            parameters.append(record)
    return parameters


def _property_parameter(pair: Node) -> Optional[ParameterRecord]:
    # The value node decides: {"timeout": 30} yields 30, while {"flag": true}
    # and {size: someConst} yield nothing.
    value_node = pair.child_by_field_name("value")
    if value_node is None:
        return None
    is_literal, value = literal_value(value_node)
    if not is_literal or not is_retained_value(value):
        return None
    return ParameterRecord(name=property_key(pair), value=value)  # type: ignore[arg-type]


__all__ = ["extract_parameters", "is_retained_value"]
