"""Parsing of ``/** ... */`` documentation comments."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Dict, List, Optional

_PARAM_TAG = re.compile(r"@param\s+(?:\{[^}]*\}\s*)?\[?([\w$]+)[^\s\]]*\]?\s*(?:-\s*)?(.*)")


@dataclass
class DocComment:
    """Description text and ``@param`` documentation of one doc comment."""

    description: str = ""
    params: Dict[str, str] = field(default_factory=dict)


def parse_doc_comment(text: str) -> DocComment:
    body = text.strip()
    if body.startswith("/**"):
        body = body[3:]
    if body.endswith("*/"):
        body = body[:-2]

    description: List[str] = []
    params: Dict[str, str] = {}
    current: Optional[str] = None
    in_tags = False
    for raw in body.splitlines():
        line = raw.strip()
        if line.startswith("*"):
            line = line[1:]
            if line.startswith(" "):
                line = line[1:]
        stripped = line.strip()
        if stripped.startswith("@"):
            in_tags = True
            current = None
            match = _PARAM_TAG.match(stripped)
            if match:
                current = match.group(1)
                params[current] = match.group(2).strip()
            continue
        if in_tags:
            # continuation of the previous tag
            if current is not None and stripped:
                params[current] = f"{params[current]} {stripped}".strip()
            continue
        description.append(line.rstrip())

    return DocComment(description="\n".join(description).strip(), params=params)


__all__ = ["DocComment", "parse_doc_comment"]
