"""Core data models shared across sls-annotations components."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Union

ParameterValue = Union[int, str]


class InvocationSite(str, Enum):
    """Where the serializer looks for the call whose arguments become parameters."""

    # First call expression anywhere under the annotated declaration.
    DECLARATION = "declaration"
    # First call inside the decorator itself, falling back to DECLARATION.
    DECORATOR = "decorator"


@dataclass
class SymbolRecord:
    """Name, doc comment and display type of a signature parameter."""

    name: str
    documentation: str
    type: str

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "documentation": self.documentation, "type": self.type}


@dataclass
class SignatureRecord:
    """A call or construct signature of a resolved decorator symbol."""

    parameters: List[SymbolRecord]
    return_type: str
    documentation: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "parameters": [parameter.to_dict() for parameter in self.parameters],
            "returnType": self.return_type,
            "documentation": self.documentation,
        }


@dataclass
class ParameterRecord:
    """Literal value assigned to a named property in a decorator invocation."""

    name: str
    value: ParameterValue

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "value": self.value}


@dataclass
class DecoratorRecord:
    """One resolved decorator together with the decorators nested under it."""

    name: str
    documentation: str
    type: str
    source_file: str
    constructors: List[SignatureRecord] = field(default_factory=list)
    parameters: List[ParameterRecord] = field(default_factory=list)
    children: List["DecoratorRecord"] = field(default_factory=list)

    def options(self) -> Dict[str, ParameterValue]:
        """Flatten parameters into a mapping; later names override earlier ones."""
        return {parameter.name: parameter.value for parameter in self.parameters}

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "documentation": self.documentation,
            "type": self.type,
            "constructors": [signature.to_dict() for signature in self.constructors],
            "parameters": [parameter.to_dict() for parameter in self.parameters],
            "children": [child.to_dict() for child in self.children],
            "sourceFile": self.source_file,
        }


@dataclass
class HandlerReference:
    """Shallow view of a nested decorator attached to a registry entry."""

    name: str
    options: Dict[str, ParameterValue] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "options": dict(self.options)}


@dataclass
class ConfigEntry:
    """A function registry entry generated from a handler decorator."""

    name: str
    handler_path: str
    display_name: str
    options: Dict[str, Any] = field(default_factory=dict)
    handlers: List[HandlerReference] = field(default_factory=list)

    def as_function(self) -> Dict[str, Any]:
        """Render the entry in the shape stored in the service function registry."""
        function: Dict[str, Any] = {"handler": self.handler_path, "name": self.display_name}
        function.update(self.options)
        if self.handlers:
            function["handlers"] = [handler.to_dict() for handler in self.handlers]
        return function
