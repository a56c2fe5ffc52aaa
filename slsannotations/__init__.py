"""Collect decorated TypeScript handlers into a serverless function registry."""

from .config import AnnotationsConfig, ConfigError, ServiceConfig, load_config
from .errors import CollectionError, DuplicateName, MissingName, MissingOptions, UnresolvedSymbol
from .mapper import HandlerMapper
from .models import ConfigEntry, DecoratorRecord, InvocationSite, ParameterRecord
from .plugin import AnnotationsPlugin

__all__ = [
    "AnnotationsConfig",
    "AnnotationsPlugin",
    "CollectionError",
    "ConfigEntry",
    "ConfigError",
    "DecoratorRecord",
    "DuplicateName",
    "HandlerMapper",
    "InvocationSite",
    "MissingName",
    "MissingOptions",
    "ParameterRecord",
    "ServiceConfig",
    "UnresolvedSymbol",
    "load_config",
]
