"""Configuration loading from the service's serverless.yml."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import yaml

from .models import InvocationSite

_CONFIG_NAMES = ("serverless.yml", "serverless.yaml")

DEFAULT_PATTERN = "**/*.ts"
DEFAULT_IGNORE = ("src/shared",)
DEFAULT_HANDLERS: Dict[str, Dict[str, Any]] = {"handler": {}}


class ConfigError(RuntimeError):
    """Raised when the configuration file cannot be parsed."""


class _ServerlessLoader(yaml.SafeLoader):
    """Safe loader that tolerates CloudFormation short-form tags (``!Ref``)."""


def _construct_tagged(loader: yaml.SafeLoader, tag_suffix: str, node: yaml.Node) -> Any:
    if isinstance(node, yaml.ScalarNode):
        return loader.construct_scalar(node)
    if isinstance(node, yaml.SequenceNode):
        return loader.construct_sequence(node, deep=True)
    return loader.construct_mapping(node, deep=True)  # type: ignore[arg-type]


_ServerlessLoader.add_multi_constructor("!", _construct_tagged)


@dataclass
class AnnotationsConfig:
    """Settings from ``custom.annotations``."""

    pattern: str = DEFAULT_PATTERN
    ignore: List[str] = field(default_factory=lambda: list(DEFAULT_IGNORE))
    handlers: Dict[str, Dict[str, Any]] = field(
        default_factory=lambda: {name: dict(bag) for name, bag in DEFAULT_HANDLERS.items()}
    )
    invocation_site: InvocationSite = InvocationSite.DECLARATION


@dataclass
class ServiceConfig:
    """The parts of a serverless service definition the collector reads and updates."""

    root: Path
    service: str
    provider_stage: Optional[str] = None
    functions: Dict[str, Any] = field(default_factory=dict)
    annotations: AnnotationsConfig = field(default_factory=AnnotationsConfig)


def load_config(config_path: Path) -> ServiceConfig:
    """Load the service configuration; a missing file yields defaults."""
    config_file = _resolve_config_path(Path(config_path))
    root = config_file.parent.resolve()

    if not config_file.exists():
        return ServiceConfig(root=root, service=root.name)

    data = _read_config(config_file)
    if not isinstance(data, dict):
        raise ConfigError(f"{config_file.name} must contain a mapping at the root")

    service = _service_name(data.get("service")) or root.name

    provider = _as_dict(data.get("provider"))
    provider_stage = _as_str(provider.get("stage"))

    functions_data = data.get("functions")
    if functions_data is None:
        functions: Dict[str, Any] = {}
    elif isinstance(functions_data, dict):
        functions = dict(functions_data)
    else:
        raise ConfigError("functions must be a mapping of function names")

    custom = _as_dict(data.get("custom"))
    annotations_data = custom.get("annotations")
    if annotations_data is not None and not isinstance(annotations_data, dict):
        raise ConfigError("custom.annotations must be a mapping")

    return ServiceConfig(
        root=root,
        service=service,
        provider_stage=provider_stage,
        functions=functions,
        annotations=_parse_annotations(annotations_data or {}),
    )


def _parse_annotations(data: Dict[str, Any]) -> AnnotationsConfig:
    # User keys replace the defaults one by one; nothing is deep-merged.
    config = AnnotationsConfig()

    if "pattern" in data:
        pattern = _as_str(data["pattern"])
        if not pattern:
            raise ConfigError("custom.annotations.pattern must be a non-empty string")
        config.pattern = pattern

    if "ignore" in data:
        config.ignore = _as_str_list(data["ignore"])

    if "handlers" in data:
        handlers = data["handlers"]
        if not isinstance(handlers, dict):
            raise ConfigError("custom.annotations.handlers must map decorator names to options")
        parsed: Dict[str, Dict[str, Any]] = {}
        for name, bag in handlers.items():
            if bag is None:
                bag = {}
            if not isinstance(bag, dict):
                raise ConfigError(f"Default options for handler '{name}' must be a mapping")
            parsed[str(name)] = dict(bag)
        config.handlers = parsed

    if "invocation" in data:
        value = _as_str(data["invocation"])
        try:
            config.invocation_site = InvocationSite(value)
        except ValueError:
            choices = ", ".join(site.value for site in InvocationSite)
            raise ConfigError(
                f"custom.annotations.invocation must be one of: {choices}"
            ) from None

    return config


def _resolve_config_path(config_path: Path) -> Path:
    config_path = config_path.expanduser()
    if config_path.is_dir() or config_path.suffix not in {".yml", ".yaml"}:
        for name in _CONFIG_NAMES:
            candidate = config_path / name
            if candidate.exists():
                return candidate.resolve()
        return (config_path / _CONFIG_NAMES[0]).resolve()
    return config_path.resolve()


def _read_config(path: Path) -> Any:
    text = path.read_text(encoding="utf-8")
    if not text.strip():
        return {}
    try:
        loaded = yaml.load(text, Loader=_ServerlessLoader)  # noqa: S506 - safe loader subclass
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    return loaded or {}


def _service_name(value: Any) -> Optional[str]:
    if isinstance(value, dict):
        return _as_str(value.get("name"))
    return _as_str(value)


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_str(value: Any) -> Optional[str]:
    return str(value) if isinstance(value, (str, int, float, bool)) else None


def _as_str_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, Sequence):
        return [str(item) for item in value if isinstance(item, (str, int, float, bool))]
    return []


__all__ = [
    "AnnotationsConfig",
    "ConfigError",
    "DEFAULT_HANDLERS",
    "DEFAULT_IGNORE",
    "DEFAULT_PATTERN",
    "ServiceConfig",
    "load_config",
]
