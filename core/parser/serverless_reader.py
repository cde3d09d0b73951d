"""Load serverless.yml definitions from the local filesystem."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from core.models import ServerlessConfig

DEFAULT_CONFIG_PATH = Path("serverless.yml")


class ServerlessConfigError(Exception):
    """Base class for errors raised while loading a serverless definition."""

    def __init__(self, message: str, path: Path | str | None = None) -> None:
        super().__init__(message)
        self.path = path


class ConfigNotFound(ServerlessConfigError):
    """The requested definition file does not exist."""


class ConfigParseError(ServerlessConfigError):
    """The definition exists but is not a usable serverless document."""


class CloudFormationLoader(yaml.SafeLoader):
    """Safe loader that understands CloudFormation short-form intrinsic tags."""


def _construct_intrinsic(loader: yaml.SafeLoader, tag_suffix: str, node: yaml.Node) -> dict[str, Any]:
    name = "Ref" if tag_suffix == "Ref" else f"Fn::{tag_suffix}"
    if isinstance(node, yaml.ScalarNode):
        value: Any = loader.construct_scalar(node)
        if tag_suffix == "GetAtt" and isinstance(value, str):
            value = value.split(".", 1)
    elif isinstance(node, yaml.SequenceNode):
        value = loader.construct_sequence(node, deep=True)
    else:
        value = loader.construct_mapping(node, deep=True)
    return {name: value}


CloudFormationLoader.add_multi_constructor("!", _construct_intrinsic)


def parse_serverless_config(text: str, source: Path | str = "<string>") -> ServerlessConfig:
    """Parse an in-memory serverless document."""
    try:
        data = yaml.load(text, Loader=CloudFormationLoader)  # noqa: S506 - SafeLoader subclass
    except yaml.YAMLError as exc:
        raise ConfigParseError(f"Error reading {source}: {exc}", source) from exc

    if not isinstance(data, dict):
        raise ConfigParseError(f"Error reading {source}: document must be a mapping", source)

    try:
        return ServerlessConfig.model_validate(data)
    except ValidationError as exc:
        raise ConfigParseError(f"Error reading {source}: {exc}", source) from exc


def load_serverless_config(path: Path | str | None = None) -> ServerlessConfig:
    """Read and parse ``path`` (``./serverless.yml`` when omitted)."""
    config_path = Path(path) if path is not None else DEFAULT_CONFIG_PATH
    if not config_path.is_file():
        raise ConfigNotFound(f"{config_path} not found", config_path)

    try:
        text = config_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise ConfigParseError(f"Error reading {config_path}: {exc}", config_path) from exc
    return parse_serverless_config(text, source=config_path)


__all__ = [
    "CloudFormationLoader",
    "ConfigNotFound",
    "ConfigParseError",
    "DEFAULT_CONFIG_PATH",
    "ServerlessConfigError",
    "load_serverless_config",
    "parse_serverless_config",
]
