"""Configuration loader for the slpg CLI."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any

import yaml

from core.authz.evaluator import DEFAULT_OPA_URL
from core.constants import CONTEXT_OUTPUT_PATH, POLICY_OUTPUT_PATH
from core.context import DEFAULT_ROLE_MAP

DEFAULTS = {
    "serverless_config": "serverless.yml",
    "output_path": str(POLICY_OUTPUT_PATH),
    "context_output_path": str(CONTEXT_OUTPUT_PATH),
    "permission_catalog": None,
    "default_format": "json",
    "opa_url": DEFAULT_OPA_URL,
}


@dataclass(slots=True)
class Settings:
    serverless_config: str = DEFAULTS["serverless_config"]
    output_path: str = DEFAULTS["output_path"]
    context_output_path: str = DEFAULTS["context_output_path"]
    permission_catalog: str | None = DEFAULTS["permission_catalog"]
    default_format: str = DEFAULTS["default_format"]
    opa_url: str = DEFAULTS["opa_url"]
    role_map: dict[str, str] = field(default_factory=lambda: dict(DEFAULT_ROLE_MAP))

    @classmethod
    def from_mapping(cls, data: dict[str, Any]) -> "Settings":
        role_map = data.get("role_map", DEFAULT_ROLE_MAP)
        if not isinstance(role_map, dict):
            raise ValueError("role_map must be a mapping of email to role.")
        return cls(
            serverless_config=str(data.get("serverless_config", DEFAULTS["serverless_config"])),
            output_path=str(data.get("output_path", DEFAULTS["output_path"])),
            context_output_path=str(data.get("context_output_path", DEFAULTS["context_output_path"])),
            permission_catalog=data.get("permission_catalog", DEFAULTS["permission_catalog"]),
            default_format=data.get("default_format", DEFAULTS["default_format"]),
            opa_url=data.get("opa_url", DEFAULTS["opa_url"]),
            role_map={str(email): str(role) for email, role in role_map.items()},
        )

    def merge_cli(
        self,
        format_override: str | None = None,
        output_path: str | None = None,
        permission_catalog: str | None = None,
        opa_url: str | None = None,
    ) -> "Settings":
        return replace(
            self,
            default_format=format_override or self.default_format,
            output_path=output_path or self.output_path,
            permission_catalog=permission_catalog or self.permission_catalog,
            opa_url=opa_url or self.opa_url,
            role_map=dict(self.role_map),
        )


def load_settings(path: Path) -> Settings:
    if not path.exists():
        return Settings()

    with path.open("r", encoding="utf-8") as handle:
        data = yaml.safe_load(handle) or {}

    if not isinstance(data, dict):
        raise ValueError("Configuration file must be a mapping of keys to values.")

    return Settings.from_mapping(data)


__all__ = ["Settings", "load_settings"]
