"""Static mapping from AWS service to the actions a deployment needs."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Any, Iterable, Mapping

import yaml

DEFAULT_CATALOG_PATH = Path(__file__).resolve().parent.parent / "data" / "resource_map.json"


@dataclass(frozen=True, slots=True)
class PermissionCatalog:
    """Read-only lookup of the actions each service requires."""

    service_actions: Mapping[str, tuple[str, ...]] = field(default_factory=dict)

    def __post_init__(self) -> None:
        frozen = {service: tuple(actions) for service, actions in self.service_actions.items()}
        object.__setattr__(self, "service_actions", MappingProxyType(frozen))

    def actions_for(self, service: str) -> tuple[str, ...] | None:
        """Return the actions for ``service`` or None when it is not catalogued."""
        return self.service_actions.get(service)

    def extend(self, service: str, actions: Iterable[str]) -> "PermissionCatalog":
        """Return a copy with ``actions`` added to ``service``."""
        merged = dict(self.service_actions)
        merged[service] = tuple(dict.fromkeys([*merged.get(service, ()), *actions]))
        return PermissionCatalog(merged)

    @property
    def services(self) -> list[str]:
        return sorted(self.service_actions)

    @classmethod
    def from_mapping(cls, data: Any) -> "PermissionCatalog":
        if not isinstance(data, dict):
            raise ValueError("Permission catalog must be a mapping of service to action list.")
        catalog: dict[str, tuple[str, ...]] = {}
        for service, actions in data.items():
            if not isinstance(service, str):
                raise ValueError(f"Permission catalog key {service!r} is not a string.")
            if not isinstance(actions, list) or not all(isinstance(action, str) for action in actions):
                raise ValueError(f"Permission catalog entry for {service!r} must be a list of strings.")
            catalog[service] = tuple(actions)
        return cls(catalog)


def load_catalog(path: Path | str | None = None) -> PermissionCatalog:
    """Load a catalog from YAML or JSON; the bundled map is used by default."""
    catalog_path = Path(path) if path is not None else DEFAULT_CATALOG_PATH
    if not catalog_path.exists():
        raise FileNotFoundError(catalog_path)

    with catalog_path.open("r", encoding="utf-8") as handle:
        data = yaml.safe_load(handle)
    return PermissionCatalog.from_mapping(data)


__all__ = ["DEFAULT_CATALOG_PATH", "PermissionCatalog", "load_catalog"]
