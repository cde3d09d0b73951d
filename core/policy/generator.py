"""Assemble a least-privilege policy from detected services."""

from __future__ import annotations

from typing import Iterable, Tuple

from core.detection.services import ServiceDetector
from core.inference.arn_rules import ArnRuleRegistry, NameScope
from core.inference.permissions import PermissionCatalog
from core.models import POLICY_VERSION, PolicyDoc, PolicyStatement, ServerlessConfig

# Appended to every policy to cover anything the detectors miss.
CATCH_ALL_RESOURCE = "*"


class PolicyGenerator:
    """Compose a single-statement policy document for a set of services."""

    def __init__(self, catalog: PermissionCatalog, arn_rules: ArnRuleRegistry | None = None) -> None:
        self.catalog = catalog
        self.arn_rules = arn_rules or ArnRuleRegistry()

    def build(self, services: Iterable[str], scope: NameScope) -> PolicyDoc:
        detected = list(services)
        statement = PolicyStatement(  # type: ignore[arg-type]
            effect="Allow",
            actions=self.collect_actions(detected),
            resources=self.collect_resources(detected, scope),
        )
        return PolicyDoc(version=POLICY_VERSION, statements=[statement])  # type: ignore[arg-type]

    def collect_actions(self, services: Iterable[str]) -> list[str]:
        actions: set[str] = set()
        for service in services:
            actions.update(self.catalog.actions_for(service) or ())
        return sorted(actions)

    def collect_resources(self, services: Iterable[str], scope: NameScope) -> list[str]:
        resources = self.arn_rules.build_all(services, scope)
        resources.append(CATCH_ALL_RESOURCE)
        return list(dict.fromkeys(resources))


def generate_policy(
    config: ServerlessConfig,
    catalog: PermissionCatalog,
    detector: ServiceDetector | None = None,
    arn_rules: ArnRuleRegistry | None = None,
) -> Tuple[tuple[str, ...], PolicyDoc]:
    """Run detection and assembly for ``config``."""
    services = (detector or ServiceDetector()).detect(config)
    policy = PolicyGenerator(catalog, arn_rules).build(services, NameScope.from_config(config))
    return services, policy


__all__ = ["CATCH_ALL_RESOURCE", "PolicyGenerator", "generate_policy"]
