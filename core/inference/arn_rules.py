"""Resource ARN templates scoped to a serverless naming convention."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Dict, Iterable, List

from core.models import ServerlessConfig

# Generated policies never resolve a concrete account.
ACCOUNT_WILDCARD = "*"


@dataclass(frozen=True, slots=True)
class NameScope:
    """Naming inputs substituted into every template."""

    service: str
    stage: str
    region: str
    account: str = ACCOUNT_WILDCARD

    @property
    def prefix(self) -> str:
        return f"{self.service}-{self.stage}"

    @classmethod
    def from_config(cls, config: ServerlessConfig) -> "NameScope":
        return cls(service=config.service, stage=config.stage, region=config.region)


ArnTemplate = Callable[[NameScope], List[str]]


@dataclass(slots=True)
class ArnRuleRegistry:
    """Registry of ARN template functions keyed by service id."""

    service_rules: Dict[str, list[ArnTemplate]] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not self.service_rules:
            self._register_defaults()

    def build(self, service: str, scope: NameScope) -> list[str]:
        """Return the patterns for ``service``; unknown services yield none."""
        patterns: list[str] = []
        for template in self.service_rules.get(service, []):
            patterns.extend(template(scope))
        return patterns

    def build_all(self, services: Iterable[str], scope: NameScope) -> list[str]:
        patterns: list[str] = []
        for service in services:
            patterns.extend(self.build(service, scope))
        return patterns

    def register(self, service: str, template: ArnTemplate) -> None:
        self.service_rules.setdefault(service, []).append(template)

    # ------------------------------------------------------------------
    def _register_defaults(self) -> None:
        self.register("s3", s3_arns)
        self.register("lambda", lambda_arns)
        self.register("dynamodb", dynamodb_arns)
        self.register("logs", logs_arns)
        self.register("cloudformation", cloudformation_arns)
        self.register("iam", iam_arns)
        self.register("ec2", ec2_arns)
        self.register("rds", rds_arns)
        self.register("sqs", sqs_arns)
        self.register("sns", sns_arns)


# ---------------------------------------------------------------------------
# Service-specific templates


def s3_arns(scope: NameScope) -> list[str]:
    return [
        f"arn:aws:s3:::{scope.prefix}-*",
        f"arn:aws:s3:::{scope.prefix}-*/*",
    ]


def lambda_arns(scope: NameScope) -> list[str]:
    base = f"arn:aws:lambda:{scope.region}:{scope.account}"
    return [
        f"{base}:function:{scope.prefix}-*",
        f"{base}:layer:{scope.prefix}-*",
    ]


def dynamodb_arns(scope: NameScope) -> list[str]:
    table = f"arn:aws:dynamodb:{scope.region}:{scope.account}:table/{scope.prefix}-*"
    return [table, f"{table}/index/*"]


def logs_arns(scope: NameScope) -> list[str]:
    group = f"arn:aws:logs:{scope.region}:{scope.account}:log-group:/aws/lambda/{scope.prefix}-*"
    return [group, f"{group}:*"]


def cloudformation_arns(scope: NameScope) -> list[str]:
    base = f"arn:aws:cloudformation:{scope.region}:{scope.account}:stack"
    return [
        f"{base}/{scope.prefix}/*",
        f"{base}/{scope.prefix}-*/*",
    ]


def iam_arns(scope: NameScope) -> list[str]:
    return [
        f"arn:aws:iam::{scope.account}:role/{scope.prefix}-*",
        f"arn:aws:iam::{scope.account}:role/*-{scope.prefix}-*",
    ]


def ec2_arns(scope: NameScope) -> list[str]:
    # Network resources are not named after the service.
    base = f"arn:aws:ec2:{scope.region}:{scope.account}"
    return [
        f"{base}:security-group/*",
        f"{base}:network-interface/*",
        f"{base}:vpc/*",
        f"{base}:subnet/*",
    ]


def rds_arns(scope: NameScope) -> list[str]:
    base = f"arn:aws:rds:{scope.region}:{scope.account}"
    return [
        f"{base}:db:{scope.prefix}-*",
        f"{base}:subgrp:{scope.prefix}-*",
        f"{base}:pg:{scope.prefix}-*",
    ]


def sqs_arns(scope: NameScope) -> list[str]:
    return [f"arn:aws:sqs:{scope.region}:{scope.account}:{scope.prefix}-*"]


def sns_arns(scope: NameScope) -> list[str]:
    return [f"arn:aws:sns:{scope.region}:{scope.account}:{scope.prefix}-*"]


__all__ = [
    "ACCOUNT_WILDCARD",
    "ArnRuleRegistry",
    "ArnTemplate",
    "NameScope",
    "cloudformation_arns",
    "dynamodb_arns",
    "ec2_arns",
    "iam_arns",
    "lambda_arns",
    "logs_arns",
    "rds_arns",
    "s3_arns",
    "sns_arns",
    "sqs_arns",
]
