"""Infer the AWS services a serverless definition relies on."""

from __future__ import annotations

import json
from typing import Callable, Iterable, Sequence

from core.models import ServerlessConfig

ServiceId = str
DetectionRule = Callable[[ServerlessConfig], Iterable[ServiceId]]

# Always needed to deploy a serverless stack.
BASELINE_SERVICES: tuple[ServiceId, ...] = ("cloudformation", "apigateway", "iam", "sts")

RESOURCE_TYPE_PREFIXES: dict[str, ServiceId] = {
    "AWS::S3::": "s3",
    "AWS::DynamoDB::": "dynamodb",
    "AWS::EC2::": "ec2",
    "AWS::RDS::": "rds",
    "AWS::Lambda::": "lambda",
    "AWS::Logs::": "logs",
    "AWS::SQS::": "sqs",
    "AWS::SNS::": "sns",
}

# Matched case-sensitively against provider.environment values.
ENVIRONMENT_TOKENS: dict[str, ServiceId] = {
    "dynamodb": "dynamodb",
}

# Matched against the lower-cased JSON rendering of the custom section.
CUSTOM_TOKENS: tuple[tuple[str, ServiceId], ...] = (
    ("s3", "s3"),
    ("dynamodb", "dynamodb"),
    ("rds", "rds"),
    ("ec2", "ec2"),
    ("vpc", "ec2"),
)


def baseline_services(_config: ServerlessConfig) -> tuple[ServiceId, ...]:
    return BASELINE_SERVICES


def function_services(config: ServerlessConfig) -> tuple[ServiceId, ...]:
    return ("lambda",) if config.functions else ()


def resource_type_services(config: ServerlessConfig) -> list[ServiceId]:
    found: list[ServiceId] = []
    for definition in config.resources.definitions.values():
        if not isinstance(definition, dict):
            continue
        resource_type = definition.get("Type")
        if not isinstance(resource_type, str):
            continue
        for prefix, service in RESOURCE_TYPE_PREFIXES.items():
            if resource_type.startswith(prefix):
                found.append(service)
                break
    return found


def vpc_services(config: ServerlessConfig) -> tuple[ServiceId, ...]:
    # An empty `vpc: {}` block still counts as present.
    vpc = config.provider.vpc
    present = vpc is not None and vpc is not False and vpc != ""
    return ("ec2",) if present else ()


def environment_services(config: ServerlessConfig) -> list[ServiceId]:
    found: list[ServiceId] = []
    for value in config.provider.environment.values():
        if not isinstance(value, str):
            continue
        for token, service in ENVIRONMENT_TOKENS.items():
            if token in value:
                found.append(service)
    return found


def custom_section_services(config: ServerlessConfig) -> list[ServiceId]:
    if not config.custom:
        return []
    text = json.dumps(config.custom, default=str).lower()
    return [service for token, service in CUSTOM_TOKENS if token in text]


DEFAULT_RULES: tuple[DetectionRule, ...] = (
    baseline_services,
    function_services,
    resource_type_services,
    vpc_services,
    environment_services,
    custom_section_services,
)


class ServiceDetector:
    """Fold independent detection rules into one ordered set of services."""

    def __init__(self, rules: Sequence[DetectionRule] | None = None) -> None:
        self.rules = tuple(rules) if rules is not None else DEFAULT_RULES

    def detect(self, config: ServerlessConfig) -> tuple[ServiceId, ...]:
        """Return unique service ids in first-detection order."""
        contributions = (service for rule in self.rules for service in rule(config))
        return tuple(dict.fromkeys(contributions))


__all__ = [
    "BASELINE_SERVICES",
    "CUSTOM_TOKENS",
    "DEFAULT_RULES",
    "ENVIRONMENT_TOKENS",
    "RESOURCE_TYPE_PREFIXES",
    "DetectionRule",
    "ServiceDetector",
    "ServiceId",
    "baseline_services",
    "custom_section_services",
    "environment_services",
    "function_services",
    "resource_type_services",
    "vpc_services",
]
