"""Policy assembly tests."""

from __future__ import annotations

import pytest

from core.detection.services import BASELINE_SERVICES
from core.inference.arn_rules import NameScope
from core.inference.permissions import PermissionCatalog, load_catalog
from core.models import ServerlessConfig
from core.policy.generator import CATCH_ALL_RESOURCE, PolicyGenerator, generate_policy

SCOPE = NameScope(service="myapp", stage="dev", region="us-east-1")


def _catalog() -> PermissionCatalog:
    return PermissionCatalog(
        {
            "s3": ["s3:PutObject", "s3:GetObject"],
            "lambda": ["lambda:InvokeFunction", "s3:GetObject"],
            "iam": ["iam:PassRole"],
        }
    )


def _config(**data) -> ServerlessConfig:
    return ServerlessConfig.model_validate({"service": "myapp", "provider": {"stage": "dev", "region": "us-east-1"}, **data})


def test_actions_are_sorted_and_unique():
    policy = PolicyGenerator(_catalog()).build(["s3", "lambda", "iam"], SCOPE)
    actions = policy.statements[0].actions
    assert actions == ["iam:PassRole", "lambda:InvokeFunction", "s3:GetObject", "s3:PutObject"]


def test_services_missing_from_catalog_contribute_nothing():
    policy = PolicyGenerator(_catalog()).build(["rds", "sts"], SCOPE)
    assert policy.statements[0].actions == []


def test_catch_all_resource_is_always_last():
    policy = PolicyGenerator(_catalog()).build([], SCOPE)
    assert policy.statements[0].resources == [CATCH_ALL_RESOURCE]

    policy = PolicyGenerator(_catalog()).build(["s3"], SCOPE)
    assert policy.statements[0].resources[-1] == "*"


def test_resources_are_deduplicated_in_detection_order():
    generator = PolicyGenerator(_catalog())
    resources = generator.collect_resources(["s3", "lambda", "s3"], SCOPE)
    assert resources == [
        "arn:aws:s3:::myapp-dev-*",
        "arn:aws:s3:::myapp-dev-*/*",
        "arn:aws:lambda:us-east-1:*:function:myapp-dev-*",
        "arn:aws:lambda:us-east-1:*:layer:myapp-dev-*",
        "*",
    ]


def test_single_allow_statement_document_shape():
    policy = PolicyGenerator(_catalog()).build(["s3"], SCOPE)
    document = policy.to_document()
    assert document["Version"] == "2012-10-17"
    assert len(document["Statement"]) == 1
    statement = document["Statement"][0]
    assert list(statement) == ["Effect", "Action", "Resource"]
    assert statement["Effect"] == "Allow"


def test_generate_policy_dynamodb_scenario():
    config = _config(resources={"Resources": {"Tbl": {"Type": "AWS::DynamoDB::Table"}}})
    services, policy = generate_policy(config, load_catalog())

    assert set(services) == {"cloudformation", "apigateway", "iam", "sts", "dynamodb"}
    resources = policy.statements[0].resources
    assert "arn:aws:dynamodb:us-east-1:*:table/myapp-dev-*" in resources
    assert "arn:aws:dynamodb:us-east-1:*:table/myapp-dev-*/index/*" in resources
    assert "*" in resources
    assert not any(arn.startswith(("arn:aws:s3", "arn:aws:ec2")) for arn in resources)


def test_generate_policy_s3_bucket_scenario():
    config = _config(resources={"Resources": {"Bucket": {"Type": "AWS::S3::Bucket"}}})
    services, policy = generate_policy(config, load_catalog())

    assert "s3" in services
    resources = policy.statements[0].resources
    assert "arn:aws:s3:::myapp-dev-*" in resources
    assert "arn:aws:s3:::myapp-dev-*/*" in resources


def test_generate_policy_vpc_adds_network_patterns():
    services, policy = generate_policy(_config(provider={"vpc": True}), load_catalog())
    assert "ec2" in services
    assert "arn:aws:ec2:us-east-1:*:subnet/*" in policy.statements[0].resources
    assert any(action.startswith("ec2:") for action in policy.statements[0].actions)


@pytest.mark.parametrize(
    "data",
    [
        {},
        {"functions": {"a": {}}, "custom": {"bucket": "s3", "db": "dynamodb"}},
        {"provider": {"vpc": True, "environment": {"T": "dynamodb"}}},
    ],
)
def test_invariants_hold_for_any_input(data):
    _, policy = generate_policy(_config(**data), load_catalog())
    statement = policy.statements[0]
    assert statement.actions == sorted(set(statement.actions))
    assert len(statement.resources) == len(set(statement.resources))
    assert "*" in statement.resources


def test_generation_is_idempotent():
    config = _config(functions={"hello": {}}, resources={"Resources": {"B": {"Type": "AWS::S3::Bucket"}}})
    first = generate_policy(config, load_catalog())[1].to_document()
    second = generate_policy(config, load_catalog())[1].to_document()
    assert first == second


def test_baseline_policy_scopes_stack_and_roles():
    services, policy = generate_policy(_config(), load_catalog())
    assert services == BASELINE_SERVICES
    assert policy.statements[0].resources == [
        "arn:aws:cloudformation:us-east-1:*:stack/myapp-dev/*",
        "arn:aws:cloudformation:us-east-1:*:stack/myapp-dev-*/*",
        "arn:aws:iam::*:role/myapp-dev-*",
        "arn:aws:iam::*:role/*-myapp-dev-*",
        "*",
    ]
    assert policy.services == ["apigateway", "cloudformation", "iam", "sts"]
