"""CLI command tests."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from cli import config as cli_config
from cli.main import app as cli_app

SERVERLESS = """\
service: myapp
provider:
  name: aws
  stage: dev
  region: us-east-1
functions:
  hello:
    handler: app.handler
resources:
  Resources:
    Tbl:
      Type: AWS::DynamoDB::Table
"""


@pytest.fixture
def workdir(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    return tmp_path


def test_generate_writes_default_output(workdir, capsys):
    (workdir / "serverless.yml").write_text(SERVERLESS, encoding="utf-8")

    exit_code = cli_app(["generate"])

    assert exit_code == 0
    policy = json.loads((workdir / "output" / "generated-policy.json").read_text(encoding="utf-8"))
    statement = policy["Statement"][0]
    assert policy["Version"] == "2012-10-17"
    assert statement["Effect"] == "Allow"
    assert "arn:aws:dynamodb:us-east-1:*:table/myapp-dev-*/index/*" in statement["Resource"]
    assert statement["Resource"][-1] == "*"
    assert statement["Action"] == sorted(set(statement["Action"]))

    captured = capsys.readouterr().out
    assert "Detected services: cloudformation, apigateway, iam, sts, lambda, dynamodb" in captured
    assert "Policy saved to:" in captured


def test_generate_accepts_path_and_output(workdir):
    source = workdir / "infra" / "app.yml"
    source.parent.mkdir()
    source.write_text(SERVERLESS, encoding="utf-8")
    target = workdir / "out" / "policy.json"

    assert cli_app(["generate", str(source), "--output", str(target)]) == 0
    assert target.exists()


def test_generate_is_byte_identical_across_runs(workdir):
    (workdir / "serverless.yml").write_text(SERVERLESS, encoding="utf-8")
    output_path = workdir / "output" / "generated-policy.json"

    assert cli_app(["generate"]) == 0
    first = output_path.read_bytes()
    assert cli_app(["generate"]) == 0
    assert output_path.read_bytes() == first


def test_generate_missing_file_exits_one_without_output(workdir, capsys):
    exit_code = cli_app(["generate"])

    assert exit_code == 1
    assert not (workdir / "output").exists()
    assert "not found" in capsys.readouterr().err


def test_generate_parse_error_exits_one_without_output(workdir):
    (workdir / "serverless.yml").write_text("service: [broken\n", encoding="utf-8")

    assert cli_app(["generate"]) == 1
    assert not (workdir / "output").exists()


def test_generate_uses_injected_catalog(workdir):
    (workdir / "serverless.yml").write_text(SERVERLESS, encoding="utf-8")
    catalog = workdir / "catalog.yml"
    catalog.write_text("dynamodb:\n  - dynamodb:GetItem\n  - dynamodb:GetItem\n", encoding="utf-8")

    assert cli_app(["generate", "--catalog", str(catalog)]) == 0
    policy = json.loads((workdir / "output" / "generated-policy.json").read_text(encoding="utf-8"))
    assert policy["Statement"][0]["Action"] == ["dynamodb:GetItem"]


def test_settings_file_overrides_output_path(workdir):
    (workdir / "serverless.yml").write_text(SERVERLESS, encoding="utf-8")
    (workdir / "slpg.yml").write_text("output_path: build/policy.json\n", encoding="utf-8")

    assert cli_app(["generate"]) == 0
    assert (workdir / "build" / "policy.json").exists()


def test_settings_must_be_mapping(tmp_path):
    path = tmp_path / "slpg.yml"
    path.write_text("- not\n- a mapping\n", encoding="utf-8")
    with pytest.raises(ValueError):
        cli_config.load_settings(path)


def test_settings_defaults_when_missing(tmp_path):
    settings = cli_config.load_settings(tmp_path / "absent.yml")
    assert settings.output_path == str(Path("output") / "generated-policy.json")
    assert settings.role_map["qa@gmail.com"] == "qa"


def test_context_command_writes_file(workdir, monkeypatch, capsys):
    monkeypatch.setattr(
        "core.context.run_git",
        lambda args: "main" if args[0] == "rev-parse" else "'devops@gmail.com'",
    )
    monkeypatch.delenv("ENVIRONMENT", raising=False)

    assert cli_app(["context"]) == 0
    saved = json.loads((workdir / "output" / "detected-context.json").read_text(encoding="utf-8"))
    assert saved == {
        "userEmail": "devops@gmail.com",
        "userRole": "devops",
        "branch": "main",
        "environment": "deploy",
        "pipelineStage": "deploy",
    }
    assert "Context saved to:" in capsys.readouterr().out


class _Response:
    def __init__(self, payload):
        self.payload = payload

    def raise_for_status(self):
        return None

    def json(self):
        return self.payload


def test_evaluate_reads_context_file(workdir, monkeypatch, capsys):
    calls = []

    def fake_post(url, json=None, timeout=None):
        calls.append((url, json))
        return _Response({"result": True})

    monkeypatch.setattr("core.authz.evaluator.requests.post", fake_post)
    monkeypatch.delenv("OPA_URL", raising=False)
    context_path = workdir / "ctx.json"
    context_path.write_text(
        json.dumps({"userEmail": "qa@gmail.com", "userRole": "qa", "branch": "dev", "environment": "test", "pipelineStage": "test"}),
        encoding="utf-8",
    )

    exit_code = cli_app(["evaluate", "--context", str(context_path), "--url", "http://opa.local/v1/data/cicd/allow"])

    assert exit_code == 0
    assert calls == [
        (
            "http://opa.local/v1/data/cicd/allow",
            {"input": {"user": {"role": "qa"}, "pipeline": {"stage": "test"}, "resource": {"environment": "test"}}},
        )
    ]
    assert "Access granted." in capsys.readouterr().out


def test_evaluate_denied_uses_environment_variables(workdir, monkeypatch, capsys):
    calls = []

    def fake_post(url, json=None, timeout=None):
        calls.append(json)
        return _Response({"result": False})

    monkeypatch.setattr("core.authz.evaluator.requests.post", fake_post)
    monkeypatch.setenv("USER_ROLE", "none")
    monkeypatch.setenv("PIPELINE_STAGE", "deploy")
    monkeypatch.setenv("ENVIRONMENT", "prod")

    assert cli_app(["evaluate", "--role", "admin"]) == 1
    assert calls[0]["input"] == {"user": {"role": "admin"}, "pipeline": {"stage": "deploy"}, "resource": {"environment": "prod"}}
    assert "Access denied." in capsys.readouterr().err
