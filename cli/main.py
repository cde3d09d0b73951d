"""Command line interface for serverless least-privilege workflows."""

from __future__ import annotations

import argparse
import json
import os
import sys
from pathlib import Path
from typing import Any, Mapping

from cli import config, output
from core.authz.evaluator import PolicyEvaluationError, PolicyEvaluator
from core.context import detect_context
from core.inference.permissions import load_catalog
from core.models import AuthorizationRequest, DeploymentContext
from core.parser.serverless_reader import ServerlessConfigError, load_serverless_config
from core.policy.generator import generate_policy


class CLIError(Exception):
    def __init__(self, message: str, exit_code: int = 2) -> None:
        super().__init__(message)
        self.exit_code = exit_code


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="slpg", description="Serverless least-privilege policy generator")
    parser.add_argument("--settings", type=Path, default=Path("slpg.yml"), help="Path to CLI settings file")

    subparsers = parser.add_subparsers(dest="command", required=True)

    # generate ---------------------------------------------------------------
    gen_cmd = subparsers.add_parser("generate", help="Create an IAM policy from serverless.yml")
    gen_cmd.add_argument("serverless_config", nargs="?", type=Path, help="Path to serverless.yml")
    gen_cmd.add_argument("--catalog", type=Path, help="Permission catalog (YAML or JSON)")
    gen_cmd.add_argument("--output", type=Path, help="Where to write the policy JSON")

    # context ----------------------------------------------------------------
    ctx_cmd = subparsers.add_parser("context", help="Detect the deployment context from git")
    ctx_cmd.add_argument("--output", type=Path, help="Where to write the context JSON")
    ctx_cmd.add_argument("--format", choices=["json", "md", "table"], help="Console format override")

    # evaluate ---------------------------------------------------------------
    eval_cmd = subparsers.add_parser("evaluate", help="Ask the policy engine whether a deployment is allowed")
    eval_cmd.add_argument("--role")
    eval_cmd.add_argument("--stage")
    eval_cmd.add_argument("--environment")
    eval_cmd.add_argument("--context", type=Path, help="Context JSON written by `slpg context`")
    eval_cmd.add_argument("--url", help="Policy engine decision URL")

    return parser


def app(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        settings = config.load_settings(args.settings)

        if args.command == "generate":
            merged = settings.merge_cli(
                output_path=str(args.output) if args.output else None,
                permission_catalog=str(args.catalog) if args.catalog else None,
            )
            return _cmd_generate(args, merged)
        if args.command == "context":
            merged = settings.merge_cli(format_override=args.format)
            return _cmd_context(args, merged)
        if args.command == "evaluate":
            merged = settings.merge_cli(opa_url=args.url or os.environ.get("OPA_URL"))
            return _cmd_evaluate(args, merged)
    except ServerlessConfigError as exc:
        print(exc, file=sys.stderr)
        return 1
    except CLIError as exc:
        print(exc, file=sys.stderr)
        return exc.exit_code
    except Exception as exc:  # pragma: no cover - unexpected errors bubble up
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    return 0


# ---------------------------------------------------------------------------
# Command implementations


def _cmd_generate(args: argparse.Namespace, settings: config.Settings) -> int:
    config_path = args.serverless_config or Path(settings.serverless_config)
    catalog = load_catalog(settings.permission_catalog)

    print(f"Reading {config_path}")
    serverless = load_serverless_config(config_path)
    services, policy = generate_policy(serverless, catalog)
    print(f"Detected services: {', '.join(services)}")

    output_path = Path(settings.output_path)
    output.write_json(policy.to_document(), output_path)
    print(f"\nPolicy saved to: {output_path}")
    return 0


def _cmd_context(args: argparse.Namespace, settings: config.Settings) -> int:
    context = detect_context(role_map=settings.role_map)
    payload = context.model_dump(by_alias=True)
    output.emit(payload, settings.default_format)

    output_path = args.output or Path(settings.context_output_path)
    output.write_json(payload, output_path)
    print(f"Context saved to: {output_path}")
    return 0


def _cmd_evaluate(args: argparse.Namespace, settings: config.Settings) -> int:
    saved = _load_context(args.context) if args.context else None
    request = _authorization_request(args, saved, os.environ)

    evaluator = PolicyEvaluator(url=settings.opa_url)
    try:
        allowed = evaluator.evaluate(request)
    except PolicyEvaluationError as exc:
        raise CLIError(str(exc), exit_code=1) from exc

    if allowed:
        print("Access granted.")
        return 0
    print("Access denied.", file=sys.stderr)
    return 1


# ---------------------------------------------------------------------------
# Helpers


def _load_context(path: Path) -> DeploymentContext:
    if not path.exists():
        raise CLIError(f"Context file {path} not found", exit_code=1)
    data: Any = json.loads(path.read_text(encoding="utf-8"))
    return DeploymentContext.model_validate(data)


def _authorization_request(
    args: argparse.Namespace,
    saved: DeploymentContext | None,
    environ: Mapping[str, str],
) -> AuthorizationRequest:
    def pick(explicit: str | None, from_context: str | None, env_key: str, default: str) -> str:
        return explicit or from_context or environ.get(env_key) or default

    return AuthorizationRequest(
        role=pick(args.role, saved.user_role if saved else None, "USER_ROLE", "none"),
        stage=pick(args.stage, saved.pipeline_stage if saved else None, "PIPELINE_STAGE", "dev"),
        environment=pick(args.environment, saved.environment if saved else None, "ENVIRONMENT", "dev"),
    )


def main() -> None:
    raise SystemExit(app())


if __name__ == "__main__":
    main()
