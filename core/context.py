"""Derive the deployment context from git metadata and the environment."""

from __future__ import annotations

import os
import subprocess
from typing import Callable, Mapping, Sequence

from core.models import DeploymentContext

DEFAULT_ROLE_MAP: dict[str, str] = {
    "devops@gmail.com": "devops",
    "qa@gmail.com": "qa",
    "admin@gmail.com": "admin",
}
UNKNOWN_BRANCH = "unknown"
UNKNOWN_EMAIL = "unknown@gmail.com"
BRANCH_STAGES: dict[str, str] = {
    "main": "deploy",
    "dev": "test",
}
DEFAULT_PIPELINE_STAGE = "dev"

GitRunner = Callable[[Sequence[str]], str]


def run_git(args: Sequence[str]) -> str:
    result = subprocess.run(["git", *args], capture_output=True, text=True, check=True)
    return result.stdout


def _git_output(runner: GitRunner | None, args: Sequence[str], fallback: str) -> str:
    try:
        output = (runner or run_git)(args)
    except (OSError, subprocess.CalledProcessError):
        return fallback
    cleaned = output.replace("'", "").strip()
    return cleaned or fallback


def current_branch(runner: GitRunner | None = None) -> str:
    return _git_output(runner, ["rev-parse", "--abbrev-ref", "HEAD"], UNKNOWN_BRANCH)


def last_committer_email(runner: GitRunner | None = None) -> str:
    return _git_output(runner, ["log", "-1", "--pretty=format:%ce"], UNKNOWN_EMAIL)


def resolve_role(email: str, role_map: Mapping[str, str] | None = None) -> str:
    mapping = DEFAULT_ROLE_MAP if role_map is None else role_map
    return mapping.get(email, "none")


def pipeline_stage_for(branch: str) -> str:
    return BRANCH_STAGES.get(branch, DEFAULT_PIPELINE_STAGE)


def target_environment(pipeline_stage: str, environ: Mapping[str, str] | None = None) -> str:
    """ENVIRONMENT wins when set; otherwise the pipeline stage is the target."""
    env = os.environ if environ is None else environ
    value = env.get("ENVIRONMENT")
    return value.lower() if value else pipeline_stage


def detect_context(
    role_map: Mapping[str, str] | None = None,
    environ: Mapping[str, str] | None = None,
    runner: GitRunner | None = None,
) -> DeploymentContext:
    branch = current_branch(runner)
    email = last_committer_email(runner)
    stage = pipeline_stage_for(branch)
    return DeploymentContext(
        user_email=email,
        user_role=resolve_role(email, role_map),
        branch=branch,
        environment=target_environment(stage, environ),
        pipeline_stage=stage,
    )


__all__ = [
    "DEFAULT_ROLE_MAP",
    "current_branch",
    "detect_context",
    "last_committer_email",
    "pipeline_stage_for",
    "resolve_role",
    "run_git",
    "target_environment",
]
