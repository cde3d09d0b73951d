"""Client for the remote policy engine that gates deployments."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import requests

from core.models import AuthorizationRequest

DEFAULT_OPA_URL = "http://localhost:8181/v1/data/cicd/allow"


class PolicyEvaluationError(RuntimeError):
    """Raised when the policy engine cannot be reached or answers badly."""


@dataclass
class PolicyEvaluator:
    url: str = DEFAULT_OPA_URL
    timeout: float = 10.0
    session: Any | None = None

    def evaluate(self, request: AuthorizationRequest) -> bool:
        """Return True only when the engine answers ``{"result": true}``."""
        http = self.session or requests
        try:
            response = http.post(self.url, json={"input": request.as_input()}, timeout=self.timeout)
            response.raise_for_status()
            payload = response.json()
        except requests.RequestException as exc:
            raise PolicyEvaluationError(f"Policy evaluation failed: {exc}") from exc
        except ValueError as exc:
            raise PolicyEvaluationError("Policy engine returned a non-JSON response") from exc

        if not isinstance(payload, dict):
            return False
        return payload.get("result") is True


__all__ = ["DEFAULT_OPA_URL", "PolicyEvaluationError", "PolicyEvaluator"]
