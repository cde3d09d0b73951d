"""Deployment authorization against an external policy engine."""

from .evaluator import DEFAULT_OPA_URL, PolicyEvaluationError, PolicyEvaluator

__all__ = ["DEFAULT_OPA_URL", "PolicyEvaluationError", "PolicyEvaluator"]
