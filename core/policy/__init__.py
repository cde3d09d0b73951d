"""Policy generation helpers."""

from .generator import CATCH_ALL_RESOURCE, PolicyGenerator, generate_policy

__all__ = ["CATCH_ALL_RESOURCE", "PolicyGenerator", "generate_policy"]
