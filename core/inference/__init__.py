"""Inference utilities for deriving permissions and resource scopes."""

from .arn_rules import ArnRuleRegistry, NameScope
from .permissions import PermissionCatalog, load_catalog

__all__ = ["ArnRuleRegistry", "NameScope", "PermissionCatalog", "load_catalog"]
