"""Service detection for serverless definitions."""

from .services import BASELINE_SERVICES, ServiceDetector

__all__ = ["BASELINE_SERVICES", "ServiceDetector"]
