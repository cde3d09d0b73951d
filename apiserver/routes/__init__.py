"""API routes."""

from . import generate, objects

__all__ = ["generate", "objects"]
