"""Serverless least-privilege policy generator."""

from importlib import import_module

_EXPORTS = {
    "generate_policy": "core.policy.generator",
    "load_catalog": "core.inference.permissions",
    "load_serverless_config": "core.parser.serverless_reader",
}

__all__ = sorted(_EXPORTS)


def __getattr__(name: str):
    if name in _EXPORTS:
        return getattr(import_module(_EXPORTS[name]), name)
    raise AttributeError(f"module 'slpg' has no attribute {name}")


__version__ = "0.1.0"
