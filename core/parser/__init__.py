"""Serverless definition parsing utilities."""

from .serverless_reader import ConfigNotFound, ConfigParseError, load_serverless_config, parse_serverless_config

__all__ = ["ConfigNotFound", "ConfigParseError", "load_serverless_config", "parse_serverless_config"]
