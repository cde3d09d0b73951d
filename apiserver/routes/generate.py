"""API route for generating policies from a posted serverless definition."""

from __future__ import annotations

import base64
import binascii
from typing import Any

from core.inference.permissions import load_catalog
from core.parser.serverless_reader import ConfigParseError, parse_serverless_config
from core.policy.generator import generate_policy


def _request_text(event: dict[str, Any]) -> str:
    payload = event.get("body") or ""
    if event.get("isBase64Encoded") and isinstance(payload, str):
        try:
            return base64.b64decode(payload, validate=True).decode("utf-8")
        except (binascii.Error, UnicodeDecodeError) as exc:
            raise ConfigParseError(f"Error reading request body: {exc}", "request body") from exc
    return payload if isinstance(payload, str) else ""


def handle(event: dict[str, Any]) -> dict[str, Any]:
    try:
        serverless = parse_serverless_config(_request_text(event), source="request body")
    except ConfigParseError as exc:
        return {
            "statusCode": 400,
            "body": {"message": str(exc)},
        }

    services, policy = generate_policy(serverless, load_catalog())
    return {
        "statusCode": 200,
        "body": {
            "services": list(services),
            "policy": policy.to_document(),
        },
    }
