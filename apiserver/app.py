"""Lambda entrypoint for the hello app and the policy generation API."""

from __future__ import annotations

import json
from typing import Any, Callable, Dict, Tuple

from apiserver.routes import generate, objects

RouteHandler = Callable[[dict[str, Any]], dict[str, Any]]
JSON_HEADERS = {"Content-Type": "application/json"}


ROUTES: Dict[Tuple[str, str], RouteHandler] = {
    ("GET", "/hello"): objects.handle,
    ("POST", "/generate"): generate.handle,
}


def _route_key(event: dict[str, Any]) -> Tuple[str, str]:
    method = (event.get("httpMethod") or "GET").upper()
    path = event.get("resource") or event.get("path") or "/"
    if len(path) > 1:
        path = path.rstrip("/")
    return method, path


def lambda_handler(event: dict[str, Any], context: Any) -> dict[str, Any]:
    handler = ROUTES.get(_route_key(event))
    if handler is None:
        return {
            "statusCode": 404,
            "headers": dict(JSON_HEADERS),
            "body": json.dumps({"message": "Route not found"}),
        }

    response = handler(event)
    response.setdefault("headers", dict(JSON_HEADERS))
    body = response.get("body")
    if body is not None and not isinstance(body, str):
        response["body"] = json.dumps(body)
    return response
