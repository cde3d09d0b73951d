"""API route returning an object stored in the app bucket."""

from __future__ import annotations

import os
from typing import Any

import boto3
from botocore.exceptions import BotoCoreError, ClientError

DEFAULT_OBJECT_KEY = "hello.txt"


def handle(event: dict[str, Any], s3_client: Any | None = None) -> dict[str, Any]:
    bucket = os.environ.get("BUCKET_NAME")
    key = os.environ.get("OBJECT_KEY", DEFAULT_OBJECT_KEY)
    if not bucket:
        return _error("BUCKET_NAME is not configured")

    client = s3_client or boto3.client("s3")
    try:
        body = client.get_object(Bucket=bucket, Key=key)["Body"].read()
    except (BotoCoreError, ClientError) as exc:
        return _error(str(exc))

    return {
        "statusCode": 200,
        "headers": {"Content-Type": "text/plain; charset=utf-8"},
        "body": body.decode("utf-8", errors="replace"),
    }


def _error(message: str) -> dict[str, Any]:
    return {
        "statusCode": 500,
        "headers": {"Content-Type": "text/plain; charset=utf-8"},
        "body": f"Error fetching file: {message}",
    }
