"""Output helpers for the slpg CLI."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from pydantic import BaseModel


def _default_serializer(value: Any) -> Any:
    if isinstance(value, BaseModel):
        return value.model_dump(by_alias=True, exclude_none=True)
    if isinstance(value, set):
        return sorted(value)
    if isinstance(value, Path):
        return str(value)
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def render(data: Any, fmt: str) -> str:
    if fmt == "json":
        return json.dumps(data, indent=2, default=_default_serializer)
    if fmt == "md":
        return _to_markdown(data)
    if fmt == "table":
        return _to_table(data)
    raise ValueError(f"Unsupported format: {fmt}")


def emit(data: Any, fmt: str, output_path: Path | None = None) -> None:
    rendered = render(data, fmt)
    if output_path:
        write_text(rendered, output_path)
    else:
        print(rendered)


def write_json(data: Any, output_path: Path) -> None:
    """Write ``data`` as pretty-printed JSON in a single write."""
    write_text(json.dumps(data, indent=2, default=_default_serializer), output_path)


def write_text(rendered: str, output_path: Path) -> None:
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(rendered + ("\n" if not rendered.endswith("\n") else ""), encoding="utf-8")


def _to_markdown(data: Any) -> str:
    if isinstance(data, list):
        if not data:
            return "(no data)"
        return "\n".join(f"- {item}" for item in data)
    if isinstance(data, dict):
        lines = ["| Key | Value |", "| --- | --- |"]
        for key, value in data.items():
            if isinstance(value, list):
                value = "<br>".join(str(item) for item in value)
            lines.append(f"| {key} | {value} |")
        return "\n".join(lines)
    return str(data)


def _to_table(data: Any) -> str:
    if isinstance(data, dict):
        width = max(len(str(key)) for key in data.keys()) if data else 0
        lines: list[str] = []
        for key, value in data.items():
            if isinstance(value, list):
                entries = [str(item) for item in value] or [""]
                lines.append(f"{str(key).ljust(width)} : {entries[0]}")
                lines.extend(f"{'':{width}}   {entry}" for entry in entries[1:])
            else:
                lines.append(f"{str(key).ljust(width)} : {value}")
        return "\n".join(lines)
    if isinstance(data, list):
        return "\n".join(str(item) for item in data)
    return str(data)


__all__ = ["emit", "render", "write_json", "write_text"]
