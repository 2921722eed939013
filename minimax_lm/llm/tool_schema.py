"""Normalize host tool declarations into OpenAI-style function definitions."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass
class HostTool:
    """A tool declared by the host for the model to call."""

    name: str
    description: str = ""
    input_schema: Any = field(default=None)


def to_wire_tools(tools: list[HostTool] | None) -> list[dict] | None:
    """
    Convert host tools to wire ``tools`` entries.

    Tools without a usable name are skipped.  Returns ``None`` rather than an
    empty list when nothing survives.
    """
    if not tools:
        return None

    converted: list[dict] = []
    for tool in tools:
        name = _trimmed(tool.name)
        if not name:
            continue

        function: dict = {"name": name}
        description = _trimmed(tool.description)
        if description:
            function["description"] = description
        function["parameters"] = normalize_parameters(tool.input_schema)

        converted.append({"type": "function", "function": function})

    return converted or None


def normalize_parameters(schema: Any) -> dict:
    """
    Make a JSON schema acceptable to the API.

    The API rejects schemas without ``type``, and object schemas without
    ``properties``.
    """
    if not isinstance(schema, dict):
        return {"type": "object", "properties": {}}

    s = dict(schema)
    s.setdefault("type", "object")
    if s["type"] == "object":
        s.setdefault("properties", {})
    return s


def resolve_tool_choice(tools: list[dict] | None, tool_mode: str | None) -> str | None:
    if not tools:
        return None
    return "required" if tool_mode == "required" else "auto"


def _trimmed(value: Any) -> str | None:
    if not isinstance(value, str):
        return None
    return value.strip() or None
