"""
Convert host conversation messages into MiniMax wire messages.

Role mapping:
  - system    -> one ``system`` message with the concatenated text parts.
  - assistant -> one ``assistant`` message carrying text, ``tool_calls`` and
    ``reasoning_details``.
  - user      -> an optional ``user`` message followed by one ``tool``
    message per tool result.
"""

from __future__ import annotations

import base64
import json
from typing import Any

from minimax_lm.llm.types import WireMessage
from minimax_lm.types import (
    DataPart,
    HostMessage,
    TextPart,
    ToolCallPart,
    ToolResultPart,
)

_KNOWN_PARTS = (TextPart, ToolCallPart, ToolResultPart, DataPart)


def to_wire_messages(messages: list[HostMessage]) -> list[WireMessage]:
    converted: list[WireMessage] = []
    for msg in messages:
        converted.extend(_to_wire(msg))
    return converted


def _to_wire(message: HostMessage) -> list[WireMessage]:
    parts = message.parts
    if message.role == "assistant":
        return [_assistant_message(parts)]
    if message.role == "user":
        return _user_and_tool_messages(parts)
    return [WireMessage(role="system", content=_concat_text(parts))]


# ------------------------------------------------------------------
# Assistant
# ------------------------------------------------------------------

def _assistant_message(parts: list[Any]) -> WireMessage:
    tool_calls: list[dict] = []
    reasoning_details: list[dict] = []

    for part in parts:
        if isinstance(part, ToolCallPart):
            tool_calls.append(
                {
                    "id": part.call_id,
                    "type": "function",
                    "function": {
                        "name": part.name,
                        "arguments": json.dumps(
                            part.input if part.input is not None else {}
                        ),
                    },
                }
            )
            continue

        detail = to_reasoning_detail(part, len(reasoning_details))
        if detail is not None:
            reasoning_details.append(detail)

    return WireMessage(
        role="assistant",
        content=_concat_text(parts),
        tool_calls=tool_calls or None,
        reasoning_details=reasoning_details or None,
    )


def is_thinking_part(part: Any) -> bool:
    """
    Structural test for a reasoning part.

    Anything that is not one of the known part types and whose ``value`` is a
    string or a list of strings qualifies.
    """
    if part is None or isinstance(part, _KNOWN_PARTS):
        return False
    value = _field(part, "value")
    if isinstance(value, str):
        return True
    if isinstance(value, list):
        return all(isinstance(item, str) for item in value)
    return False


def to_reasoning_detail(part: Any, index: int) -> dict | None:
    if not is_thinking_part(part):
        return None

    value = _field(part, "value")
    text = "".join(value) if isinstance(value, list) else value
    if not text or not text.strip():
        return None

    detail: dict = {"type": "reasoning.text", "index": index, "text": text}

    part_id = _non_empty(_field(part, "id"))
    if part_id:
        detail["id"] = part_id

    fmt = _non_empty(_field(part, "format"))
    if fmt:
        detail["format"] = fmt

    metadata = _field(part, "metadata")
    if isinstance(metadata, dict):
        detail.update(metadata)

    return detail


# ------------------------------------------------------------------
# User / tool
# ------------------------------------------------------------------

def _user_and_tool_messages(parts: list[Any]) -> list[WireMessage]:
    text = _concat_text(parts)
    tool_messages = [
        WireMessage(
            role="tool",
            tool_call_id=part.call_id,
            content=render_tool_result(part.content),
        )
        for part in parts
        if isinstance(part, ToolResultPart)
    ]

    messages: list[WireMessage] = []
    # A turn made only of tool results gets no empty user message.
    if text.strip() or not tool_messages:
        messages.append(WireMessage(role="user", content=text))
    messages.extend(tool_messages)
    return messages


def render_tool_result(content: list[Any]) -> str:
    """Flatten tool-result sub-parts into text; ``"{}"`` when nothing remains."""
    pieces: list[str] = []
    for part in content or []:
        if isinstance(part, TextPart):
            pieces.append(part.value)
        elif isinstance(part, DataPart):
            encoded = base64.b64encode(bytes(part.data)).decode("ascii")
            pieces.append(f"[data:{part.mime_type};base64,{encoded}]")
        elif isinstance(_field(part, "value"), str):
            pieces.append(_field(part, "value"))
        else:
            pieces.append(_safe_json(part))

    text = "".join(pieces).strip()
    return text or "{}"


# ------------------------------------------------------------------
# Helpers
# ------------------------------------------------------------------

def _concat_text(parts: list[Any]) -> str:
    return "".join(p.value for p in parts if isinstance(p, TextPart))


def _field(part: Any, name: str) -> Any:
    if isinstance(part, dict):
        return part.get(name)
    return getattr(part, name, None)


def _non_empty(value: Any) -> str | None:
    if not isinstance(value, str):
        return None
    value = value.strip()
    return value or None


def _safe_json(value: Any) -> str:
    try:
        return json.dumps(value)
    except (TypeError, ValueError):
        return str(value)
