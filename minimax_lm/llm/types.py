"""Wire-format types for the MiniMax chat-completion API."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass
class WireMessage:
    """A single message in the request's ``messages`` array."""

    role: str  # "system", "user", "assistant", "tool"
    content: str
    tool_calls: list[dict] | None = None
    reasoning_details: list[dict] | None = None
    tool_call_id: str | None = None

    def to_dict(self) -> dict:
        m: dict = {"role": self.role, "content": self.content}
        if self.role == "tool":
            m["tool_call_id"] = self.tool_call_id or ""
            return m
        if self.tool_calls:
            m["tool_calls"] = list(self.tool_calls)
        if self.reasoning_details:
            m["reasoning_details"] = list(self.reasoning_details)
        return m


@dataclass
class ChatOptions:
    """Per-request knobs for ``MiniMaxClient.stream_chat``."""

    api_key: str | None = None
    temperature: float | None = None
    max_tokens: int | None = None
    tools: list[dict] | None = None
    tool_choice: str | None = None  # "auto" or "required"
    reasoning_split: bool | None = None


# ---------------------------------------------------------------------------
# Upstream chunk structs
# ---------------------------------------------------------------------------

def _str_or_none(value: Any) -> str | None:
    return value if isinstance(value, str) else None


@dataclass
class ReasoningFragment:
    """One ``reasoning_details`` entry that carries a string ``text``."""

    text: str
    id: str | None = None
    metadata: dict | None = None

    @classmethod
    def from_dict(cls, raw: Any) -> ReasoningFragment | None:
        if not isinstance(raw, dict) or not isinstance(raw.get("text"), str):
            return None

        reasoning_id = None
        for key in ("id", "reasoning_id", "thinking_id"):
            value = raw.get(key)
            if isinstance(value, str) and value.strip():
                reasoning_id = value.strip()
                break

        metadata = raw.get("metadata")
        return cls(
            text=raw["text"],
            id=reasoning_id,
            metadata=metadata if isinstance(metadata, dict) else None,
        )


@dataclass
class ToolCallFragment:
    """
    A partial tool call from ``delta.tool_calls``.

    *index* is ``None`` when the upstream omitted it or sent something that
    is not a non-negative integer.
    """

    index: int | None = None
    id: str | None = None
    name: str | None = None
    arguments: str | None = None

    @classmethod
    def from_dict(cls, raw: Any) -> ToolCallFragment | None:
        if not isinstance(raw, dict):
            return None

        index = raw.get("index")
        if isinstance(index, bool) or not isinstance(index, int) or index < 0:
            index = None

        func = raw.get("function")
        if not isinstance(func, dict):
            func = {}

        return cls(
            index=index,
            id=_str_or_none(raw.get("id")),
            name=_str_or_none(func.get("name")),
            arguments=_str_or_none(func.get("arguments")),
        )


@dataclass
class ChoiceDelta:
    content: str | None = None
    reasoning_details: list[ReasoningFragment] = field(default_factory=list)
    tool_calls: list[ToolCallFragment] = field(default_factory=list)

    @classmethod
    def from_dict(cls, raw: Any) -> ChoiceDelta:
        if not isinstance(raw, dict):
            return cls()

        reasoning: list[ReasoningFragment] = []
        raw_reasoning = raw.get("reasoning_details")
        if isinstance(raw_reasoning, list):
            for item in raw_reasoning:
                fragment = ReasoningFragment.from_dict(item)
                if fragment is not None:
                    reasoning.append(fragment)

        tool_calls: list[ToolCallFragment] = []
        raw_tcs = raw.get("tool_calls")
        if isinstance(raw_tcs, list):
            for item in raw_tcs:
                fragment = ToolCallFragment.from_dict(item)
                if fragment is not None:
                    tool_calls.append(fragment)

        return cls(
            content=_str_or_none(raw.get("content")),
            reasoning_details=reasoning,
            tool_calls=tool_calls,
        )


@dataclass
class ChunkChoice:
    index: int = 0
    delta: ChoiceDelta = field(default_factory=ChoiceDelta)
    finish_reason: str | None = None

    @classmethod
    def from_dict(cls, raw: Any) -> ChunkChoice | None:
        if not isinstance(raw, dict):
            return None
        index = raw.get("index")
        return cls(
            index=index if isinstance(index, int) and not isinstance(index, bool) else 0,
            delta=ChoiceDelta.from_dict(raw.get("delta")),
            finish_reason=_str_or_none(raw.get("finish_reason")),
        )


@dataclass
class ChatChunk:
    """
    A single streamed chunk.

    A chunk may bundle several choices; they are processed in array order.
    """

    choices: list[ChunkChoice] = field(default_factory=list)
    id: str | None = None
    model: str | None = None

    @classmethod
    def from_dict(cls, raw: Any) -> ChatChunk:
        if not isinstance(raw, dict):
            return cls()

        choices: list[ChunkChoice] = []
        raw_choices = raw.get("choices")
        if isinstance(raw_choices, list):
            for item in raw_choices:
                choice = ChunkChoice.from_dict(item)
                if choice is not None:
                    choices.append(choice)

        return cls(
            choices=choices,
            id=_str_or_none(raw.get("id")),
            model=_str_or_none(raw.get("model")),
        )
