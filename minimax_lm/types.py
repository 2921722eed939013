from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Union


@dataclass
class TextPart:
    value: str


@dataclass
class ToolCallPart:
    call_id: str
    name: str
    input: dict | None = None


@dataclass
class DataPart:
    data: bytes
    mime_type: str


@dataclass
class ToolResultPart:
    call_id: str
    content: list[Any] = field(default_factory=list)


@dataclass
class ThinkingPart:
    value: str | list[str]
    id: str | None = None
    metadata: dict[str, Any] | None = None
    format: str | None = None


ResponsePart = Union[TextPart, ThinkingPart, ToolCallPart]


@dataclass
class HostMessage:
    role: str  # "system", "user", "assistant"
    content: list[Any] | str = field(default_factory=list)

    @property
    def parts(self) -> list[Any]:
        if isinstance(self.content, str):
            return [TextPart(self.content)]
        if isinstance(self.content, list):
            return self.content
        return []


class ErrorCode:
    NO_API_KEY = "NO_API_KEY"
    AUTHENTICATION_ERROR = "AUTHENTICATION_ERROR"
    API_ERROR = "API_ERROR"
    TIMEOUT = "TIMEOUT"
    NETWORK_ERROR = "NETWORK_ERROR"
    UNKNOWN_ERROR = "UNKNOWN_ERROR"
