"""
Assembles streaming tool-call fragments into complete ``ToolCallPart``s.

Design goals:
  - Accumulate ``ToolCallFragment``s keyed by the stream-provided index.  A
    fragment without a valid index is treated as the next call.
  - ``id`` and ``name`` are overwritten by every non-empty fragment value;
    argument text is appended.
  - ``drain()`` returns every call that has both an id and a name, ordered
    by index, and discards all state.  Calls missing either are dropped.
  - Argument text never causes a call to be dropped: malformed JSON is
    wrapped as ``{"rawArguments": ...}``.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass

from minimax_lm.llm.types import ToolCallFragment
from minimax_lm.types import ToolCallPart

logger = logging.getLogger(__name__)


@dataclass
class AccumulatedToolCall:
    index: int
    id: str | None = None
    name: str | None = None
    arguments: str = ""


class ToolCallAssembler:
    """Buffers tool-call fragments for one response."""

    def __init__(self) -> None:
        self._buf: dict[int, AccumulatedToolCall] = {}

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def feed(self, fragment: ToolCallFragment) -> AccumulatedToolCall:
        """Merge *fragment* into its pending call and return that call."""
        index = fragment.index if fragment.index is not None else len(self._buf)
        call = self._buf.get(index)
        if call is None:
            call = AccumulatedToolCall(index=index)
            self._buf[index] = call

        if fragment.id:
            call.id = fragment.id
        if fragment.name:
            call.name = fragment.name
        if fragment.arguments:
            call.arguments += fragment.arguments

        return call

    def drain(self) -> list[ToolCallPart]:
        """Finalize all complete calls and discard every buffer."""
        parts: list[ToolCallPart] = []
        for index in sorted(self._buf):
            call = self._buf[index]
            if not call.id or not call.name:
                logger.debug(
                    "Dropping incomplete tool call idx=%d id=%r name=%r",
                    index,
                    call.id,
                    call.name,
                )
                continue
            parts.append(
                ToolCallPart(
                    call_id=call.id,
                    name=call.name,
                    input=parse_tool_arguments(call.arguments),
                )
            )
        self._buf.clear()
        return parts

    @property
    def pending(self) -> dict[int, AccumulatedToolCall]:
        return self._buf


def parse_tool_arguments(raw: str) -> dict:
    """
    Parse accumulated argument text into a dict.

    Empty text gives ``{}``; a JSON non-object is wrapped as ``{"value": ...}``;
    invalid JSON is wrapped as ``{"rawArguments": raw}``.
    """
    text = raw.strip()
    if not text:
        return {}

    try:
        parsed = json.loads(text)
    except (json.JSONDecodeError, ValueError):
        logger.debug("Tool-call arguments are not valid JSON: %.200s", raw)
        return {"rawArguments": raw}

    if isinstance(parsed, dict):
        return parsed
    return {"value": parsed}
