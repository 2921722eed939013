"""
Turns a stream of ``ChatChunk``s into host response parts.

Per choice, in array order:

  1. Reasoning.  The upstream resends the *whole* reasoning text so far
     with every delta, so the new part is found by prefix-diffing against
     the last text emitted.  A text that does not extend the buffer is a
     reset and is emitted in full.
  2. Text content is emitted as-is.
  3. Tool-call fragments are accumulated; on the first ``tool_calls`` /
     ``function_call`` finish reason all complete calls are emitted once.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from minimax_lm.llm.tool_call_assembler import ToolCallAssembler
from minimax_lm.llm.types import ChatChunk, ChunkChoice, ReasoningFragment
from minimax_lm.types import ResponsePart, TextPart, ThinkingPart

TOOL_CALL_FINISH_REASONS = frozenset({"tool_calls", "function_call"})


@dataclass
class StreamState:
    """Mutable state for one response; never shared between requests."""

    reasoning_buffer: str = ""
    tool_calls: ToolCallAssembler = field(default_factory=ToolCallAssembler)
    tool_calls_emitted: bool = False


class ResponseReconstructor:
    """
    Parameters
    ----------
    supports_thinking:
        Whether the host has a structured reasoning part.  When it does not,
        reasoning is degraded to ``<think>...</think>`` wrapped text.
    """

    def __init__(self, supports_thinking: bool = True) -> None:
        self.supports_thinking = supports_thinking
        self.state = StreamState()

    def feed(self, chunk: ChatChunk) -> list[ResponsePart]:
        """Process one chunk and return the parts it produces, in order."""
        parts: list[ResponsePart] = []
        for choice in chunk.choices:
            parts.extend(self._process_choice(choice))
        return parts

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _process_choice(self, choice: ChunkChoice) -> list[ResponsePart]:
        parts: list[ResponsePart] = []
        delta = choice.delta

        if delta.reasoning_details:
            reasoning = self._reasoning_part(delta.reasoning_details[-1])
            if reasoning is not None:
                parts.append(reasoning)

        if delta.content:
            parts.append(TextPart(delta.content))

        for fragment in delta.tool_calls:
            self.state.tool_calls.feed(fragment)

        if (
            not self.state.tool_calls_emitted
            and choice.finish_reason in TOOL_CALL_FINISH_REASONS
        ):
            parts.extend(self.state.tool_calls.drain())
            self.state.tool_calls_emitted = True

        return parts

    def _reasoning_part(self, latest: ReasoningFragment) -> ResponsePart | None:
        new_text = diff_reasoning(self.state.reasoning_buffer, latest.text)
        if not new_text:
            return None
        self.state.reasoning_buffer = latest.text

        if not self.supports_thinking:
            return TextPart(f"<think>{new_text}</think>")
        return ThinkingPart(value=new_text, id=latest.id, metadata=latest.metadata)


def diff_reasoning(buffer: str, latest: str) -> str:
    """Return the part of *latest* not yet emitted, or all of it on a reset."""
    if latest.startswith(buffer):
        return latest[len(buffer):]
    return latest
