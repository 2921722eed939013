"""LLM subsystem -- wire mapping, streaming client, and response reconstruction."""

from minimax_lm.llm.cancellation import AbortSignal, CancellationToken, RequestAborted
from minimax_lm.llm.client import MiniMaxClient
from minimax_lm.llm.errors import ProviderError, UpstreamAPIError, classify_error
from minimax_lm.llm.message_mapper import to_wire_messages
from minimax_lm.llm.reconstructor import ResponseReconstructor, StreamState
from minimax_lm.llm.token_counter import TokenCounter
from minimax_lm.llm.tool_call_assembler import ToolCallAssembler
from minimax_lm.llm.tool_schema import HostTool, to_wire_tools
from minimax_lm.llm.types import ChatChunk, ChatOptions, WireMessage

__all__ = [
    "AbortSignal",
    "CancellationToken",
    "ChatChunk",
    "ChatOptions",
    "HostTool",
    "MiniMaxClient",
    "ProviderError",
    "RequestAborted",
    "ResponseReconstructor",
    "StreamState",
    "TokenCounter",
    "ToolCallAssembler",
    "UpstreamAPIError",
    "WireMessage",
    "classify_error",
    "to_wire_messages",
    "to_wire_tools",
]
