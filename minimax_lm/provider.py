"""
Chat provider -- the host-facing entry point.

The provider is what a chat-UI host talks to.  For each response it:

  1. Resolves the API key (model-attached key, else the key store).
  2. Maps host messages and tools to the wire format.
  3. Streams ``ChatChunk``s from ``MiniMaxClient``.
  4. Feeds them through a fresh ``ResponseReconstructor`` and yields the
     resulting host parts.

Classified failures are translated into user-facing messages; an
authentication failure also deletes the stored key.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, AsyncIterator

from minimax_lm.auth import ApiKeyStore
from minimax_lm.config import MiniMaxConfig
from minimax_lm.llm.cancellation import CancellationToken
from minimax_lm.llm.client import MiniMaxClient
from minimax_lm.llm.errors import ProviderError
from minimax_lm.llm.message_mapper import to_wire_messages
from minimax_lm.llm.models import get_model_by_id, visible_models
from minimax_lm.llm.reconstructor import ResponseReconstructor
from minimax_lm.llm.token_counter import TokenCounter
from minimax_lm.llm.tool_schema import HostTool, resolve_tool_choice, to_wire_tools
from minimax_lm.llm.types import ChatOptions
from minimax_lm.types import ErrorCode, HostMessage, ResponsePart

logger = logging.getLogger(__name__)


@dataclass
class ModelInformation:
    """What the host shows in its model picker."""

    id: str
    name: str
    family: str
    max_input_tokens: int
    max_output_tokens: int
    detail: str = "Coding Plan"
    version: str = "1.0"
    tool_calling: bool = True
    api_key: str | None = field(default=None, repr=False)


@dataclass
class ResponseOptions:
    """Per-request options supplied by the host."""

    tools: list[HostTool] | None = None
    tool_mode: str = "auto"  # "auto" or "required"
    max_tokens: Any = None


class ChatProvider:
    """
    Parameters
    ----------
    client:
        Streaming client used for every response.
    key_store:
        Source of stored API keys; also invalidated on 401.
    config:
        Loaded configuration (defaults, visible models).
    supports_thinking:
        Host capability flag, resolved once by the caller.  Controls both
        the ``reasoning_split`` request flag and how reasoning is reported.
    """

    def __init__(
        self,
        client: MiniMaxClient,
        key_store: ApiKeyStore,
        config: MiniMaxConfig | None = None,
        token_counter: TokenCounter | None = None,
        supports_thinking: bool = True,
    ) -> None:
        self.client = client
        self.key_store = key_store
        self.config = config or MiniMaxConfig()
        self.token_counter = token_counter or TokenCounter()
        self.supports_thinking = supports_thinking

    # ------------------------------------------------------------------
    # Model information
    # ------------------------------------------------------------------

    def provide_model_information(
        self, configured_api_key: str | None
    ) -> list[ModelInformation]:
        api_key = configured_api_key.strip() if isinstance(configured_api_key, str) else ""
        if not api_key:
            return []

        return [
            ModelInformation(
                id=m.id,
                name=m.name,
                family=m.id,
                max_input_tokens=m.context_length,
                max_output_tokens=m.context_length,
                api_key=api_key,
            )
            for m in visible_models(self.config.models.visible_models)
        ]

    # ------------------------------------------------------------------
    # Streaming response
    # ------------------------------------------------------------------

    async def provide_response(
        self,
        model: ModelInformation | str,
        messages: list[HostMessage],
        options: ResponseOptions | None = None,
        token: CancellationToken | None = None,
    ) -> AsyncIterator[ResponsePart]:
        """
        Stream host response parts for one request.

        Cancellation stops the stream silently; already-yielded parts stand.
        """
        options = options or ResponseOptions()
        token = token or CancellationToken()

        model_id = model if isinstance(model, str) else model.id
        attached_key = None if isinstance(model, str) else model.api_key
        api_key = (
            attached_key
            if attached_key and attached_key.strip()
            else self.key_store.get_or_prompt_api_key()
        )
        if not api_key:
            raise ProviderError(
                'API key not configured. Use "mmx key set" to store one.',
                ErrorCode.NO_API_KEY,
            )

        try:
            async for part in self._stream_response(
                model_id, messages, options, token, api_key
            ):
                yield part
        except ProviderError as exc:
            if exc.code == ErrorCode.TIMEOUT and token.is_cancelled:
                return
            raise self._map_error(exc) from exc

    async def _stream_response(
        self,
        model_id: str,
        messages: list[HostMessage],
        options: ResponseOptions,
        token: CancellationToken,
        api_key: str,
    ) -> AsyncIterator[ResponsePart]:
        resolved = get_model_by_id(model_id)
        if resolved is None:
            raise ValueError(f'Unsupported model "{model_id}" selected for MiniMax.')

        tools = to_wire_tools(options.tools)
        reconstructor = ResponseReconstructor(supports_thinking=self.supports_thinking)
        chat_options = ChatOptions(
            api_key=api_key,
            temperature=self.config.chat.temperature,
            max_tokens=self._resolve_max_tokens(options.max_tokens),
            tools=tools,
            tool_choice=resolve_tool_choice(tools, options.tool_mode),
            reasoning_split=self.supports_thinking and self.config.chat.reasoning_split,
        )

        stream = self.client.stream_chat(
            resolved.id, to_wire_messages(messages), chat_options, token
        )
        try:
            async for chunk in stream:
                if token.is_cancelled:
                    return
                for part in reconstructor.feed(chunk):
                    yield part
        finally:
            await stream.aclose()

    def _resolve_max_tokens(self, value: Any) -> int:
        if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
            return self.config.chat.max_tokens
        return value

    def _map_error(self, error: ProviderError) -> ProviderError:
        if error.status_code == 401 and error.code != ErrorCode.NO_API_KEY:
            logger.warning("Authentication failed; deleting stored API key")
            self.key_store.delete_api_key()
            return ProviderError(
                'Invalid API key. Please set a new one using "mmx key set".',
                ErrorCode.AUTHENTICATION_ERROR,
                401,
            )
        if error.status_code == 429:
            return ProviderError(
                "Rate limit exceeded. Please wait and try again.",
                error.code,
                429,
            )
        return ProviderError(
            f"MiniMax API error: {error.message}", error.code, error.status_code
        )

    # ------------------------------------------------------------------
    # Token counting
    # ------------------------------------------------------------------

    def provide_token_count(self, text: str | HostMessage) -> int:
        if isinstance(text, str):
            return self.token_counter.estimate_tokens(text)
        return self.token_counter.count_message(text)
