"""
MiniMax streaming chat client.

One ``stream_chat`` call owns exactly one upstream request: it builds the
request body, binds the host's ``CancellationToken`` to the request's
``AbortSignal``, and yields parsed ``ChatChunk`` objects until the stream
ends or cancellation is observed.  Failures are classified into
``ProviderError`` and re-raised; nothing is retried.
"""

from __future__ import annotations

import logging
from typing import AsyncIterator

from minimax_lm.llm.cancellation import AbortSignal, CancellationToken
from minimax_lm.llm.errors import ProviderError, classify_error
from minimax_lm.llm.transport import ChatTransport, HttpxChatTransport
from minimax_lm.llm.types import ChatChunk, ChatOptions, WireMessage
from minimax_lm.types import ErrorCode

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://api.minimax.io/v1"
DEFAULT_TEMPERATURE = 1.0
DEFAULT_MAX_TOKENS = 8192


class MiniMaxClient:
    """
    Parameters
    ----------
    base_url:
        API root; ``/chat/completions`` is appended.
    transport:
        The streaming transport.  Defaults to ``HttpxChatTransport``.
    """

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        transport: ChatTransport | None = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._transport = transport or HttpxChatTransport()

    @property
    def base_url(self) -> str:
        return self._base_url

    async def stream_chat(
        self,
        model: str,
        messages: list[WireMessage],
        options: ChatOptions | None = None,
        token: CancellationToken | None = None,
    ) -> AsyncIterator[ChatChunk]:
        options = options or ChatOptions()
        api_key = (options.api_key or "").strip()
        if not api_key:
            raise ProviderError("API key is required", ErrorCode.NO_API_KEY, 401)

        if token is not None and token.is_cancelled:
            return

        signal = AbortSignal()
        dispose = token.on_cancel(signal.abort) if token is not None else None
        stream = None

        try:
            body = self.build_body(model, messages, options)
            headers = self._build_headers(api_key)
            logger.info(
                "REQUEST: model=%s messages=%d tools=%d api_key=%s",
                model,
                len(messages),
                len(options.tools or []),
                _mask(api_key),
            )

            url = f"{self._base_url}/chat/completions"
            stream = self._transport.stream(url, body, headers, signal)
            async for payload in stream:
                if token is not None and token.is_cancelled:
                    return
                yield ChatChunk.from_dict(payload)
        except Exception as exc:
            raise classify_error(exc) from exc
        finally:
            if dispose is not None:
                dispose()
            aclose = getattr(stream, "aclose", None)
            if aclose is not None:
                await aclose()

    # ------------------------------------------------------------------
    # Request building
    # ------------------------------------------------------------------

    def build_body(
        self,
        model: str,
        messages: list[WireMessage],
        options: ChatOptions,
    ) -> dict:
        body: dict = {
            "model": model,
            "stream": True,
            "messages": [m.to_dict() for m in messages],
            "temperature": (
                options.temperature
                if options.temperature is not None
                else DEFAULT_TEMPERATURE
            ),
            "max_tokens": (
                options.max_tokens
                if options.max_tokens is not None
                else DEFAULT_MAX_TOKENS
            ),
        }
        if options.tools:
            body["tools"] = options.tools
            if options.tool_choice:
                body["tool_choice"] = options.tool_choice
        # The API only streams reasoning_details when asked to.
        body["reasoning_split"] = (
            options.reasoning_split if options.reasoning_split is not None else True
        )
        return body

    def _build_headers(self, api_key: str) -> dict[str, str]:
        return {
            "Content-Type": "application/json",
            "Accept": "text/event-stream",
            "Authorization": f"Bearer {api_key}",
        }


def _mask(api_key: str) -> str:
    if len(api_key) <= 8:
        return "***"
    return f"{api_key[:4]}...{api_key[-4:]}"
