"""
Streaming HTTP transport for OpenAI-compatible chat completions.

The transport only moves JSON objects: it posts the request body, parses
Server-Sent Events and yields each ``data:`` payload as a ``dict``.  Mapping
payloads to chunks and errors to ``ProviderError`` is the client's job.

Dependencies: ``httpx`` (async HTTP client).
"""

from __future__ import annotations

import asyncio
import json
import logging
from abc import ABC, abstractmethod
from typing import Any, AsyncIterator, Awaitable, TypeVar

import httpx

from minimax_lm.llm.cancellation import AbortSignal, RequestAborted
from minimax_lm.llm.errors import UpstreamAPIError

logger = logging.getLogger(__name__)

T = TypeVar("T")

_DONE = object()


class ChatTransport(ABC):
    """Opens one streamed chat-completion request per ``stream`` call."""

    @abstractmethod
    def stream(
        self,
        url: str,
        body: dict,
        headers: dict[str, str],
        signal: AbortSignal,
    ) -> AsyncIterator[dict]:
        """
        Issue the request and yield parsed chunk payloads.

        Must raise ``RequestAborted`` promptly once *signal* is aborted.
        """
        ...


class HttpxChatTransport(ChatTransport):
    """
    SSE transport on top of ``httpx.AsyncClient``.

    Parameters
    ----------
    timeout:
        HTTP timeout in seconds.
    client:
        Optional pre-built client (tests pass one with ``httpx.MockTransport``).
        When omitted a client is created per request and closed afterwards.
    """

    def __init__(
        self,
        timeout: float = 120.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._timeout = timeout
        self._client = client

    async def stream(
        self,
        url: str,
        body: dict,
        headers: dict[str, str],
        signal: AbortSignal,
    ) -> AsyncIterator[dict]:
        signal.raise_if_aborted()

        client = self._client or httpx.AsyncClient(timeout=self._timeout)
        try:
            request = client.build_request("POST", url, json=body, headers=headers)
            response = await _race(client.send(request, stream=True), signal)
            try:
                if response.status_code >= 400:
                    # Read the body so the error carries the API's message.
                    await _race(response.aread(), signal)
                    response.raise_for_status()

                async for payload in _iter_payloads(response, signal):
                    yield payload
            finally:
                await response.aclose()
        finally:
            if self._client is None:
                await client.aclose()


async def _iter_payloads(
    response: httpx.Response, signal: AbortSignal
) -> AsyncIterator[dict]:
    lines = response.aiter_lines()
    while True:
        try:
            line = await _race(lines.__anext__(), signal)
        except StopAsyncIteration:
            return

        payload = _parse_sse_line(line)
        if payload is None:
            continue
        if payload is _DONE:
            return

        error = payload.get("error")
        if isinstance(error, dict):
            raise UpstreamAPIError(
                str(error.get("message") or "Upstream error"),
                _status_of(error),
            )
        yield payload


def _parse_sse_line(line: str) -> Any:
    """
    Parse one SSE line.

    Returns the decoded ``data:`` payload, ``_DONE`` for ``data: [DONE]``,
    or ``None`` for anything to skip (comments, event names, bad JSON).
    """
    line = line.rstrip("\r")
    if not line.startswith("data:"):
        return None

    data_str = line[len("data:"):].strip()
    if not data_str:
        return None
    if data_str == "[DONE]":
        return _DONE

    try:
        data = json.loads(data_str)
    except json.JSONDecodeError:
        logger.warning("Failed to parse SSE data: %s", data_str[:200])
        return None

    if not isinstance(data, dict):
        logger.warning("Ignoring non-object SSE payload: %s", data_str[:200])
        return None
    return data


def _status_of(error: dict) -> int | None:
    for key in ("status", "status_code", "http_code"):
        value = error.get(key)
        if isinstance(value, int) and not isinstance(value, bool):
            return value
    return None


async def _race(awaitable: Awaitable[T], signal: AbortSignal) -> T:
    """
    Await *awaitable* unless *signal* aborts first.

    On abort the pending operation is cancelled and ``RequestAborted`` raised.
    """
    signal.raise_if_aborted()

    task = asyncio.ensure_future(awaitable)
    waiter = asyncio.ensure_future(signal.wait())
    try:
        done, _ = await asyncio.wait(
            {task, waiter}, return_when=asyncio.FIRST_COMPLETED
        )
    except BaseException:
        task.cancel()
        raise
    finally:
        waiter.cancel()

    if task in done:
        return task.result()

    task.cancel()
    try:
        await task
    except (asyncio.CancelledError, StopAsyncIteration, httpx.HTTPError):
        pass
    raise RequestAborted()
