"""
Error taxonomy for MiniMax requests.

Every failure raised by the client is a ``ProviderError`` whose ``code`` is
one of the ``ErrorCode`` constants.  The client never retries; callers pick
the remediation (e.g. deleting a stored key on ``AUTHENTICATION_ERROR``).
"""

from __future__ import annotations

from typing import Any

import httpx

from minimax_lm.llm.cancellation import RequestAborted
from minimax_lm.types import ErrorCode


class ProviderError(Exception):
    def __init__(
        self,
        message: str,
        code: str = ErrorCode.UNKNOWN_ERROR,
        status_code: int | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code
        self.status_code = status_code

    def __repr__(self) -> str:
        return (
            f"ProviderError(code={self.code!r}, status_code={self.status_code!r}, "
            f"message={self.message!r})"
        )


class UpstreamAPIError(Exception):
    """An API error reported by the upstream, in a response or inside the stream."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code


def classify_error(error: Any) -> ProviderError:
    """Map any caught failure onto a ``ProviderError``."""
    if isinstance(error, ProviderError):
        return error

    if isinstance(error, httpx.HTTPStatusError):
        return _api_error(_http_error_message(error), error.response.status_code)

    if isinstance(error, UpstreamAPIError):
        return _api_error(error.message, error.status_code or 0)

    if isinstance(error, RequestAborted):
        return ProviderError("Request timeout", ErrorCode.TIMEOUT)

    if isinstance(error, BaseException):
        return ProviderError(str(error) or repr(error), ErrorCode.NETWORK_ERROR)

    return ProviderError(str(error), ErrorCode.UNKNOWN_ERROR)


def _api_error(message: str, status_code: int) -> ProviderError:
    code = (
        ErrorCode.AUTHENTICATION_ERROR if status_code == 401 else ErrorCode.API_ERROR
    )
    return ProviderError(message, code, status_code)


def _http_error_message(error: httpx.HTTPStatusError) -> str:
    """Prefer the API's own error message over httpx's generic text."""
    response = error.response
    try:
        payload = response.json()
    except (ValueError, httpx.ResponseNotRead):
        payload = None

    if isinstance(payload, dict):
        err = payload.get("error")
        if isinstance(err, dict) and isinstance(err.get("message"), str):
            return f"{response.status_code} {err['message']}"
        base = payload.get("base_resp")
        if isinstance(base, dict) and isinstance(base.get("status_msg"), str):
            return f"{response.status_code} {base['status_msg']}"

    return f"HTTP {response.status_code}"
