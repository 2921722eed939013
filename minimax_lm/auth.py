"""
API key storage.

Keys come from an environment variable when set, otherwise from a small JSON
credentials file written with owner-only permissions.
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Callable

import typer

logger = logging.getLogger(__name__)

_KEY_FIELD = "apiKey"


def _typer_prompt() -> str:
    return typer.prompt(
        "Enter your MiniMax API Key", hide_input=True, default="", show_default=False
    )


class ApiKeyStore:
    """
    Parameters
    ----------
    path:
        Location of the credentials JSON file.
    env_var:
        Environment variable that, when non-blank, takes precedence over the
        stored key.
    prompt:
        Callable returning the user's answer.  Defaults to a hidden
        ``typer.prompt``.
    """

    def __init__(
        self,
        path: str | Path,
        env_var: str | None = None,
        prompt: Callable[[], str | None] | None = None,
    ) -> None:
        self.path = Path(path).expanduser()
        self.env_var = env_var
        self._prompt = prompt or _typer_prompt

    def get_api_key(self) -> str | None:
        if self.env_var:
            env_key = os.environ.get(self.env_var, "").strip()
            if env_key:
                return env_key

        stored = self._read().get(_KEY_FIELD)
        if isinstance(stored, str) and stored.strip():
            return stored.strip()
        return None

    def get_or_prompt_api_key(self) -> str | None:
        return self.get_api_key() or self.prompt_for_api_key()

    def prompt_for_api_key(self) -> str | None:
        answer = self._prompt()
        key = (answer or "").strip()
        if not key:
            return None
        self.store_api_key(key)
        return key

    def store_api_key(self, key: str) -> None:
        data = self._read()
        data[_KEY_FIELD] = key.strip()
        self._write(data)
        logger.info("Stored API key in %s", self.path)

    def delete_api_key(self) -> None:
        data = self._read()
        if _KEY_FIELD not in data:
            return
        del data[_KEY_FIELD]
        self._write(data)
        logger.info("Deleted stored API key from %s", self.path)

    # ------------------------------------------------------------------
    # File I/O
    # ------------------------------------------------------------------

    def _read(self) -> dict:
        if not self.path.is_file():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except json.JSONDecodeError:
            logger.warning("Ignoring unreadable credentials file %s", self.path)
            return {}
        return data if isinstance(data, dict) else {}

    def _write(self, data: dict) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd = os.open(self.path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            json.dump(data, f)
        os.chmod(self.path, 0o600)
