"""
Typed configuration model with precedence-based loader.

Precedence (lowest to highest):
    defaults < config file (YAML) < env vars < CLI flags
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field, fields, asdict
from pathlib import Path
from typing import Any

import yaml

from minimax_lm.llm.client import DEFAULT_BASE_URL, DEFAULT_MAX_TOKENS, DEFAULT_TEMPERATURE
from minimax_lm.llm.models import DEFAULT_MODEL_ID


# ---------------------------------------------------------------------------
# Section dataclasses
# ---------------------------------------------------------------------------

@dataclass
class ApiConfig:
    base_url: str = DEFAULT_BASE_URL
    api_key_env: str = "MINIMAX_API_KEY"
    timeout_seconds: int = 120


@dataclass
class ChatConfig:
    default_model: str = DEFAULT_MODEL_ID
    temperature: float = DEFAULT_TEMPERATURE
    max_tokens: int = DEFAULT_MAX_TOKENS
    reasoning_split: bool = True


@dataclass
class ModelsConfig:
    visible_models: list[str] | None = None


@dataclass
class CredentialsConfig:
    store_path: str = "~/.minimax_lm/credentials.json"


# ---------------------------------------------------------------------------
# Root config
# ---------------------------------------------------------------------------

@dataclass
class MiniMaxConfig:
    api: ApiConfig = field(default_factory=ApiConfig)
    chat: ChatConfig = field(default_factory=ChatConfig)
    models: ModelsConfig = field(default_factory=ModelsConfig)
    credentials: CredentialsConfig = field(default_factory=CredentialsConfig)

    def to_dict(self) -> dict:
        return asdict(self)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _apply_dotpath(obj: Any, dotpath: str, value: Any) -> None:
    """Walk obj via dotpath and set the final attribute."""
    parts = dotpath.split(".")
    for part in parts[:-1]:
        obj = getattr(obj, part)
    setattr(obj, parts[-1], value)


def _coerce(value: str, target_type: type) -> Any:
    """Coerce a string env value to the target type."""
    if target_type is bool:
        return value.lower() in ("1", "true", "yes", "on")
    if target_type is int:
        return int(value)
    if target_type is float:
        return float(value)
    if target_type is list:
        return [s.strip() for s in value.split(",") if s.strip()]
    return value


def _build_section(cls: type, raw: Any) -> Any:
    """Build a dataclass section from a raw dict, ignoring unknown keys."""
    if not isinstance(raw, dict):
        return cls()
    valid_fields = {f.name for f in fields(cls)}
    filtered = {k: v for k, v in raw.items() if k in valid_fields}
    return cls(**filtered)


# ---------------------------------------------------------------------------
# ENV var mapping
# ---------------------------------------------------------------------------

_ENV_MAP: dict[str, tuple[str, type]] = {
    "MINIMAX_LM_BASE_URL":        ("api.base_url", str),
    "MINIMAX_LM_API_KEY_ENV":     ("api.api_key_env", str),
    "MINIMAX_LM_TIMEOUT":         ("api.timeout_seconds", int),
    "MINIMAX_LM_MODEL":           ("chat.default_model", str),
    "MINIMAX_LM_TEMPERATURE":     ("chat.temperature", float),
    "MINIMAX_LM_MAX_TOKENS":      ("chat.max_tokens", int),
    "MINIMAX_LM_REASONING_SPLIT": ("chat.reasoning_split", bool),
    "MINIMAX_LM_VISIBLE_MODELS":  ("models.visible_models", list),
    "MINIMAX_LM_CREDENTIALS":     ("credentials.store_path", str),
}


# ---------------------------------------------------------------------------
# Loader
# ---------------------------------------------------------------------------

def find_config_path() -> Path | None:
    """Find a config file in the standard locations."""
    candidates = [
        Path.cwd() / "minimax.yaml",
        Path.cwd() / "minimax.yml",
        Path.home() / ".config" / "minimax_lm" / "config.yaml",
        Path.home() / ".minimax_lm" / "config.yaml",
    ]
    for p in candidates:
        if p.is_file():
            return p
    return None


def load_config(
    config_path: str | Path | None = None,
    *,
    cli_overrides: dict[str, Any] | None = None,
) -> MiniMaxConfig:
    """
    Build a MiniMaxConfig by layering sources in precedence order:

        defaults  <  config file  <  env vars  <  CLI flags

    Parameters
    ----------
    config_path : path to YAML config file (optional)
    cli_overrides : dict of dotpath -> value CLI flag overrides
    """
    raw: dict[str, Any] = {}

    # --- 1. Config file ---
    if config_path is not None:
        p = Path(config_path).expanduser()
        if p.is_file():
            with p.open("r", encoding="utf-8") as f:
                raw = yaml.safe_load(f) or {}
            if not isinstance(raw, dict):
                raise ValueError(f"Config file {p} must contain a mapping")

    # --- Build sections from raw ---
    cfg = MiniMaxConfig(
        api=_build_section(ApiConfig, raw.get("api", {})),
        chat=_build_section(ChatConfig, raw.get("chat", {})),
        models=_build_section(ModelsConfig, raw.get("models", {})),
        credentials=_build_section(CredentialsConfig, raw.get("credentials", {})),
    )

    # --- 2. Env var overrides ---
    for env_var, (dotpath, target_type) in _ENV_MAP.items():
        val = os.environ.get(env_var)
        if val is not None:
            _apply_dotpath(cfg, dotpath, _coerce(val, target_type))

    # --- 3. CLI flag overrides ---
    if cli_overrides:
        for dotpath, value in cli_overrides.items():
            if value is not None:
                _apply_dotpath(cfg, dotpath, value)

    return cfg
