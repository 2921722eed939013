"""Catalog of MiniMax models exposed to the host."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class ModelInfo:
    id: str
    name: str
    context_length: int


SUPPORTED_MODELS: tuple[ModelInfo, ...] = (
    ModelInfo("MiniMax-M2.5", "MiniMax M2.5", 204_800),
    ModelInfo("MiniMax-M2.1", "MiniMax M2.1", 204_800),
    ModelInfo("MiniMax-M2", "MiniMax M2", 204_800),
)

DEFAULT_MODEL_ID = "MiniMax-M2.5"

_MODEL_BY_ID = {m.id: m for m in SUPPORTED_MODELS}


def get_model_by_id(model_id: str) -> ModelInfo | None:
    return _MODEL_BY_ID.get(model_id)


def visible_models(configured: Any) -> list[ModelInfo]:
    """
    Filter the catalog by a configured list of model ids.

    Anything that is not a list, or a list that matches nothing, yields the
    whole catalog.
    """
    if not isinstance(configured, list):
        return list(SUPPORTED_MODELS)

    wanted = {v for v in configured if isinstance(v, str)}
    selected = [m for m in SUPPORTED_MODELS if m.id in wanted]
    return selected or list(SUPPORTED_MODELS)
