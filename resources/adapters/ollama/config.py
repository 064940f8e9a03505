"""Pydantic settings for the Ollama adapter resource."""

from __future__ import annotations

import httpx
from pydantic import BaseModel, ConfigDict, Field, field_validator

from packages.switchyard_shared.config import (
    SwitchyardSettings,
    resolve_component_settings,
)
from resources.adapters.ollama.component import RESOURCE_COMPONENT_ID

DEFAULT_BASE_URL = "http://localhost:11434"
DEFAULT_EMBED_MODEL = "mxbai-embed-large"


class OllamaAdapterSettings(BaseModel):
    """Runtime settings for calls to one Ollama daemon."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    base_url: str = DEFAULT_BASE_URL
    timeout_seconds: float = Field(default=60.0, gt=0)
    embed_model: str = DEFAULT_EMBED_MODEL
    default_context_window: int = Field(default=4096, ge=0)
    default_max_output_tokens: int = Field(default=2048, ge=0)

    @field_validator("base_url", mode="before")
    @classmethod
    def _validate_base_url(cls, value: object) -> object:
        """Require an absolute http(s) URL and drop any trailing slash."""
        if not isinstance(value, str):
            return value
        if not is_valid_endpoint(value):
            raise ValueError(f"invalid endpoint URL: {value!r}")
        return value.strip().rstrip("/")

    @field_validator("embed_model")
    @classmethod
    def _validate_embed_model(cls, value: str) -> str:
        normalized = value.strip()
        if normalized == "":
            raise ValueError("embed_model must be non-empty")
        return normalized


def is_valid_endpoint(value: str) -> bool:
    """Return whether ``value`` parses as an absolute http(s) URL with a host."""
    try:
        url = httpx.URL(value.strip())
    except (httpx.InvalidURL, TypeError):
        return False
    return url.scheme in {"http", "https"} and url.host != ""


def resolve_ollama_adapter_settings(
    settings: SwitchyardSettings,
) -> OllamaAdapterSettings:
    """Resolve adapter settings from ``components.adapter.ollama``."""
    return resolve_component_settings(
        settings=settings,
        component_id=RESOURCE_COMPONENT_ID,
        model=OllamaAdapterSettings,
    )
