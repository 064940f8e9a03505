"""Pydantic settings for the LiteLLM adapter resource."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator

from packages.switchyard_shared.config import (
    SwitchyardSettings,
    resolve_component_settings,
)
from resources.adapters.litellm.component import RESOURCE_COMPONENT_ID


class LiteLlmModelSettings(BaseModel):
    """One catalog entry reported by ``list_models`` and ``get_model``."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    name: str
    context_window_size: int = Field(default=0, ge=0)
    max_output_tokens: int = Field(default=0, ge=0)
    supports_image_input: bool = False
    pricing_per_input_token: float = Field(default=0.0, ge=0)
    pricing_per_output_token: float = Field(default=0.0, ge=0)


class LiteLlmAdapterSettings(BaseModel):
    """In-process LiteLLM provider runtime configuration."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    name: str = "litellm"
    backend: str = "ollama"
    api_base: str = "http://localhost:11434"
    api_key: str = ""
    api_key_env: str = ""
    timeout_seconds: float = Field(default=30.0, gt=0)
    max_retries: int = Field(default=2, ge=0)
    embed_model: str = "mxbai-embed-large"
    models: tuple[LiteLlmModelSettings, ...] = ()
    options: dict[str, Any] = Field(default_factory=dict)

    @model_validator(mode="after")
    def _validate_settings(self) -> "LiteLlmAdapterSettings":
        """Reject blank selectors and ambiguous inline + env-based API keys."""
        if self.name.strip() == "":
            raise ValueError("name must be non-empty")
        if self.backend.strip() == "":
            raise ValueError("backend must be non-empty")
        if self.api_key.strip() != "" and self.api_key_env.strip() != "":
            raise ValueError("api_key and api_key_env are mutually exclusive")
        names = [model.name for model in self.models]
        if len(set(names)) != len(names):
            raise ValueError("models must have unique names")
        return self


def resolve_litellm_adapter_settings(
    settings: SwitchyardSettings,
) -> LiteLlmAdapterSettings:
    """Resolve LiteLLM adapter settings from ``components.adapter.litellm``."""
    return resolve_component_settings(
        settings=settings,
        component_id=RESOURCE_COMPONENT_ID,
        model=LiteLlmAdapterSettings,
    )
