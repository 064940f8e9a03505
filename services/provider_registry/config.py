"""Pydantic settings for the Provider Registry Service."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator

from packages.switchyard_shared.config import (
    SwitchyardSettings,
    resolve_component_settings,
)
from services.provider_registry.component import SERVICE_COMPONENT_ID

DEFAULT_MAX_POOL_SIZE = 10
SUPPORTED_PROVIDERS = frozenset({"ollama", "litellm"})


class EmbedderSettings(BaseModel):
    """Provider/model selector and concurrency ceiling for the batch embedder."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    provider: str = "ollama"
    model: str = "mxbai-embed-large"
    dimensions: int = Field(default=0, ge=0)
    max_pool_size: int = DEFAULT_MAX_POOL_SIZE


class ProviderRegistryServiceSettings(BaseModel):
    """Resolved service settings: which providers to register at startup."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    providers: tuple[str, ...] = ("ollama",)
    embedder: EmbedderSettings = EmbedderSettings()

    @field_validator("providers")
    @classmethod
    def _validate_providers(cls, value: tuple[str, ...]) -> tuple[str, ...]:
        normalized = tuple(item.strip() for item in value)
        unknown = sorted(set(normalized) - SUPPORTED_PROVIDERS)
        if unknown:
            raise ValueError(f"unsupported providers: {', '.join(unknown)}")
        if len(set(normalized)) != len(normalized):
            raise ValueError("providers must not contain duplicates")
        return normalized


def resolve_provider_registry_settings(
    settings: SwitchyardSettings,
) -> ProviderRegistryServiceSettings:
    """Resolve service settings from ``components.service.provider_registry``."""
    return resolve_component_settings(
        settings=settings,
        component_id=SERVICE_COMPONENT_ID,
        model=ProviderRegistryServiceSettings,
    )
