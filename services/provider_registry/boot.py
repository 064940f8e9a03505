"""Process startup for the Provider Registry Service."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Sequence, TextIO

from packages.switchyard_shared.config import SwitchyardSettings, load_settings
from packages.switchyard_shared.llm import Provider
from packages.switchyard_shared.logging import configure_logging, get_logger
from services.provider_registry.embedder import LlmEmbedder
from services.provider_registry.service import (
    ProviderRegistryService,
    build_llm_embedder,
    build_provider_registry_service,
)

_LOGGER = get_logger(__name__)


@dataclass(frozen=True)
class ProviderRuntime:
    """Everything a host process needs after startup."""

    settings: SwitchyardSettings
    registry: ProviderRegistryService
    embedder: LlmEmbedder


def bootstrap(
    *,
    settings: SwitchyardSettings | None = None,
    config_path: str | Path | None = None,
    providers: Sequence[Provider] | None = None,
    log_stream: TextIO | None = None,
) -> ProviderRuntime:
    """Load settings, configure logging, then build the registry and embedder.

    ``settings`` wins over ``config_path``; with neither, the default config
    file and ``SWITCHYARD_`` environment variables are read.
    """
    resolved = (
        settings if settings is not None else load_settings(config_path=config_path)
    )
    configure_logging(resolved.logging, stream=log_stream)

    registry = build_provider_registry_service(settings=resolved, providers=providers)
    embedder = build_llm_embedder(settings=resolved, registry=registry)
    _LOGGER.info(
        "Provider registry started with providers: %s",
        ", ".join(registry.list_providers()) or "(none)",
    )
    return ProviderRuntime(settings=resolved, registry=registry, embedder=embedder)
