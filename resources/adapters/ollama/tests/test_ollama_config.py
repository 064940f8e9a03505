"""Tests for Ollama adapter settings resolution."""

from __future__ import annotations

from packages.switchyard_shared.config import SwitchyardSettings
from resources.adapters.ollama.config import (
    OllamaAdapterSettings,
    resolve_ollama_adapter_settings,
)


def test_resolve_ollama_adapter_settings_defaults() -> None:
    resolved = resolve_ollama_adapter_settings(SwitchyardSettings(components={}))

    assert resolved == OllamaAdapterSettings()
    assert resolved.base_url == "http://localhost:11434"
    assert resolved.embed_model == "mxbai-embed-large"


def test_resolve_ollama_adapter_settings_component_override() -> None:
    settings = SwitchyardSettings(
        components={
            "adapter": {
                "ollama": {
                    "base_url": "https://gpu-box.lan:11434/",
                    "timeout_seconds": 12.5,
                    "embed_model": " nomic-embed-text ",
                }
            }
        }
    )

    resolved = resolve_ollama_adapter_settings(settings)

    assert resolved.base_url == "https://gpu-box.lan:11434"
    assert resolved.timeout_seconds == 12.5
    assert resolved.embed_model == "nomic-embed-text"
