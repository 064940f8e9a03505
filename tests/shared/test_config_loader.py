"""Tests for pydantic-settings-backed shared configuration loading."""

from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import BaseModel, ValidationError

from packages.switchyard_shared.config import (
    SwitchyardSettings,
    load_settings,
    resolve_component_settings,
)
from resources.adapters.ollama.config import resolve_ollama_adapter_settings
from services.provider_registry.config import resolve_provider_registry_settings


class _ExampleSettings(BaseModel):
    size: int = 1


def test_load_settings_uses_switchyard_precedence_cascade(tmp_path: Path) -> None:
    """Init params should override env, env should override YAML, then defaults."""
    config_file = tmp_path / "switchyard.yaml"
    config_file.write_text(
        "\n".join(
            [
                "logging:",
                "  level: WARNING",
                "components:",
                "  adapter:",
                "    ollama:",
                "      base_url: http://yaml-host:11434",
                "      timeout_seconds: 15",
                "  service:",
                "    provider_registry:",
                "      embedder:",
                "        max_pool_size: 3",
            ]
        ),
        encoding="utf-8",
    )

    settings = load_settings(
        cli_params={"logging": {"level": "DEBUG"}},
        environ={
            "SWITCHYARD_LOGGING__LEVEL": "ERROR",
            "SWITCHYARD_COMPONENTS__ADAPTER__OLLAMA__BASE_URL": "http://env-host:11434",
            "SWITCHYARD_COMPONENTS__SERVICE__PROVIDER_REGISTRY__EMBEDDER__DIMENSIONS": "1024",
            "UNRELATED_VARIABLE": "ignored",
        },
        config_path=config_file,
    )

    ollama = resolve_ollama_adapter_settings(settings)
    registry = resolve_provider_registry_settings(settings)

    assert settings.logging.level == "DEBUG"
    assert ollama.base_url == "http://env-host:11434"
    assert ollama.timeout_seconds == 15
    assert registry.embedder.max_pool_size == 3
    assert registry.embedder.dimensions == 1024


def test_load_settings_uses_model_defaults_when_sources_missing(tmp_path: Path) -> None:
    """Settings should fall back to model defaults when env and YAML are absent."""
    settings = load_settings(config_path=tmp_path / "switchyard.yaml", environ={})

    assert settings.logging.level == "INFO"
    assert settings.logging.service == "switchyard"
    assert settings.logging.json_output is True
    assert resolve_ollama_adapter_settings(settings).base_url == (
        "http://localhost:11434"
    )


def test_load_settings_coerces_env_scalars(tmp_path: Path) -> None:
    settings = load_settings(
        config_path=tmp_path / "missing.yaml",
        environ={
            "SWITCHYARD_LOGGING__JSON_OUTPUT": "false",
            "SWITCHYARD_COMPONENTS__SERVICE__PROVIDER_REGISTRY__PROVIDERS": (
                '["ollama", "litellm"]'
            ),
        },
    )

    assert settings.logging.json_output is False
    assert resolve_provider_registry_settings(settings).providers == (
        "ollama",
        "litellm",
    )


def test_load_settings_rejects_non_mapping_yaml(tmp_path: Path) -> None:
    config_file = tmp_path / "switchyard.yaml"
    config_file.write_text("- just\n- a list\n", encoding="utf-8")

    with pytest.raises(ValueError, match="top-level mapping"):
        load_settings(config_path=config_file, environ={})


def test_flat_component_keys_are_rejected() -> None:
    with pytest.raises(ValidationError, match="components.adapter.ollama"):
        SwitchyardSettings(components={"adapter_ollama": {"base_url": "http://x"}})


def test_resolve_component_settings_rejects_unknown_kind() -> None:
    with pytest.raises(ValueError, match="invalid component id"):
        resolve_component_settings(
            settings=SwitchyardSettings(),
            component_id="substrate_postgres",
            model=_ExampleSettings,
        )


def test_resolve_component_settings_defaults_for_missing_section() -> None:
    resolved = resolve_component_settings(
        settings=SwitchyardSettings(components={}),
        component_id="adapter_example",
        model=_ExampleSettings,
    )

    assert resolved == _ExampleSettings()
