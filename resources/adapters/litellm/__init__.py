"""LiteLLM adapter resource exports."""

from resources.adapters.litellm.component import RESOURCE_COMPONENT_ID
from resources.adapters.litellm.config import (
    LiteLlmAdapterSettings,
    LiteLlmModelSettings,
    resolve_litellm_adapter_settings,
)
from resources.adapters.litellm.litellm_provider import LiteLlmProvider

__all__ = [
    "LiteLlmAdapterSettings",
    "LiteLlmModelSettings",
    "LiteLlmProvider",
    "RESOURCE_COMPONENT_ID",
    "resolve_litellm_adapter_settings",
]
