"""Component identifier for the LiteLLM adapter resource."""

from __future__ import annotations

RESOURCE_COMPONENT_ID = "adapter_litellm"
