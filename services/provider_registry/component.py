"""Component identifiers for the Provider Registry Service."""

from __future__ import annotations

SERVICE_COMPONENT_ID = "service_provider_registry"
EMBEDDER_COMPONENT_ID = "service_provider_registry.embedder"
ADAPTER_COMPONENT_ID = "service_provider_registry.adapter"
