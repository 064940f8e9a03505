"""Canonical structured logging field names.

Every component logs with these keys so log lines from the registry, the
embedder and the backend adapters can be joined on the same fields.
"""

TIMESTAMP = "timestamp"
LEVEL = "level"
LOGGER = "logger"
MESSAGE = "message"
EVENT = "event"

# Call correlation.
TRACE_ID = "trace_id"

# Public API invocation fields.
COMPONENT_ID = "component_id"
API_NAME = "api_name"
PUBLIC_API_INVOCATION_EVENT = "public_api_invocation"
PUBLIC_API_COMPLETION_EVENT = "public_api_completion"
SUCCESS = "success"
DURATION_MS = "duration_ms"
ERRORS = "errors"
ERROR_CATEGORY = "error_category"

# Provider routing fields.
PROVIDER = "provider"
MODEL = "model"
BATCH_SIZE = "batch_size"
POOL_SIZE = "pool_size"
ITEM_INDEX = "item_index"

# Common service-level fields.
SERVICE = "service"
ENVIRONMENT = "environment"
