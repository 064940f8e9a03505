"""Shared error code constants.

Codes are stable machine-readable identifiers attached to every error detail
produced by Switchyard components. Component-specific codes live next to the
shared ones so that callers only ever import one module.
"""

# Validation
VALIDATION_ERROR = "VALIDATION_ERROR"
INVALID_ARGUMENT = "INVALID_ARGUMENT"
UNSUPPORTED_CONTENT_TYPE = "UNSUPPORTED_CONTENT_TYPE"
DIMENSION_MISMATCH = "DIMENSION_MISMATCH"

# Not found
NOT_FOUND = "NOT_FOUND"

# Conflict
ALREADY_EXISTS = "ALREADY_EXISTS"

# Dependency / backend
DEPENDENCY_FAILURE = "DEPENDENCY_FAILURE"
DEPENDENCY_TIMEOUT = "DEPENDENCY_TIMEOUT"
DEPENDENCY_UNAVAILABLE = "DEPENDENCY_UNAVAILABLE"

# Internal
INTERNAL_ERROR = "INTERNAL_ERROR"
UNEXPECTED_EXCEPTION = "UNEXPECTED_EXCEPTION"
