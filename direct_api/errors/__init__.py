"""Error handling framework for the Direct API.

This package provides:
- Error code registry with E-XXXX format codes
- Typed exceptions the API layer maps to HTTP status codes
- Error formatting utilities

Error categories:
- E-2xxx: Validation errors (HTTP 400)
- E-4xxx: System/internal errors (HTTP 500)
- E-5xxx: Authentication errors (HTTP 401/403)
"""

from direct_api.errors.domain import (
    BadRequestError,
    DataAccessError,
    ServerInternalError,
    UnauthorizedError,
)
from direct_api.errors.formatter import DirectAPIError, format_error
from direct_api.errors.registry import (
    ERROR_REGISTRY,
    ErrorCategory,
    ErrorCode,
    get_error,
    get_errors_by_category,
)

__all__ = [
    # Registry
    "ErrorCode",
    "ErrorCategory",
    "ERROR_REGISTRY",
    "get_error",
    "get_errors_by_category",
    # Exceptions
    "DirectAPIError",
    "BadRequestError",
    "ServerInternalError",
    "UnauthorizedError",
    "DataAccessError",
    # Formatter
    "format_error",
]
