"""Typed domain exceptions for API error mapping.

The service layer raises these; the FastAPI exception handler turns
any DirectAPIError into a response using its ``http_status``.

Usage:
    # In the query layer
    raise BadRequestError.from_code("E-2009")

    # In the service facade
    except DataAccessError as e:
        raise ServerInternalError.from_code("E-4001") from e
"""

from direct_api.errors.formatter import DirectAPIError


class BadRequestError(DirectAPIError):
    """Caller input failed validation. Maps to HTTP 400."""


class ServerInternalError(DirectAPIError):
    """A data access call failed. Maps to HTTP 500.

    The message is a fixed context string; the underlying cause is
    chained with ``raise ... from`` and never reported to the caller.
    """


class UnauthorizedError(DirectAPIError):
    """Caller is not logged in (401) or lacks an access level (403)."""


class DataAccessError(Exception):
    """Raised by the persistence layer when a database call fails."""

    def __init__(self, operation: str) -> None:
        super().__init__(f"Database operation failed: {operation}")
        self.operation = operation
