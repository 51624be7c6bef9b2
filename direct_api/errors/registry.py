"""Error code registry with E-XXXX format codes.

This module defines the error code system for the Direct API, organizing
errors into categories:
- E-2xxx: Validation errors (bad request)
- E-4xxx: System/internal errors
- E-5xxx: Authentication and authorization errors

Each error includes a code, title, message template, and remediation steps.
"""

from dataclasses import dataclass
from enum import Enum


class ErrorCategory(str, Enum):
    """Categories for error codes."""

    VALIDATION = "validation"  # E-2xxx: Caller input errors
    SYSTEM = "system"  # E-4xxx: System/internal errors
    AUTH = "auth"  # E-5xxx: Authentication errors


@dataclass
class ErrorCode:
    """Definition of an error code with metadata.

    Attributes:
        code: Error code in E-XXXX format.
        category: Error category for grouping.
        title: Short title for display.
        message_template: Message with {placeholders} for context.
        remediation: Action the caller should take to resolve.
        http_status: HTTP status the transport layer reports.
    """

    code: str
    category: ErrorCategory
    title: str
    message_template: str
    remediation: str
    http_status: int = 400


ERROR_REGISTRY: dict[str, ErrorCode] = {
    # Validation errors (E-2xxx)
    "E-2001": ErrorCode(
        code="E-2001",
        category=ErrorCategory.VALIDATION,
        title="Invalid Challenge Type Filter",
        message_template='Invalid type. One of ["active", "past", "draft"] expected.',
        remediation="Use only active, past or draft as type filter values.",
    ),
    "E-2002": ErrorCode(
        code="E-2002",
        category=ErrorCategory.VALIDATION,
        title="Invalid Creator Filter",
        message_template="Invalid creator, only current user is supported.",
        remediation="Filter by creator using your own handle only.",
    ),
    "E-2003": ErrorCode(
        code="E-2003",
        category=ErrorCategory.VALIDATION,
        title="Non-positive Direct Project Id",
        message_template="Direct Project Id should be positive.",
        remediation="Supply direct project ids greater than zero.",
    ),
    "E-2004": ErrorCode(
        code="E-2004",
        category=ErrorCategory.VALIDATION,
        title="Invalid Integer Filter",
        message_template="Invalid {field}.",
        remediation="Supply whole numbers for {field}.",
    ),
    "E-2005": ErrorCode(
        code="E-2005",
        category=ErrorCategory.VALIDATION,
        title="Invalid Start Date Filter",
        message_template="Invalid challenge start date filter, should be MM/dd/yyyy",
        remediation="Format startDateFrom and startDateTo as MM/dd/yyyy.",
    ),
    "E-2006": ErrorCode(
        code="E-2006",
        category=ErrorCategory.VALIDATION,
        title="Invalid End Date Filter",
        message_template="Invalid challenge end date filter, should be MM/dd/yyyy",
        remediation="Format endDateFrom and endDateTo as MM/dd/yyyy.",
    ),
    "E-2007": ErrorCode(
        code="E-2007",
        category=ErrorCategory.VALIDATION,
        title="Invalid Limit",
        message_template="Invalid limit, -1 if you want to get all records.",
        remediation="Use a positive limit, or -1 for all records.",
    ),
    "E-2008": ErrorCode(
        code="E-2008",
        category=ErrorCategory.VALIDATION,
        title="Invalid Offset",
        message_template="Invalid offset, must be 0 or more.",
        remediation="Use an offset of 0 or more.",
    ),
    "E-2009": ErrorCode(
        code="E-2009",
        category=ErrorCategory.VALIDATION,
        title="Unsupported Sort Field",
        message_template="Sorting is not supported for requested field.",
        remediation="Sort by one of the documented challenge fields.",
    ),
    "E-2010": ErrorCode(
        code="E-2010",
        category=ErrorCategory.VALIDATION,
        title="Unsupported Sort Order",
        message_template="Specified sort order is not supported. {sort_order}",
        remediation="Use asc or desc as sort order.",
    ),
    "E-2011": ErrorCode(
        code="E-2011",
        category=ErrorCategory.VALIDATION,
        title="Malformed Filter",
        message_template="Malformed filter expression '{segment}', expected key=value.",
        remediation="Encode filters as key=value pairs joined by '&'.",
    ),
    # System errors (E-4xxx)
    "E-4001": ErrorCode(
        code="E-4001",
        category=ErrorCategory.SYSTEM,
        title="Challenge Query Failed",
        message_template="An error occurred while querying for challenges",
        remediation="This is a system error. Retry the request. Contact support if issue persists.",
        http_status=500,
    ),
    "E-4002": ErrorCode(
        code="E-4002",
        category=ErrorCategory.SYSTEM,
        title="Challenge Count Failed",
        message_template="An error occurred while querying for challenges total count",
        remediation="This is a system error. Retry the request. Contact support if issue persists.",
        http_status=500,
    ),
    # Auth errors (E-5xxx)
    "E-5001": ErrorCode(
        code="E-5001",
        category=ErrorCategory.AUTH,
        title="Not Authenticated",
        message_template="The request is not associated with a logged in user.",
        remediation="Log in and retry the request.",
        http_status=401,
    ),
    "E-5002": ErrorCode(
        code="E-5002",
        category=ErrorCategory.AUTH,
        title="Access Denied",
        message_template="Access denied, one of {levels} access level is required.",
        remediation="Ask an administrator to grant you the member role.",
        http_status=403,
    ),
}


def get_error(code: str) -> ErrorCode | None:
    """Get error definition by code.

    Args:
        code: Error code in E-XXXX format.

    Returns:
        ErrorCode if found, None otherwise.
    """
    return ERROR_REGISTRY.get(code)


def get_errors_by_category(category: ErrorCategory) -> list[ErrorCode]:
    """Get all errors in a category."""
    return [e for e in ERROR_REGISTRY.values() if e.category == category]
