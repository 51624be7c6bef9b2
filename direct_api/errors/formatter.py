"""Application error type and formatting utilities.

This module provides:
- DirectAPIError exception class built from registry codes
- Error formatting for logs and API responses
"""

from dataclasses import dataclass, field

from direct_api.errors.registry import get_error


@dataclass
class DirectAPIError(Exception):
    """Application error with code, message, and context.

    Attributes:
        code: Error code in E-XXXX format.
        message: Human-readable error message.
        remediation: Action the caller should take to resolve.
        http_status: HTTP status code reported to the caller.
        details: Additional context dictionary.
    """

    code: str
    message: str
    remediation: str
    http_status: int = 400
    details: dict = field(default_factory=dict)

    def __str__(self) -> str:
        """Return string representation of the error."""
        return f"{self.code}: {self.message}"

    @classmethod
    def from_code(cls, code: str, **kwargs: object) -> "DirectAPIError":
        """Create error from registry code with context substitution.

        Args:
            code: Error code in E-XXXX format.
            **kwargs: Context values for message template substitution.
                The special key 'details' is stored on the error rather
                than substituted.

        Returns:
            Error instance of the calling class with formatted message.
        """
        details = kwargs.pop("details", {})
        if not isinstance(details, dict):
            details = {}

        error_def = get_error(code)
        if not error_def:
            return cls(
                code=code,
                message=f"Unknown error: {code}",
                remediation="Contact support.",
                http_status=500,
                details=details,
            )

        message = error_def.message_template
        remediation = error_def.remediation
        try:
            message = message.format(**kwargs)
            remediation = remediation.format(**kwargs)
        except KeyError:
            # Keep template if some placeholders are missing
            pass

        return cls(
            code=error_def.code,
            message=message,
            remediation=remediation,
            http_status=error_def.http_status,
            details=details,
        )

    def to_response(self) -> dict:
        """Return the JSON body reported to API callers."""
        return {
            "error_code": self.code,
            "message": self.message,
            "remediation": self.remediation,
            "details": self.details if self.details else None,
        }


def format_error(error: DirectAPIError, include_remediation: bool = True) -> str:
    """Format error for display.

    Args:
        error: The DirectAPIError to format.
        include_remediation: Whether to include remediation steps.

    Returns:
        Multi-line formatted string.
    """
    lines = [f"{error.code}: {error.message}"]
    for key, value in sorted(error.details.items()):
        lines.append(f"  {key}: {value}")
    if include_remediation:
        lines.append(f"  Action: {error.remediation}")
    return "\n".join(lines)
