"""Domain-specific exceptions.

All exceptions in the salesdesk package inherit from SalesdeskError,
making it easy to catch every library error while still being able
to handle specific error types.
"""

from __future__ import annotations

from enum import Enum
from typing import Any


class ApiErrorCode(str, Enum):
    """Standardized transport error codes."""

    NETWORK_ERROR = "NETWORK_ERROR"
    TIMEOUT = "TIMEOUT"
    UNAUTHORIZED = "UNAUTHORIZED"
    FORBIDDEN = "FORBIDDEN"
    NOT_FOUND = "NOT_FOUND"
    CONFLICT = "CONFLICT"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    INTERNAL_ERROR = "INTERNAL_ERROR"
    SERVICE_UNAVAILABLE = "SERVICE_UNAVAILABLE"
    UNKNOWN_ERROR = "UNKNOWN_ERROR"


STATUS_CODES: dict[int, ApiErrorCode] = {
    401: ApiErrorCode.UNAUTHORIZED,
    403: ApiErrorCode.FORBIDDEN,
    404: ApiErrorCode.NOT_FOUND,
    409: ApiErrorCode.CONFLICT,
    422: ApiErrorCode.VALIDATION_ERROR,
    500: ApiErrorCode.INTERNAL_ERROR,
    503: ApiErrorCode.SERVICE_UNAVAILABLE,
}


class SalesdeskError(Exception):
    """Base exception for all salesdesk errors."""

    pass


class ApiError(SalesdeskError):
    """Request to the backend failed.

    Carries the HTTP status (0 when no response was received), a
    standardized error code and whatever JSON body the server returned.

    Attributes:
        status: HTTP status code, 0 for network failures.
        code: Standardized error code.
        data: Decoded error body, if any.
    """

    def __init__(
        self,
        message: str,
        status: int = 500,
        code: ApiErrorCode | None = None,
        data: dict[str, Any] | None = None,
    ) -> None:
        """Initialize ApiError.

        Args:
            message: Human readable error description.
            status: HTTP status code.
            code: Error code; derived from status when omitted.
            data: Decoded response body.
        """
        super().__init__(message)
        self.message = message
        self.status = status
        self.code = code or STATUS_CODES.get(status, ApiErrorCode.UNKNOWN_ERROR)
        self.data = data

    @property
    def is_unauthorized(self) -> bool:
        """True when the server rejected the session."""
        return self.status == 401

    @property
    def is_forbidden(self) -> bool:
        """True for 403 responses."""
        return self.status == 403

    @property
    def is_client_error(self) -> bool:
        """True for 4xx responses."""
        return 400 <= self.status < 500

    @property
    def is_server_error(self) -> bool:
        """True for 5xx responses."""
        return self.status >= 500

    @property
    def validation_errors(self) -> dict[str, list[str]] | None:
        """Field errors from a 422 response, if the server sent any."""
        if self.code != ApiErrorCode.VALIDATION_ERROR or not self.data:
            return None
        errors = self.data.get("errors")
        return errors if isinstance(errors, dict) else None

    def to_dict(self) -> dict[str, Any]:
        """Serialize for logging."""
        return {
            "message": self.message,
            "status": self.status,
            "code": self.code.value,
            "data": self.data,
        }


class AuthError(SalesdeskError):
    """Authentication failed.

    Raised for bad credentials or any other login failure that the
    user can act on. The message is safe to show to the user.
    """

    pass


class PortalAccessDeniedError(AuthError):
    """The account authenticated but may not use the web portal."""

    pass


class AccessDeniedError(SalesdeskError):
    """Actor lacks access to a module or feature.

    Attributes:
        module: Module that was checked.
        feature: Feature key that was checked.
    """

    def __init__(self, module: str, feature: str) -> None:
        """Initialize AccessDeniedError.

        Args:
            module: Module that was checked.
            feature: Feature key that was checked.
        """
        super().__init__(f"Access to '{feature}' on '{module}' is not permitted")
        self.module = module
        self.feature = feature


class RoleError(SalesdeskError):
    """Role administration rule violated (e.g. deleting a default role)."""

    pass
