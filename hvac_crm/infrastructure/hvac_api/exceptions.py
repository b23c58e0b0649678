"""
HVAC API Exceptions.

Infrastructure errors raised by HvacApiClient. They are NOT domain exceptions:
API Layer maps them to HTTP responses using their status_code.
"""

from typing import Any, Optional


class HvacApiError(Exception):
    """
    Base exception for HVAC API failures.

    Attributes:
        message: Human-readable description
        status_code: HTTP status to report (upstream status or synthetic)
        details: Upstream response body or failure details (optional)
    """

    default_status_code = 500

    def __init__(self, message: str, status_code: Optional[int] = None, details: Any = None) -> None:
        self.message = message
        self.status_code = status_code if status_code is not None else self.default_status_code
        self.details = details
        super().__init__(message)

    def __str__(self) -> str:
        return f"{self.__class__.__name__}({self.status_code}): {self.message}"


class HvacApiTimeoutError(HvacApiError):
    default_status_code = 408

    def __init__(self, details: Any = None) -> None:
        super().__init__("HVAC API request timed out", details=details)


class HvacApiBadRequestError(HvacApiError):
    default_status_code = 400

    def __init__(self, message: str = "Bad request", details: Any = None) -> None:
        super().__init__(message, details=details)


class HvacApiUnauthorizedError(HvacApiError):
    default_status_code = 401

    def __init__(self, details: Any = None) -> None:
        super().__init__("Unauthorized access to HVAC API", details=details)


class HvacApiForbiddenError(HvacApiError):
    default_status_code = 403

    def __init__(self, details: Any = None) -> None:
        super().__init__("Access to HVAC API resource is forbidden", details=details)


class HvacApiNotFoundError(HvacApiError):
    default_status_code = 404

    def __init__(self, endpoint: str, details: Any = None) -> None:
        self.endpoint = endpoint
        super().__init__(f"HVAC API resource not found: {endpoint}", details=details)


class HvacApiServerError(HvacApiError):
    """Non-2xx status without a dedicated exception (5xx, 409, 422...)."""


class HvacApiNetworkError(HvacApiError):
    default_status_code = 503
