"""
HVAC API Integration Module

Exports:
    - HvacApiClient: REST client for the external HVAC backend
    - ListResult, normalize_list: List response normalization
    - HvacApiError and subclasses
"""

from .client import HvacApiClient, ListResult, normalize_list
from .exceptions import (
    HvacApiBadRequestError,
    HvacApiError,
    HvacApiForbiddenError,
    HvacApiNetworkError,
    HvacApiNotFoundError,
    HvacApiServerError,
    HvacApiTimeoutError,
    HvacApiUnauthorizedError,
)

__all__ = [
    "HvacApiClient",
    "ListResult",
    "normalize_list",
    "HvacApiError",
    "HvacApiBadRequestError",
    "HvacApiForbiddenError",
    "HvacApiNetworkError",
    "HvacApiNotFoundError",
    "HvacApiServerError",
    "HvacApiTimeoutError",
    "HvacApiUnauthorizedError",
]
