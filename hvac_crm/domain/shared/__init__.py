"""
Shared Domain Module

Shared domain concepts used across all subdomains (compliance, hvac, quotes,
permissions). Contains the domain exception hierarchy.
"""

from .exceptions import (
    DomainException,
    EntityNotFoundError,
    FeatureDisabledError,
    InsufficientPermissionsError,
    InvalidEntityError,
    InvalidQuoteError,
    InvalidSearchQueryError,
    InvalidStatusTransitionError,
    InvalidTaxIdentifierError,
)

__all__ = [
    "DomainException",
    "InvalidTaxIdentifierError",
    "InvalidEntityError",
    "InvalidQuoteError",
    "InvalidStatusTransitionError",
    "EntityNotFoundError",
    "InsufficientPermissionsError",
    "FeatureDisabledError",
    "InvalidSearchQueryError",
]
