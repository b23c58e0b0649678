"""
Domain Layer Exceptions

This module defines the exception hierarchy for the Domain Layer.
All domain-specific exceptions inherit from DomainException.

Responsibility:
    - Base exception class for domain errors
    - Type-safe error handling across layers
    - Clear separation from framework and infrastructure exceptions

Architecture Notes:
    - Part of Shared Domain (used across compliance, hvac, quotes and permissions)
    - API Layer maps each subclass to an HTTP status code (see api/main.py)
    - Infrastructure Layer raises its own exceptions (HvacApiError, SemanticSearchError)
"""


class DomainException(Exception):
    """
    Base exception for all domain layer errors.

    This exception serves as the root of the domain exception hierarchy.
    All domain-specific exceptions should inherit from this class to enable
    type-safe error handling in Application and API layers.

    Usage:
        - Catch this in Application Layer to handle all domain errors
        - API Layer converts to appropriate HTTP status codes
        - Infrastructure Layer should not raise DomainException (use own exceptions)

    Examples:
        >>> raise DomainException("Business rule violation")

        >>> try:
        ...     quote.change_status(QuoteStatus.SENT)
        ... except DomainException as e:
        ...     logger.error(f"Domain error: {e}")
    """

    def __init__(self, message: str) -> None:
        """
        Initialize domain exception with error message.

        Args:
            message: Human-readable error description
        """
        self.message = message
        super().__init__(message)

    def __str__(self) -> str:
        """String representation of the exception."""
        return f"{self.__class__.__name__}: {self.message}"

    def __repr__(self) -> str:
        """Developer-friendly representation."""
        return f"{self.__class__.__name__}(message={self.message!r})"


class InvalidTaxIdentifierError(DomainException):
    """
    Raised when a Polish business identifier is rejected.

    This exception is raised when:
    - NIP has wrong length or checksum
    - REGON has wrong length or checksum
    - KRS has wrong length or starts with 0
    - Postal code is not in XX-XXX format

    Attributes:
        identifier_type: "NIP", "REGON", "KRS" or "POSTAL_CODE"
        original_value: Raw input that failed validation (optional)
        errors: Polish validation messages

    Examples:
        >>> raise InvalidTaxIdentifierError(
        ...     "NIP zawiera nieprawidłową sumę kontrolną",
        ...     identifier_type="NIP",
        ...     original_value="1234567890",
        ... )
    """

    def __init__(
        self,
        message: str,
        identifier_type: str | None = None,
        original_value: str | None = None,
        errors: list[str] | None = None,
    ) -> None:
        self.identifier_type = identifier_type
        self.original_value = original_value
        self.errors = errors or [message]
        super().__init__(message)


class InvalidEntityError(DomainException):
    """
    Raised when an HVAC entity fails validation on creation or update.

    Examples:
        >>> raise InvalidEntityError("Equipment name is required", field_name="name")
    """

    def __init__(self, message: str, field_name: str | None = None) -> None:
        """
        Initialize entity validation error.

        Args:
            message: Error description
            field_name: Name of field that caused error (optional)
        """
        self.field_name = field_name
        super().__init__(message)


class InvalidQuoteError(DomainException):
    """
    Raised when quote or quote item data violates business rules.

    This exception is raised when:
    - Item quantity is zero or negative
    - Unit price or discount is negative
    - Net amount for VAT calculation is negative

    Examples:
        >>> raise InvalidQuoteError("Quantity must be greater than 0, got 0", field_name="quantity")
    """

    def __init__(self, message: str, field_name: str | None = None) -> None:
        self.field_name = field_name
        super().__init__(message)


class InvalidStatusTransitionError(DomainException):
    """
    Raised when an entity is moved to a status its lifecycle does not allow.

    Used by ServiceTicket, MaintenanceRecord and Quote.

    Attributes:
        current_status: Status the entity is in
        requested_status: Status that was requested

    Examples:
        >>> raise InvalidStatusTransitionError(
        ...     "Cannot change ticket status from completed to open",
        ...     current_status="completed",
        ...     requested_status="open",
        ... )
    """

    def __init__(
        self,
        message: str,
        current_status: str | None = None,
        requested_status: str | None = None,
    ) -> None:
        self.current_status = current_status
        self.requested_status = requested_status
        super().__init__(message)


class EntityNotFoundError(DomainException):
    """
    Raised when a requested record does not exist.

    Attributes:
        entity_type: Kind of record (e.g. "equipment", "quote")
        entity_id: Identifier that was looked up

    Examples:
        >>> raise EntityNotFoundError("Quote not found", entity_type="quote", entity_id="q-1")
    """

    def __init__(
        self,
        message: str,
        entity_type: str | None = None,
        entity_id: str | None = None,
    ) -> None:
        self.entity_type = entity_type
        self.entity_id = entity_id
        super().__init__(message)


class InsufficientPermissionsError(DomainException):
    """
    Raised when the caller is not allowed to perform an HVAC operation.

    Maps to HTTP 403 Forbidden in the API Layer.

    Attributes:
        required: Permission values that were required (optional)

    Examples:
        >>> raise InsufficientPermissionsError("Workspace not found")
        >>> raise InsufficientPermissionsError(
        ...     "Insufficient HVAC permissions. Required: delete_equipment",
        ...     required=["delete_equipment"],
        ... )
    """

    def __init__(self, message: str, required: list[str] | None = None) -> None:
        self.required = required or []
        super().__init__(message)


class FeatureDisabledError(DomainException):
    """
    Raised when an operation needs an HVAC feature flag that is switched off.

    Maps to HTTP 403 Forbidden in the API Layer.

    Attributes:
        features: Names of the disabled features
    """

    def __init__(self, message: str, features: list[str] | None = None) -> None:
        self.features = features or []
        super().__init__(message)


class InvalidSearchQueryError(DomainException):
    """
    Raised when a semantic search query is empty or malformed.

    Examples:
        >>> raise InvalidSearchQueryError("Search query cannot be empty")
    """
