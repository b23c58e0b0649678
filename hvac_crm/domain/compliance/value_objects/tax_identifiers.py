"""
Polish Business Identifier Value Objects.

Immutable wrappers around the validators in domain/compliance/validators.py.
Creating an instance with an invalid value raises InvalidTaxIdentifierError,
so an existing Nip/Regon/Krs/PostalCode is always valid.

Value is stored normalized (digits only, or "XX-XXX" for postal codes).
"""

from dataclasses import dataclass

from hvac_crm.domain.compliance.validators import (
    ValidationResult,
    format_nip,
    format_regon,
    nip_type,
    normalize_digits,
    validate_krs,
    validate_nip,
    validate_postal_code,
    validate_regon,
)
from hvac_crm.domain.shared.exceptions import InvalidTaxIdentifierError


def _raise_if_invalid(result: ValidationResult, identifier_type: str, raw: str) -> None:
    if not result.is_valid:
        raise InvalidTaxIdentifierError(
            result.errors[0],
            identifier_type=identifier_type,
            original_value=raw,
            errors=result.errors,
        )


@dataclass(frozen=True)
class Nip:
    """
    Polish tax identification number (NIP).

    Attributes:
        value: 10 digits without separators

    Examples:
        >>> nip = Nip.from_string("526-104-08-28")
        >>> nip.value
        '5261040828'
        >>> nip.formatted()
        '526-104-08-28'
        >>> Nip("5261040827")
        Traceback (most recent call last):
        ...
        InvalidTaxIdentifierError: NIP zawiera nieprawidłową sumę kontrolną
    """

    value: str

    def __post_init__(self) -> None:
        _raise_if_invalid(validate_nip(self.value), "NIP", self.value)
        # Frozen dataclass: bypass immutability once to store normalized digits
        object.__setattr__(self, "value", normalize_digits(self.value))

    @classmethod
    def from_string(cls, text: str) -> "Nip":
        """Parse NIP from text with any separators."""
        return cls(normalize_digits(text) if text else text)

    def formatted(self) -> str:
        return format_nip(self.value)

    @property
    def is_individual(self) -> bool:
        """True for NIPs issued to natural persons."""
        return nip_type(self.value) == "individual"

    def __str__(self) -> str:
        return self.formatted()


@dataclass(frozen=True)
class Regon:
    """
    Polish statistical registry number (REGON), 9 or 14 digits.

    Examples:
        >>> Regon("123456785").is_local_unit
        False
        >>> Regon("12345678512347").formatted()
        '123-456-78-512347'
    """

    value: str

    def __post_init__(self) -> None:
        _raise_if_invalid(validate_regon(self.value), "REGON", self.value)
        object.__setattr__(self, "value", normalize_digits(self.value))

    @classmethod
    def from_string(cls, text: str) -> "Regon":
        return cls(normalize_digits(text) if text else text)

    def formatted(self) -> str:
        return format_regon(self.value)

    @property
    def is_local_unit(self) -> bool:
        """True for 14-digit REGON of a local business unit."""
        return len(self.value) == 14

    def __str__(self) -> str:
        return self.formatted()


@dataclass(frozen=True)
class Krs:
    """National Court Register number (10 digits, first digit non-zero)."""

    value: str

    def __post_init__(self) -> None:
        _raise_if_invalid(validate_krs(self.value), "KRS", self.value)
        object.__setattr__(self, "value", normalize_digits(self.value))

    @classmethod
    def from_string(cls, text: str) -> "Krs":
        return cls(text)

    def formatted(self) -> str:
        return self.value

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class PostalCode:
    """Polish postal code in XX-XXX format."""

    value: str

    def __post_init__(self) -> None:
        _raise_if_invalid(validate_postal_code(self.value), "POSTAL_CODE", self.value)
        object.__setattr__(self, "value", self.value.strip())

    @classmethod
    def from_string(cls, text: str) -> "PostalCode":
        return cls(text)

    def formatted(self) -> str:
        return self.value

    def __str__(self) -> str:
        return self.value
