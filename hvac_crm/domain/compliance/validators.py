"""
Polish Business Identifier Validators.

Pure check-digit and format validation for NIP, REGON, KRS and postal codes.
These functions never raise: they return a ValidationResult with Polish error
messages so that callers (API, value objects, compliance checker) can decide
how to surface them.

Responsibility:
    - Normalize raw input (strip everything except digits)
    - Verify length and checksum according to Polish registry rules
    - Produce formatted representation and identifier metadata

Architecture Notes:
    - Part of Domain Layer (compliance subdomain)
    - No I/O, no caching (ComplianceService caches results)
    - Value objects in value_objects/tax_identifiers.py wrap these functions

Checksum Rules:
    NIP:   weights 6,5,7,2,3,4,5,6,7; sum % 11 must equal 10th digit (10 is invalid)
    REGON: 9 digits  -> weights 8,9,2,3,4,5,6,7; sum % 11, 10 maps to 0
           14 digits -> weights 2,4,8,5,0,9,7,3,6,1,2,4,8; same rule,
                        and the first 9 digits must be a valid REGON-9
"""

import re
from dataclasses import dataclass, field
from typing import Any, Final

# ============================================================================
# CONSTANTS
# ============================================================================

NIP_WEIGHTS: Final[tuple[int, ...]] = (6, 5, 7, 2, 3, 4, 5, 6, 7)
REGON_9_WEIGHTS: Final[tuple[int, ...]] = (8, 9, 2, 3, 4, 5, 6, 7)
REGON_14_WEIGHTS: Final[tuple[int, ...]] = (2, 4, 8, 5, 0, 9, 7, 3, 6, 1, 2, 4, 8)

# NIP prefixes issued to natural persons
INDIVIDUAL_NIP_PREFIXES: Final[range] = range(123, 130)

NON_DIGIT_PATTERN: Final[re.Pattern] = re.compile(r"\D")
POSTAL_CODE_PATTERN: Final[re.Pattern] = re.compile(r"^\d{2}-\d{3}$")

# Polish user-facing messages
NIP_REQUIRED: Final[str] = "NIP jest wymagany"
NIP_INVALID_LENGTH: Final[str] = "NIP musi składać się z 10 cyfr"
NIP_INVALID_CHECKSUM: Final[str] = "NIP zawiera nieprawidłową sumę kontrolną"
REGON_REQUIRED: Final[str] = "REGON jest wymagany"
REGON_INVALID_LENGTH: Final[str] = "REGON musi składać się z 9 lub 14 cyfr"
REGON_INVALID_CHECKSUM: Final[str] = "REGON zawiera nieprawidłową sumę kontrolną"
KRS_REQUIRED: Final[str] = "KRS jest wymagany"
KRS_INVALID_LENGTH: Final[str] = "KRS musi składać się z 10 cyfr"
KRS_LEADING_ZERO: Final[str] = "KRS nie może zaczynać się od 0"
POSTAL_CODE_REQUIRED: Final[str] = "Kod pocztowy jest wymagany"
POSTAL_CODE_INVALID_FORMAT: Final[str] = "Kod pocztowy musi być w formacie XX-XXX"


@dataclass
class ValidationResult:
    """
    Outcome of identifier validation.

    Attributes:
        is_valid: True when input passed every check
        errors: Polish error messages (empty when valid)
        normalized: Input reduced to digits (or trimmed for postal code)
        formatted: Display format (None when invalid)
        metadata: Extra facts about the identifier (e.g. {"type": "company"})

    Examples:
        >>> result = validate_nip("526-104-08-28")
        >>> result.is_valid
        True
        >>> result.formatted
        '526-104-08-28'
    """

    is_valid: bool
    errors: list[str] = field(default_factory=list)
    normalized: str = ""
    formatted: str | None = None
    metadata: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def failure(cls, error: str, normalized: str = "") -> "ValidationResult":
        """Build an invalid result with a single error message."""
        return cls(is_valid=False, errors=[error], normalized=normalized)


def normalize_digits(value: str | None) -> str:
    """Strip everything except digits (spaces, dashes, 'PL' prefix, etc.)."""
    if not value:
        return ""
    return NON_DIGIT_PATTERN.sub("", str(value))


def _weighted_sum(digits: str, weights: tuple[int, ...]) -> int:
    return sum(int(digit) * weight for digit, weight in zip(digits, weights))


# ============================================================================
# NIP
# ============================================================================


def nip_checksum_ok(digits: str) -> bool:
    """
    Verify NIP check digit.

    Args:
        digits: Exactly 10 digits

    Returns:
        True if the 10th digit matches the weighted sum modulo 11

    Examples:
        >>> nip_checksum_ok("5261040828")
        True
        >>> nip_checksum_ok("5261040827")
        False
    """
    checksum = _weighted_sum(digits[:9], NIP_WEIGHTS) % 11
    if checksum == 10:
        return False
    return checksum == int(digits[9])


def format_nip(digits: str) -> str:
    """Format 10 NIP digits as XXX-XXX-XX-XX."""
    return f"{digits[0:3]}-{digits[3:6]}-{digits[6:8]}-{digits[8:10]}"


def nip_type(digits: str) -> str:
    """Return "individual" for natural-person prefixes (123-129), else "company"."""
    return "individual" if int(digits[0:3]) in INDIVIDUAL_NIP_PREFIXES else "company"


def validate_nip(value: str | None) -> ValidationResult:
    """
    Validate Polish tax identification number (NIP).

    Args:
        value: Raw NIP, any separators allowed ("526-104-08-28", "PL5261040828")

    Returns:
        ValidationResult with formatted NIP and metadata {"type": ...} when valid

    Examples:
        >>> validate_nip("").errors
        ['NIP jest wymagany']
        >>> validate_nip("123").errors
        ['NIP musi składać się z 10 cyfr']
        >>> validate_nip("1234563218").metadata
        {'type': 'individual'}
    """
    if not value or not str(value).strip():
        return ValidationResult.failure(NIP_REQUIRED)

    digits = normalize_digits(value)
    if len(digits) != 10:
        return ValidationResult.failure(NIP_INVALID_LENGTH, digits)

    if not nip_checksum_ok(digits):
        return ValidationResult.failure(NIP_INVALID_CHECKSUM, digits)

    return ValidationResult(
        is_valid=True,
        normalized=digits,
        formatted=format_nip(digits),
        metadata={"type": nip_type(digits)},
    )


# ============================================================================
# REGON
# ============================================================================


def _regon_check_digit(digits: str, weights: tuple[int, ...]) -> int:
    checksum = _weighted_sum(digits, weights) % 11
    return 0 if checksum == 10 else checksum


def regon_checksum_ok(digits: str) -> bool:
    """
    Verify REGON check digit for 9- or 14-digit numbers.

    A 14-digit REGON (local unit) embeds the 9-digit REGON of its parent
    company, which must also be valid.

    Examples:
        >>> regon_checksum_ok("123456785")
        True
        >>> regon_checksum_ok("12345678512347")
        True
    """
    if len(digits) == 9:
        return _regon_check_digit(digits[:8], REGON_9_WEIGHTS) == int(digits[8])

    if len(digits) == 14:
        if not regon_checksum_ok(digits[:9]):
            return False
        return _regon_check_digit(digits[:13], REGON_14_WEIGHTS) == int(digits[13])

    return False


def format_regon(digits: str) -> str:
    """Format REGON as XXX-XXX-XXX (9 digits) or XXX-XXX-XX-XXXXXX (14 digits)."""
    if len(digits) == 9:
        return f"{digits[0:3]}-{digits[3:6]}-{digits[6:9]}"
    return f"{digits[0:3]}-{digits[3:6]}-{digits[6:8]}-{digits[8:14]}"


def validate_regon(value: str | None) -> ValidationResult:
    """
    Validate Polish statistical registry number (REGON).

    Args:
        value: Raw REGON with 9 or 14 digits

    Returns:
        ValidationResult with metadata {"type": "company" | "local_unit"} when valid
    """
    if not value or not str(value).strip():
        return ValidationResult.failure(REGON_REQUIRED)

    digits = normalize_digits(value)
    if len(digits) not in (9, 14):
        return ValidationResult.failure(REGON_INVALID_LENGTH, digits)

    if not regon_checksum_ok(digits):
        return ValidationResult.failure(REGON_INVALID_CHECKSUM, digits)

    return ValidationResult(
        is_valid=True,
        normalized=digits,
        formatted=format_regon(digits),
        metadata={"type": "company" if len(digits) == 9 else "local_unit"},
    )


# ============================================================================
# KRS / POSTAL CODE
# ============================================================================


def validate_krs(value: str | None) -> ValidationResult:
    """
    Validate National Court Register number (KRS): 10 digits, no leading zero.
    """
    if not value or not str(value).strip():
        return ValidationResult.failure(KRS_REQUIRED)

    digits = normalize_digits(value)
    if len(digits) != 10:
        return ValidationResult.failure(KRS_INVALID_LENGTH, digits)

    if digits.startswith("0"):
        return ValidationResult.failure(KRS_LEADING_ZERO, digits)

    return ValidationResult(is_valid=True, normalized=digits, formatted=digits)


def validate_postal_code(value: str | None) -> ValidationResult:
    """
    Validate Polish postal code in XX-XXX format.

    Unlike numeric identifiers the input is not stripped of separators:
    "00950" is rejected, "00-950" is accepted.
    """
    if not value or not str(value).strip():
        return ValidationResult.failure(POSTAL_CODE_REQUIRED)

    code = str(value).strip()
    if not POSTAL_CODE_PATTERN.match(code):
        return ValidationResult.failure(POSTAL_CODE_INVALID_FORMAT, code)

    return ValidationResult(is_valid=True, normalized=code, formatted=code)
