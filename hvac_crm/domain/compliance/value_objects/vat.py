"""
Polish VAT categories and calculation.

Rates follow the Polish VAT act: 23% standard, 8% and 5% reduced, 0% and exempt.
HVAC maintenance and residential repair are billed at the first reduced rate.
"""

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from enum import Enum
from typing import Final

from hvac_crm.domain.shared.exceptions import InvalidQuoteError

TWO_PLACES: Final[Decimal] = Decimal("0.01")


class VatCategory(str, Enum):
    """
    VAT rate categories.

    Attributes:
        STANDARD: 23%
        REDUCED_FIRST: 8% (construction, renovation, HVAC maintenance)
        REDUCED_SECOND: 5%
        ZERO: 0% (export, intra-EU supply)
        EXEMPT: exempt from VAT
    """

    STANDARD = "standard"
    REDUCED_FIRST = "reduced_first"
    REDUCED_SECOND = "reduced_second"
    ZERO = "zero"
    EXEMPT = "exempt"

    @property
    def rate(self) -> Decimal:
        """VAT rate as a fraction (e.g. Decimal("0.23"))."""
        return VAT_RATES[self]


VAT_RATES: Final[dict[VatCategory, Decimal]] = {
    VatCategory.STANDARD: Decimal("0.23"),
    VatCategory.REDUCED_FIRST: Decimal("0.08"),
    VatCategory.REDUCED_SECOND: Decimal("0.05"),
    VatCategory.ZERO: Decimal("0"),
    VatCategory.EXEMPT: Decimal("0"),
}

# Service types billed at 8%
REDUCED_RATE_SERVICES: Final[frozenset[str]] = frozenset({"maintenance", "repair_residential"})


def round_money(amount: Decimal) -> Decimal:
    """Round to grosze (2 decimal places, half up)."""
    return Decimal(amount).quantize(TWO_PLACES, rounding=ROUND_HALF_UP)


@dataclass(frozen=True)
class VatCalculation:
    """
    Result of VAT calculation for a net amount.

    Attributes:
        net_amount: Net amount (rounded)
        vat_rate: Rate as fraction
        vat_amount: VAT due (rounded)
        gross_amount: net + VAT

    Examples:
        >>> calc = calculate_vat(Decimal("1000"), VatCategory.STANDARD)
        >>> calc.vat_amount
        Decimal('230.00')
        >>> calc.gross_amount
        Decimal('1230.00')
    """

    net_amount: Decimal
    vat_rate: Decimal
    vat_amount: Decimal
    gross_amount: Decimal
    category: VatCategory = VatCategory.STANDARD

    def to_dict(self) -> dict:
        return {
            "net_amount": str(self.net_amount),
            "vat_rate": str(self.vat_rate),
            "vat_amount": str(self.vat_amount),
            "gross_amount": str(self.gross_amount),
            "category": self.category.value,
        }


def calculate_vat(net_amount: Decimal | int | float | str, category: VatCategory) -> VatCalculation:
    """
    Calculate VAT for net amount.

    Args:
        net_amount: Net amount (converted to Decimal via str to avoid float noise)
        category: VAT category

    Returns:
        VatCalculation with amounts rounded to 2 places

    Raises:
        InvalidQuoteError: If net_amount is negative
    """
    net = Decimal(str(net_amount))
    if net < 0:
        raise InvalidQuoteError(f"Net amount cannot be negative, got {net}", field_name="net_amount")

    rate = category.rate
    vat_amount = round_money(net * rate)
    net_rounded = round_money(net)
    return VatCalculation(
        net_amount=net_rounded,
        vat_rate=rate,
        vat_amount=vat_amount,
        gross_amount=net_rounded + vat_amount,
        category=category,
    )


def vat_category_for_service(service_type: str | None) -> VatCategory:
    """
    Pick VAT category for an HVAC service type.

    Examples:
        >>> vat_category_for_service("maintenance")
        <VatCategory.REDUCED_FIRST: 'reduced_first'>
        >>> vat_category_for_service("installation")
        <VatCategory.STANDARD: 'standard'>
    """
    if service_type and service_type.lower() in REDUCED_RATE_SERVICES:
        return VatCategory.REDUCED_FIRST
    return VatCategory.STANDARD
