"""
Customer Entity.

HVAC service customer: household, company or industrial site.
Polish identifiers (NIP, REGON) and postal code are validated when present.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Optional

from hvac_crm.domain.compliance.validators import (
    normalize_digits,
    validate_nip,
    validate_postal_code,
    validate_regon,
)
from hvac_crm.domain.shared.exceptions import InvalidEntityError, InvalidTaxIdentifierError
from hvac_crm.shared.utils import new_id, parse_datetime, parse_enum, pick


class CustomerType(str, Enum):
    RESIDENTIAL = "residential"
    COMMERCIAL = "commercial"
    INDUSTRIAL = "industrial"


class CustomerStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"
    SUSPENDED = "suspended"
    PROSPECT = "prospect"


@dataclass
class Customer:
    """
    Mutable entity representing an HVAC customer.

    Attributes:
        name: Customer or company name (min 2 characters)
        email: Contact email (optional)
        phone: Contact phone (optional)
        nip: Tax number, stored as 10 digits (optional, validated)
        regon: Registry number, stored as 9 or 14 digits (optional, validated)
        customer_type: RESIDENTIAL, COMMERCIAL or INDUSTRIAL
        status: Relationship status
        street, city, postal_code, country: Address parts
        notes: Free text

    Examples:
        >>> customer = Customer(name="Hotel Bałtyk", nip="526-104-08-28", city="Gdańsk")
        >>> customer.nip
        '5261040828'
        >>> customer.is_company()
        True
    """

    name: str
    email: Optional[str] = None
    phone: Optional[str] = None
    nip: Optional[str] = None
    regon: Optional[str] = None
    customer_type: CustomerType = CustomerType.RESIDENTIAL
    status: CustomerStatus = CustomerStatus.ACTIVE
    street: Optional[str] = None
    city: Optional[str] = None
    postal_code: Optional[str] = None
    country: str = "Polska"
    notes: Optional[str] = None

    id: str = field(default_factory=new_id)
    created_at: datetime = field(default_factory=datetime.now)
    updated_at: datetime = field(default_factory=datetime.now)

    MIN_NAME_LENGTH = 2

    def __post_init__(self) -> None:
        """
        Validate name and Polish identifiers.

        Raises:
            InvalidEntityError: If name is too short
            InvalidTaxIdentifierError: If NIP, REGON or postal code is invalid
        """
        if not self.name or len(self.name.strip()) < self.MIN_NAME_LENGTH:
            raise InvalidEntityError(
                f"Customer name must have at least {self.MIN_NAME_LENGTH} characters",
                field_name="name",
            )
        self.name = self.name.strip()

        if self.nip:
            result = validate_nip(self.nip)
            if not result.is_valid:
                raise InvalidTaxIdentifierError(result.errors[0], "NIP", self.nip, result.errors)
            self.nip = normalize_digits(self.nip)

        if self.regon:
            result = validate_regon(self.regon)
            if not result.is_valid:
                raise InvalidTaxIdentifierError(result.errors[0], "REGON", self.regon, result.errors)
            self.regon = normalize_digits(self.regon)

        if self.postal_code:
            result = validate_postal_code(self.postal_code)
            if not result.is_valid:
                raise InvalidTaxIdentifierError(
                    result.errors[0], "POSTAL_CODE", self.postal_code, result.errors
                )
            self.postal_code = self.postal_code.strip()

    def is_company(self) -> bool:
        """Customers with NIP or non-residential type are invoiced as companies."""
        return bool(self.nip) or self.customer_type != CustomerType.RESIDENTIAL

    def full_address(self) -> str:
        """
        Join address parts in Polish order: "street, postal_code city, country".

        Examples:
            >>> Customer(name="Jan", street="ul. Długa 1", postal_code="80-001", city="Gdańsk").full_address()
            'ul. Długa 1, 80-001 Gdańsk, Polska'
        """
        locality = " ".join(part for part in (self.postal_code, self.city) if part)
        return ", ".join(part for part in (self.street, locality, self.country) if part)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "phone": self.phone,
            "nip": self.nip,
            "regon": self.regon,
            "customer_type": self.customer_type.value,
            "status": self.status.value,
            "street": self.street,
            "city": self.city,
            "postal_code": self.postal_code,
            "country": self.country,
            "notes": self.notes,
            "created_at": self.created_at.isoformat(),
            "updated_at": self.updated_at.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Customer":
        """
        Build Customer from to_dict() output or HVAC API payload (camelCase).

        Enum values are matched case-insensitively ("COMMERCIAL" or "commercial").
        """
        customer_type = pick(data, "customer_type") or data.get("type")
        return cls(
            id=str(data["id"]) if data.get("id") else new_id(),
            name=data["name"],
            email=data.get("email"),
            phone=data.get("phone"),
            nip=data.get("nip"),
            regon=data.get("regon"),
            customer_type=parse_enum(CustomerType, customer_type, CustomerType.RESIDENTIAL),
            status=parse_enum(CustomerStatus, data.get("status"), CustomerStatus.ACTIVE),
            street=data.get("street"),
            city=data.get("city"),
            postal_code=pick(data, "postal_code"),
            country=data.get("country") or "Polska",
            notes=data.get("notes"),
            created_at=parse_datetime(pick(data, "created_at")) or datetime.now(),
            updated_at=parse_datetime(pick(data, "updated_at")) or datetime.now(),
        )

    def __str__(self) -> str:
        return f"Customer({self.name}, {self.customer_type.value})"
