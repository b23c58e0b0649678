"""
API Request Schemas

Pydantic models for request bodies. Routers convert them to domain
entities with Entity.from_dict(body.model_dump(exclude_none=True)),
so field names follow the entities' snake_case names.
"""

from datetime import date, datetime
from decimal import Decimal
from typing import Any, Optional

from pydantic import BaseModel, Field

from hvac_crm.domain.compliance.value_objects.vat import VatCategory
from hvac_crm.domain.hvac.entities import (
    EquipmentCondition,
    EquipmentStatus,
    EquipmentType,
    MaintenanceType,
    TicketPriority,
    TicketStatus,
)
from hvac_crm.domain.quotes.entities import (
    DiscountType,
    HvacCategory,
    PaymentMethod,
    QuoteItemType,
    QuotePriority,
    QuoteStatus,
)


# ============================================================================
# COMPLIANCE
# ============================================================================


class IdentifierRequest(BaseModel):
    """Single identifier to validate (NIP, REGON, KRS or postal code)."""

    value: str = Field(description="Identifier as typed by user (dashes/spaces allowed)")

    class Config:
        json_schema_extra = {"example": {"value": "526-104-08-28"}}


class VatCalculationRequest(BaseModel):
    """
    VAT calculation input.

    Either category or service_type must be given. When both are given,
    category wins.
    """

    net_amount: Decimal = Field(ge=0)
    category: Optional[VatCategory] = None
    service_type: Optional[str] = None

    class Config:
        json_schema_extra = {
            "example": {"net_amount": "1000.00", "service_type": "repair_residential"}
        }


class ComplianceCheckRequest(BaseModel):
    nip: Optional[str] = None
    regon: Optional[str] = None
    region: Optional[str] = None
    hvac_licenses: list[str] = Field(default_factory=list)

    class Config:
        json_schema_extra = {
            "example": {
                "nip": "5261040828",
                "regon": "123456785",
                "region": "mazowieckie",
                "hvac_licenses": ["F-gazy"],
            }
        }


# ============================================================================
# QUOTES
# ============================================================================


class QuoteItemRequest(BaseModel):
    name: str
    quantity: Decimal = Field(gt=0)
    unit_price: Decimal = Field(ge=0)
    item_type: QuoteItemType = QuoteItemType.SERVICE
    description: Optional[str] = None
    unit: str = "szt."
    vat_rate: Optional[Decimal] = None
    discount: Decimal = Decimal("0")
    discount_type: DiscountType = DiscountType.PERCENTAGE
    category: Optional[HvacCategory] = None


class QuoteRequest(BaseModel):
    """Quote create body; totals are computed server-side."""

    title: str = Field(min_length=1)
    customer_id: Optional[str] = None
    customer_name: Optional[str] = None
    description: Optional[str] = None
    items: list[QuoteItemRequest] = Field(default_factory=list)
    priority: QuotePriority = QuotePriority.MEDIUM
    category: Optional[HvacCategory] = None
    currency: str = "PLN"
    valid_until: Optional[datetime] = None
    payment_method: Optional[PaymentMethod] = None
    payment_terms: Optional[str] = None
    margin: Decimal = Decimal("0")

    class Config:
        json_schema_extra = {
            "example": {
                "title": "Montaż klimatyzacji w biurze",
                "customer_id": "cust-17",
                "items": [
                    {
                        "name": "Klimatyzator split 3,5 kW",
                        "quantity": 2,
                        "unit_price": "3200.00",
                        "item_type": "product",
                    },
                    {"name": "Montaż", "quantity": 2, "unit_price": "800.00"},
                ],
            }
        }


class QuoteStatusRequest(BaseModel):
    status: QuoteStatus
    reason: Optional[str] = Field(default=None, description="Rejection reason")


class QuoteFromTemplateRequest(BaseModel):
    template_id: str
    customer_id: str
    overrides: dict[str, Any] = Field(default_factory=dict)


# ============================================================================
# EQUIPMENT / MAINTENANCE
# ============================================================================


class EquipmentRequest(BaseModel):
    name: str = Field(min_length=1)
    equipment_type: EquipmentType = EquipmentType.OTHER
    manufacturer: Optional[str] = None
    model: Optional[str] = None
    serial_number: Optional[str] = None
    status: EquipmentStatus = EquipmentStatus.ACTIVE
    condition: EquipmentCondition = EquipmentCondition.GOOD
    installation_date: Optional[date] = None
    warranty_expiration: Optional[date] = None
    last_service_date: Optional[date] = None
    next_service_date: Optional[date] = None
    customer_id: Optional[str] = None
    location: Optional[str] = None
    notes: Optional[str] = None


class MaintenanceRequest(BaseModel):
    """Maintenance to schedule; equipment_id comes from URL path."""

    maintenance_type: MaintenanceType = MaintenanceType.PREVENTIVE
    title: Optional[str] = None
    description: Optional[str] = None
    scheduled_date: date
    technician_id: Optional[str] = None
    cost: Optional[Decimal] = Field(default=None, ge=0)
    notes: Optional[str] = None


# ============================================================================
# SERVICE TICKETS
# ============================================================================


class TicketRequest(BaseModel):
    title: str = Field(min_length=1)
    description: Optional[str] = None
    priority: TicketPriority = TicketPriority.MEDIUM
    service_type: Optional[str] = None
    customer_id: Optional[str] = None
    customer_name: Optional[str] = None
    customer_address: Optional[str] = None
    equipment_id: Optional[str] = None
    estimated_duration: Optional[int] = Field(default=None, ge=0)

    class Config:
        json_schema_extra = {
            "example": {
                "title": "Brak ciepłej wody",
                "priority": "high",
                "service_type": "repair_residential",
                "customer_id": "cust-17",
            }
        }


class TicketStatusRequest(BaseModel):
    status: TicketStatus
    scheduled_date: Optional[datetime] = None
    technician_id: Optional[str] = None
    actual_duration: Optional[int] = Field(default=None, ge=0)
