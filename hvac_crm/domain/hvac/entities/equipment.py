"""
Equipment Entity.

Installed HVAC unit at a customer site (boiler, heat pump, air conditioner...).
Tracks lifecycle status, physical condition, warranty and service schedule.

Business Rules:
    - Decommissioned equipment never needs service
    - Equipment needs service when status is MAINTENANCE/REPAIR_NEEDED,
      condition is POOR/CRITICAL, or next_service_date has arrived
    - Warranty is active through warranty_expiration (inclusive)
"""

from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from enum import Enum
from typing import Any, Optional

from hvac_crm.domain.shared.exceptions import InvalidEntityError
from hvac_crm.shared.utils import (
    isoformat_or_none,
    new_id,
    parse_date,
    parse_datetime,
    parse_enum,
    pick,
)


class EquipmentType(str, Enum):
    BOILER = "boiler"
    HEAT_PUMP = "heat_pump"
    AIR_CONDITIONER = "air_conditioner"
    FURNACE = "furnace"
    VENTILATION_SYSTEM = "ventilation_system"
    THERMOSTAT = "thermostat"
    DUCTWORK = "ductwork"
    RADIATOR = "radiator"
    HEAT_EXCHANGER = "heat_exchanger"
    CHILLER = "chiller"
    OTHER = "other"


class EquipmentStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"
    MAINTENANCE = "maintenance"
    REPAIR_NEEDED = "repair_needed"
    DECOMMISSIONED = "decommissioned"
    WARRANTY = "warranty"


class EquipmentCondition(str, Enum):
    EXCELLENT = "excellent"
    GOOD = "good"
    FAIR = "fair"
    POOR = "poor"
    CRITICAL = "critical"


SERVICE_STATUSES = frozenset({EquipmentStatus.MAINTENANCE, EquipmentStatus.REPAIR_NEEDED})
SERVICE_CONDITIONS = frozenset({EquipmentCondition.POOR, EquipmentCondition.CRITICAL})


@dataclass
class Equipment:
    """
    Mutable entity representing installed HVAC equipment.

    Attributes:
        name: Display name (required)
        equipment_type: Kind of unit
        manufacturer, model, serial_number: Identification
        status: Lifecycle status (default ACTIVE)
        condition: Physical condition (default GOOD)
        installation_date: When installed
        warranty_expiration: Last day of warranty
        last_service_date, next_service_date: Service schedule
        customer_id: Owner customer ID
        location: Where on site (e.g. "Kotłownia, piwnica")
        notes: Free text

    Examples:
        >>> eq = Equipment(
        ...     name="Pompa ciepła Vitocal 200-S",
        ...     equipment_type=EquipmentType.HEAT_PUMP,
        ...     warranty_expiration=date(2026, 5, 1),
        ... )
        >>> eq.is_under_warranty(today=date(2026, 4, 1))
        True
        >>> eq.warranty_expires_within(60, today=date(2026, 4, 1))
        True
    """

    name: str
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

    id: str = field(default_factory=new_id)
    created_at: datetime = field(default_factory=datetime.now)
    updated_at: datetime = field(default_factory=datetime.now)

    def __post_init__(self) -> None:
        if not self.name or not self.name.strip():
            raise InvalidEntityError("Equipment name is required", field_name="name")
        self.name = self.name.strip()

        if (
            self.installation_date
            and self.warranty_expiration
            and self.warranty_expiration < self.installation_date
        ):
            raise InvalidEntityError(
                "Warranty expiration cannot be before installation date",
                field_name="warranty_expiration",
            )

    # ------------------------------------------------------------------
    # Business rules
    # ------------------------------------------------------------------

    def is_under_warranty(self, today: Optional[date] = None) -> bool:
        if self.warranty_expiration is None:
            return False
        today = today or date.today()
        return today <= self.warranty_expiration

    def warranty_expires_within(self, days: int, today: Optional[date] = None) -> bool:
        """
        Check if warranty ends within the next `days` days.

        Already-expired warranties do not count.

        Args:
            days: Look-ahead window in days (>= 0)
            today: Reference date (default: date.today())
        """
        if days < 0:
            raise ValueError(f"days must be >= 0, got {days}")
        if not self.is_under_warranty(today):
            return False
        today = today or date.today()
        return self.warranty_expiration <= today + timedelta(days=days)

    def needs_service(self, today: Optional[date] = None) -> bool:
        """
        Decide whether equipment should be put on the service list.

        Returns:
            True if status/condition demand service or next_service_date has arrived
        """
        if self.status == EquipmentStatus.DECOMMISSIONED:
            return False
        if self.status in SERVICE_STATUSES or self.condition in SERVICE_CONDITIONS:
            return True
        if self.next_service_date is not None:
            today = today or date.today()
            return self.next_service_date <= today
        return False

    def record_service(self, service_date: date, next_service_date: Optional[date] = None) -> None:
        """Register completed service: bring unit back to ACTIVE and move schedule."""
        self.last_service_date = service_date
        self.next_service_date = next_service_date
        if self.status in SERVICE_STATUSES:
            self.status = EquipmentStatus.ACTIVE
        self.updated_at = datetime.now()

    # ------------------------------------------------------------------
    # Serialization
    # ------------------------------------------------------------------

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "equipment_type": self.equipment_type.value,
            "manufacturer": self.manufacturer,
            "model": self.model,
            "serial_number": self.serial_number,
            "status": self.status.value,
            "condition": self.condition.value,
            "installation_date": isoformat_or_none(self.installation_date),
            "warranty_expiration": isoformat_or_none(self.warranty_expiration),
            "last_service_date": isoformat_or_none(self.last_service_date),
            "next_service_date": isoformat_or_none(self.next_service_date),
            "customer_id": self.customer_id,
            "location": self.location,
            "notes": self.notes,
            "created_at": self.created_at.isoformat(),
            "updated_at": self.updated_at.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Equipment":
        """
        Build Equipment from to_dict() output or HVAC API payload.

        Accepts "type" as alias of "equipment_type" (HVAC API field name).
        """
        raw_type = pick(data, "equipment_type") or data.get("type")
        return cls(
            id=str(data["id"]) if data.get("id") else new_id(),
            name=data["name"],
            equipment_type=parse_enum(EquipmentType, raw_type, EquipmentType.OTHER),
            manufacturer=data.get("manufacturer"),
            model=data.get("model"),
            serial_number=pick(data, "serial_number"),
            status=parse_enum(EquipmentStatus, data.get("status"), EquipmentStatus.ACTIVE),
            condition=parse_enum(EquipmentCondition, data.get("condition"), EquipmentCondition.GOOD),
            installation_date=parse_date(pick(data, "installation_date")),
            warranty_expiration=parse_date(pick(data, "warranty_expiration")),
            last_service_date=parse_date(pick(data, "last_service_date")),
            next_service_date=parse_date(pick(data, "next_service_date")),
            customer_id=pick(data, "customer_id"),
            location=data.get("location"),
            notes=data.get("notes"),
            created_at=parse_datetime(pick(data, "created_at")) or datetime.now(),
            updated_at=parse_datetime(pick(data, "updated_at")) or datetime.now(),
        )

    def __str__(self) -> str:
        return f"Equipment({self.name}, {self.equipment_type.value}, {self.status.value})"
