"""
MaintenanceRecord Entity.

Planned or completed maintenance of a single piece of equipment.
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Optional

from hvac_crm.domain.shared.exceptions import InvalidEntityError, InvalidStatusTransitionError
from hvac_crm.shared.utils import (
    isoformat_or_none,
    new_id,
    parse_date,
    parse_datetime,
    parse_decimal,
    parse_enum,
    pick,
)


class MaintenanceType(str, Enum):
    PREVENTIVE = "preventive"
    CORRECTIVE = "corrective"
    EMERGENCY = "emergency"
    INSPECTION = "inspection"
    CLEANING = "cleaning"
    CALIBRATION = "calibration"
    REPLACEMENT = "replacement"
    ROUTINE = "routine"


class MaintenanceStatus(str, Enum):
    SCHEDULED = "scheduled"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    OVERDUE = "overdue"


@dataclass
class MaintenanceRecord:
    """
    Mutable entity representing equipment maintenance.

    Attributes:
        equipment_id: Equipment being maintained (required)
        maintenance_type: Kind of maintenance (default PREVENTIVE)
        status: Lifecycle status (default SCHEDULED)
        title, description: What is done
        scheduled_date: Planned date
        completed_date: Actual completion date
        technician_id: Assigned technician
        cost: Cost in PLN (non-negative)
        notes: Technician notes

    Examples:
        >>> record = MaintenanceRecord(equipment_id="eq-1", scheduled_date=date(2026, 1, 10))
        >>> record.is_overdue(today=date(2026, 1, 11))
        True
    """

    equipment_id: str
    maintenance_type: MaintenanceType = MaintenanceType.PREVENTIVE
    status: MaintenanceStatus = MaintenanceStatus.SCHEDULED
    title: Optional[str] = None
    description: Optional[str] = None
    scheduled_date: Optional[date] = None
    completed_date: Optional[date] = None
    technician_id: Optional[str] = None
    cost: Optional[Decimal] = None
    notes: Optional[str] = None

    id: str = field(default_factory=new_id)
    created_at: datetime = field(default_factory=datetime.now)
    updated_at: datetime = field(default_factory=datetime.now)

    def __post_init__(self) -> None:
        if not self.equipment_id:
            raise InvalidEntityError("Maintenance record requires equipment_id", field_name="equipment_id")
        if self.cost is not None:
            self.cost = Decimal(str(self.cost))
            if self.cost < 0:
                raise InvalidEntityError(f"Cost cannot be negative, got {self.cost}", field_name="cost")

    def is_overdue(self, today: Optional[date] = None) -> bool:
        if self.status == MaintenanceStatus.OVERDUE:
            return True
        if self.status != MaintenanceStatus.SCHEDULED or self.scheduled_date is None:
            return False
        today = today or date.today()
        return self.scheduled_date < today

    def mark_completed(self, completed_date: Optional[date] = None, notes: Optional[str] = None) -> None:
        """
        Close maintenance.

        Raises:
            InvalidStatusTransitionError: If record is CANCELLED
        """
        if self.status == MaintenanceStatus.CANCELLED:
            raise InvalidStatusTransitionError(
                "Cannot complete cancelled maintenance",
                current_status=self.status.value,
                requested_status=MaintenanceStatus.COMPLETED.value,
            )
        self.status = MaintenanceStatus.COMPLETED
        self.completed_date = completed_date or date.today()
        if notes:
            self.notes = notes
        self.updated_at = datetime.now()

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "equipment_id": self.equipment_id,
            "maintenance_type": self.maintenance_type.value,
            "status": self.status.value,
            "title": self.title,
            "description": self.description,
            "scheduled_date": isoformat_or_none(self.scheduled_date),
            "completed_date": isoformat_or_none(self.completed_date),
            "technician_id": self.technician_id,
            "cost": str(self.cost) if self.cost is not None else None,
            "notes": self.notes,
            "created_at": self.created_at.isoformat(),
            "updated_at": self.updated_at.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "MaintenanceRecord":
        raw_type = pick(data, "maintenance_type") or data.get("type")
        return cls(
            id=str(data["id"]) if data.get("id") else new_id(),
            equipment_id=pick(data, "equipment_id"),
            maintenance_type=parse_enum(MaintenanceType, raw_type, MaintenanceType.PREVENTIVE),
            status=parse_enum(MaintenanceStatus, data.get("status"), MaintenanceStatus.SCHEDULED),
            title=data.get("title"),
            description=data.get("description"),
            scheduled_date=parse_date(pick(data, "scheduled_date")),
            completed_date=parse_date(pick(data, "completed_date")),
            technician_id=pick(data, "technician_id"),
            cost=parse_decimal(data.get("cost")),
            notes=data.get("notes"),
            created_at=parse_datetime(pick(data, "created_at")) or datetime.now(),
            updated_at=parse_datetime(pick(data, "updated_at")) or datetime.now(),
        )
