"""
ServiceTicket Entity.

Service request raised by a customer (breakdown, inspection, installation).
This entity has identity and lifecycle (status state machine).

State Machine:
    OPEN        -> SCHEDULED, IN_PROGRESS, CANCELLED
    SCHEDULED   -> IN_PROGRESS, ON_HOLD, CANCELLED
    IN_PROGRESS -> ON_HOLD, COMPLETED, CANCELLED
    ON_HOLD     -> SCHEDULED, IN_PROGRESS, CANCELLED
    COMPLETED   -> (terminal)
    CANCELLED   -> (terminal)
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Final, Optional

from hvac_crm.domain.shared.exceptions import InvalidEntityError, InvalidStatusTransitionError
from hvac_crm.shared.utils import new_id, parse_datetime, parse_enum, pick


class TicketStatus(str, Enum):
    OPEN = "open"
    SCHEDULED = "scheduled"
    IN_PROGRESS = "in_progress"
    ON_HOLD = "on_hold"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class TicketPriority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    URGENT = "urgent"
    CRITICAL = "critical"


ALLOWED_TRANSITIONS: Final[dict[TicketStatus, frozenset[TicketStatus]]] = {
    TicketStatus.OPEN: frozenset(
        {TicketStatus.SCHEDULED, TicketStatus.IN_PROGRESS, TicketStatus.CANCELLED}
    ),
    TicketStatus.SCHEDULED: frozenset(
        {TicketStatus.IN_PROGRESS, TicketStatus.ON_HOLD, TicketStatus.CANCELLED}
    ),
    TicketStatus.IN_PROGRESS: frozenset(
        {TicketStatus.ON_HOLD, TicketStatus.COMPLETED, TicketStatus.CANCELLED}
    ),
    TicketStatus.ON_HOLD: frozenset(
        {TicketStatus.SCHEDULED, TicketStatus.IN_PROGRESS, TicketStatus.CANCELLED}
    ),
    TicketStatus.COMPLETED: frozenset(),
    TicketStatus.CANCELLED: frozenset(),
}

TERMINAL_STATUSES: Final[frozenset[TicketStatus]] = frozenset(
    {TicketStatus.COMPLETED, TicketStatus.CANCELLED}
)


@dataclass
class ServiceTicket:
    """
    Mutable entity representing an HVAC service ticket.

    Attributes:
        title: Short problem summary (required)
        description: Details reported by customer
        ticket_number: Human-friendly number "SRV-YYYYMMDD-XXXXXX"
        priority: LOW..CRITICAL (default MEDIUM)
        status: Lifecycle status (default OPEN)
        service_type: e.g. "maintenance", "repair_residential", "installation"
        customer_id, customer_name, customer_address: Customer reference
        equipment_id: Equipment concerned (optional)
        technician_id: Assigned technician (optional)
        scheduled_date: Planned visit
        completed_date: When work was finished
        estimated_duration, actual_duration: Minutes

    Examples:
        >>> ticket = ServiceTicket(title="Brak ciepłej wody", priority=TicketPriority.HIGH)
        >>> ticket.schedule(datetime(2026, 1, 12, 9, 0), technician_id="tech-7")
        >>> ticket.start()
        >>> ticket.complete(actual_duration=95)
        >>> ticket.status
        <TicketStatus.COMPLETED: 'completed'>
    """

    title: str
    description: Optional[str] = None
    ticket_number: Optional[str] = None
    priority: TicketPriority = TicketPriority.MEDIUM
    status: TicketStatus = TicketStatus.OPEN
    service_type: Optional[str] = None
    customer_id: Optional[str] = None
    customer_name: Optional[str] = None
    customer_address: Optional[str] = None
    equipment_id: Optional[str] = None
    technician_id: Optional[str] = None
    scheduled_date: Optional[datetime] = None
    completed_date: Optional[datetime] = None
    estimated_duration: Optional[int] = None
    actual_duration: Optional[int] = None

    id: str = field(default_factory=new_id)
    created_at: datetime = field(default_factory=datetime.now)
    updated_at: datetime = field(default_factory=datetime.now)

    def __post_init__(self) -> None:
        if not self.title or not self.title.strip():
            raise InvalidEntityError("Ticket title is required", field_name="title")
        self.title = self.title.strip()
        for name in ("estimated_duration", "actual_duration"):
            value = getattr(self, name)
            if value is not None and value < 0:
                raise InvalidEntityError(f"{name} cannot be negative, got {value}", field_name=name)

    # ------------------------------------------------------------------
    # State machine
    # ------------------------------------------------------------------

    def can_transition_to(self, new_status: TicketStatus) -> bool:
        return new_status in ALLOWED_TRANSITIONS[self.status]

    def transition_to(self, new_status: TicketStatus) -> None:
        """
        Move ticket to new status.

        Raises:
            InvalidStatusTransitionError: If transition is not allowed
        """
        if not self.can_transition_to(new_status):
            raise InvalidStatusTransitionError(
                f"Cannot change ticket status from {self.status.value} to {new_status.value}",
                current_status=self.status.value,
                requested_status=new_status.value,
            )
        self.status = new_status
        self.updated_at = datetime.now()

    def schedule(self, scheduled_date: datetime, technician_id: Optional[str] = None) -> None:
        self.transition_to(TicketStatus.SCHEDULED)
        self.scheduled_date = scheduled_date
        if technician_id:
            self.technician_id = technician_id

    def start(self) -> None:
        self.transition_to(TicketStatus.IN_PROGRESS)

    def put_on_hold(self) -> None:
        self.transition_to(TicketStatus.ON_HOLD)

    def complete(
        self, actual_duration: Optional[int] = None, completed_date: Optional[datetime] = None
    ) -> None:
        """
        Finish work on ticket.

        Args:
            actual_duration: Minutes spent (optional)
            completed_date: Completion time (default: now)
        """
        if actual_duration is not None and actual_duration < 0:
            raise InvalidEntityError(
                f"actual_duration cannot be negative, got {actual_duration}",
                field_name="actual_duration",
            )
        self.transition_to(TicketStatus.COMPLETED)
        self.completed_date = completed_date or datetime.now()
        if actual_duration is not None:
            self.actual_duration = actual_duration

    def cancel(self) -> None:
        self.transition_to(TicketStatus.CANCELLED)

    def is_active(self) -> bool:
        return self.status not in TERMINAL_STATUSES

    def generate_ticket_number(self, now: Optional[datetime] = None) -> str:
        """
        Assign ticket number in format SRV-YYYYMMDD-XXXXXX.

        Suffix is the first 6 hex characters of the ticket id, uppercased.
        Existing ticket number is kept.

        Examples:
            >>> t = ServiceTicket(title="Serwis", id="3fa85f64-5717-4562-b3fc-2c963f66afa6")
            >>> t.generate_ticket_number(datetime(2026, 3, 1))
            'SRV-20260301-3FA85F'
        """
        if not self.ticket_number:
            stamp = (now or datetime.now()).strftime("%Y%m%d")
            suffix = self.id.replace("-", "")[:6].upper()
            self.ticket_number = f"SRV-{stamp}-{suffix}"
        return self.ticket_number

    # ------------------------------------------------------------------
    # Serialization
    # ------------------------------------------------------------------

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "ticket_number": self.ticket_number,
            "priority": self.priority.value,
            "status": self.status.value,
            "service_type": self.service_type,
            "customer_id": self.customer_id,
            "customer_name": self.customer_name,
            "customer_address": self.customer_address,
            "equipment_id": self.equipment_id,
            "technician_id": self.technician_id,
            "scheduled_date": self.scheduled_date.isoformat() if self.scheduled_date else None,
            "completed_date": self.completed_date.isoformat() if self.completed_date else None,
            "estimated_duration": self.estimated_duration,
            "actual_duration": self.actual_duration,
            "created_at": self.created_at.isoformat(),
            "updated_at": self.updated_at.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ServiceTicket":
        return cls(
            id=str(data["id"]) if data.get("id") else new_id(),
            title=data["title"],
            description=data.get("description"),
            ticket_number=pick(data, "ticket_number"),
            priority=parse_enum(TicketPriority, data.get("priority"), TicketPriority.MEDIUM),
            status=parse_enum(TicketStatus, data.get("status"), TicketStatus.OPEN),
            service_type=pick(data, "service_type"),
            customer_id=pick(data, "customer_id"),
            customer_name=pick(data, "customer_name"),
            customer_address=pick(data, "customer_address"),
            equipment_id=pick(data, "equipment_id"),
            technician_id=pick(data, "technician_id"),
            scheduled_date=parse_datetime(pick(data, "scheduled_date")),
            completed_date=parse_datetime(pick(data, "completed_date")),
            estimated_duration=pick(data, "estimated_duration"),
            actual_duration=pick(data, "actual_duration"),
            created_at=parse_datetime(pick(data, "created_at")) or datetime.now(),
            updated_at=parse_datetime(pick(data, "updated_at")) or datetime.now(),
        )

    def __str__(self) -> str:
        return f"ServiceTicket({self.ticket_number or self.id}, {self.status.value})"
