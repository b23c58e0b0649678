"""
Service Ticket Service - Application Orchestration

Responsibility:
    Service ticket use cases: listing, details, creation (ticket number
    generated when missing) and status changes validated by the domain
    state machine before being sent to HVAC API.

Architecture Notes:
    - Part of Application Layer (Services/Use Cases)
    - Status transition rules live in ServiceTicket (Domain Layer)
    - Optional HvacCacheStrategy serves ticket details (ticket:{id}:details)
      and receives "ticket-status-changed" events
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Callable, Mapping, Optional

from hvac_crm.domain.hvac.entities import ServiceTicket, TicketStatus
from hvac_crm.domain.shared.exceptions import EntityNotFoundError
from hvac_crm.infrastructure.cache import HvacCacheStrategy
from hvac_crm.infrastructure.hvac_api import HvacApiClient
from hvac_crm.shared.utils import parse_datetime, to_camel_payload

logger = logging.getLogger(__name__)


@dataclass
class TicketPage:
    items: list[ServiceTicket] = field(default_factory=list)
    total: int = 0


class ServiceTicketService:
    def __init__(self, client: HvacApiClient, cache_strategy: Optional[HvacCacheStrategy] = None) -> None:
        self.client = client
        self.cache_strategy = cache_strategy

    def _cached(self, key: str, loader: Callable[[], Any]) -> Any:
        if self.cache_strategy is None:
            return loader()
        return self.cache_strategy.get_or_set("service-tickets", key, loader)

    def list_tickets(
        self, filters: Optional[Mapping[str, Any]] = None, limit: int = 50, offset: int = 0
    ) -> TicketPage:
        result = self.client.get_service_tickets(filters=filters, limit=limit, offset=offset)
        return TicketPage(items=[ServiceTicket.from_dict(item) for item in result.items], total=result.total)

    def get_ticket(self, ticket_id: str) -> ServiceTicket:
        """
        Raises:
            EntityNotFoundError: If ticket does not exist
        """
        data = self._cached(f"ticket:{ticket_id}:details", lambda: self.client.get_service_ticket(ticket_id))
        return self._ticket_or_raise(ticket_id, data)

    def _ticket_or_raise(self, ticket_id: str, data: Optional[Mapping[str, Any]]) -> ServiceTicket:
        if data is None:
            raise EntityNotFoundError(
                f"Service ticket {ticket_id} not found", entity_type="service_ticket", entity_id=ticket_id
            )
        return ServiceTicket.from_dict(data)

    def create_ticket(self, ticket: ServiceTicket) -> ServiceTicket:
        ticket.generate_ticket_number()
        payload = to_camel_payload(ticket.to_dict())
        for key in ("id", "createdAt", "updatedAt"):
            payload.pop(key, None)

        created = ServiceTicket.from_dict(self.client.create_service_ticket(payload))
        logger.info(f"Created service ticket {created.ticket_number} ({created.priority.value})")
        return created

    def change_status(
        self,
        ticket_id: str,
        new_status: TicketStatus,
        scheduled_date: Optional[datetime] = None,
        technician_id: Optional[str] = None,
        actual_duration: Optional[int] = None,
    ) -> ServiceTicket:
        """
        Apply status transition and persist it.

        Raises:
            EntityNotFoundError: If ticket does not exist
            InvalidStatusTransitionError: If transition is not allowed
        """
        ticket = self._ticket_or_raise(ticket_id, self.client.get_service_ticket(ticket_id))
        previous = ticket.status

        if new_status == TicketStatus.SCHEDULED and scheduled_date is not None:
            ticket.schedule(parse_datetime(scheduled_date), technician_id)
        elif new_status == TicketStatus.COMPLETED:
            ticket.complete(actual_duration=actual_duration)
        else:
            ticket.transition_to(new_status)
            if technician_id:
                ticket.technician_id = technician_id

        payload = to_camel_payload(
            {
                "status": ticket.status.value,
                "scheduled_date": ticket.scheduled_date.isoformat() if ticket.scheduled_date else None,
                "completed_date": ticket.completed_date.isoformat() if ticket.completed_date else None,
                "technician_id": ticket.technician_id,
                "actual_duration": ticket.actual_duration,
                "customer_id": ticket.customer_id,
            }
        )
        updated = ServiceTicket.from_dict(self.client.update_service_ticket(ticket_id, payload))

        if self.cache_strategy is not None:
            self.cache_strategy.invalidate_by_event("ticket-status-changed", ticket_id)

        logger.info(f"Ticket {ticket_id} moved from {previous.value} to {updated.status.value}")
        return updated
