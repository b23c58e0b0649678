"""
Dashboard Service - Application Orchestration

Responsibility:
    Computes HVAC dashboard card numbers: active tickets, scheduled visits,
    equipment in service, overdue maintenance and indexed documents.

Architecture Notes:
    - Part of Application Layer (Services/Use Cases)
    - Counting rules come from domain entities (is_active, needs_service, is_overdue)
    - Weaviate failures yield documents_indexed = 0, never an error
"""

import logging
from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, Field

from hvac_crm.application.services.equipment_service import EquipmentService
from hvac_crm.application.services.service_ticket_service import ServiceTicketService
from hvac_crm.domain.hvac.entities import ServiceTicket, TicketStatus
from hvac_crm.infrastructure.search import SemanticSearchError, WeaviateClient

logger = logging.getLogger(__name__)

TICKET_PAGE_SIZE = 100


class DashboardStats(BaseModel):
    """
    Dashboard statistics.

    Attributes:
        active_tickets: Tickets not completed/cancelled ("Aktywne Zgłoszenia")
        scheduled_visits: Tickets in SCHEDULED status ("Zaplanowane Wizyty")
        equipment_in_service: Equipment needing service ("Sprzęt w Serwisie")
        overdue_maintenance: Overdue maintenance records of that equipment
        documents_indexed: Weaviate document count ("Dokumenty w Bazie")
        generated_at: When stats were computed
    """

    active_tickets: int = Field(ge=0)
    scheduled_visits: int = Field(ge=0)
    equipment_in_service: int = Field(ge=0)
    overdue_maintenance: int = Field(ge=0)
    documents_indexed: int = Field(ge=0)
    generated_at: datetime

    class Config:
        """Pydantic configuration for DashboardStats."""

        json_schema_extra = {
            "example": {
                "active_tickets": 12,
                "scheduled_visits": 8,
                "equipment_in_service": 3,
                "overdue_maintenance": 1,
                "documents_indexed": 1247,
                "generated_at": "2026-03-02T08:00:00",
            }
        }


class DashboardService:
    def __init__(
        self,
        tickets: ServiceTicketService,
        equipment: EquipmentService,
        weaviate: Optional[WeaviateClient] = None,
    ) -> None:
        self.tickets = tickets
        self.equipment = equipment
        self.weaviate = weaviate

    def _all_tickets(self) -> list[ServiceTicket]:
        tickets: list[ServiceTicket] = []
        offset = 0
        while True:
            page = self.tickets.list_tickets(limit=TICKET_PAGE_SIZE, offset=offset)
            tickets.extend(page.items)
            offset += TICKET_PAGE_SIZE
            if not page.items or offset >= page.total:
                return tickets

    def _documents_indexed(self) -> int:
        if self.weaviate is None:
            return 0
        try:
            return self.weaviate.count_documents()
        except SemanticSearchError as e:
            logger.warning(f"Could not count Weaviate documents: {e.message}")
            return 0

    def get_stats(self, today: Optional[date] = None) -> DashboardStats:
        today = today or date.today()
        tickets = self._all_tickets()
        in_service = self.equipment.needing_service(today)

        overdue = 0
        for item in in_service:
            overdue += sum(
                1 for record in self.equipment.maintenance_history(item.id) if record.is_overdue(today)
            )

        stats = DashboardStats(
            active_tickets=sum(1 for ticket in tickets if ticket.is_active()),
            scheduled_visits=sum(1 for ticket in tickets if ticket.status == TicketStatus.SCHEDULED),
            equipment_in_service=len(in_service),
            overdue_maintenance=overdue,
            documents_indexed=self._documents_indexed(),
            generated_at=datetime.now(),
        )
        logger.debug(f"Dashboard stats: {stats.model_dump()}")
        return stats
