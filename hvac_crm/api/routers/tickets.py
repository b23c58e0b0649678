"""
API Router for Service Tickets

Responsibility:
    HTTP interface for service ticket listing, creation and status workflow.

Architecture Notes:
    - Part of API Layer (Presentation)
    - Status transitions are validated by ServiceTicket state machine
      (invalid transition -> 400 via global DomainException handler)

Contains:
    - GET /tickets, GET /tickets/{ticket_id}
    - POST /tickets
    - PATCH /tickets/{ticket_id}/status
"""

import logging
from typing import Any, Optional

from fastapi import APIRouter, Depends, Path, Query, status

from hvac_crm.api.dependencies import get_ticket_service, require_permissions
from hvac_crm.api.schemas.common import ErrorResponse, PageResponse
from hvac_crm.api.schemas.requests import TicketRequest, TicketStatusRequest
from hvac_crm.application.services import ServiceTicketService
from hvac_crm.domain.hvac.entities import ServiceTicket
from hvac_crm.domain.permissions import HvacPermission

logger = logging.getLogger(__name__)


router = APIRouter(
    prefix="/tickets",
    tags=["tickets"],
    responses={
        400: {"model": ErrorResponse, "description": "Bad Request - Invalid status transition"},
        403: {"model": ErrorResponse, "description": "Forbidden - Missing HVAC permission"},
        404: {"model": ErrorResponse, "description": "Not Found - Ticket not found"},
    },
)


@router.get(
    "",
    response_model=PageResponse,
    dependencies=[Depends(require_permissions(HvacPermission.READ_SERVICE_TICKETS))],
    summary="List service tickets",
)
def list_tickets(
    ticket_status: Optional[str] = Query(default=None, alias="status"),
    priority: Optional[str] = Query(default=None),
    technician_id: Optional[str] = Query(default=None),
    customer_id: Optional[str] = Query(default=None),
    limit: int = Query(default=50, ge=1, le=100),
    offset: int = Query(default=0, ge=0),
    service: ServiceTicketService = Depends(get_ticket_service),
) -> PageResponse:
    filters = {
        key: value
        for key, value in {
            "status": ticket_status,
            "priority": priority,
            "technicianId": technician_id,
            "customerId": customer_id,
        }.items()
        if value
    }
    page = service.list_tickets(filters=filters or None, limit=limit, offset=offset)
    return PageResponse(items=[ticket.to_dict() for ticket in page.items], total=page.total)


@router.get(
    "/{ticket_id}",
    response_model=dict[str, Any],
    dependencies=[Depends(require_permissions(HvacPermission.READ_SERVICE_TICKETS))],
    summary="Get service ticket",
)
def get_ticket(
    ticket_id: str = Path(...),
    service: ServiceTicketService = Depends(get_ticket_service),
) -> dict[str, Any]:
    return service.get_ticket(ticket_id).to_dict()


@router.post(
    "",
    response_model=dict[str, Any],
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_permissions(HvacPermission.CREATE_SERVICE_TICKETS))],
    summary="Create service ticket",
    description="Ticket number SRV-YYYYMMDD-XXXXXX is generated before sending to HVAC API.",
)
def create_ticket(
    request: TicketRequest,
    service: ServiceTicketService = Depends(get_ticket_service),
) -> dict[str, Any]:
    ticket = ServiceTicket.from_dict(request.model_dump(mode="json", exclude_none=True))
    return service.create_ticket(ticket).to_dict()


@router.patch(
    "/{ticket_id}/status",
    response_model=dict[str, Any],
    dependencies=[Depends(require_permissions(HvacPermission.UPDATE_SERVICE_TICKETS))],
    summary="Change service ticket status",
)
def change_ticket_status(
    request: TicketStatusRequest,
    ticket_id: str = Path(...),
    service: ServiceTicketService = Depends(get_ticket_service),
) -> dict[str, Any]:
    ticket = service.change_status(
        ticket_id,
        request.status,
        scheduled_date=request.scheduled_date,
        technician_id=request.technician_id,
        actual_duration=request.actual_duration,
    )
    return ticket.to_dict()
