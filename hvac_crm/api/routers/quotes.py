"""
API Router for HVAC Quotes

Responsibility:
    HTTP interface for quote listing, creation, status changes, templates,
    analytics and local totals calculation.

Architecture Notes:
    - Part of API Layer (Presentation)
    - Depends on Application Layer (QuoteManagementService)
    - Quotes follow service ticket permissions: reading needs
      READ_SERVICE_TICKETS, changing needs CREATE/UPDATE_SERVICE_TICKETS
    - Plain def endpoints: HvacApiClient is blocking, FastAPI runs them in threadpool

Contains:
    - GET /quotes, GET /quotes/{quote_id}, GET /quotes/{quote_id}/value
    - POST /quotes, PUT /quotes/{quote_id}, PATCH /quotes/{quote_id}/status
    - POST /quotes/{quote_id}/duplicate
    - POST /quotes/from-template, GET /quotes/templates
    - GET /quotes/analytics, POST /quotes/calculate

Does NOT contain:
    - Totals arithmetic (Domain Layer quote_calculator)
    - HVAC API calls (Infrastructure Layer via Application Layer)
"""

import logging
from typing import Any, Optional

from fastapi import APIRouter, Body, Depends, HTTPException, Path, Query, status

from hvac_crm.api.dependencies import get_quote_service, require_permissions
from hvac_crm.api.schemas.common import ErrorResponse, PageResponse
from hvac_crm.api.schemas.requests import (
    QuoteFromTemplateRequest,
    QuoteRequest,
    QuoteStatusRequest,
)
from hvac_crm.application.services import QuoteManagementService
from hvac_crm.domain.permissions import HvacPermission
from hvac_crm.domain.quotes.entities import Quote

logger = logging.getLogger(__name__)

READ_QUOTES = require_permissions(HvacPermission.READ_SERVICE_TICKETS)
CREATE_QUOTES = require_permissions(HvacPermission.CREATE_SERVICE_TICKETS)
UPDATE_QUOTES = require_permissions(HvacPermission.UPDATE_SERVICE_TICKETS)


router = APIRouter(
    prefix="/quotes",
    tags=["quotes"],
    responses={
        403: {"model": ErrorResponse, "description": "Forbidden - Missing HVAC permission"},
        404: {"model": ErrorResponse, "description": "Not Found - Quote not found"},
        502: {"model": ErrorResponse, "description": "Bad Gateway - HVAC API failure"},
    },
)


def _quote_from_request(request: QuoteRequest) -> Quote:
    return Quote.from_dict(request.model_dump(mode="json", exclude_none=True))


# ============================================================================
# QUERIES
# ============================================================================


@router.get(
    "",
    response_model=PageResponse,
    dependencies=[Depends(READ_QUOTES)],
    summary="List quotes",
    description=(
        "Lists quotes from HVAC API. status/customer_id/category are passed upstream; "
        "quick_filter (pending, sent, accepted, expired, high_value) narrows the page locally."
    ),
)
def list_quotes(
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=20, ge=1, le=100),
    status_filter: Optional[str] = Query(default=None, alias="status"),
    customer_id: Optional[str] = Query(default=None),
    category: Optional[str] = Query(default=None),
    quick_filter: Optional[str] = Query(default=None),
    service: QuoteManagementService = Depends(get_quote_service),
) -> PageResponse:
    filters = {
        key: value
        for key, value in {"status": status_filter, "customerId": customer_id, "category": category}.items()
        if value
    }
    quote_page = service.get_quotes(page=page, limit=limit, filters=filters or None)

    quotes = quote_page.quotes
    if quick_filter:
        try:
            quotes = service.filter_quotes(quotes, quick_filter)
        except ValueError as e:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    return PageResponse(items=[quote.to_dict() for quote in quotes], total=quote_page.total)


@router.get(
    "/templates",
    response_model=list[dict[str, Any]],
    dependencies=[Depends(READ_QUOTES)],
    summary="List quote templates",
)
def list_templates(
    category: Optional[str] = Query(default=None),
    service: QuoteManagementService = Depends(get_quote_service),
) -> list[dict[str, Any]]:
    return service.get_templates(category)


@router.get(
    "/analytics",
    response_model=dict[str, Any],
    dependencies=[Depends(READ_QUOTES)],
    summary="Quote analytics",
    description="Analytics computed by HVAC API, or locally from one page of quotes when local=true.",
)
def quote_analytics(
    local: bool = Query(default=False),
    limit: int = Query(default=100, ge=1, le=100),
    service: QuoteManagementService = Depends(get_quote_service),
) -> dict[str, Any]:
    if local:
        quote_page = service.get_quotes(page=1, limit=limit)
        return service.local_analytics(quote_page.quotes).to_dict()
    return service.get_analytics()


@router.get(
    "/{quote_id}",
    response_model=dict[str, Any],
    dependencies=[Depends(READ_QUOTES)],
    summary="Get quote",
)
def get_quote(
    quote_id: str = Path(...),
    service: QuoteManagementService = Depends(get_quote_service),
) -> dict[str, Any]:
    return service.get_quote(quote_id).to_dict()


@router.get(
    "/{quote_id}/value",
    response_model=dict[str, str],
    dependencies=[Depends(READ_QUOTES)],
    summary="Quote value summary",
    description="Net, VAT, gross, margin and profit (net x margin / 100) of a stored quote.",
)
def get_quote_value(
    quote_id: str = Path(...),
    service: QuoteManagementService = Depends(get_quote_service),
) -> dict[str, str]:
    return service.quote_value(quote_id)


# ============================================================================
# COMMANDS
# ============================================================================


@router.post(
    "",
    response_model=dict[str, Any],
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(CREATE_QUOTES)],
    summary="Create quote",
)
def create_quote(
    request: QuoteRequest,
    service: QuoteManagementService = Depends(get_quote_service),
) -> dict[str, Any]:
    return service.create_quote(_quote_from_request(request)).to_dict()


@router.post(
    "/from-template",
    response_model=dict[str, Any],
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(CREATE_QUOTES)],
    summary="Create quote from template",
)
def create_quote_from_template(
    request: QuoteFromTemplateRequest,
    service: QuoteManagementService = Depends(get_quote_service),
) -> dict[str, Any]:
    quote = service.create_from_template(request.template_id, request.customer_id, request.overrides)
    return quote.to_dict()


@router.post(
    "/calculate",
    response_model=dict[str, Any],
    dependencies=[Depends(READ_QUOTES)],
    summary="Calculate quote totals locally",
    description="Returns item totals and net/VAT/gross sums. Nothing is stored.",
)
def calculate_quote(
    request: QuoteRequest,
    service: QuoteManagementService = Depends(get_quote_service),
) -> dict[str, Any]:
    return service.calculate(_quote_from_request(request))


@router.post(
    "/{quote_id}/duplicate",
    response_model=dict[str, Any],
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(CREATE_QUOTES)],
    summary="Duplicate quote",
    description="Creates a draft copy titled \"<title> (Kopia)\" with new ids and cleared timestamps.",
)
def duplicate_quote(
    quote_id: str = Path(...),
    service: QuoteManagementService = Depends(get_quote_service),
) -> dict[str, Any]:
    return service.duplicate_quote(quote_id).to_dict()


@router.put(
    "/{quote_id}",
    response_model=dict[str, Any],
    dependencies=[Depends(UPDATE_QUOTES)],
    summary="Update quote fields",
)
def update_quote(
    quote_id: str = Path(...),
    changes: dict[str, Any] = Body(...),
    service: QuoteManagementService = Depends(get_quote_service),
) -> dict[str, Any]:
    return service.update_quote(quote_id, changes).to_dict()


@router.patch(
    "/{quote_id}/status",
    response_model=dict[str, Any],
    dependencies=[Depends(UPDATE_QUOTES)],
    summary="Change quote status",
    description="Stamps sentAt/acceptedAt/rejectedAt for sent/accepted/rejected.",
)
def update_quote_status(
    request: QuoteStatusRequest,
    quote_id: str = Path(...),
    service: QuoteManagementService = Depends(get_quote_service),
) -> dict[str, Any]:
    return service.update_quote_status(quote_id, request.status, request.reason).to_dict()
