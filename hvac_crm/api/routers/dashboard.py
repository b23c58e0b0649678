"""
API Router for HVAC Dashboard

Contains:
    - GET /dashboard/stats - Active tickets, scheduled visits, equipment in
      service, overdue maintenance and indexed documents
"""

from fastapi import APIRouter, Depends

from hvac_crm.api.dependencies import get_dashboard_service, require_permissions
from hvac_crm.api.schemas.common import ErrorResponse
from hvac_crm.application.services import DashboardService, DashboardStats
from hvac_crm.domain.permissions import HvacPermission

router = APIRouter(
    prefix="/dashboard",
    tags=["dashboard"],
    responses={403: {"model": ErrorResponse, "description": "Forbidden - ACCESS_ANALYTICS required"}},
)


@router.get(
    "/stats",
    response_model=DashboardStats,
    dependencies=[Depends(require_permissions(HvacPermission.ACCESS_ANALYTICS))],
    summary="Dashboard statistics",
)
def dashboard_stats(service: DashboardService = Depends(get_dashboard_service)) -> DashboardStats:
    return service.get_stats()
