"""
API Router for HVAC Equipment and Maintenance

Responsibility:
    HTTP interface for equipment CRUD, service/warranty reports and
    maintenance scheduling.

Architecture Notes:
    - Part of API Layer (Presentation)
    - Depends on Application Layer (EquipmentService)
    - Fixed paths (/needing-service, /expiring-warranties) are declared
      before /{equipment_id}

Contains:
    - GET /equipment, GET /equipment/{equipment_id}
    - GET /equipment/needing-service
    - GET /equipment/expiring-warranties?days=30
    - POST /equipment, PUT /equipment/{equipment_id}, DELETE /equipment/{equipment_id}
    - GET/POST /equipment/{equipment_id}/maintenance
"""

import logging
from typing import Any, Optional

from fastapi import APIRouter, Body, Depends, Path, Query, status

from hvac_crm.api.dependencies import get_equipment_service, require_permissions
from hvac_crm.api.schemas.common import DeleteResponse, ErrorResponse, PageResponse
from hvac_crm.api.schemas.requests import EquipmentRequest, MaintenanceRequest
from hvac_crm.application.services import EquipmentService
from hvac_crm.domain.hvac.entities import Equipment, MaintenanceRecord
from hvac_crm.domain.permissions import HvacPermission

logger = logging.getLogger(__name__)


router = APIRouter(
    prefix="/equipment",
    tags=["equipment"],
    responses={
        403: {"model": ErrorResponse, "description": "Forbidden - Missing HVAC permission"},
        404: {"model": ErrorResponse, "description": "Not Found - Equipment not found"},
        502: {"model": ErrorResponse, "description": "Bad Gateway - HVAC API failure"},
    },
)


# ============================================================================
# QUERIES
# ============================================================================


@router.get(
    "",
    response_model=PageResponse,
    dependencies=[Depends(require_permissions(HvacPermission.READ_EQUIPMENT))],
    summary="List equipment",
)
def list_equipment(
    customer_id: Optional[str] = Query(default=None),
    equipment_status: Optional[str] = Query(default=None, alias="status"),
    limit: int = Query(default=50, ge=1, le=100),
    offset: int = Query(default=0, ge=0),
    service: EquipmentService = Depends(get_equipment_service),
) -> PageResponse:
    filters = {
        key: value
        for key, value in {"customerId": customer_id, "status": equipment_status}.items()
        if value
    }
    page = service.list_equipment(filters=filters or None, limit=limit, offset=offset)
    return PageResponse(items=[item.to_dict() for item in page.items], total=page.total)


@router.get(
    "/needing-service",
    response_model=list[dict[str, Any]],
    dependencies=[Depends(require_permissions(HvacPermission.READ_EQUIPMENT))],
    summary="Equipment needing service",
    description="Units in maintenance/repair_needed status or with next service date due.",
)
def equipment_needing_service(
    service: EquipmentService = Depends(get_equipment_service),
) -> list[dict[str, Any]]:
    return [item.to_dict() for item in service.needing_service()]


@router.get(
    "/expiring-warranties",
    response_model=list[dict[str, Any]],
    dependencies=[Depends(require_permissions(HvacPermission.READ_EQUIPMENT))],
    summary="Equipment with warranty expiring soon",
)
def expiring_warranties(
    days: int = Query(default=30, ge=0, le=3650),
    service: EquipmentService = Depends(get_equipment_service),
) -> list[dict[str, Any]]:
    return [item.to_dict() for item in service.expiring_warranties(days=days)]


@router.get(
    "/{equipment_id}",
    response_model=dict[str, Any],
    dependencies=[Depends(require_permissions(HvacPermission.READ_EQUIPMENT))],
    summary="Get equipment",
)
def get_equipment(
    equipment_id: str = Path(...),
    service: EquipmentService = Depends(get_equipment_service),
) -> dict[str, Any]:
    return service.get_equipment(equipment_id).to_dict()


@router.get(
    "/{equipment_id}/maintenance",
    response_model=list[dict[str, Any]],
    dependencies=[Depends(require_permissions(HvacPermission.READ_MAINTENANCE))],
    summary="Maintenance history of equipment",
)
def maintenance_history(
    equipment_id: str = Path(...),
    service: EquipmentService = Depends(get_equipment_service),
) -> list[dict[str, Any]]:
    return [record.to_dict() for record in service.maintenance_history(equipment_id)]


# ============================================================================
# COMMANDS
# ============================================================================


@router.post(
    "",
    response_model=dict[str, Any],
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_permissions(HvacPermission.CREATE_EQUIPMENT))],
    summary="Register equipment",
)
def create_equipment(
    request: EquipmentRequest,
    service: EquipmentService = Depends(get_equipment_service),
) -> dict[str, Any]:
    equipment = Equipment.from_dict(request.model_dump(mode="json", exclude_none=True))
    return service.create_equipment(equipment).to_dict()


@router.put(
    "/{equipment_id}",
    response_model=dict[str, Any],
    dependencies=[Depends(require_permissions(HvacPermission.UPDATE_EQUIPMENT))],
    summary="Update equipment fields",
)
def update_equipment(
    equipment_id: str = Path(...),
    changes: dict[str, Any] = Body(...),
    service: EquipmentService = Depends(get_equipment_service),
) -> dict[str, Any]:
    return service.update_equipment(equipment_id, changes).to_dict()


@router.delete(
    "/{equipment_id}",
    response_model=DeleteResponse,
    dependencies=[Depends(require_permissions(HvacPermission.DELETE_EQUIPMENT))],
    summary="Delete equipment",
)
def delete_equipment(
    equipment_id: str = Path(...),
    service: EquipmentService = Depends(get_equipment_service),
) -> DeleteResponse:
    return DeleteResponse(deleted=service.delete_equipment(equipment_id))


@router.post(
    "/{equipment_id}/maintenance",
    response_model=dict[str, Any],
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_permissions(HvacPermission.SCHEDULE_MAINTENANCE))],
    summary="Schedule maintenance",
)
def schedule_maintenance(
    request: MaintenanceRequest,
    equipment_id: str = Path(...),
    service: EquipmentService = Depends(get_equipment_service),
) -> dict[str, Any]:
    record = MaintenanceRecord.from_dict(
        {**request.model_dump(mode="json", exclude_none=True), "equipment_id": equipment_id}
    )
    return service.schedule_maintenance(record).to_dict()
