"""
Prefetch Loader - Cache Warming Data Source

Responsibility:
    Supplies HvacCacheStrategy.prefetch_for_workflow() with data from HVAC API.
    Called once per cache data type, returns {cache key: value}.

Key Conventions (match invalidation patterns of HvacCacheStrategy):
    customer-data                  customer:{id}:profile
    service-tickets                ticket:{id}:details
    technician-schedules           schedule:{technician_id}:tickets
    equipment-status               equipment:{id}:status
    equipment-maintenance-history  equipment:{id}:maintenance
"""

import logging
from typing import Any, Callable

from hvac_crm.domain.hvac.entities import EquipmentStatus, TicketStatus
from hvac_crm.infrastructure.hvac_api import HvacApiClient
from hvac_crm.shared.utils import pick

logger = logging.getLogger(__name__)

PREFETCH_LIMIT = 100


class HvacPrefetchLoader:
    """
    Callable loader: loader(data_type) -> {key: value}.

    Unknown data types yield an empty mapping.
    """

    def __init__(self, client: HvacApiClient, limit: int = PREFETCH_LIMIT) -> None:
        self.client = client
        self.limit = limit
        self._loaders: dict[str, Callable[[], dict[str, Any]]] = {
            "customer-data": self._customers,
            "service-tickets": self._tickets,
            "technician-schedules": self._schedules,
            "equipment-status": self._equipment_status,
            "equipment-maintenance-history": self._maintenance_history,
        }

    def __call__(self, data_type: str) -> dict[str, Any]:
        loader = self._loaders.get(data_type)
        if loader is None:
            logger.warning(f"No prefetch loader for data type: {data_type}")
            return {}
        return loader()

    def _customers(self) -> dict[str, Any]:
        customers = self.client.get_customers(limit=self.limit).items
        return {f"customer:{item['id']}:profile": item for item in customers if item.get("id")}

    def _open_tickets(self) -> list[dict[str, Any]]:
        tickets = self.client.get_service_tickets(limit=self.limit).items
        closed = {TicketStatus.COMPLETED.value, TicketStatus.CANCELLED.value}
        return [item for item in tickets if str(item.get("status", "")).lower() not in closed]

    def _tickets(self) -> dict[str, Any]:
        return {f"ticket:{item['id']}:details": item for item in self._open_tickets() if item.get("id")}

    def _schedules(self) -> dict[str, Any]:
        schedules: dict[str, Any] = {}
        for item in self._open_tickets():
            technician_id = pick(item, "technician_id")
            if technician_id:
                schedules.setdefault(f"schedule:{technician_id}:tickets", []).append(item)
        return schedules

    def _equipment_status(self) -> dict[str, Any]:
        equipment = self.client.get_equipment(limit=self.limit).items
        return {
            f"equipment:{item['id']}:status": {
                "status": item.get("status"),
                "condition": item.get("condition"),
            }
            for item in equipment
            if item.get("id")
        }

    def _maintenance_history(self) -> dict[str, Any]:
        service_statuses = {EquipmentStatus.MAINTENANCE.value, EquipmentStatus.REPAIR_NEEDED.value}
        equipment = self.client.get_equipment(limit=self.limit).items
        return {
            f"equipment:{item['id']}:maintenance": self.client.get_maintenance_history(item["id"])
            for item in equipment
            if item.get("id") and str(item.get("status", "")).lower() in service_statuses
        }
