"""
Equipment Service - Application Orchestration

Responsibility:
    Equipment use cases: listing, CRUD, service and warranty watch lists,
    maintenance history and scheduling. Watch lists are filtered locally with
    domain rules (Equipment.needs_service, Equipment.warranty_expires_within).

Architecture Notes:
    - Part of Application Layer (Services/Use Cases)
    - Depends on Domain Layer (Equipment, MaintenanceRecord)
    - Depends on Infrastructure Layer (HvacApiClient)
    - Optional HvacCacheStrategy serves equipment details and maintenance
      history (equipment:{id}:details, equipment:{id}:maintenance) and
      receives "equipment-maintenance" events
"""

import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Any, Callable, Mapping, Optional

from hvac_crm.domain.hvac.entities import Equipment, MaintenanceRecord
from hvac_crm.domain.shared.exceptions import EntityNotFoundError
from hvac_crm.infrastructure.cache import HvacCacheStrategy
from hvac_crm.infrastructure.hvac_api import HvacApiClient
from hvac_crm.shared.utils import to_camel_payload

logger = logging.getLogger(__name__)

# Page size used when scanning all equipment for watch lists
SCAN_PAGE_SIZE = 100


@dataclass
class EquipmentPage:
    items: list[Equipment] = field(default_factory=list)
    total: int = 0


class EquipmentService:
    def __init__(self, client: HvacApiClient, cache_strategy: Optional[HvacCacheStrategy] = None) -> None:
        self.client = client
        self.cache_strategy = cache_strategy

    def _cached(self, data_type: str, key: str, loader: Callable[[], Any]) -> Any:
        if self.cache_strategy is None:
            return loader()
        return self.cache_strategy.get_or_set(data_type, key, loader)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def list_equipment(
        self, filters: Optional[Mapping[str, Any]] = None, limit: int = 50, offset: int = 0
    ) -> EquipmentPage:
        result = self.client.get_equipment(filters=filters, limit=limit, offset=offset)
        return EquipmentPage(items=[Equipment.from_dict(item) for item in result.items], total=result.total)

    def all_equipment(self, filters: Optional[Mapping[str, Any]] = None) -> list[Equipment]:
        """Fetch every page of equipment."""
        items: list[Equipment] = []
        offset = 0
        while True:
            page = self.list_equipment(filters=filters, limit=SCAN_PAGE_SIZE, offset=offset)
            items.extend(page.items)
            offset += SCAN_PAGE_SIZE
            if not page.items or offset >= page.total:
                return items

    def get_equipment(self, equipment_id: str) -> Equipment:
        """
        Raises:
            EntityNotFoundError: If equipment does not exist
        """
        data = self._cached(
            "equipment-status",
            f"equipment:{equipment_id}:details",
            lambda: self.client.get_equipment_by_id(equipment_id),
        )
        if data is None:
            raise EntityNotFoundError(
                f"Equipment {equipment_id} not found", entity_type="equipment", entity_id=equipment_id
            )
        return Equipment.from_dict(data)

    def needing_service(self, today: Optional[date] = None) -> list[Equipment]:
        return [item for item in self.all_equipment() if item.needs_service(today)]

    def expiring_warranties(self, days: int = 30, today: Optional[date] = None) -> list[Equipment]:
        return [item for item in self.all_equipment() if item.warranty_expires_within(days, today)]

    def maintenance_history(self, equipment_id: str) -> list[MaintenanceRecord]:
        history = self._cached(
            "equipment-maintenance-history",
            f"equipment:{equipment_id}:maintenance",
            lambda: self.client.get_maintenance_history(equipment_id),
        )
        return [MaintenanceRecord.from_dict({"equipmentId": equipment_id, **item}) for item in history or []]

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def _payload(self, equipment: Equipment) -> dict[str, Any]:
        payload = to_camel_payload(equipment.to_dict())
        for key in ("id", "createdAt", "updatedAt"):
            payload.pop(key, None)
        return payload

    def create_equipment(self, equipment: Equipment) -> Equipment:
        created = Equipment.from_dict(self.client.create_equipment(self._payload(equipment)))
        logger.info(f"Created equipment {created.id} ({created.name})")
        return created

    def update_equipment(self, equipment_id: str, changes: Mapping[str, Any]) -> Equipment:
        updated = Equipment.from_dict(self.client.update_equipment(equipment_id, to_camel_payload(dict(changes))))
        self._notify_maintenance(equipment_id)
        return updated

    def delete_equipment(self, equipment_id: str) -> bool:
        deleted = self.client.delete_equipment(equipment_id)
        self._notify_maintenance(equipment_id)
        return deleted

    def schedule_maintenance(self, record: MaintenanceRecord) -> MaintenanceRecord:
        payload = to_camel_payload(record.to_dict())
        for key in ("id", "createdAt", "updatedAt"):
            payload.pop(key, None)

        result = self.client.schedule_maintenance(payload)
        data = {**payload, **(result or {})}
        data["equipmentId"] = data.get("equipmentId") or record.equipment_id
        scheduled = MaintenanceRecord.from_dict(data)
        self._notify_maintenance(record.equipment_id)
        logger.info(
            f"Scheduled {scheduled.maintenance_type.value} maintenance for equipment "
            f"{record.equipment_id} on {scheduled.scheduled_date}"
        )
        return scheduled

    def _notify_maintenance(self, equipment_id: str) -> None:
        if self.cache_strategy is not None:
            self.cache_strategy.invalidate_by_event("equipment-maintenance", equipment_id)
