"""
HVAC Entities

Mutable domain entities with identity and lifecycle:
    - Customer: HVAC service customer
    - Equipment: Installed HVAC unit
    - ServiceTicket: Service request with status state machine
    - MaintenanceRecord: Planned/completed maintenance
"""

from .customer import Customer, CustomerStatus, CustomerType
from .equipment import Equipment, EquipmentCondition, EquipmentStatus, EquipmentType
from .maintenance_record import MaintenanceRecord, MaintenanceStatus, MaintenanceType
from .service_ticket import ServiceTicket, TicketPriority, TicketStatus

__all__ = [
    "Customer",
    "CustomerStatus",
    "CustomerType",
    "Equipment",
    "EquipmentCondition",
    "EquipmentStatus",
    "EquipmentType",
    "MaintenanceRecord",
    "MaintenanceStatus",
    "MaintenanceType",
    "ServiceTicket",
    "TicketPriority",
    "TicketStatus",
]
