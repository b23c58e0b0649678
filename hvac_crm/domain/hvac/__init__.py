"""
HVAC Subdomain Module

Core CRM records of an HVAC service company: customers, installed equipment,
service tickets and maintenance records.

Usage:
    >>> from hvac_crm.domain.hvac import Equipment, ServiceTicket
    >>> # Or import from specific submodules
    >>> from hvac_crm.domain.hvac.entities.equipment import EquipmentStatus
"""

from .entities import (
    Customer,
    Equipment,
    MaintenanceRecord,
    ServiceTicket,
)

__all__ = [
    "Customer",
    "Equipment",
    "MaintenanceRecord",
    "ServiceTicket",
]
