"""
HVAC Permissions.

Static role-based access model for HVAC operations.

Contains:
    - HvacPermission enum
    - ROLE_PERMISSIONS: workspace role -> granted permissions
    - FEATURE_FOR_PERMISSION: permissions that need a feature flag
    - Convenience permission sets for routers
"""

from enum import Enum
from typing import Final


class HvacPermission(str, Enum):
    # Equipment
    READ_EQUIPMENT = "READ_EQUIPMENT"
    CREATE_EQUIPMENT = "CREATE_EQUIPMENT"
    UPDATE_EQUIPMENT = "UPDATE_EQUIPMENT"
    DELETE_EQUIPMENT = "DELETE_EQUIPMENT"

    # Service tickets
    READ_SERVICE_TICKETS = "READ_SERVICE_TICKETS"
    CREATE_SERVICE_TICKETS = "CREATE_SERVICE_TICKETS"
    UPDATE_SERVICE_TICKETS = "UPDATE_SERVICE_TICKETS"
    DELETE_SERVICE_TICKETS = "DELETE_SERVICE_TICKETS"
    ASSIGN_SERVICE_TICKETS = "ASSIGN_SERVICE_TICKETS"

    # Technicians
    READ_TECHNICIANS = "READ_TECHNICIANS"
    CREATE_TECHNICIANS = "CREATE_TECHNICIANS"
    UPDATE_TECHNICIANS = "UPDATE_TECHNICIANS"
    DELETE_TECHNICIANS = "DELETE_TECHNICIANS"

    # Maintenance
    READ_MAINTENANCE = "READ_MAINTENANCE"
    CREATE_MAINTENANCE = "CREATE_MAINTENANCE"
    UPDATE_MAINTENANCE = "UPDATE_MAINTENANCE"
    DELETE_MAINTENANCE = "DELETE_MAINTENANCE"
    SCHEDULE_MAINTENANCE = "SCHEDULE_MAINTENANCE"

    # Advanced
    ACCESS_ANALYTICS = "ACCESS_ANALYTICS"
    MANAGE_HVAC_SETTINGS = "MANAGE_HVAC_SETTINGS"
    SEMANTIC_SEARCH = "SEMANTIC_SEARCH"
    CUSTOMER_360_VIEW = "CUSTOMER_360_VIEW"

    # Administrative
    HVAC_ADMIN = "HVAC_ADMIN"
    MANAGE_HVAC_USERS = "MANAGE_HVAC_USERS"


ALL_PERMISSIONS: Final[frozenset[HvacPermission]] = frozenset(HvacPermission)

_TECHNICIAN: Final[frozenset[HvacPermission]] = frozenset(
    {
        HvacPermission.READ_EQUIPMENT,
        HvacPermission.UPDATE_EQUIPMENT,
        HvacPermission.READ_SERVICE_TICKETS,
        HvacPermission.UPDATE_SERVICE_TICKETS,
        HvacPermission.READ_MAINTENANCE,
        HvacPermission.UPDATE_MAINTENANCE,
        HvacPermission.SEMANTIC_SEARCH,
    }
)

_SUPERVISOR: Final[frozenset[HvacPermission]] = _TECHNICIAN | {
    HvacPermission.CREATE_EQUIPMENT,
    HvacPermission.CREATE_SERVICE_TICKETS,
    HvacPermission.ASSIGN_SERVICE_TICKETS,
    HvacPermission.READ_TECHNICIANS,
    HvacPermission.CREATE_MAINTENANCE,
    HvacPermission.SCHEDULE_MAINTENANCE,
    HvacPermission.ACCESS_ANALYTICS,
    HvacPermission.CUSTOMER_360_VIEW,
}

ROLE_PERMISSIONS: Final[dict[str, frozenset[HvacPermission]]] = {
    "hvac-technician": _TECHNICIAN,
    "hvac-supervisor": _SUPERVISOR,
    "hvac-manager": ALL_PERMISSIONS - {HvacPermission.HVAC_ADMIN},
    "hvac-admin": ALL_PERMISSIONS,
    "admin": ALL_PERMISSIONS,
}

# Permission -> feature flag name (keys of HvacConfig.features)
FEATURE_FOR_PERMISSION: Final[dict[HvacPermission, str]] = {
    HvacPermission.SEMANTIC_SEARCH: "semantic_search",
    HvacPermission.ACCESS_ANALYTICS: "ai_insights",
    HvacPermission.CUSTOMER_360_VIEW: "customer_360",
    HvacPermission.SCHEDULE_MAINTENANCE: "maintenance",
}

# Convenience sets
HVAC_READ: Final[tuple[HvacPermission, ...]] = (
    HvacPermission.READ_EQUIPMENT,
    HvacPermission.READ_SERVICE_TICKETS,
    HvacPermission.READ_MAINTENANCE,
)
HVAC_WRITE: Final[tuple[HvacPermission, ...]] = (
    HvacPermission.CREATE_EQUIPMENT,
    HvacPermission.UPDATE_EQUIPMENT,
    HvacPermission.CREATE_SERVICE_TICKETS,
    HvacPermission.UPDATE_SERVICE_TICKETS,
    HvacPermission.CREATE_MAINTENANCE,
    HvacPermission.UPDATE_MAINTENANCE,
)
HVAC_ADMIN_ONLY: Final[tuple[HvacPermission, ...]] = (HvacPermission.HVAC_ADMIN,)
SEMANTIC_SEARCH_ONLY: Final[tuple[HvacPermission, ...]] = (HvacPermission.SEMANTIC_SEARCH,)
CUSTOMER_360_ONLY: Final[tuple[HvacPermission, ...]] = (HvacPermission.CUSTOMER_360_VIEW,)


def permissions_for_role(role: str | None) -> frozenset[HvacPermission]:
    """Permissions granted to role; unknown roles get none."""
    if not role:
        return frozenset()
    return ROLE_PERMISSIONS.get(role.lower(), frozenset())
