"""
Permissions subdomain: HVAC roles, permissions and access guard.
"""

from .guard import AccessContext, PermissionGuard
from .permissions import (
    CUSTOMER_360_ONLY,
    FEATURE_FOR_PERMISSION,
    HVAC_ADMIN_ONLY,
    HVAC_READ,
    HVAC_WRITE,
    ROLE_PERMISSIONS,
    SEMANTIC_SEARCH_ONLY,
    HvacPermission,
    permissions_for_role,
)

__all__ = [
    "AccessContext",
    "PermissionGuard",
    "HvacPermission",
    "ROLE_PERMISSIONS",
    "FEATURE_FOR_PERMISSION",
    "HVAC_READ",
    "HVAC_WRITE",
    "HVAC_ADMIN_ONLY",
    "SEMANTIC_SEARCH_ONLY",
    "CUSTOMER_360_ONLY",
    "permissions_for_role",
]
