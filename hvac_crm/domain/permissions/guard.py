"""
Permission Guard.

Decides whether a caller may perform an operation requiring HVAC permissions.

Check Order:
    1. Nothing required -> allow
    2. No workspace -> InsufficientPermissionsError("Workspace not found")
    3. API key present -> allow
    4. No role -> InsufficientPermissionsError("User workspace not found")
    5. Required feature disabled -> FeatureDisabledError
    6. Role lacks a permission -> InsufficientPermissionsError
"""

import logging
from dataclasses import dataclass, field
from typing import Iterable, Optional

from hvac_crm.domain.permissions.permissions import (
    FEATURE_FOR_PERMISSION,
    HvacPermission,
    permissions_for_role,
)
from hvac_crm.domain.shared.exceptions import FeatureDisabledError, InsufficientPermissionsError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AccessContext:
    """
    Caller identity for a request.

    Attributes:
        workspace_id: Workspace the request targets
        role: Workspace role (e.g. "hvac-technician")
        api_key: Integration API key (grants full access)
        features: Feature flag name -> enabled. Missing flags count as enabled.
    """

    workspace_id: Optional[str] = None
    role: Optional[str] = None
    api_key: Optional[str] = None
    features: dict[str, bool] = field(default_factory=dict, hash=False, compare=False)

    def feature_enabled(self, name: str) -> bool:
        return self.features.get(name, True)


class PermissionGuard:
    """
    Stateless permission checker.

    Examples:
        >>> context = AccessContext(workspace_id="ws-1", role="hvac-technician")
        >>> PermissionGuard.check(context, [HvacPermission.READ_EQUIPMENT])
        True
        >>> PermissionGuard.check(context, [HvacPermission.DELETE_EQUIPMENT])
        Traceback (most recent call last):
        ...
        hvac_crm.domain.shared.exceptions.InsufficientPermissionsError: ...
    """

    @staticmethod
    def check(context: AccessContext, required: Iterable[HvacPermission]) -> bool:
        """
        Verify context against required permissions.

        Returns:
            True when access is allowed

        Raises:
            InsufficientPermissionsError: Missing workspace, role or permission
            FeatureDisabledError: A required feature flag is off
        """
        required = list(required)
        if not required:
            return True

        if not context.workspace_id:
            raise InsufficientPermissionsError("Workspace not found")

        if context.api_key:
            return True

        if not context.role:
            raise InsufficientPermissionsError("User workspace not found")

        disabled = [
            FEATURE_FOR_PERMISSION[permission]
            for permission in required
            if permission in FEATURE_FOR_PERMISSION
            and not context.feature_enabled(FEATURE_FOR_PERMISSION[permission])
        ]
        if disabled:
            raise FeatureDisabledError("Required HVAC features are not enabled", features=disabled)

        granted = permissions_for_role(context.role)
        if not all(permission in granted for permission in required):
            names = [permission.value for permission in required]
            logger.warning(
                f"Permission denied for role '{context.role}' in workspace "
                f"{context.workspace_id}: requires {names}"
            )
            raise InsufficientPermissionsError(
                f"Insufficient HVAC permissions. Required: {', '.join(names)}",
                required=names,
            )

        return True
