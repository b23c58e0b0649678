"""
API Dependency Injection

Responsibility:
    - Build AccessContext from request headers
    - Enforce HVAC permissions per endpoint (require_permissions)
    - Provide Application Layer services to routers

Architecture Notes:
    - Part of API Layer (Presentation)
    - Long-lived collaborators (HTTP clients, caches) are created once per
      process; services holding in-memory caches are shared too
    - Tests replace any provider through app.dependency_overrides

Headers:
    X-Workspace-Id: Workspace the request targets
    X-User-Role: Workspace role (hvac-technician, hvac-manager, ...)
    X-Api-Key: Integration key (bypasses role checks)
"""

import logging
from functools import lru_cache
from typing import Callable, Optional

from fastapi import Depends, Header

from hvac_crm.application.services import (
    ComplianceService,
    DashboardService,
    EquipmentService,
    QuoteManagementService,
    SemanticSearchService,
    ServiceTicketService,
)
from hvac_crm.domain.permissions import AccessContext, HvacPermission, PermissionGuard
from hvac_crm.infrastructure.cache import HvacCacheStrategy
from hvac_crm.infrastructure.config import get_config
from hvac_crm.infrastructure.hvac_api import HvacApiClient
from hvac_crm.infrastructure.search import WeaviateClient

logger = logging.getLogger(__name__)


# ============================================================================
# ACCESS CONTROL
# ============================================================================


async def get_access_context(
    x_workspace_id: Optional[str] = Header(default=None),
    x_user_role: Optional[str] = Header(default=None),
    x_api_key: Optional[str] = Header(default=None),
) -> AccessContext:
    """Caller identity with feature flags from configuration."""
    return AccessContext(
        workspace_id=x_workspace_id,
        role=x_user_role,
        api_key=x_api_key,
        features=dict(get_config().features),
    )


def require_permissions(*permissions: HvacPermission) -> Callable:
    """
    Dependency factory enforcing HVAC permissions.

    Usage:
        @router.get("", dependencies=[Depends(require_permissions(HvacPermission.READ_EQUIPMENT))])

    Raises (via PermissionGuard):
        InsufficientPermissionsError -> 403
        FeatureDisabledError -> 403
    """

    async def dependency(context: AccessContext = Depends(get_access_context)) -> AccessContext:
        PermissionGuard.check(context, permissions)
        return context

    return dependency


# ============================================================================
# INFRASTRUCTURE
# ============================================================================


@lru_cache(maxsize=1)
def get_hvac_api_client() -> HvacApiClient:
    return HvacApiClient(get_config())


@lru_cache(maxsize=1)
def get_cache_strategy() -> Optional[HvacCacheStrategy]:
    config = get_config()
    if not config.cache.enabled:
        logger.info("HVAC cache disabled, event invalidation off")
        return None
    return HvacCacheStrategy(default_ttl=config.cache.default_ttl)


@lru_cache(maxsize=1)
def get_weaviate_client() -> Optional[WeaviateClient]:
    """Weaviate client, or None when semantic search feature is off."""
    config = get_config()
    if not config.is_feature_enabled("semantic_search"):
        return None
    return WeaviateClient(config)


# ============================================================================
# APPLICATION SERVICES
# ============================================================================


@lru_cache(maxsize=1)
def get_compliance_service() -> ComplianceService:
    return ComplianceService()


@lru_cache(maxsize=1)
def get_quote_service() -> QuoteManagementService:
    return QuoteManagementService(get_hvac_api_client())


def get_equipment_service() -> EquipmentService:
    return EquipmentService(get_hvac_api_client(), get_cache_strategy())


def get_ticket_service() -> ServiceTicketService:
    return ServiceTicketService(get_hvac_api_client(), get_cache_strategy())


def get_search_service() -> SemanticSearchService:
    return SemanticSearchService(get_hvac_api_client(), get_weaviate_client())


def get_dashboard_service(
    tickets: ServiceTicketService = Depends(get_ticket_service),
    equipment: EquipmentService = Depends(get_equipment_service),
) -> DashboardService:
    return DashboardService(tickets, equipment, get_weaviate_client())


def reset_dependencies() -> None:
    """Drop process-wide clients and services (used on shutdown and in tests)."""
    if get_hvac_api_client.cache_info().currsize:
        get_hvac_api_client().close()
    if get_weaviate_client.cache_info().currsize:
        weaviate = get_weaviate_client()
        if weaviate is not None:
            weaviate.close()

    for provider in (
        get_hvac_api_client,
        get_cache_strategy,
        get_weaviate_client,
        get_compliance_service,
        get_quote_service,
    ):
        provider.cache_clear()
