"""
API Routers Package

Contains all FastAPI routers grouped by functionality.

Architecture Notes:
    - Part of API Layer (Presentation)
    - Routers are thin wrappers around Application Layer services
    - Permissions enforced per endpoint with require_permissions()

Available Routers:
    - compliance_router: Polish identifiers, VAT, compliance score (public)
    - quotes_router: Quote management and analytics
    - equipment_router: Equipment and maintenance
    - tickets_router: Service tickets
    - search_router: Semantic search
    - dashboard_router: Dashboard statistics
"""

from .compliance import router as compliance_router
from .dashboard import router as dashboard_router
from .equipment import router as equipment_router
from .quotes import router as quotes_router
from .search import router as search_router
from .tickets import router as tickets_router

__all__ = [
    "compliance_router",
    "dashboard_router",
    "equipment_router",
    "quotes_router",
    "search_router",
    "tickets_router",
]
