"""
Application Services (Use Cases)

Exports:
    - ComplianceService, CompanyLookupResult
    - QuoteManagementService, QuotePage
    - EquipmentService, EquipmentPage
    - ServiceTicketService, TicketPage
    - SemanticSearchService, SemanticSearchQuery, SemanticSearchResponse
    - DashboardService, DashboardStats
    - HvacPrefetchLoader: cache warming data source
"""

from .compliance_service import CompanyLookupResult, ComplianceService
from .dashboard_service import DashboardService, DashboardStats
from .equipment_service import EquipmentPage, EquipmentService
from .prefetch_loader import HvacPrefetchLoader
from .quote_management_service import QuoteManagementService, QuotePage
from .semantic_search_service import (
    SemanticSearchQuery,
    SemanticSearchResponse,
    SemanticSearchResult,
    SemanticSearchService,
)
from .service_ticket_service import ServiceTicketService, TicketPage

__all__ = [
    "CompanyLookupResult",
    "ComplianceService",
    "DashboardService",
    "DashboardStats",
    "EquipmentPage",
    "EquipmentService",
    "HvacPrefetchLoader",
    "QuoteManagementService",
    "QuotePage",
    "SemanticSearchQuery",
    "SemanticSearchResponse",
    "SemanticSearchResult",
    "SemanticSearchService",
    "ServiceTicketService",
    "TicketPage",
]
