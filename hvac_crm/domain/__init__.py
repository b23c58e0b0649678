"""
Domain Layer - Core Business Logic

Business rules of the HVAC CRM: entities, value objects and domain services.
Framework-independent and highly testable.

Architecture:
    - Clean Architecture: Domain Layer is the center, no external dependencies
    - Domain-Driven Design: Entities, Value Objects, Services

Subdomains:
    - compliance: Polish NIP/REGON/KRS validation, VAT, energy providers
    - hvac: Customers, equipment, service tickets, maintenance records
    - quotes: Commercial offers, totals and analytics
    - permissions: Role-based access for HVAC operations
    - shared: Cross-subdomain concepts (exceptions)

Usage:
    >>> from hvac_crm.domain import DomainException
    >>> from hvac_crm.domain.hvac import Equipment
    >>> from hvac_crm.domain.compliance import validate_nip
"""

from hvac_crm.domain.shared.exceptions import DomainException

__all__ = ["DomainException"]
