"""
API Layer - FastAPI Presentation Layer

Responsibility:
    HTTP interface for the HVAC CRM. Handles requests, responses,
    access headers and permission checks. No business logic.

Contains:
    - FastAPI routers (compliance, quotes, equipment, tickets, search, dashboard)
    - Request/Response models (Pydantic)
    - Dependency injection setup and permission dependencies
    - Middleware configuration (CORS, logging)

Does NOT contain:
    - Business logic (belongs to Domain layer)
    - Orchestration (belongs to Application layer)
    - HVAC API / Weaviate / Redis access (belongs to Infrastructure layer)
"""
