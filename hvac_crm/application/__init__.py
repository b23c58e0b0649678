"""
Application Layer - Use Cases and Orchestration

Responsibility:
    Coordinates the flow of data between API, Domain and Infrastructure layers.
    Handles background cache maintenance with Celery.

Contains:
    - Application services (quotes, equipment, tickets, search, dashboard, compliance)
    - Celery tasks (cache warming, workflow prefetch)

Does NOT contain:
    - Domain business rules (belongs to Domain layer)
    - HTTP handling (belongs to API layer)
    - Infrastructure details (belongs to Infrastructure layer)
"""
