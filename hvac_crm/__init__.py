"""
HVAC CRM - backend for Polish HVAC service companies.

Layers:
    - domain: Compliance rules, HVAC entities, quotes, permissions
    - application: Services and Celery tasks
    - infrastructure: HVAC API client, Weaviate, Redis/memory cache, config
    - api: FastAPI routers
"""

__version__ = "0.1.0"
