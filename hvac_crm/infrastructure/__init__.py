"""
Infrastructure Layer

Adapters to external systems: configuration, Redis, cache tiers,
HVAC REST API client and Weaviate semantic search client.
"""
