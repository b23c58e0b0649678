"""Persistence adapters (Redis)."""
