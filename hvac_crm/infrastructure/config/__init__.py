"""
Configuration Module

Exports:
    - HvacConfig: Complete configuration (API, Weaviate, business, cache, features)
    - get_config: Process-wide configuration singleton
    - reset_config: Clear singleton (tests)
"""

from .hvac_config import (
    FEATURE_FLAGS,
    BusinessSettings,
    CacheSettings,
    HvacApiSettings,
    HvacConfig,
    WeaviateSettings,
    env_flag,
    get_config,
    reset_config,
)

__all__ = [
    "FEATURE_FLAGS",
    "BusinessSettings",
    "CacheSettings",
    "HvacApiSettings",
    "HvacConfig",
    "WeaviateSettings",
    "env_flag",
    "get_config",
    "reset_config",
]
