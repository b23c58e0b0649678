"""
Shared Utilities

Responsibility:
    Cross-cutting helpers used across all layers.

Contains:
    - Date/datetime parsing and ISO formatting
    - Key lookup tolerant to camelCase payloads from the HVAC API

Does NOT contain:
    - Business logic
    - Infrastructure implementations
"""
