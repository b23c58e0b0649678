"""
Shared Utilities

Generic conversion helpers used by entity to_dict()/from_dict() and by
infrastructure clients when reading HVAC API payloads.
"""

from .converters import (
    camel_to_snake,
    isoformat_or_none,
    new_id,
    parse_date,
    parse_datetime,
    parse_decimal,
    parse_enum,
    pick,
    snake_to_camel,
    to_camel_payload,
)

__all__ = [
    "camel_to_snake",
    "isoformat_or_none",
    "new_id",
    "parse_date",
    "parse_datetime",
    "parse_decimal",
    "parse_enum",
    "pick",
    "snake_to_camel",
    "to_camel_payload",
]
