"""
Conversion helpers for entity serialization.

The HVAC API returns camelCase JSON (customerId, serialNumber) while entities
use snake_case attributes. pick() reads either spelling so from_dict() works
on both our own to_dict() output and raw API payloads.
"""

import re
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Any, Mapping, Optional
from uuid import uuid4

_CAMEL_BOUNDARY = re.compile(r"(?<!^)(?=[A-Z])")


def camel_to_snake(name: str) -> str:
    """
    Convert camelCase to snake_case.

    Examples:
        >>> camel_to_snake("serialNumber")
        'serial_number'
    """
    return _CAMEL_BOUNDARY.sub("_", name).lower()


def snake_to_camel(name: str) -> str:
    head, *tail = name.split("_")
    return head + "".join(part.title() for part in tail)


def pick(data: Mapping[str, Any], key: str, default: Any = None) -> Any:
    """
    Read snake_case key, falling back to its camelCase spelling.

    Examples:
        >>> pick({"customerId": "c-1"}, "customer_id")
        'c-1'
        >>> pick({}, "customer_id", "n/a")
        'n/a'
    """
    if key in data and data[key] is not None:
        return data[key]
    camel = snake_to_camel(key)
    if camel in data and data[camel] is not None:
        return data[camel]
    return default


def parse_datetime(value: Any) -> Optional[datetime]:
    """
    Parse ISO datetime string (a trailing "Z" is accepted). None passes through.

    Results are naive local time, comparable with datetime.now(). Offsets are
    converted to local time and dropped.

    Examples:
        >>> parse_datetime("2026-03-02T09:30:00").tzinfo is None
        True
    """
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return _naive_local(value)
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    text = str(value)
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    return _naive_local(datetime.fromisoformat(text))


def _naive_local(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value
    return value.astimezone().replace(tzinfo=None)


def parse_date(value: Any) -> Optional[date]:
    """Parse ISO date (or datetime, truncated to date). None passes through."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    text = str(value)
    if len(text) == 10:
        return date.fromisoformat(text)
    parsed = parse_datetime(text)
    return parsed.date() if parsed else None


def parse_decimal(value: Any) -> Optional[Decimal]:
    if value is None or value == "":
        return None
    try:
        return Decimal(str(value))
    except InvalidOperation as e:
        raise ValueError(f"Invalid decimal value: {value!r}") from e


def isoformat_or_none(value: Optional[date]) -> Optional[str]:
    return value.isoformat() if value is not None else None


def parse_enum(enum_cls, raw: Any, default=None):
    """
    Convert raw value to str Enum member, case-insensitively.

    Examples:
        >>> parse_enum(EquipmentStatus, "REPAIR_NEEDED", EquipmentStatus.ACTIVE)
        <EquipmentStatus.REPAIR_NEEDED: 'repair_needed'>
    """
    if raw is None or raw == "":
        return default
    if isinstance(raw, enum_cls):
        return raw
    return enum_cls(str(raw).lower())


def new_id() -> str:
    """Generate entity identifier (UUID4 string; HVAC API ids are opaque strings)."""
    return str(uuid4())


def to_camel_payload(data: Any) -> Any:
    """
    Recursively rename dict keys to camelCase for HVAC API requests.

    Examples:
        >>> to_camel_payload({"customer_id": "c-1", "items": [{"unit_price": "10"}]})
        {'customerId': 'c-1', 'items': [{'unitPrice': '10'}]}
    """
    if isinstance(data, Mapping):
        return {snake_to_camel(str(key)): to_camel_payload(value) for key, value in data.items()}
    if isinstance(data, list):
        return [to_camel_payload(item) for item in data]
    return data
