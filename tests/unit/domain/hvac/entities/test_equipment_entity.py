"""
Tests for Equipment entity business rules.
"""

from datetime import date

import pytest

from hvac_crm.domain.hvac.entities import (
    Equipment,
    EquipmentCondition,
    EquipmentStatus,
    EquipmentType,
)
from hvac_crm.domain.shared.exceptions import InvalidEntityError

TODAY = date(2026, 4, 1)


def test_equipment_requires_name():
    with pytest.raises(InvalidEntityError):
        Equipment(name="  ")


def test_warranty_cannot_end_before_installation():
    with pytest.raises(InvalidEntityError) as exc_info:
        Equipment(
            name="Kocioł",
            installation_date=date(2025, 1, 1),
            warranty_expiration=date(2024, 12, 31),
        )

    assert exc_info.value.field_name == "warranty_expiration"


def test_is_under_warranty_includes_last_day():
    equipment = Equipment(name="Kocioł", warranty_expiration=TODAY)

    assert equipment.is_under_warranty(TODAY) is True
    assert Equipment(name="Kocioł").is_under_warranty(TODAY) is False


@pytest.mark.parametrize(
    "expiration, days, expected",
    [
        (date(2026, 4, 30), 30, True),
        (date(2026, 5, 1), 30, True),
        (date(2026, 5, 2), 30, False),
        (date(2026, 3, 31), 30, False),
    ],
)
def test_warranty_expires_within(expiration, days, expected):
    equipment = Equipment(name="Pompa ciepła", warranty_expiration=expiration)

    assert equipment.warranty_expires_within(days, TODAY) is expected


def test_warranty_expires_within_rejects_negative_days():
    with pytest.raises(ValueError):
        Equipment(name="Pompa").warranty_expires_within(-1, TODAY)


@pytest.mark.parametrize(
    "kwargs, expected",
    [
        ({"status": EquipmentStatus.REPAIR_NEEDED}, True),
        ({"status": EquipmentStatus.MAINTENANCE}, True),
        ({"condition": EquipmentCondition.CRITICAL}, True),
        ({"next_service_date": TODAY}, True),
        ({"next_service_date": date(2026, 4, 2)}, False),
        ({}, False),
        (
            {"status": EquipmentStatus.DECOMMISSIONED, "condition": EquipmentCondition.POOR},
            False,
        ),
    ],
)
def test_needs_service(kwargs, expected):
    equipment = Equipment(name="Klimatyzator", **kwargs)

    assert equipment.needs_service(TODAY) is expected


def test_record_service_returns_unit_to_active():
    equipment = Equipment(name="Klimatyzator", status=EquipmentStatus.REPAIR_NEEDED)

    equipment.record_service(TODAY, next_service_date=date(2027, 4, 1))

    assert equipment.status == EquipmentStatus.ACTIVE
    assert equipment.last_service_date == TODAY
    assert equipment.next_service_date == date(2027, 4, 1)


def test_from_dict_accepts_api_type_alias():
    equipment = Equipment.from_dict(
        {
            "id": "eq-1",
            "name": "Vitocal 200-S",
            "type": "HEAT_PUMP",
            "serialNumber": "SN-1",
            "warrantyExpiration": "2027-05-01",
            "status": "repair_needed",
        }
    )

    assert equipment.equipment_type == EquipmentType.HEAT_PUMP
    assert equipment.serial_number == "SN-1"
    assert equipment.warranty_expiration == date(2027, 5, 1)
    assert equipment.status == EquipmentStatus.REPAIR_NEEDED


def test_to_dict_serializes_dates_as_iso():
    data = Equipment(name="Kocioł", installation_date=date(2024, 9, 1)).to_dict()

    assert data["installation_date"] == "2024-09-01"
    assert data["warranty_expiration"] is None
    assert data["equipment_type"] == "other"
