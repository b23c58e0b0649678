"""
Tests for HVAC role permissions.
"""

import pytest

from hvac_crm.domain.permissions import (
    FEATURE_FOR_PERMISSION,
    HvacPermission,
    permissions_for_role,
)


def test_technician_can_read_but_not_delete():
    granted = permissions_for_role("hvac-technician")

    assert HvacPermission.READ_EQUIPMENT in granted
    assert HvacPermission.UPDATE_SERVICE_TICKETS in granted
    assert HvacPermission.DELETE_EQUIPMENT not in granted
    assert HvacPermission.CREATE_SERVICE_TICKETS not in granted


def test_supervisor_extends_technician():
    technician = permissions_for_role("hvac-technician")
    supervisor = permissions_for_role("hvac-supervisor")

    assert technician < supervisor
    assert HvacPermission.SCHEDULE_MAINTENANCE in supervisor
    assert HvacPermission.ACCESS_ANALYTICS in supervisor


def test_manager_has_everything_except_admin():
    granted = permissions_for_role("hvac-manager")

    assert HvacPermission.DELETE_EQUIPMENT in granted
    assert HvacPermission.HVAC_ADMIN not in granted


@pytest.mark.parametrize("role", ["hvac-admin", "admin", "ADMIN"])
def test_admin_roles_have_all_permissions(role):
    assert permissions_for_role(role) == frozenset(HvacPermission)


@pytest.mark.parametrize("role", [None, "", "guest"])
def test_unknown_role_has_no_permissions(role):
    assert permissions_for_role(role) == frozenset()


def test_feature_mapping():
    assert FEATURE_FOR_PERMISSION[HvacPermission.SEMANTIC_SEARCH] == "semantic_search"
    assert FEATURE_FOR_PERMISSION[HvacPermission.SCHEDULE_MAINTENANCE] == "maintenance"
    assert HvacPermission.READ_EQUIPMENT not in FEATURE_FOR_PERMISSION
