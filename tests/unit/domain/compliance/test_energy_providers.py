"""
Tests for Polish energy provider registry lookup.
"""

import pytest

from hvac_crm.domain.compliance import find_energy_provider, list_energy_providers


def test_registry_contains_four_operators_in_order():
    codes = [provider.code for provider in list_energy_providers()]

    assert codes == ["PGE", "TAURON", "ENEA", "ENERGA"]


@pytest.mark.parametrize(
    "query, expected_code",
    [
        ("mazowieckie", "PGE"),
        ("Śląskie", "TAURON"),
        ("enea", "ENEA"),
        ("ENERGA", "ENERGA"),
        ("kujawsko-pomorskie", "ENERGA"),
        ("tauron", "TAURON"),
    ],
)
def test_find_energy_provider_by_region_name_or_code(query, expected_code):
    assert find_energy_provider(query).code == expected_code


def test_region_served_by_two_operators_resolves_to_first():
    assert find_energy_provider("warmińsko-mazurskie").code == "PGE"


@pytest.mark.parametrize("query", ["Bawaria", "", "   ", None])
def test_find_energy_provider_returns_none_when_nothing_matches(query):
    assert find_energy_provider(query) is None


def test_provider_to_dict():
    data = find_energy_provider("PGE").to_dict()

    assert data["name"] == "PGE Polska Grupa Energetyczna"
    assert "mazowieckie" in data["regions"]
    assert data["contact"]["phone"] == "+48 801 900 900"
