"""
Tests for NIP/REGON/KRS/PostalCode value objects.
"""

import pytest

from hvac_crm.domain.compliance.value_objects import Krs, Nip, PostalCode, Regon
from hvac_crm.domain.shared.exceptions import InvalidTaxIdentifierError


def test_nip_stores_normalized_digits():
    # Act
    nip = Nip.from_string("526-104-08-28")

    # Assert
    assert nip.value == "5261040828"
    assert nip.formatted() == "526-104-08-28"
    assert str(nip) == "526-104-08-28"
    assert nip.is_individual is False


def test_nip_equality_ignores_separators():
    assert Nip("526-104-08-28") == Nip("5261040828")


def test_invalid_nip_raises_with_polish_message():
    with pytest.raises(InvalidTaxIdentifierError) as exc_info:
        Nip("5261040827")

    assert exc_info.value.identifier_type == "NIP"
    assert exc_info.value.original_value == "5261040827"
    assert "sumę kontrolną" in exc_info.value.message


def test_nip_is_immutable():
    nip = Nip("5261040828")

    with pytest.raises(AttributeError):
        nip.value = "1234563218"


def test_regon_local_unit_flag():
    assert Regon("123456785").is_local_unit is False
    assert Regon("12345678512347").is_local_unit is True


def test_invalid_regon_raises():
    with pytest.raises(InvalidTaxIdentifierError) as exc_info:
        Regon("12345")

    assert exc_info.value.identifier_type == "REGON"


def test_krs_and_postal_code():
    assert Krs("1000012345").formatted() == "1000012345"
    assert PostalCode(" 00-950 ").value == "00-950"

    with pytest.raises(InvalidTaxIdentifierError):
        PostalCode("00950")
