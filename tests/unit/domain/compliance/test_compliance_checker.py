"""
Tests for company compliance scoring.
"""

from hvac_crm.domain.compliance import CompanyComplianceData, check_compliance
from hvac_crm.domain.compliance.services.compliance_checker import (
    REC_ADD_NIP,
    REC_ADD_REGON,
    REC_CHECK_NIP,
    REC_ENERGY_PROVIDER,
    REC_HVAC_LICENSES,
    SUMMARY_EXCELLENT,
    SUMMARY_GOOD,
    SUMMARY_INCOMPLETE,
    summary_for_score,
)


def test_complete_company_scores_maximum():
    # Arrange
    data = CompanyComplianceData(
        nip="5261040828",
        regon="123456785",
        region="mazowieckie",
        hvac_licenses=["F-gazy"],
    )

    # Act
    report = check_compliance(data)

    # Assert
    assert report.compliance_score == 90
    assert report.nip_valid is True
    assert report.regon_valid is True
    assert report.hvac_licenses_valid is True
    assert report.energy_provider.code == "PGE"
    assert report.recommendations == [SUMMARY_EXCELLENT]


def test_empty_company_gets_all_recommendations():
    report = check_compliance(CompanyComplianceData())

    assert report.compliance_score == 0
    assert report.nip is None
    assert report.nip_valid is False
    assert report.recommendations == [
        REC_ADD_NIP,
        REC_ADD_REGON,
        REC_HVAC_LICENSES,
        SUMMARY_INCOMPLETE,
    ]


def test_missing_region_gives_no_points_and_no_recommendation():
    report = check_compliance(
        CompanyComplianceData(nip="5261040828", regon="123456785", hvac_licenses=["UDT"])
    )

    assert report.compliance_score == 75
    assert report.energy_provider is None
    assert REC_ENERGY_PROVIDER not in report.recommendations
    assert report.recommendations[-1] == SUMMARY_GOOD


def test_unknown_region_recommends_energy_provider():
    report = check_compliance(CompanyComplianceData(region="Bawaria"))

    assert report.energy_provider is None
    assert REC_ENERGY_PROVIDER in report.recommendations


def test_invalid_nip_recommends_checking_it():
    report = check_compliance(CompanyComplianceData(nip="5261040827"))

    assert report.nip is not None
    assert report.nip_valid is False
    assert report.recommendations[0] == REC_CHECK_NIP


def test_blank_licenses_are_ignored():
    report = check_compliance(CompanyComplianceData(hvac_licenses=["", "  "]))

    assert report.hvac_licenses_valid is False
    assert REC_HVAC_LICENSES in report.recommendations


def test_summary_thresholds():
    assert summary_for_score(90) == SUMMARY_EXCELLENT
    assert summary_for_score(70) == SUMMARY_GOOD
    assert summary_for_score(69) == SUMMARY_INCOMPLETE
