"""
Compliance Checker Domain Service.

Responsibility:
    Scores how complete a company's Polish regulatory data is and produces
    Polish recommendations for what is missing.

Architecture Notes:
    - Part of Domain Layer (compliance subdomain)
    - Stateless, pure function over CompanyComplianceData
    - Used by ComplianceService (Application Layer) and /api/compliance/check

Scoring:
    NIP valid              +30
    REGON valid            +20
    Energy provider found  +15  (only when region given)
    HVAC licenses present  +25
    Maximum                 90
"""

from dataclasses import dataclass, field
from typing import Final, Optional

from hvac_crm.domain.compliance.energy_providers import EnergyProvider, find_energy_provider
from hvac_crm.domain.compliance.validators import ValidationResult, validate_nip, validate_regon

NIP_POINTS: Final[int] = 30
REGON_POINTS: Final[int] = 20
ENERGY_PROVIDER_POINTS: Final[int] = 15
HVAC_LICENSE_POINTS: Final[int] = 25

EXCELLENT_THRESHOLD: Final[int] = 90
GOOD_THRESHOLD: Final[int] = 70

REC_CHECK_NIP: Final[str] = "Sprawdź poprawność numeru NIP"
REC_ADD_NIP: Final[str] = "Dodaj numer NIP firmy"
REC_CHECK_REGON: Final[str] = "Sprawdź poprawność numeru REGON"
REC_ADD_REGON: Final[str] = "Dodaj numer REGON firmy"
REC_ENERGY_PROVIDER: Final[str] = "Określ dostawcę energii dla regionu"
REC_HVAC_LICENSES: Final[str] = "Dodaj certyfikaty HVAC (F-gazy, UDT, itp.)"
SUMMARY_EXCELLENT: Final[str] = "Doskonała zgodność z polskimi przepisami!"
SUMMARY_GOOD: Final[str] = "Dobra zgodność, rozważ uzupełnienie brakujących danych"
SUMMARY_INCOMPLETE: Final[str] = "Wymagane uzupełnienie danych dla pełnej zgodności"


@dataclass
class CompanyComplianceData:
    """Company data submitted for compliance check. All fields optional."""

    nip: Optional[str] = None
    regon: Optional[str] = None
    region: Optional[str] = None
    hvac_licenses: list[str] = field(default_factory=list)


@dataclass
class ComplianceReport:
    """
    Result of compliance check.

    Attributes:
        compliance_score: 0-90 points
        nip: NIP validation result (None if NIP not provided)
        regon: REGON validation result (None if REGON not provided)
        energy_provider: Provider for region (None if not found or no region)
        hvac_certifications: Licenses provided
        recommendations: Polish recommendations, summary line last
    """

    compliance_score: int = 0
    nip: Optional[ValidationResult] = None
    regon: Optional[ValidationResult] = None
    energy_provider: Optional[EnergyProvider] = None
    hvac_certifications: list[str] = field(default_factory=list)
    recommendations: list[str] = field(default_factory=list)

    @property
    def nip_valid(self) -> bool:
        return self.nip is not None and self.nip.is_valid

    @property
    def regon_valid(self) -> bool:
        return self.regon is not None and self.regon.is_valid

    @property
    def hvac_licenses_valid(self) -> bool:
        return len(self.hvac_certifications) > 0


def summary_for_score(score: int) -> str:
    if score >= EXCELLENT_THRESHOLD:
        return SUMMARY_EXCELLENT
    if score >= GOOD_THRESHOLD:
        return SUMMARY_GOOD
    return SUMMARY_INCOMPLETE


def check_compliance(data: CompanyComplianceData) -> ComplianceReport:
    """
    Run full compliance check for company data.

    Args:
        data: Company identifiers, region and HVAC licenses

    Returns:
        ComplianceReport with score and Polish recommendations

    Examples:
        >>> report = check_compliance(CompanyComplianceData(
        ...     nip="5261040828",
        ...     regon="123456785",
        ...     region="mazowieckie",
        ...     hvac_licenses=["F-gazy"],
        ... ))
        >>> report.compliance_score
        90
        >>> report.recommendations
        ['Doskonała zgodność z polskimi przepisami!']
    """
    report = ComplianceReport()

    if data.nip:
        report.nip = validate_nip(data.nip)
        if report.nip.is_valid:
            report.compliance_score += NIP_POINTS
        else:
            report.recommendations.append(REC_CHECK_NIP)
    else:
        report.recommendations.append(REC_ADD_NIP)

    if data.regon:
        report.regon = validate_regon(data.regon)
        if report.regon.is_valid:
            report.compliance_score += REGON_POINTS
        else:
            report.recommendations.append(REC_CHECK_REGON)
    else:
        report.recommendations.append(REC_ADD_REGON)

    if data.region:
        report.energy_provider = find_energy_provider(data.region)
        if report.energy_provider:
            report.compliance_score += ENERGY_PROVIDER_POINTS
        else:
            report.recommendations.append(REC_ENERGY_PROVIDER)

    licenses = [lic for lic in data.hvac_licenses if lic and lic.strip()]
    if licenses:
        report.hvac_certifications = licenses
        report.compliance_score += HVAC_LICENSE_POINTS
    else:
        report.recommendations.append(REC_HVAC_LICENSES)

    report.recommendations.append(summary_for_score(report.compliance_score))
    return report
