"""
Compliance Subdomain

Polish business compliance rules: NIP/REGON/KRS/postal code validation,
VAT categories, energy provider registry and compliance scoring.

Exports:
    Validators:
        - validate_nip, validate_regon, validate_krs, validate_postal_code
        - ValidationResult

    Value Objects:
        - Nip, Regon, Krs, PostalCode
        - VatCategory, VatCalculation, calculate_vat

    Services:
        - check_compliance, CompanyComplianceData, ComplianceReport
        - find_energy_provider, EnergyProvider
"""

from .energy_providers import EnergyProvider, find_energy_provider, list_energy_providers
from .services.compliance_checker import (
    CompanyComplianceData,
    ComplianceReport,
    check_compliance,
)
from .validators import (
    ValidationResult,
    validate_krs,
    validate_nip,
    validate_postal_code,
    validate_regon,
)
from .value_objects import (
    Krs,
    Nip,
    PostalCode,
    Regon,
    VatCalculation,
    VatCategory,
    calculate_vat,
    vat_category_for_service,
)

__all__ = [
    "ValidationResult",
    "validate_nip",
    "validate_regon",
    "validate_krs",
    "validate_postal_code",
    "Nip",
    "Regon",
    "Krs",
    "PostalCode",
    "VatCategory",
    "VatCalculation",
    "calculate_vat",
    "vat_category_for_service",
    "EnergyProvider",
    "find_energy_provider",
    "list_energy_providers",
    "CompanyComplianceData",
    "ComplianceReport",
    "check_compliance",
]
