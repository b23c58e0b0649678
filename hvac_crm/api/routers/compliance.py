"""
API Router for Polish Compliance

Responsibility:
    HTTP interface for NIP/REGON/KRS/postal code validation, VAT calculation,
    company compliance scoring and energy provider lookup.

Architecture Notes:
    - Part of API Layer (Presentation)
    - Public validators: no permission required
    - Invalid identifiers are NOT errors here: responses carry is_valid=False
      with Polish messages

Contains:
    - POST /compliance/nip/validate
    - POST /compliance/regon/validate
    - POST /compliance/krs/validate
    - POST /compliance/postal-code/validate
    - POST /compliance/vat/calculate
    - POST /compliance/check
    - GET /compliance/energy-providers?query=
"""

import logging
from typing import Any, Optional

from fastapi import APIRouter, Depends, Query, status
from pydantic import BaseModel, Field

from hvac_crm.api.dependencies import get_compliance_service
from hvac_crm.api.schemas.common import ErrorResponse
from hvac_crm.api.schemas.requests import (
    ComplianceCheckRequest,
    IdentifierRequest,
    VatCalculationRequest,
)
from hvac_crm.application.services import CompanyLookupResult, ComplianceService
from hvac_crm.domain.compliance import (
    CompanyComplianceData,
    ValidationResult,
    find_energy_provider,
    list_energy_providers,
    validate_krs,
    validate_postal_code,
)
from hvac_crm.domain.compliance.value_objects import calculate_vat, vat_category_for_service

logger = logging.getLogger(__name__)


# ============================================================================
# RESPONSE MODELS
# ============================================================================


class ValidationResponse(BaseModel):
    is_valid: bool
    errors: list[str] = Field(default_factory=list)
    normalized: str = ""
    formatted: Optional[str] = None
    metadata: dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def from_result(cls, result: ValidationResult) -> "ValidationResponse":
        return cls(
            is_valid=result.is_valid,
            errors=list(result.errors),
            normalized=result.normalized,
            formatted=result.formatted,
            metadata=dict(result.metadata),
        )


class VatCalculationResponse(BaseModel):
    net_amount: str
    vat_rate: str
    vat_amount: str
    gross_amount: str
    category: str


class ComplianceReportResponse(BaseModel):
    """
    Company compliance report.

    Attributes:
        compliance_score: 0-90 points
        nip_valid, regon_valid, hvac_licenses_valid: Per-check outcome
        energy_provider: Provider serving company region (if found)
        recommendations: Polish recommendations, summary line last
    """

    compliance_score: int
    nip_valid: bool
    regon_valid: bool
    hvac_licenses_valid: bool
    energy_provider: Optional[dict[str, Any]] = None
    hvac_certifications: list[str] = Field(default_factory=list)
    recommendations: list[str] = Field(default_factory=list)

    class Config:
        json_schema_extra = {
            "example": {
                "compliance_score": 90,
                "nip_valid": True,
                "regon_valid": True,
                "hvac_licenses_valid": True,
                "energy_provider": {"name": "PGE Polska Grupa Energetyczna", "code": "PGE"},
                "hvac_certifications": ["F-gazy"],
                "recommendations": ["Doskonała zgodność z polskimi przepisami!"],
            }
        }


# ============================================================================
# ROUTER CONFIGURATION
# ============================================================================


router = APIRouter(
    prefix="/compliance",
    tags=["compliance"],
    responses={
        422: {"model": ErrorResponse, "description": "Unprocessable Entity - Invalid request body"},
        500: {"model": ErrorResponse, "description": "Internal Server Error"},
    },
)


# ============================================================================
# ENDPOINTS
# ============================================================================


@router.post(
    "/nip/validate",
    response_model=CompanyLookupResult,
    status_code=status.HTTP_200_OK,
    summary="Validate Polish NIP",
)
async def validate_nip_endpoint(
    request: IdentifierRequest,
    service: ComplianceService = Depends(get_compliance_service),
) -> CompanyLookupResult:
    return service.validate_nip(request.value)


@router.post(
    "/regon/validate",
    response_model=CompanyLookupResult,
    status_code=status.HTTP_200_OK,
    summary="Validate Polish REGON (9 or 14 digits)",
)
async def validate_regon_endpoint(
    request: IdentifierRequest,
    service: ComplianceService = Depends(get_compliance_service),
) -> CompanyLookupResult:
    return service.validate_regon(request.value)


@router.post(
    "/krs/validate",
    response_model=ValidationResponse,
    status_code=status.HTTP_200_OK,
    summary="Validate KRS number",
)
async def validate_krs_endpoint(request: IdentifierRequest) -> ValidationResponse:
    return ValidationResponse.from_result(validate_krs(request.value))


@router.post(
    "/postal-code/validate",
    response_model=ValidationResponse,
    status_code=status.HTTP_200_OK,
    summary="Validate Polish postal code (XX-XXX)",
)
async def validate_postal_code_endpoint(request: IdentifierRequest) -> ValidationResponse:
    return ValidationResponse.from_result(validate_postal_code(request.value))


@router.post(
    "/vat/calculate",
    response_model=VatCalculationResponse,
    status_code=status.HTTP_200_OK,
    summary="Calculate Polish VAT for net amount",
    description=(
        "Uses explicit VAT category when given, otherwise derives it from service_type "
        "(residential repair/maintenance -> 8%, everything else -> 23%)."
    ),
)
async def calculate_vat_endpoint(request: VatCalculationRequest) -> VatCalculationResponse:
    category = request.category or vat_category_for_service(request.service_type)
    return VatCalculationResponse(**calculate_vat(request.net_amount, category).to_dict())


@router.post(
    "/check",
    response_model=ComplianceReportResponse,
    status_code=status.HTTP_200_OK,
    summary="Score company compliance with Polish regulations",
)
async def check_compliance_endpoint(
    request: ComplianceCheckRequest,
    service: ComplianceService = Depends(get_compliance_service),
) -> ComplianceReportResponse:
    report = service.check_company(
        CompanyComplianceData(
            nip=request.nip,
            regon=request.regon,
            region=request.region,
            hvac_licenses=list(request.hvac_licenses),
        )
    )
    return ComplianceReportResponse(
        compliance_score=report.compliance_score,
        nip_valid=report.nip_valid,
        regon_valid=report.regon_valid,
        hvac_licenses_valid=report.hvac_licenses_valid,
        energy_provider=report.energy_provider.to_dict() if report.energy_provider else None,
        hvac_certifications=list(report.hvac_certifications),
        recommendations=list(report.recommendations),
    )


@router.get(
    "/energy-providers",
    response_model=list[dict[str, Any]],
    status_code=status.HTTP_200_OK,
    summary="Find energy provider by name, code or region",
    description="Without query returns whole registry; with query returns first match (or empty list).",
)
async def energy_providers_endpoint(
    query: Optional[str] = Query(default=None, description="Name fragment, code or voivodeship"),
) -> list[dict[str, Any]]:
    if not query:
        return [provider.to_dict() for provider in list_energy_providers()]

    provider = find_energy_provider(query)
    if provider is None:
        logger.info(f"No energy provider matches '{query}'")
        return []
    return [provider.to_dict()]
