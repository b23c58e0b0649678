"""
Compliance Service - Polish Business Identifier Lookups

Responsibility:
    Validates NIP and REGON numbers for API callers and caches the results
    for 24 hours. Wraps domain validators into lookup result DTOs.

Architecture Notes:
    - Part of Application Layer (Services)
    - Depends on Domain Layer (compliance validators)
    - Depends on Infrastructure Layer (MemoryCache)

Contains:
    - CompanyLookupResult: Response DTO
    - ComplianceService: Validation + caching

Does NOT contain:
    - Checksum algorithms (domain/compliance/validators.py)
    - GUS/CEIDG registry lookups (company_name, address, status and
      vat_payer stay None)
"""

import logging
from typing import Optional

from pydantic import BaseModel, Field

from hvac_crm.domain.compliance import (
    CompanyComplianceData,
    ComplianceReport,
    check_compliance,
    validate_nip,
    validate_regon,
)
from hvac_crm.domain.compliance.validators import normalize_digits
from hvac_crm.infrastructure.cache import MemoryCache

logger = logging.getLogger(__name__)

VALIDATION_CACHE_TTL = 24 * 60 * 60


# ============================================================================
# RESULT (Response DTO)
# ============================================================================


class CompanyLookupResult(BaseModel):
    """
    Result of NIP/REGON lookup.

    Attributes:
        is_valid: Checksum and length are correct
        number: Digits only
        formatted: Dashed format (None when invalid)
        entity_type: "company", "individual" or "local_unit"
        company_name, address, status, vat_payer: Registry data (not resolved)
        error: First Polish validation message when invalid
    """

    is_valid: bool
    number: str
    formatted: Optional[str] = None
    entity_type: Optional[str] = None
    company_name: Optional[str] = None
    address: Optional[str] = None
    status: Optional[str] = None
    vat_payer: Optional[bool] = None
    error: Optional[str] = Field(default=None, description="Polish validation message")

    class Config:
        """Pydantic configuration for CompanyLookupResult."""

        json_schema_extra = {
            "example": {
                "is_valid": True,
                "number": "5261040828",
                "formatted": "526-104-08-28",
                "entity_type": "company",
                "company_name": None,
                "address": None,
                "status": None,
                "vat_payer": None,
                "error": None,
            }
        }


# ============================================================================
# SERVICE
# ============================================================================


class ComplianceService:
    """
    Polish compliance validation with result caching.

    Examples:
        >>> service = ComplianceService()
        >>> service.validate_nip("526-104-08-28").formatted
        '526-104-08-28'
    """

    def __init__(self, cache: Optional[MemoryCache] = None) -> None:
        self.cache = cache or MemoryCache(default_ttl=VALIDATION_CACHE_TTL)

    def validate_nip(self, nip: str) -> CompanyLookupResult:
        digits = normalize_digits(nip or "")
        cache_key = f"nip_validation_{digits}"
        cached = self.cache.get(cache_key)
        if cached is not None:
            return cached

        result = validate_nip(nip or "")
        lookup = CompanyLookupResult(
            is_valid=result.is_valid,
            number=digits,
            formatted=result.formatted,
            entity_type=result.metadata.get("type"),
            error=result.errors[0] if result.errors else None,
        )
        # Failures depend on raw input, not just its digits
        if lookup.is_valid:
            self.cache.set(cache_key, lookup, ttl=VALIDATION_CACHE_TTL)
        logger.debug(f"NIP {digits} validated: valid={lookup.is_valid}")
        return lookup

    def validate_regon(self, regon: str) -> CompanyLookupResult:
        digits = normalize_digits(regon or "")
        cache_key = f"regon_validation_{digits}"
        cached = self.cache.get(cache_key)
        if cached is not None:
            return cached

        result = validate_regon(regon or "")
        lookup = CompanyLookupResult(
            is_valid=result.is_valid,
            number=digits,
            formatted=result.formatted,
            entity_type=result.metadata.get("type"),
            error=result.errors[0] if result.errors else None,
        )
        if lookup.is_valid:
            self.cache.set(cache_key, lookup, ttl=VALIDATION_CACHE_TTL)
        logger.debug(f"REGON {digits} validated: valid={lookup.is_valid}")
        return lookup

    def check_company(self, data: CompanyComplianceData) -> ComplianceReport:
        report = check_compliance(data)
        logger.info(f"Compliance check finished with score {report.compliance_score}")
        return report
