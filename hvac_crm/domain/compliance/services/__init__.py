"""Compliance domain services."""

from .compliance_checker import CompanyComplianceData, ComplianceReport, check_compliance

__all__ = ["CompanyComplianceData", "ComplianceReport", "check_compliance"]
