"""Compliance value objects (immutable, validated on creation)."""

from .tax_identifiers import Krs, Nip, PostalCode, Regon
from .vat import VatCalculation, VatCategory, calculate_vat, round_money, vat_category_for_service

__all__ = [
    "Nip",
    "Regon",
    "Krs",
    "PostalCode",
    "VatCategory",
    "VatCalculation",
    "calculate_vat",
    "round_money",
    "vat_category_for_service",
]
