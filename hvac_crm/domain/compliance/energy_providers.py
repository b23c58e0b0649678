"""
Polish energy provider registry.

Static list of the four distribution system operators an HVAC installer deals
with when connecting heat pumps or air conditioning. Lookup accepts a provider
name fragment, provider code or voivodeship (region) name.
"""

from dataclasses import dataclass, field
from typing import Final, Optional


@dataclass(frozen=True)
class EnergyProvider:
    """
    Energy distribution operator.

    Attributes:
        name: Full company name
        code: Short code (PGE, TAURON, ENEA, ENERGA)
        api_endpoint: Provider integration endpoint
        regions: Voivodeships served (lowercase Polish names)
        services: Offered services (electricity, gas, heat, renewable)
        contact: Phone, email and website
    """

    name: str
    code: str
    api_endpoint: str
    regions: tuple[str, ...]
    services: tuple[str, ...] = ()
    contact: dict[str, str] = field(default_factory=dict, hash=False, compare=False)

    def serves_region(self, region: str) -> bool:
        needle = region.lower()
        return any(needle in r.lower() for r in self.regions)

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "code": self.code,
            "api_endpoint": self.api_endpoint,
            "regions": list(self.regions),
            "services": list(self.services),
            "contact": dict(self.contact),
        }


ENERGY_PROVIDERS: Final[tuple[EnergyProvider, ...]] = (
    EnergyProvider(
        name="PGE Polska Grupa Energetyczna",
        code="PGE",
        api_endpoint="https://api.pge.pl/v1",
        regions=("mazowieckie", "lubelskie", "podlaskie", "warmińsko-mazurskie"),
        services=("electricity", "gas", "renewable"),
        contact={
            "phone": "+48 801 900 900",
            "email": "kontakt@pge.pl",
            "website": "https://www.pge.pl",
        },
    ),
    EnergyProvider(
        name="Tauron Polska Energia",
        code="TAURON",
        api_endpoint="https://api.tauron.pl/v1",
        regions=("śląskie", "małopolskie", "opolskie"),
        services=("electricity", "gas", "heat"),
        contact={
            "phone": "+48 801 400 400",
            "email": "kontakt@tauron.pl",
            "website": "https://www.tauron.pl",
        },
    ),
    EnergyProvider(
        name="Enea",
        code="ENEA",
        api_endpoint="https://api.enea.pl/v1",
        regions=("wielkopolskie", "zachodniopomorskie", "lubuskie"),
        services=("electricity", "renewable"),
        contact={
            "phone": "+48 801 404 404",
            "email": "kontakt@enea.pl",
            "website": "https://www.enea.pl",
        },
    ),
    EnergyProvider(
        name="Energa",
        code="ENERGA",
        api_endpoint="https://api.energa.pl/v1",
        regions=("pomorskie", "kujawsko-pomorskie", "warmińsko-mazurskie"),
        services=("electricity", "gas"),
        contact={
            "phone": "+48 801 404 200",
            "email": "kontakt@energa.pl",
            "website": "https://www.energa.pl",
        },
    ),
)


def find_energy_provider(query: str | None) -> Optional[EnergyProvider]:
    """
    Find first provider matching name fragment, exact code or region fragment.

    Providers are checked in registry order, so a region served by two
    operators (warmińsko-mazurskie) resolves to the first one (PGE).

    Args:
        query: Name fragment, code or region (case-insensitive)

    Returns:
        Matching EnergyProvider or None

    Examples:
        >>> find_energy_provider("śląskie").code
        'TAURON'
        >>> find_energy_provider("enea").name
        'Enea'
        >>> find_energy_provider("Bawaria") is None
        True
    """
    if not query or not query.strip():
        return None

    needle = query.strip().lower()
    for provider in ENERGY_PROVIDERS:
        if (
            needle in provider.name.lower()
            or provider.code.lower() == needle
            or provider.serves_region(needle)
        ):
            return provider
    return None


def list_energy_providers() -> list[EnergyProvider]:
    return list(ENERGY_PROVIDERS)
