"""
HVAC Configuration.

Loads HVAC CRM settings from environment variables (optionally from .env file
via python-dotenv).

Responsibility:
    - HVAC API connection settings
    - Weaviate connection settings
    - Business identity (company name, NIP, REGON, currency)
    - Feature flags (FEATURE_HVAC_*)
    - Cache settings

Architecture Notes:
    - Infrastructure Layer
    - Process-wide singleton via get_config(); reset_config() for tests
    - Redis and Celery read their own env vars (see persistence/redis, tasks/celery_app)

Environment Variables:
    HVAC_API_URL, HVAC_API_KEY, HVAC_API_VERSION, HVAC_API_TIMEOUT (ms)
    WEAVIATE_HOST, WEAVIATE_PORT, WEAVIATE_SCHEME, WEAVIATE_API_KEY
    HVAC_COMPANY_NAME, HVAC_COMPANY_EMAIL, HVAC_COMPANY_NIP, HVAC_COMPANY_REGON
    HVAC_TIMEZONE, HVAC_CURRENCY
    FEATURE_HVAC_SCHEDULING, FEATURE_HVAC_MAINTENANCE, FEATURE_HVAC_INVENTORY,
    FEATURE_HVAC_SEMANTIC_SEARCH, FEATURE_HVAC_AI_INSIGHTS, FEATURE_HVAC_CUSTOMER_360
    HVAC_CACHE_ENABLED, HVAC_CACHE_TTL_DEFAULT (seconds)

Examples:
    >>> config = get_config()
    >>> config.api.base_url
    'http://localhost:8000/api/v1'
    >>> config.is_feature_enabled("semantic_search")
    True
"""

import logging
import os
import threading
from dataclasses import dataclass, field
from typing import Optional

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

# Feature flag name -> environment variable
FEATURE_FLAGS: dict[str, str] = {
    "scheduling": "FEATURE_HVAC_SCHEDULING",
    "maintenance": "FEATURE_HVAC_MAINTENANCE",
    "inventory": "FEATURE_HVAC_INVENTORY",
    "semantic_search": "FEATURE_HVAC_SEMANTIC_SEARCH",
    "ai_insights": "FEATURE_HVAC_AI_INSIGHTS",
    "customer_360": "FEATURE_HVAC_CUSTOMER_360",
}

SERVICE_ENDPOINTS = ("customers", "tickets", "equipment", "maintenance", "search")


def env_flag(name: str, default: bool = True) -> bool:
    """Read boolean env var: "true"/"1" (any case) is True."""
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("true", "1")


def _env_optional(name: str) -> Optional[str]:
    value = os.getenv(name)
    return value or None


@dataclass(frozen=True)
class HvacApiSettings:
    url: str = "http://localhost:8000"
    api_key: str = ""
    version: str = "v1"
    timeout_ms: int = 30000

    @property
    def base_url(self) -> str:
        return f"{self.url.rstrip('/')}/api/{self.version}"

    @property
    def timeout_seconds(self) -> float:
        return self.timeout_ms / 1000


@dataclass(frozen=True)
class WeaviateSettings:
    host: str = "localhost"
    port: int = 8080
    scheme: str = "http"
    api_key: Optional[str] = None

    @property
    def url(self) -> str:
        return f"{self.scheme}://{self.host}:{self.port}"


@dataclass(frozen=True)
class BusinessSettings:
    company_name: str = "Fulmark HVAC"
    company_email: Optional[str] = None
    company_nip: Optional[str] = None
    company_regon: Optional[str] = None
    timezone: str = "Europe/Warsaw"
    currency: str = "PLN"


@dataclass(frozen=True)
class CacheSettings:
    enabled: bool = True
    default_ttl: int = 3600


@dataclass(frozen=True)
class HvacConfig:
    """
    Complete HVAC CRM configuration.

    Build from environment with HvacConfig.from_env() (or get_config()).
    Tests may construct it directly with explicit settings.
    """

    api: HvacApiSettings = field(default_factory=HvacApiSettings)
    weaviate: WeaviateSettings = field(default_factory=WeaviateSettings)
    business: BusinessSettings = field(default_factory=BusinessSettings)
    cache: CacheSettings = field(default_factory=CacheSettings)
    features: dict[str, bool] = field(
        default_factory=lambda: {name: True for name in FEATURE_FLAGS},
        hash=False,
    )

    @classmethod
    def from_env(cls) -> "HvacConfig":
        """Read all settings from environment variables."""
        return cls(
            api=HvacApiSettings(
                url=os.getenv("HVAC_API_URL", "http://localhost:8000"),
                api_key=os.getenv("HVAC_API_KEY", ""),
                version=os.getenv("HVAC_API_VERSION", "v1"),
                timeout_ms=int(os.getenv("HVAC_API_TIMEOUT", "30000")),
            ),
            weaviate=WeaviateSettings(
                host=os.getenv("WEAVIATE_HOST", "localhost"),
                port=int(os.getenv("WEAVIATE_PORT", "8080")),
                scheme=os.getenv("WEAVIATE_SCHEME", "http"),
                api_key=_env_optional("WEAVIATE_API_KEY"),
            ),
            business=BusinessSettings(
                company_name=os.getenv("HVAC_COMPANY_NAME", "Fulmark HVAC"),
                company_email=_env_optional("HVAC_COMPANY_EMAIL"),
                company_nip=_env_optional("HVAC_COMPANY_NIP"),
                company_regon=_env_optional("HVAC_COMPANY_REGON"),
                timezone=os.getenv("HVAC_TIMEZONE", "Europe/Warsaw"),
                currency=os.getenv("HVAC_CURRENCY", "PLN"),
            ),
            cache=CacheSettings(
                enabled=env_flag("HVAC_CACHE_ENABLED", True),
                default_ttl=int(os.getenv("HVAC_CACHE_TTL_DEFAULT", "3600")),
            ),
            features={name: env_flag(var, True) for name, var in FEATURE_FLAGS.items()},
        )

    def is_feature_enabled(self, name: str) -> bool:
        return self.features.get(name, False)

    def service_endpoints(self) -> dict[str, str]:
        """
        Full URLs of HVAC API resources.

        Examples:
            >>> HvacConfig().service_endpoints()["tickets"]
            'http://localhost:8000/api/v1/tickets'
        """
        return {name: f"{self.api.base_url}/{name}" for name in SERVICE_ENDPOINTS}

    def validate(self) -> bool:
        """
        Check that HVAC API connection is configured.

        Returns:
            True if API URL and key are set, False otherwise (logged as warning)
        """
        missing = []
        if not self.api.url:
            missing.append("HVAC_API_URL")
        if not self.api.api_key:
            missing.append("HVAC_API_KEY")

        if missing:
            logger.warning(f"HVAC configuration incomplete, missing: {', '.join(missing)}")
            return False
        return True


_config: Optional[HvacConfig] = None
_config_lock = threading.Lock()


def get_config() -> HvacConfig:
    """Process-wide configuration (loads .env on first call)."""
    global _config

    if _config is None:
        with _config_lock:
            if _config is None:
                load_dotenv()
                _config = HvacConfig.from_env()
                logger.info(
                    f"HVAC config loaded: api={_config.api.base_url}, "
                    f"weaviate={_config.weaviate.url}, "
                    f"features={[k for k, v in _config.features.items() if v]}"
                )
    return _config


def reset_config() -> None:
    """Drop cached configuration (next get_config() re-reads environment)."""
    global _config

    with _config_lock:
        _config = None
