"""
HVAC API Client.

Synchronous REST client for the external HVAC backend (customers, service
tickets, equipment, maintenance, search, quotes).

Responsibility:
    - Build URLs ({url}/api/{version}{endpoint}) and Bearer auth headers
    - Cache GET responses in memory (5 minutes)
    - Retry transient failures with exponential backoff
    - Map HTTP failures to HvacApiError subclasses
    - Normalize list responses ({items, total})
    - Invalidate cached GETs after mutations

Architecture Notes:
    - Infrastructure Layer, wraps httpx.Client
    - http_client, cache and sleep are injectable (tests use httpx.MockTransport)
    - Payloads are plain dicts; application services map them to entities

Retry Policy:
    - Up to 3 retries after first attempt (delays 2s, 4s, 8s)
    - Retried: timeouts, transport errors, 5xx responses
    - Not retried: 4xx responses (fail immediately)

Examples:
    >>> client = HvacApiClient(get_config())
    >>> page = client.get_equipment(filters={"status": "active"}, limit=20)
    >>> page.total, len(page.items)
    (42, 20)
    >>> client.get_service_ticket("missing-id") is None
    True
"""

import json
import logging
import time
from dataclasses import dataclass, field
from typing import Any, Callable, Mapping, Optional

import httpx

from hvac_crm.infrastructure.cache.memory_cache import MemoryCache
from hvac_crm.infrastructure.config import HvacConfig, get_config
from hvac_crm.infrastructure.hvac_api.exceptions import (
    HvacApiBadRequestError,
    HvacApiError,
    HvacApiForbiddenError,
    HvacApiNetworkError,
    HvacApiNotFoundError,
    HvacApiServerError,
    HvacApiTimeoutError,
    HvacApiUnauthorizedError,
)

logger = logging.getLogger(__name__)

TOTAL_KEYS = ("totalCount", "total", "total_items")
META_TOTAL_KEYS = ("totalCount", "totalItems")


@dataclass
class ListResult:
    """Normalized list response."""

    items: list[dict[str, Any]] = field(default_factory=list)
    total: int = 0


def normalize_list(payload: Any, resource_key: str) -> ListResult:
    """
    Extract items and total from a list response.

    Items: first present of payload[resource_key], payload["data"], payload["results"]
    (or payload itself when it is a list). Total: totalCount, total, total_items,
    meta.totalCount, meta.totalItems, else len(items).

    Examples:
        >>> normalize_list({"results": [{"id": 1}], "meta": {"totalItems": 10}}, "equipment")
        ListResult(items=[{'id': 1}], total=10)
    """
    if payload is None:
        return ListResult()
    if isinstance(payload, list):
        return ListResult(items=payload, total=len(payload))

    items: list[dict[str, Any]] = []
    for key in (resource_key, "data", "results"):
        if isinstance(payload.get(key), list):
            items = payload[key]
            break

    for key in TOTAL_KEYS:
        if payload.get(key) is not None:
            return ListResult(items=items, total=int(payload[key]))

    meta = payload.get("meta") or {}
    for key in META_TOTAL_KEYS:
        if meta.get(key) is not None:
            return ListResult(items=items, total=int(meta[key]))

    return ListResult(items=items, total=len(items))


def _clean_params(params: Optional[Mapping[str, Any]]) -> dict[str, Any]:
    return {key: value for key, value in (params or {}).items() if value is not None}


def _customer_id(data: Optional[Mapping[str, Any]]) -> Optional[str]:
    if not data:
        return None
    return data.get("customerId") or data.get("customer_id")


class HvacApiClient:
    """
    REST client for the HVAC backend.

    Args:
        config: HvacConfig (default: get_config())
        http_client: httpx.Client to use (default: new client with 10s timeout)
        cache: MemoryCache for GET responses (default: 5 minute TTL)
        sleep: Delay function used between retries
    """

    MAX_RETRIES = 3
    REQUEST_TIMEOUT = 10.0
    CACHE_TTL = 300

    def __init__(
        self,
        config: Optional[HvacConfig] = None,
        http_client: Optional[httpx.Client] = None,
        cache: Optional[MemoryCache] = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.config = config or get_config()
        self._http = http_client or httpx.Client(timeout=httpx.Timeout(self.REQUEST_TIMEOUT))
        self.cache = cache or MemoryCache(default_ttl=self.CACHE_TTL)
        self._sleep = sleep

        self.total_requests = 0
        self.cache_hits = 0
        self.errors = 0
        self._response_time_total_ms = 0.0
        self._timed_responses = 0

    # ------------------------------------------------------------------
    # Core request pipeline
    # ------------------------------------------------------------------

    def url_for(self, endpoint: str) -> str:
        return f"{self.config.api.base_url}{endpoint}"

    def _headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self.config.api.api_key}",
            "Content-Type": "application/json",
        }

    @staticmethod
    def cache_key(endpoint: str, params: Optional[Mapping[str, Any]] = None) -> str:
        return f"hvac_api_{endpoint}_{json.dumps(params or {}, sort_keys=True, default=str)}"

    @staticmethod
    def _error_for_response(response: httpx.Response, endpoint: str) -> HvacApiError:
        try:
            details = response.json()
        except ValueError:
            details = response.text or None

        message = None
        if isinstance(details, dict):
            message = details.get("message")

        status = response.status_code
        if status == 400:
            return HvacApiBadRequestError(message or "Bad request", details)
        if status == 401:
            return HvacApiUnauthorizedError(details)
        if status == 403:
            return HvacApiForbiddenError(details)
        if status == 404:
            return HvacApiNotFoundError(endpoint, details)
        return HvacApiServerError(
            message or f"HVAC API request failed with status {status}",
            status_code=status,
            details=details,
        )

    def request(
        self,
        method: str,
        endpoint: str,
        data: Any = None,
        params: Optional[Mapping[str, Any]] = None,
        use_cache: bool = True,
    ) -> Any:
        """
        Perform HVAC API request with caching and retries.

        Args:
            method: HTTP method (GET, POST, PUT, PATCH, DELETE)
            endpoint: Path after API version, e.g. "/equipment/42"
            data: JSON body
            params: Query parameters (None values are dropped)
            use_cache: Use response cache for GET requests

        Returns:
            Decoded JSON body (None for empty body)

        Raises:
            HvacApiError: Subclass matching the failure
        """
        method = method.upper()
        params = _clean_params(params)
        self.total_requests += 1

        cacheable = method == "GET" and use_cache
        key = self.cache_key(endpoint, params)
        if cacheable and self.cache.contains(key):
            self.cache_hits += 1
            return self.cache.get(key)

        url = self.url_for(endpoint)
        last_error: Optional[HvacApiError] = None

        for attempt in range(self.MAX_RETRIES + 1):
            started = time.perf_counter()
            try:
                response = self._http.request(
                    method,
                    url,
                    json=data,
                    params=params or None,
                    headers=self._headers(),
                    timeout=self.REQUEST_TIMEOUT,
                )
            except httpx.TimeoutException as e:
                last_error = HvacApiTimeoutError(details=str(e))
            except httpx.TransportError as e:
                last_error = HvacApiNetworkError(
                    f"No response received from HVAC API for {endpoint}", details=str(e)
                )
            else:
                self._response_time_total_ms += (time.perf_counter() - started) * 1000
                self._timed_responses += 1
                if response.is_success:
                    body = response.json() if response.content else None
                    if cacheable:
                        self.cache.set(key, body)
                    return body

                last_error = self._error_for_response(response, endpoint)
                if response.status_code < 500:
                    self.errors += 1
                    logger.warning(f"{method} {endpoint} failed with {response.status_code}: {last_error.message}")
                    raise last_error

            if attempt < self.MAX_RETRIES:
                delay = 2 ** (attempt + 1)
                logger.warning(
                    f"Attempt {attempt + 1} failed for {method} {endpoint}. "
                    f"Retrying in {delay}s. Error: {last_error.message}"
                )
                self._sleep(delay)

        self.errors += 1
        logger.error(
            f"Failed to {method} {endpoint} after {self.MAX_RETRIES} retries. "
            f"Last error: {last_error.message}"
        )
        raise last_error

    def _get_optional(self, endpoint: str) -> Optional[dict[str, Any]]:
        try:
            return self.request("GET", endpoint)
        except HvacApiNotFoundError:
            logger.info(f"HVAC API resource not found: {endpoint}")
            return None

    def invalidate(self, *fragments: str) -> None:
        """Drop cached GET responses whose key contains any fragment."""
        for fragment in fragments:
            self.cache.invalidate_substring(fragment)

    # ------------------------------------------------------------------
    # Customers
    # ------------------------------------------------------------------

    def get_customers(self, limit: int = 50, offset: int = 0) -> ListResult:
        payload = self.request("GET", "/customers", params={"limit": limit, "offset": offset})
        return normalize_list(payload, "customers")

    def get_customer(self, customer_id: str) -> Optional[dict[str, Any]]:
        return self._get_optional(f"/customers/{customer_id}")

    def create_customer(self, data: Mapping[str, Any]) -> dict[str, Any]:
        result = self.request("POST", "/customers", data=dict(data))
        self.invalidate("/customers")
        logger.info(f"Created customer {result.get('id') if result else None}")
        return result

    def update_customer(self, customer_id: str, data: Mapping[str, Any]) -> dict[str, Any]:
        result = self.request("PUT", f"/customers/{customer_id}", data=dict(data))
        self.invalidate(f"/customers/{customer_id}", "/customers")
        return result

    def delete_customer(self, customer_id: str) -> bool:
        self.request("DELETE", f"/customers/{customer_id}")
        self.invalidate(f"/customers/{customer_id}", "/customers")
        logger.info(f"Deleted customer {customer_id}")
        return True

    # ------------------------------------------------------------------
    # Service tickets
    # ------------------------------------------------------------------

    def get_service_tickets(
        self, filters: Optional[Mapping[str, Any]] = None, limit: int = 50, offset: int = 0
    ) -> ListResult:
        params = {**(filters or {}), "limit": limit, "offset": offset}
        return normalize_list(self.request("GET", "/tickets", params=params), "tickets")

    def get_service_ticket(self, ticket_id: str) -> Optional[dict[str, Any]]:
        return self._get_optional(f"/tickets/{ticket_id}")

    def _invalidate_tickets(self, ticket_id: Optional[str], customer_id: Optional[str]) -> None:
        fragments = ["/tickets"]
        if ticket_id:
            fragments.append(f"/tickets/{ticket_id}")
        if customer_id:
            fragments.append(f"/customers/{customer_id}/tickets")
        self.invalidate(*fragments)

    def create_service_ticket(self, data: Mapping[str, Any]) -> dict[str, Any]:
        result = self.request("POST", "/tickets", data=dict(data))
        self._invalidate_tickets(None, _customer_id(data) or _customer_id(result))
        return result

    def update_service_ticket(self, ticket_id: str, data: Mapping[str, Any]) -> dict[str, Any]:
        result = self.request("PUT", f"/tickets/{ticket_id}", data=dict(data))
        self._invalidate_tickets(ticket_id, _customer_id(data) or _customer_id(result))
        return result

    # ------------------------------------------------------------------
    # Equipment and maintenance
    # ------------------------------------------------------------------

    def get_equipment(
        self, filters: Optional[Mapping[str, Any]] = None, limit: int = 50, offset: int = 0
    ) -> ListResult:
        params = {**(filters or {}), "limit": limit, "offset": offset}
        return normalize_list(self.request("GET", "/equipment", params=params), "equipment")

    def get_equipment_by_id(self, equipment_id: str) -> Optional[dict[str, Any]]:
        return self._get_optional(f"/equipment/{equipment_id}")

    def _invalidate_equipment(self, equipment_id: Optional[str], customer_id: Optional[str]) -> None:
        fragments = ["/equipment"]
        if equipment_id:
            fragments.append(f"/equipment/{equipment_id}")
        if customer_id:
            fragments.append(f"/customers/{customer_id}/equipment")
        self.invalidate(*fragments)

    def create_equipment(self, data: Mapping[str, Any]) -> dict[str, Any]:
        result = self.request("POST", "/equipment", data=dict(data))
        self._invalidate_equipment(None, _customer_id(data) or _customer_id(result))
        return result

    def update_equipment(self, equipment_id: str, data: Mapping[str, Any]) -> dict[str, Any]:
        result = self.request("PUT", f"/equipment/{equipment_id}", data=dict(data))
        self._invalidate_equipment(equipment_id, _customer_id(data) or _customer_id(result))
        return result

    def delete_equipment(self, equipment_id: str, customer_id: Optional[str] = None) -> bool:
        self.request("DELETE", f"/equipment/{equipment_id}")
        self._invalidate_equipment(equipment_id, customer_id)
        logger.info(f"Deleted equipment {equipment_id}")
        return True

    def get_maintenance_history(self, equipment_id: str) -> list[dict[str, Any]]:
        payload = self.request("GET", f"/equipment/{equipment_id}/maintenance")
        return normalize_list(payload, "records").items

    def schedule_maintenance(self, data: Mapping[str, Any]) -> dict[str, Any]:
        result = self.request("POST", "/maintenance/schedule", data=dict(data))
        equipment_id = data.get("equipmentId") or data.get("equipment_id")
        self._invalidate_equipment(equipment_id, None)
        logger.info(f"Scheduled maintenance {result.get('id') if result else None} for equipment {equipment_id}")
        return result

    # ------------------------------------------------------------------
    # Search
    # ------------------------------------------------------------------

    def search(
        self, query: str, filters: Optional[Mapping[str, Any]] = None, limit: int = 20
    ) -> list[dict[str, Any]]:
        """Full-text search in HVAC backend (never cached)."""
        payload = self.request(
            "POST",
            "/search",
            data={"query": query, "filters": dict(filters or {}), "limit": limit},
            use_cache=False,
        )
        return normalize_list(payload, "results").items

    # ------------------------------------------------------------------
    # Quotes
    # ------------------------------------------------------------------

    def list_quotes(
        self, page: int = 1, limit: int = 20, filters: Optional[Mapping[str, Any]] = None
    ) -> ListResult:
        params = {**(filters or {}), "page": page, "limit": limit}
        return normalize_list(self.request("GET", "/quotes", params=params), "quotes")

    def get_quote(self, quote_id: str) -> Optional[dict[str, Any]]:
        return self._get_optional(f"/quotes/{quote_id}")

    def create_quote(self, data: Mapping[str, Any]) -> dict[str, Any]:
        result = self.request("POST", "/quotes", data=dict(data))
        self.invalidate("/quotes")
        return result

    def update_quote(self, quote_id: str, data: Mapping[str, Any]) -> dict[str, Any]:
        result = self.request("PUT", f"/quotes/{quote_id}", data=dict(data))
        self.invalidate("/quotes")
        return result

    def update_quote_status(self, quote_id: str, data: Mapping[str, Any]) -> dict[str, Any]:
        result = self.request("PATCH", f"/quotes/{quote_id}/status", data=dict(data))
        self.invalidate("/quotes")
        return result

    def create_quote_from_template(self, data: Mapping[str, Any]) -> dict[str, Any]:
        result = self.request("POST", "/quotes/from-template", data=dict(data))
        self.invalidate("/quotes")
        return result

    def get_quote_templates(self, category: Optional[str] = None) -> list[dict[str, Any]]:
        payload = self.request("GET", "/quote-templates", params={"category": category})
        return normalize_list(payload, "templates").items

    def get_quote_analytics(self, filters: Optional[Mapping[str, Any]] = None) -> dict[str, Any]:
        return self.request("GET", "/quotes/analytics", params=filters) or {}

    # ------------------------------------------------------------------
    # Health and metrics
    # ------------------------------------------------------------------

    def check_health(self) -> bool:
        """GET {url}/health without auth; never raises."""
        try:
            response = self._http.get(f"{self.config.api.url.rstrip('/')}/health", timeout=5.0)
        except httpx.HTTPError as e:
            logger.warning(f"HVAC API health check failed: {e}")
            return False
        return response.is_success

    def get_metrics(self) -> dict[str, Any]:
        timed = self._timed_responses
        return {
            "total_requests": self.total_requests,
            "cache_hits": self.cache_hits,
            "errors": self.errors,
            "average_response_time": self._response_time_total_ms / timed if timed else 0.0,
        }

    def close(self) -> None:
        self._http.close()
