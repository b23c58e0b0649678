"""
Semantic Search Service - Application Orchestration

Responsibility:
    Runs semantic search over HVAC documents. Weaviate is the primary source;
    when it fails (SemanticSearchError) or is disabled, search falls back to
    the HVAC API /search endpoint.

Architecture Notes:
    - Part of Application Layer (Services/Use Cases)
    - Depends on Infrastructure Layer (WeaviateClient, HvacApiClient)

Contains:
    - SemanticSearchQuery: Query DTO
    - SemanticSearchResult, SemanticSearchResponse: Result DTOs
    - SemanticSearchService
"""

import logging
import time
from datetime import date
from typing import Any, Literal, Optional

from pydantic import BaseModel, Field

from hvac_crm.domain.shared.exceptions import InvalidSearchQueryError
from hvac_crm.infrastructure.hvac_api import HvacApiClient
from hvac_crm.infrastructure.search import SemanticSearchError, WeaviateClient

logger = logging.getLogger(__name__)


# ============================================================================
# QUERY / RESULT DTOs
# ============================================================================


class SemanticSearchQuery(BaseModel):
    """
    Semantic search request.

    Attributes:
        query: Natural language text (required, non-blank)
        type: Document type filter (service_report, email, ...)
        customer_id, equipment_id: Optional scope
        start_date, end_date: Optional creation date range (HVAC API fallback only)
        limit, offset: Paging
        certainty: Minimum Weaviate certainty (0..1)
    """

    query: str
    type: Optional[str] = None
    customer_id: Optional[str] = None
    equipment_id: Optional[str] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    limit: int = Field(default=20, ge=1, le=100)
    offset: int = Field(default=0, ge=0)
    certainty: float = Field(default=0.7, ge=0.0, le=1.0)

    class Config:
        """Pydantic configuration for SemanticSearchQuery."""

        json_schema_extra = {
            "example": {
                "query": "głośna praca sprężarki w klimatyzatorze",
                "type": "service_report",
                "limit": 10,
                "certainty": 0.75,
            }
        }

    def filters(self) -> dict[str, Any]:
        """Filters for HVAC API /search (None values dropped)."""
        raw = {
            "type": self.type,
            "customerId": self.customer_id,
            "equipmentId": self.equipment_id,
            "startDate": self.start_date.isoformat() if self.start_date else None,
            "endDate": self.end_date.isoformat() if self.end_date else None,
        }
        return {key: value for key, value in raw.items() if value is not None}


class SemanticSearchResult(BaseModel):
    id: str
    content: str = ""
    title: Optional[str] = None
    type: Optional[str] = None
    score: float = 0.0
    metadata: dict[str, Any] = Field(default_factory=dict)


class SemanticSearchResponse(BaseModel):
    results: list[SemanticSearchResult]
    total_count: int
    query: str
    execution_time_ms: float
    source: Literal["weaviate", "hvac_api"]


# ============================================================================
# SERVICE
# ============================================================================


class SemanticSearchService:
    """
    Weaviate-first semantic search with HVAC API fallback.

    Args:
        api_client: HvacApiClient (fallback source)
        weaviate: WeaviateClient, or None when semantic search is disabled
    """

    def __init__(self, api_client: HvacApiClient, weaviate: Optional[WeaviateClient] = None) -> None:
        self.api_client = api_client
        self.weaviate = weaviate

    def search(self, query: SemanticSearchQuery) -> SemanticSearchResponse:
        """
        Run search.

        Raises:
            InvalidSearchQueryError: If query text is blank
            HvacApiError: If fallback HVAC API search fails
        """
        text = query.query.strip()
        if not text:
            raise InvalidSearchQueryError("Search query cannot be empty")

        started = time.perf_counter()
        results: Optional[list[SemanticSearchResult]] = None
        source = "weaviate"

        if self.weaviate is not None:
            try:
                hits = self.weaviate.search(
                    text,
                    limit=query.limit,
                    offset=query.offset,
                    certainty=query.certainty,
                    document_type=query.type,
                    customer_id=query.customer_id,
                    equipment_id=query.equipment_id,
                )
                results = [SemanticSearchResult(**hit.to_dict()) for hit in hits]
            except SemanticSearchError as e:
                logger.warning(f"Weaviate search failed, falling back to HVAC API: {e.message}")

        if results is None:
            source = "hvac_api"
            items = self.api_client.search(text, filters=query.filters(), limit=query.limit)
            results = [self._from_api(item) for item in items]

        elapsed_ms = (time.perf_counter() - started) * 1000
        logger.info(f"Semantic search '{text}' returned {len(results)} results from {source} in {elapsed_ms:.1f}ms")
        return SemanticSearchResponse(
            results=results,
            total_count=len(results),
            query=text,
            execution_time_ms=round(elapsed_ms, 2),
            source=source,
        )

    @staticmethod
    def _from_api(item: dict[str, Any]) -> SemanticSearchResult:
        return SemanticSearchResult(
            id=str(item.get("id", "")),
            content=item.get("content") or "",
            title=item.get("title"),
            type=item.get("type"),
            score=float(item.get("score") or item.get("relevance") or 0.0),
            metadata=item.get("metadata") or {},
        )
