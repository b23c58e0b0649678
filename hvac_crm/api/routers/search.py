"""
API Router for Semantic Search

Contains:
    - POST /search - Weaviate semantic search with HVAC API fallback
      (requires SEMANTIC_SEARCH permission and semantic_search feature)
"""

from fastapi import APIRouter, Depends

from hvac_crm.api.dependencies import get_search_service, require_permissions
from hvac_crm.api.schemas.common import ErrorResponse
from hvac_crm.application.services import (
    SemanticSearchQuery,
    SemanticSearchResponse,
    SemanticSearchService,
)
from hvac_crm.domain.permissions import SEMANTIC_SEARCH_ONLY

router = APIRouter(
    prefix="/search",
    tags=["search"],
    responses={
        400: {"model": ErrorResponse, "description": "Bad Request - Empty query"},
        403: {"model": ErrorResponse, "description": "Forbidden - Permission or feature missing"},
    },
)


@router.post(
    "",
    response_model=SemanticSearchResponse,
    dependencies=[Depends(require_permissions(*SEMANTIC_SEARCH_ONLY))],
    summary="Semantic search over HVAC documents",
)
def semantic_search(
    query: SemanticSearchQuery,
    service: SemanticSearchService = Depends(get_search_service),
) -> SemanticSearchResponse:
    return service.search(query)
