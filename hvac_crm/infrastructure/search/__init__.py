"""
Semantic Search Infrastructure (Weaviate)

Exports:
    - WeaviateClient: REST/GraphQL client
    - HvacDocument, DocumentType, SearchHit
    - SemanticSearchError
"""

from .weaviate_client import (
    CLASS_NAME,
    DocumentType,
    HvacDocument,
    SearchHit,
    SemanticSearchError,
    WeaviateClient,
    build_where_filter,
)

__all__ = [
    "CLASS_NAME",
    "DocumentType",
    "HvacDocument",
    "SearchHit",
    "SemanticSearchError",
    "WeaviateClient",
    "build_where_filter",
]
