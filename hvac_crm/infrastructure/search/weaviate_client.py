"""
Weaviate Client.

Thin httpx-based client for the Weaviate vector database (REST + GraphQL).
Stores HVAC documents (service reports, maintenance logs, notes, manuals,
emails, transcriptions) and runs semantic nearText search over them.

Responsibility:
    - Ensure HvacDocument class exists in schema
    - Add documents
    - nearText search with certainty threshold and filters
    - Document count (Aggregate) and readiness check

Architecture Notes:
    - Infrastructure Layer
    - Vectorization happens inside Weaviate (text2vec module), not in this process
    - Every failure is raised as SemanticSearchError; SemanticSearchService
      falls back to HVAC API search on it

Examples:
    >>> client = WeaviateClient(get_config())
    >>> client.ensure_schema()
    >>> hits = client.search("wyciek czynnika chłodniczego", limit=5, document_type="service_report")
    >>> hits[0].score
    0.91
"""

import json
import logging
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Optional

import httpx

from hvac_crm.infrastructure.config import HvacConfig, get_config

logger = logging.getLogger(__name__)

CLASS_NAME = "HvacDocument"


class SemanticSearchError(Exception):
    """Raised when Weaviate is unreachable or returns an error."""

    def __init__(self, message: str, details: Any = None) -> None:
        self.message = message
        self.details = details
        super().__init__(message)


class DocumentType(str, Enum):
    SERVICE_REPORT = "service_report"
    MAINTENANCE_LOG = "maintenance_log"
    CUSTOMER_NOTE = "customer_note"
    EQUIPMENT_MANUAL = "equipment_manual"
    EMAIL = "email"
    TRANSCRIPTION = "transcription"


SCHEMA_PROPERTIES = [
    {"name": "title", "dataType": ["text"]},
    {"name": "content", "dataType": ["text"]},
    {"name": "type", "dataType": ["text"]},
    {"name": "customerId", "dataType": ["text"]},
    {"name": "equipmentId", "dataType": ["text"]},
    {"name": "createdAt", "dataType": ["date"]},
    {"name": "metadata", "dataType": ["text"]},
]

CLASS_DEFINITION = {
    "class": CLASS_NAME,
    "description": "HVAC documents for semantic search",
    "vectorizer": "text2vec-transformers",
    "properties": SCHEMA_PROPERTIES,
}


@dataclass
class HvacDocument:
    title: str
    content: str
    type: DocumentType
    customer_id: Optional[str] = None
    equipment_id: Optional[str] = None
    created_at: datetime = field(default_factory=datetime.now)
    metadata: dict[str, Any] = field(default_factory=dict)
    id: Optional[str] = None

    def to_properties(self) -> dict[str, Any]:
        """Weaviate object properties (metadata serialized as JSON text)."""
        properties: dict[str, Any] = {
            "title": self.title,
            "content": self.content,
            "type": self.type.value,
            "createdAt": self.created_at.astimezone().isoformat(),
            "metadata": json.dumps(self.metadata, default=str, ensure_ascii=False),
        }
        if self.customer_id:
            properties["customerId"] = self.customer_id
        if self.equipment_id:
            properties["equipmentId"] = self.equipment_id
        return properties


@dataclass
class SearchHit:
    id: str
    content: str
    title: Optional[str]
    type: Optional[str]
    score: float
    metadata: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "content": self.content,
            "title": self.title,
            "type": self.type,
            "score": self.score,
            "metadata": self.metadata,
        }


def _parse_metadata(raw: Any) -> dict[str, Any]:
    if not raw:
        return {}
    if isinstance(raw, dict):
        return raw
    try:
        parsed = json.loads(raw)
    except (TypeError, ValueError):
        return {"raw": raw}
    return parsed if isinstance(parsed, dict) else {"value": parsed}


def build_where_filter(
    document_type: Optional[str] = None,
    customer_id: Optional[str] = None,
    equipment_id: Optional[str] = None,
) -> Optional[str]:
    """
    Build GraphQL where argument for equality filters.

    Examples:
        >>> build_where_filter(document_type="email")
        '{path: ["type"], operator: Equal, valueText: "email"}'
    """
    operands = [
        f"{{path: [{json.dumps(path)}], operator: Equal, valueText: {json.dumps(value)}}}"
        for path, value in (
            ("type", document_type),
            ("customerId", customer_id),
            ("equipmentId", equipment_id),
        )
        if value
    ]
    if not operands:
        return None
    if len(operands) == 1:
        return operands[0]
    return f"{{operator: And, operands: [{', '.join(operands)}]}}"


class WeaviateClient:
    """
    Weaviate REST/GraphQL client.

    Args:
        config: HvacConfig (default: get_config())
        http_client: httpx.Client (default: new client, base URL from config)
    """

    TIMEOUT = 10.0

    def __init__(self, config: Optional[HvacConfig] = None, http_client: Optional[httpx.Client] = None) -> None:
        self.config = config or get_config()
        self.base_url = self.config.weaviate.url
        self._http = http_client or httpx.Client(timeout=httpx.Timeout(self.TIMEOUT))

    def _headers(self) -> dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self.config.weaviate.api_key:
            headers["Authorization"] = f"Bearer {self.config.weaviate.api_key}"
        return headers

    def _send(self, method: str, path: str, payload: Any = None, allow_404: bool = False) -> Optional[httpx.Response]:
        try:
            response = self._http.request(
                method, f"{self.base_url}{path}", json=payload, headers=self._headers()
            )
        except httpx.HTTPError as e:
            raise SemanticSearchError(f"Weaviate request {method} {path} failed: {e}") from e

        if allow_404 and response.status_code == 404:
            return None
        if not response.is_success:
            raise SemanticSearchError(
                f"Weaviate returned {response.status_code} for {method} {path}",
                details=response.text,
            )
        return response

    def _graphql(self, query: str) -> dict[str, Any]:
        response = self._send("POST", "/v1/graphql", {"query": query})
        body = response.json()
        if body.get("errors"):
            messages = "; ".join(str(error.get("message", error)) for error in body["errors"])
            raise SemanticSearchError(f"Weaviate GraphQL error: {messages}", details=body["errors"])
        return body.get("data") or {}

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    def is_ready(self) -> bool:
        try:
            return self._send("GET", "/v1/.well-known/ready") is not None
        except SemanticSearchError as e:
            logger.warning(f"Weaviate not ready: {e.message}")
            return False

    def ensure_schema(self) -> bool:
        """
        Create HvacDocument class when missing.

        Returns:
            True if class was created, False if it already existed
        """
        if self._send("GET", f"/v1/schema/{CLASS_NAME}", allow_404=True) is not None:
            return False
        self._send("POST", "/v1/schema", CLASS_DEFINITION)
        logger.info(f"Created Weaviate schema for class: {CLASS_NAME}")
        return True

    def add_document(self, document: HvacDocument) -> str:
        """Store document; returns Weaviate object id."""
        payload: dict[str, Any] = {"class": CLASS_NAME, "properties": document.to_properties()}
        if document.id:
            payload["id"] = document.id
        response = self._send("POST", "/v1/objects", payload)
        object_id = response.json().get("id") or document.id or ""
        logger.debug(f"Indexed {document.type.value} document {object_id}")
        return object_id

    def search(
        self,
        query: str,
        limit: int = 20,
        offset: int = 0,
        certainty: float = 0.7,
        document_type: Optional[str] = None,
        customer_id: Optional[str] = None,
        equipment_id: Optional[str] = None,
    ) -> list[SearchHit]:
        """
        Semantic nearText search.

        Args:
            query: Natural language query
            limit, offset: Paging
            certainty: Minimum certainty (0..1)
            document_type, customer_id, equipment_id: Optional equality filters

        Returns:
            Hits ordered by Weaviate, score = certainty
        """
        arguments = [
            f"nearText: {{concepts: [{json.dumps(query, ensure_ascii=False)}], certainty: {certainty}}}",
            f"limit: {limit}",
            f"offset: {offset}",
        ]
        where = build_where_filter(document_type, customer_id, equipment_id)
        if where:
            arguments.append(f"where: {where}")

        graphql = (
            f"{{ Get {{ {CLASS_NAME}({', '.join(arguments)}) "
            "{ title content type customerId equipmentId createdAt metadata "
            "_additional { id certainty } } } }"
        )
        data = self._graphql(graphql)
        items = (data.get("Get") or {}).get(CLASS_NAME) or []

        hits = []
        for item in items:
            additional = item.get("_additional") or {}
            metadata = _parse_metadata(item.get("metadata"))
            for key in ("customerId", "equipmentId", "createdAt"):
                if item.get(key):
                    metadata.setdefault(key, item[key])
            hits.append(
                SearchHit(
                    id=additional.get("id", ""),
                    content=item.get("content") or "",
                    title=item.get("title"),
                    type=item.get("type"),
                    score=float(additional.get("certainty") or 0.0),
                    metadata=metadata,
                )
            )
        return hits

    def count_documents(self) -> int:
        data = self._graphql(f"{{ Aggregate {{ {CLASS_NAME} {{ meta {{ count }} }} }} }}")
        groups = (data.get("Aggregate") or {}).get(CLASS_NAME) or []
        if not groups:
            return 0
        return int((groups[0].get("meta") or {}).get("count") or 0)

    def close(self) -> None:
        self._http.close()
