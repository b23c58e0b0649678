"""
Common API Schemas

Shared Pydantic models used across all API routers.
"""

from typing import Any, Dict, Optional

from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    """
    Standard error response model for all API errors.

    Provides consistent error structure across all endpoints.

    Attributes:
        code: Machine-readable error code (e.g., "ENTITY_NOT_FOUND", "HVAC_API_ERROR")
        message: Human-readable error message
        details: Optional additional error details (validation errors, debug info)
    """

    code: str = Field(description="Machine-readable error code")
    message: str = Field(description="Human-readable error message")
    details: Optional[Dict[str, Any]] = Field(
        default=None, description="Additional error context"
    )

    class Config:
        json_schema_extra = {
            "example": {
                "code": "ENTITY_NOT_FOUND",
                "message": "Equipment eq-42 not found",
                "details": {"entity_type": "equipment", "entity_id": "eq-42"},
            }
        }


class PageResponse(BaseModel):
    """
    Paged list of serialized entities.

    Attributes:
        items: Entities as dictionaries (snake_case keys)
        total: Total matching entities reported by HVAC API
    """

    items: list[Dict[str, Any]] = Field(default_factory=list)
    total: int = 0


class DeleteResponse(BaseModel):
    deleted: bool
