"""
Common Schemas
==============

Shared Pydantic models for request parsing and paginated responses.
"""

import math
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from app.constants import Pagination


class CamelModel(BaseModel):
    """Request body accepting camelCase keys (snake_case also accepted)."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="forbid",
        str_strip_whitespace=True,
    )


class CamelQuery(CamelModel):
    """Query-string model; unknown parameters are ignored."""

    model_config = ConfigDict(extra="ignore")


class PaginationParams(CamelQuery):
    """Page-based pagination parameters"""

    page: int = Field(default=Pagination.DEFAULT_PAGE, ge=1, description="1-based page number")
    limit: int = Field(
        default=Pagination.DEFAULT_PAGE_SIZE,
        ge=1,
        le=Pagination.MAX_PAGE_SIZE,
        description="Items per page",
    )


class PaginationMeta(BaseModel):
    """Pagination block returned alongside list data"""

    page: int = Field(..., description="Current page number")
    limit: int = Field(..., description="Items per page")
    total: int = Field(..., description="Total number of items")
    pages: int = Field(..., description="Total number of pages")

    model_config = ConfigDict(
        json_schema_extra={
            "example": {"page": 1, "limit": 20, "total": 45, "pages": 3}
        }
    )

    @classmethod
    def build(cls, page: int, limit: int, total: int) -> "PaginationMeta":
        return cls(page=page, limit=limit, total=total, pages=max(1, math.ceil(total / limit)))


def validation_details(errors: list[dict[str, Any]]) -> dict[str, Any]:
    """Reduce pydantic error dicts to JSON-safe field/message pairs."""
    return {
        "errors": [
            {
                "field": ".".join(str(part) for part in err.get("loc", ())),
                "message": err.get("msg", "Invalid value"),
            }
            for err in errors
        ]
    }
