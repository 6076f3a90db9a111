# backend/portfolio_tracker/schemas/pagination.py
"""
Pagination metadata shared by every list endpoint.

List responses have the shape {"items": [...], "pagination": {...}}:

    total = db.scalar(select(func.count()).select_from(query.subquery()))
    rows = db.scalars(query.offset(skip).limit(limit)).all()
    return {"items": rows, "pagination": PaginationMeta.create(total, skip, limit)}

page, pages, has_next and has_previous are derived from total/skip/limit.
"""

from typing import Generic, TypeVar

from pydantic import BaseModel, Field, computed_field

T = TypeVar("T")


class PaginationMeta(BaseModel):
    """
    Offset pagination metadata.

    Attributes:
        total: Rows matching the filters
        skip: Offset of the current page
        limit: Page size
    """

    total: int = Field(..., ge=0, description="Total number of items matching query")
    skip: int = Field(..., ge=0, description="Number of items skipped (offset)")
    limit: int = Field(..., ge=1, description="Maximum items per page")

    @computed_field
    @property
    def page(self) -> int:
        """Current page number (1-indexed)."""
        return (self.skip // self.limit) + 1

    @computed_field
    @property
    def pages(self) -> int:
        """Number of pages; an empty result still has one page."""
        if self.total <= 0:
            return 1
        return -(-self.total // self.limit)

    @computed_field
    @property
    def has_next(self) -> bool:
        return self.skip + self.limit < self.total

    @computed_field
    @property
    def has_previous(self) -> bool:
        return self.skip > 0

    @classmethod
    def create(cls, total: int, skip: int, limit: int) -> "PaginationMeta":
        return cls(total=total, skip=skip, limit=limit)


class PaginatedResponse(BaseModel, Generic[T]):
    """
    Generic list wrapper.

    Example:
        class AssetListResponse(PaginatedResponse[AssetResponse]):
            pass
    """

    items: list[T] = Field(..., description="Items of the current page")
    pagination: PaginationMeta = Field(..., description="Pagination metadata")
