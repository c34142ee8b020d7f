"""
Limit/offset window for list endpoints.

    @router.get("/orders")
    def list_orders(page: Pagination = Depends(get_pagination), ...):
        service.list_orders(rid, limit=page.limit, offset=page.offset)
"""

from dataclasses import dataclass

from fastapi import Query

from shared.config.constants import Limits


@dataclass
class Pagination:
    """Window clamped to 1..max_limit rows, starting at a non-negative offset."""

    limit: int = Limits.DEFAULT_PAGE_SIZE
    offset: int = 0
    max_limit: int = Limits.MAX_PAGE_SIZE

    def __post_init__(self):
        self.limit = max(1, min(self.limit, self.max_limit))
        self.offset = max(0, self.offset)


def get_pagination(
    limit: int = Query(Limits.DEFAULT_PAGE_SIZE, ge=1, le=Limits.MAX_PAGE_SIZE, description="Page size"),
    offset: int = Query(0, ge=0, description="Rows to skip"),
) -> Pagination:
    return Pagination(limit=limit, offset=offset)
