"""
Offset/limit pagination shared by the news and comment lists.
"""

import math
from dataclasses import dataclass
from typing import Generic, List, Tuple, TypeVar

from sqlalchemy.orm import Query

from newsverify.errors import ValidationFailed
from newsverify.models import PaginationInfo


T = TypeVar("T")


@dataclass(frozen=True)
class PageRequest:
    """A validated page/pageSize pair."""

    page: int
    page_size: int

    def __post_init__(self):
        issues = []
        if self.page < 1:
            issues.append({"field": "page", "message": "must be >= 1", "type": "greater_than_equal"})
        if self.page_size < 1:
            issues.append({"field": "pageSize", "message": "must be >= 1", "type": "greater_than_equal"})
        if issues:
            raise ValidationFailed(issues)

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.page_size

    @property
    def limit(self) -> int:
        return self.page_size


@dataclass
class Page(Generic[T]):
    data: List[T]
    pagination: PaginationInfo


def page_info(total: int, request: PageRequest) -> PaginationInfo:
    """Totals for a page; pages past the end are valid and simply empty."""
    return PaginationInfo(
        page=request.page,
        page_size=request.page_size,
        total=total,
        total_pages=math.ceil(total / request.page_size),
    )


def paginate(items: List[T], request: PageRequest) -> Page[T]:
    """Slice an in-memory sequence."""
    window = items[request.offset:request.offset + request.limit]
    return Page(data=list(window), pagination=page_info(len(items), request))


def paginate_query(query: Query, request: PageRequest) -> Tuple[list, PaginationInfo]:
    """
    Run the count and the page slice of an ORM query.

    Both statements run on the caller's session, inside the same
    transaction, so the page and the total describe the same state.
    """
    total = query.order_by(None).count()
    # Past the end: nothing to fetch, and huge offsets overflow the driver
    if request.offset >= total:
        return [], page_info(total, request)
    rows = query.offset(request.offset).limit(request.limit).all()
    return rows, page_info(total, request)
