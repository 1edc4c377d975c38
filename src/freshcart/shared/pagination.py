"""Page/size pagination used by every list endpoint."""

import math
from dataclasses import dataclass
from typing import Generic, TypeVar

T = TypeVar("T")

DEFAULT_PAGE_SIZE = 10
MAX_PAGE_SIZE = 100


@dataclass(frozen=True)
class PageRequest:
    page: int = 1
    size: int | None = DEFAULT_PAGE_SIZE  # None returns everything

    @classmethod
    def of(cls, page: int | None = None, size: int | str | None = None) -> "PageRequest":
        safe_page = max(1, page or 1)
        if size == "all":
            return cls(page=1, size=None)
        try:
            safe_size = int(size) if size is not None else DEFAULT_PAGE_SIZE
        except ValueError:
            safe_size = DEFAULT_PAGE_SIZE
        return cls(page=safe_page, size=min(MAX_PAGE_SIZE, max(1, safe_size)))

    @property
    def offset(self) -> int:
        return 0 if self.size is None else (self.page - 1) * self.size


@dataclass(frozen=True)
class Page(Generic[T]):
    items: list[T]
    page: int
    size: int
    total: int

    @property
    def total_pages(self) -> int:
        if not self.size:
            return 1
        return max(1, math.ceil(self.total / self.size))


def fetch_all(query) -> list:
    """Every match of ``query``; querysets cap results at a default limit otherwise."""
    total = query.limit(1).all().total
    if not total:
        return []
    return query.limit(total).all().items


def paginate(query, request: PageRequest) -> Page:
    """Run ``query`` for one page and report the unpaginated total."""
    if request.size is None:
        items = fetch_all(query)
        return Page(items=items, page=1, size=len(items), total=len(items))

    result = query.offset(request.offset).limit(request.size).all()
    return Page(items=list(result.items), page=request.page, size=request.size, total=result.total)
