import math
from typing import Any, Callable, Dict, Generic, List, Sequence, Tuple, TypeVar

from fastapi import Query
from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel
from sqlalchemy.orm import Query as SAQuery

from app.core.config import settings
from app.core.exceptions import InvalidArgumentError

T = TypeVar("T")


class PageRequest(BaseModel):
    """Page number (zero based), page size and a "field,direction" sort."""
    page: int = Field(0, ge=0)
    size: int = Field(settings.DEFAULT_PAGE_SIZE, ge=1)
    sort: str = "createdAt,desc"

    @property
    def offset(self) -> int:
        return self.page * self.size

    def sort_order(self) -> Tuple[str, str]:
        field, _, direction = self.sort.partition(",")
        direction = (direction or "asc").strip().lower()
        if direction not in ("asc", "desc"):
            raise InvalidArgumentError(f"Unknown sort direction '{direction}'")
        return field.strip(), direction


class Page(BaseModel, Generic[T]):
    content: List[T]
    page: int
    size: int
    total_elements: int
    total_pages: int

    model_config = {
        "from_attributes": True,
        "alias_generator": to_camel,
        "populate_by_name": True,
    }

    @classmethod
    def build(cls, content: Sequence[Any], page_request: PageRequest, total: int) -> "Page":
        return cls(
            content=list(content),
            page=page_request.page,
            size=page_request.size,
            total_elements=total,
            total_pages=math.ceil(total / page_request.size) if total else 0,
        )

    @classmethod
    def from_list(cls, items: Sequence[Any], page_request: PageRequest) -> "Page":
        start = page_request.offset
        if start >= len(items):
            return cls.build([], page_request, len(items))
        end = min(start + page_request.size, len(items))
        return cls.build(items[start:end], page_request, len(items))

    def map(self, fn: Callable[[Any], Any]) -> "Page":
        return Page(
            content=[fn(item) for item in self.content],
            page=self.page,
            size=self.size,
            total_elements=self.total_elements,
            total_pages=self.total_pages,
        )


def page_params(default_sort: str = "createdAt,desc", max_size: int = 100):
    """Builds a FastAPI dependency reading ?page=&size=&sort= from the query string."""

    def dependency(
            page: int = Query(0, ge=0, description="Zero based page index"),
            size: int = Query(settings.DEFAULT_PAGE_SIZE, ge=1, le=100, description="Page size"),
            sort: str = Query(default_sort, description="Sort as field,asc|desc"),
    ) -> PageRequest:
        return PageRequest(page=page, size=min(size, max_size), sort=sort)

    return dependency


def apply_sort(query: SAQuery, page_request: PageRequest, sortable: Dict[str, Any]) -> SAQuery:
    field, direction = page_request.sort_order()
    column = sortable.get(field)
    if column is None:
        raise InvalidArgumentError(f"Cannot sort by '{field}'")
    query = query.order_by(column.desc() if direction == "desc" else column.asc())
    # Stable order for rows sharing the same sort value
    if field != "id" and "id" in sortable:
        tie = sortable["id"]
        query = query.order_by(tie.desc() if direction == "desc" else tie.asc())
    return query


def paginate(query: SAQuery, page_request: PageRequest, sortable: Dict[str, Any]) -> Page:
    total = query.order_by(None).count()
    items = (
        apply_sort(query, page_request, sortable)
        .offset(page_request.offset)
        .limit(page_request.size)
        .all()
    )
    return Page.build(items, page_request, total)
