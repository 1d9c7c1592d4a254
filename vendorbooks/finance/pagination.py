from typing import Generic, List, Sequence, TypeVar

from pydantic import BaseModel

T = TypeVar("T")


# Paginated response wrapper — used by all list endpoints
class Page(BaseModel, Generic[T]):
    data: List[T]
    total: int
    page: int
    limit: int
    total_pages: int
    has_next: bool
    has_prev: bool


class PageRequest(BaseModel):
    """
    Current page/size selection of a list view.

    Picking a new page size always goes back to page 1; picking a page keeps
    the size.
    """
    page: int = 1
    page_size: int = 10

    class Config:
        frozen = True

    def with_page(self, page: int) -> "PageRequest":
        return PageRequest(page=page, page_size=self.page_size)

    def with_page_size(self, page_size: int) -> "PageRequest":
        return PageRequest(page=1, page_size=page_size)

    def apply(self, items: Sequence[T]) -> Page[T]:
        return paginate(items, self.page_size, self.page)


def paginate(items: Sequence[T], page_size: int, page_number: int) -> Page[T]:
    """
    Slice an ordered collection into one page.

    Out-of-range page numbers (0, negative, past the end) are clamped to the
    nearest valid page instead of raising; an empty collection has zero pages
    and yields an empty page 1.
    """
    items = list(items)
    limit = max(1, page_size)
    total = len(items)
    total_pages = -(-total // limit) if total else 0
    page = min(max(1, page_number), max(1, total_pages))
    start = (page - 1) * limit

    return Page(
        data=items[start:start + limit],
        total=total,
        page=page,
        limit=limit,
        total_pages=total_pages,
        has_next=page < total_pages,
        has_prev=page > 1,
    )
