"""Search filter + pagination for one level of a hierarchy listing."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Generic, Mapping, Optional, Sequence, TypeVar

from ..config import NavigatorConfig

T = TypeVar("T")

DEFAULT_PAGE_SIZE = 12


@dataclass(frozen=True)
class PageSlice(Generic[T]):
    """One rendered page.

    Attributes:
        page_items: Items on the page.
        total_count: Items left after filtering.
        total_pages: Always at least 1.
        page: The page actually shown, after clamping.
    """

    page_items: tuple[T, ...]
    total_count: int
    total_pages: int
    page: int

    @property
    def has_previous(self) -> bool:
        return self.page > 0

    @property
    def has_next(self) -> bool:
        return self.page < self.total_pages - 1


def _name_of(item: Any) -> str:
    if isinstance(item, Mapping):
        name = item.get("name")
    else:
        name = getattr(item, "name", None)
    return name if isinstance(name, str) else ""


def slice_view(
    items: Sequence[T],
    search_term: str = "",
    page: int = 0,
    page_size: Optional[int] = None,
    config: Optional[NavigatorConfig] = None,
) -> PageSlice[T]:
    """Filter ``items`` by name, then cut out one page.

    The page index is clamped into range instead of failing: the list may
    shrink (e.g. after a delete) while the caller still holds an old index.

    Args:
        items: Objects or mappings with a ``name``.
        search_term: Case-insensitive substring; blank matches everything.
        page: Requested 0-based page.
        page_size: Items per page. Defaults to ``config.page_size``, or
            ``DEFAULT_PAGE_SIZE`` without a config.
        config: Supplies the default page size.

    Raises:
        ValueError: If ``page_size`` is less than 1.

    Example::

        view = slice_view(index.children_of(nav.effective_parent_id), "prod", page=2)
    """
    if page_size is None:
        page_size = config.page_size if config is not None else DEFAULT_PAGE_SIZE
    if page_size < 1:
        raise ValueError(f"page_size must be at least 1, got {page_size}")

    if search_term.strip():
        needle = search_term.casefold()
        filtered = [item for item in items if needle in _name_of(item).casefold()]
    else:
        filtered = list(items)

    total_count = len(filtered)
    total_pages = max(1, math.ceil(total_count / page_size))
    page = min(max(page, 0), total_pages - 1)
    start = page * page_size

    return PageSlice(
        page_items=tuple(filtered[start : start + page_size]),
        total_count=total_count,
        total_pages=total_pages,
        page=page,
    )


__all__ = [
    "DEFAULT_PAGE_SIZE",
    "PageSlice",
    "slice_view",
]
