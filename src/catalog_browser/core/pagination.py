"""Fixed-size pagination with reset-on-filter-change semantics."""

import logging
import math
from dataclasses import dataclass
from typing import Hashable, List, Optional, Sequence, Tuple, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar('T')

# --- Module-level constants ---
DEFAULT_PAGE_SIZE = 20


@dataclass(frozen=True)
class PageState:
    """Snapshot of pagination state for a given result count."""
    current_page: int
    page_size: int
    total_pages: int

    @property
    def has_previous(self) -> bool:
        return self.current_page > 1

    @property
    def has_next(self) -> bool:
        return self.current_page < self.total_pages

    @property
    def page_numbers(self) -> Tuple[int, ...]:
        return tuple(range(1, self.total_pages + 1))

    @property
    def shows_controls(self) -> bool:
        """Pager controls are only meaningful with more than one page."""
        return self.total_pages > 1


class Paginator:
    """
    Slices an ordered result into fixed-size, 1-based pages.

    The paginator remembers the last filter key it saw. Whenever a different
    key is synced, the current page jumps back to 1, even if the old page
    would still exist in the new result.

    Usage:
        paginator = Paginator(page_size=20)
        paginator.sync_filter_key((query, category, semantic_ids))
        visible = paginator.page_slice(filtered)
    """

    def __init__(self, page_size: int = DEFAULT_PAGE_SIZE):
        if page_size < 1:
            raise ValueError(f"page_size must be >= 1, got {page_size}")
        self._page_size = page_size
        self._current_page = 1
        self._filter_key: Optional[Hashable] = None

    @property
    def page_size(self) -> int:
        return self._page_size

    @property
    def current_page(self) -> int:
        return self._current_page

    def total_pages(self, item_count: int) -> int:
        """ceil(item_count / page_size); zero items means zero pages."""
        return math.ceil(item_count / self._page_size)

    def page_slice(self, items: Sequence[T]) -> List[T]:
        start = (self._current_page - 1) * self._page_size
        return list(items[start:start + self._page_size])

    def state(self, item_count: int) -> PageState:
        return PageState(
            current_page=self._current_page,
            page_size=self._page_size,
            total_pages=self.total_pages(item_count),
        )

    def sync_filter_key(self, key: Hashable) -> bool:
        """
        Record the current filter inputs, compared by value.

        Returns:
            True if the key changed and the page was reset to 1
        """
        if key == self._filter_key:
            return False
        self._filter_key = key
        self.reset()
        return True

    def reset(self):
        if self._current_page != 1:
            logger.debug(f"Paginator reset from page {self._current_page} to 1")
        self._current_page = 1

    def set_page(self, page: int, item_count: int) -> bool:
        """
        Move to an explicit page.

        Requests outside [1, total_pages] are rejected and leave the current
        page untouched.

        Returns:
            True if the page changed
        """
        total = self.total_pages(item_count)
        if page < 1 or page > total:
            logger.debug(f"Rejected page request {page} (total pages: {total})")
            return False
        if page == self._current_page:
            return False
        self._current_page = page
        return True

    def next_page(self, item_count: int) -> bool:
        return self.set_page(self._current_page + 1, item_count)

    def previous_page(self, item_count: int) -> bool:
        return self.set_page(self._current_page - 1, item_count)
