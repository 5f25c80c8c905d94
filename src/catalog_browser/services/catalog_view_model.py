"""
View model for a paginated, searchable catalog.

Composes the collection mirror, the search state machine, the search service,
the paginator and the notification queue into the state a catalog view binds
to. Everything is recomputed on the owner thread after each input change and
announced through the changed signal.
"""

import logging
from typing import List, Optional, Tuple

from PyQt6.QtCore import QObject, pyqtSignal

from catalog_browser.core.background_task import BackgroundTaskManager
from catalog_browser.core.highlight import HighlightSpan, highlight_spans
from catalog_browser.core.pagination import PageState, Paginator
from catalog_browser.io.base import DocumentSource
from catalog_browser.protocols.catalog_config import CatalogConfig, get_catalog_config
from catalog_browser.protocols.semantic_search import (
    SemanticSearchServiceProtocol,
    get_semantic_search_service,
)
from .catalog_types import Category, Item
from .collection_mirror import CollectionMirror
from .notification_queue import Notification, NotificationQueue
from .search_service import CatalogSearchService
from .search_state import SearchAction, SearchMode, SearchState, apply_user_action

logger = logging.getLogger(__name__)


class CatalogViewModel(QObject):
    """
    Catalog view state: filtered items, current page and notifications.

    Usage:
        view_model = CatalogViewModel(source)
        view_model.changed.connect(self._render)
        view_model.start()

        search_edit.textChanged.connect(view_model.set_query_text)
        search_button.clicked.connect(view_model.submit_semantic_search)

        def closeEvent(self, event):
            view_model.close()
            super().closeEvent(event)
    """

    changed = pyqtSignal()
    notification_changed = pyqtSignal(object)  # Notification or None

    def __init__(
        self,
        source: DocumentSource,
        semantic_service: Optional[SemanticSearchServiceProtocol] = None,
        config: Optional[CatalogConfig] = None,
        task_manager: Optional[BackgroundTaskManager] = None,
        parent: Optional[QObject] = None,
    ):
        super().__init__(parent)
        self._config = config or get_catalog_config()
        self._semantic_service = semantic_service or get_semantic_search_service()
        self._tasks = task_manager or BackgroundTaskManager()

        self._mirror = CollectionMirror(source, self._config, parent=self)
        self._notifications = NotificationQueue(self._config, parent=self)
        self._search = CatalogSearchService(uncategorized_label=self._config.uncategorized_label)
        self._paginator = Paginator(self._config.page_size)

        self._state = SearchState()
        self._filtered: List[Item] = []
        self._closed = False

        self._mirror.items_changed.connect(self._on_items_changed)
        self._mirror.categories_changed.connect(self._on_categories_changed)
        self._mirror.loading_changed.connect(lambda _loading: self.changed.emit())
        self._mirror.error_occurred.connect(self._notifications.error)
        self._notifications.notification_changed.connect(self.notification_changed.emit)

        self._recompute()

    # ========== LIFECYCLE ==========

    def start(self):
        """Subscribe to the document source."""
        if self._closed:
            raise RuntimeError("CatalogViewModel cannot be restarted after close()")
        self._mirror.start()

    def close(self):
        """Tear down: release subscriptions, cancel timers, drop any in-flight search."""
        if self._closed:
            return
        self._closed = True
        self._mirror.stop()
        self._tasks.cleanup()
        self._notifications.shutdown()
        logger.info("Catalog view model closed")

    @property
    def is_closed(self) -> bool:
        return self._closed

    # ========== USER ACTIONS ==========

    def set_query_text(self, text: str):
        self._apply(SearchAction.edit_query(text))

    def select_category(self, category_id: str):
        self._apply(SearchAction.select_category(category_id))

    def clear_search(self):
        self._apply(SearchAction.clear_search())

    def submit_semantic_search(self) -> bool:
        """
        Submit the current query to the semantic search service.

        Returns:
            True if a request was issued
        """
        if self._closed:
            return False
        if self._state.searching:
            logger.debug("Semantic search already in flight; submission rejected")
            return False
        if not self._state.query_text.strip():
            self._notifications.error(self._config.empty_query_message)
            return False
        if self._semantic_service is None:
            logger.error("No semantic search service registered")
            self._notifications.error(self._config.semantic_error_message)
            return False

        self._apply(SearchAction.submit_semantic())
        request_id = self._state.request_id
        query = self._state.query_text
        candidates = self._search.search_candidates()
        logger.info(f"Semantic search {request_id} submitted for {query!r}")

        self._tasks.run(
            target=self._semantic_service.find_matching_item_ids,
            args=(query, candidates),
            on_success=lambda item_ids: self._on_semantic_result(request_id, item_ids),
            on_error=lambda error: self._on_semantic_error(request_id, error),
        )
        return True

    def set_page(self, page: int) -> bool:
        return self._page_changed(self._paginator.set_page(page, len(self._filtered)))

    def next_page(self) -> bool:
        return self._page_changed(self._paginator.next_page(len(self._filtered)))

    def previous_page(self) -> bool:
        return self._page_changed(self._paginator.previous_page(len(self._filtered)))

    def dismiss_notification(self):
        self._notifications.dismiss()

    # ========== VIEW STATE ==========

    @property
    def search_state(self) -> SearchState:
        return self._state

    @property
    def search_mode(self) -> SearchMode:
        return self._state.mode

    @property
    def query_text(self) -> str:
        return self._state.query_text

    @property
    def selected_category(self) -> str:
        return self._state.category_id

    @property
    def items(self) -> List[Item]:
        return self._mirror.items

    @property
    def categories(self) -> List[Category]:
        return self._mirror.categories

    @property
    def filtered_items(self) -> List[Item]:
        return list(self._filtered)

    @property
    def visible_items(self) -> List[Item]:
        return self._paginator.page_slice(self._filtered)

    @property
    def total_pages(self) -> int:
        return self._paginator.total_pages(len(self._filtered))

    @property
    def current_page(self) -> int:
        return self._paginator.current_page

    @property
    def page_state(self) -> PageState:
        return self._paginator.state(len(self._filtered))

    @property
    def highlight_term(self) -> str:
        return self._state.highlight_term

    @property
    def notification(self) -> Optional[Notification]:
        return self._notifications.current

    @property
    def notifications(self) -> NotificationQueue:
        return self._notifications

    @property
    def loading(self) -> bool:
        return self._mirror.loading

    @property
    def searching(self) -> bool:
        return self._state.searching

    @property
    def semantic_failed(self) -> bool:
        return self._state.semantic_failed

    @property
    def category_filter_enabled(self) -> bool:
        return self._state.mode is SearchMode.LEXICAL

    @property
    def can_clear_search(self) -> bool:
        return self._state.mode is SearchMode.SEMANTIC

    @property
    def search_button_label(self) -> str:
        return "Searching..." if self._state.searching else "Search"

    @property
    def result_summary(self) -> str:
        if self._state.mode is SearchMode.SEMANTIC:
            count = len(self._filtered)
            return f"Showing {count} result{'' if count == 1 else 's'} from AI search."
        if self._state.semantic_failed:
            return self._config.semantic_failed_summary
        return ""

    @property
    def empty_message(self) -> str:
        if self.loading or self.visible_items:
            return ""
        return self._config.empty_result_message

    def category_name_for(self, item: Item) -> str:
        return self._search.category_name_for(item)

    def highlighted_title(self, item: Item) -> Tuple[HighlightSpan, ...]:
        return highlight_spans(item.title, self.highlight_term)

    def image_url_for(self, item: Item) -> str:
        return item.image_url_or(self._config.fallback_image_url)

    # ========== INTERNALS ==========

    def _apply(self, action: SearchAction):
        new_state = apply_user_action(self._state, action)
        if new_state == self._state:
            return
        self._state = new_state
        self._recompute()

    def _recompute(self):
        self._filtered = self._search.filter(self._state)
        self._paginator.sync_filter_key(self._state.filter_key)
        self.changed.emit()

    def _page_changed(self, changed: bool) -> bool:
        if changed:
            self.changed.emit()
        return changed

    def _on_items_changed(self, items: List[Item]):
        self._search.update_items(items)
        self._recompute()

    def _on_categories_changed(self, categories: List[Category]):
        self._search.update_categories(categories)
        self.changed.emit()

    def _on_semantic_result(self, request_id: int, item_ids: List[str]):
        if self._closed:
            return
        logger.info(f"Semantic search {request_id} returned {len(item_ids)} ids")
        self._apply(SearchAction.semantic_resolved(request_id, item_ids))

    def _on_semantic_error(self, request_id: int, error: Exception):
        if self._closed:
            return
        if request_id == self._state.request_id:
            logger.error(f"Semantic search {request_id} failed: {error}", exc_info=error)
            self._notifications.error(self._config.semantic_error_message)
        else:
            logger.debug(f"Ignoring failure of superseded semantic search {request_id}: {error}")
        self._apply(SearchAction.semantic_failed(request_id))
