"""
Reactive mirror of the items and categories collections.

Holds an always-current local copy of both collections, replaced wholesale
on every push. Subscription errors keep the previous copy in place and are
reported through error_occurred with a user-facing message.
"""

import logging
from typing import List, Optional

from PyQt6.QtCore import QObject, pyqtSignal

from catalog_browser.io.base import Document, DocumentSource, Unsubscribe
from catalog_browser.protocols.catalog_config import CatalogConfig, get_catalog_config
from .catalog_types import Category, Item

logger = logging.getLogger(__name__)


class CollectionMirror(QObject):
    """
    Mirrors two live collections from a DocumentSource.

    Pushes may be delivered on any thread; they are relayed through internal
    signals so the local copy is replaced on the thread that owns the mirror.

    Usage:
        mirror = CollectionMirror(source)
        mirror.items_changed.connect(on_items)
        mirror.error_occurred.connect(notifications.error)
        mirror.start()
        ...
        mirror.stop()
    """

    items_changed = pyqtSignal(object)       # List[Item]
    categories_changed = pyqtSignal(object)  # List[Category]
    loading_changed = pyqtSignal(bool)
    error_occurred = pyqtSignal(str)

    # Relays from source callbacks to the owner thread
    _items_pushed = pyqtSignal(object)
    _items_failed = pyqtSignal(object)
    _categories_pushed = pyqtSignal(object)
    _categories_failed = pyqtSignal(object)

    def __init__(self, source: DocumentSource, config: Optional[CatalogConfig] = None,
                 parent: Optional[QObject] = None):
        super().__init__(parent)
        self._source = source
        self._config = config or get_catalog_config()
        self._items: List[Item] = []
        self._categories: List[Category] = []
        self._loading = True
        self._unsubscribers: List[Unsubscribe] = []
        self._active = False

        self._items_pushed.connect(self._apply_items)
        self._items_failed.connect(self._on_items_error)
        self._categories_pushed.connect(self._apply_categories)
        self._categories_failed.connect(self._on_categories_error)

    @property
    def items(self) -> List[Item]:
        return self._items

    @property
    def categories(self) -> List[Category]:
        return self._categories

    @property
    def loading(self) -> bool:
        return self._loading

    @property
    def is_active(self) -> bool:
        return self._active

    def start(self):
        """Open both subscriptions. Calling start() on an active mirror does nothing."""
        if self._active:
            return
        self._active = True
        config = self._config
        logger.info(f"Subscribing to '{config.items_collection}' and '{config.categories_collection}'")

        self._unsubscribers.append(self._source.subscribe(
            config.items_collection,
            config.items_order_field,
            True,
            self._items_pushed.emit,
            self._items_failed.emit,
        ))
        self._unsubscribers.append(self._source.subscribe(
            config.categories_collection,
            config.categories_order_field,
            False,
            self._categories_pushed.emit,
            self._categories_failed.emit,
        ))

    def stop(self):
        """Release both subscriptions. Safe to call more than once."""
        self._active = False
        unsubscribers, self._unsubscribers = self._unsubscribers, []
        for unsubscribe in unsubscribers:
            unsubscribe()
        if unsubscribers:
            logger.info("Collection subscriptions released")

    def _set_loading(self, loading: bool):
        if loading != self._loading:
            self._loading = loading
            self.loading_changed.emit(loading)

    def _apply_items(self, documents: List[Document]):
        if not self._active:
            return
        self._items = [Item.from_document(document) for document in documents]
        logger.debug(f"Items snapshot: {len(self._items)} documents")
        self._set_loading(False)
        self.items_changed.emit(self._items)

    def _apply_categories(self, documents: List[Document]):
        if not self._active:
            return
        self._categories = [Category.from_document(document) for document in documents]
        logger.debug(f"Categories snapshot: {len(self._categories)} documents")
        self.categories_changed.emit(self._categories)

    def _on_items_error(self, error: Exception):
        if not self._active:
            return
        logger.error(f"Error fetching items: {error}", exc_info=error)
        self._set_loading(False)
        self.error_occurred.emit(self._config.items_error_message)

    def _on_categories_error(self, error: Exception):
        if not self._active:
            return
        logger.error(f"Error fetching categories: {error}", exc_info=error)
        self.error_occurred.emit(self._config.categories_error_message)
