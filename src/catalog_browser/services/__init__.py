"""
Service layer for the catalog core.

Collection mirroring, search state transitions, filtering, semantic search,
notifications and the view model composing them.
"""

from .catalog_types import Item, Category, SearchCandidate
from .enum_dispatch_service import EnumDispatchService
from .search_state import (
    SearchMode,
    SearchState,
    SearchAction,
    SearchActionType,
    SearchStateMachine,
    apply_user_action,
)
from .search_service import CatalogSearchService
from .semantic_search import GenerativeSemanticSearchService, build_search_prompt, parse_item_ids
from .notification_queue import Notification, NotificationQueue, NotificationSeverity
from .collection_mirror import CollectionMirror
from .catalog_view_model import CatalogViewModel

__all__ = [
    "Item",
    "Category",
    "SearchCandidate",
    "EnumDispatchService",
    "SearchMode",
    "SearchState",
    "SearchAction",
    "SearchActionType",
    "SearchStateMachine",
    "apply_user_action",
    "CatalogSearchService",
    "GenerativeSemanticSearchService",
    "build_search_prompt",
    "parse_item_ids",
    "Notification",
    "NotificationQueue",
    "NotificationSeverity",
    "CollectionMirror",
    "CatalogViewModel",
]
