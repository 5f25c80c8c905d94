"""In-memory document source that pushes ordered snapshots to subscribers."""

import itertools
import logging
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Tuple

from .base import Document, ErrorCallback, SnapshotCallback, Unsubscribe
from .exceptions import CatalogError, DocumentSourceError

logger = logging.getLogger(__name__)


def _order_key(value: Any) -> Tuple[int, str, Any]:
    """Rank values by type first so mixed-type order fields still sort."""
    if isinstance(value, bool):
        return (0, "", value)
    if isinstance(value, (int, float)):
        return (1, "", value)
    if isinstance(value, str):
        return (2, "", value)
    return (3, type(value).__name__, value)


@dataclass
class _Subscription:
    collection: str
    order_by: str
    descending: bool
    on_snapshot: SnapshotCallback
    on_error: ErrorCallback


class InMemoryDocumentStore:
    """
    Reference DocumentSource backed by plain dictionaries.

    Subscribers receive the current snapshot immediately on subscribe and a
    fresh full snapshot after every change to their collection.

    Usage:
        store = InMemoryDocumentStore()
        store.put("categories", "c1", {"name": "Fruit"})
        unsubscribe = store.subscribe("categories", "name", False, on_data, on_error)
    """

    def __init__(self):
        self._collections: Dict[str, Dict[str, Dict[str, Any]]] = {}
        self._subscriptions: Dict[int, _Subscription] = {}
        self._ids = itertools.count(1)

    # ========== DocumentSource ==========

    def subscribe(
        self,
        collection: str,
        order_by: str,
        descending: bool,
        on_snapshot: SnapshotCallback,
        on_error: ErrorCallback,
    ) -> Unsubscribe:
        token = next(self._ids)
        subscription = _Subscription(collection, order_by, descending, on_snapshot, on_error)
        self._subscriptions[token] = subscription
        logger.debug(f"Subscription {token} opened on '{collection}'")

        def unsubscribe():
            if self._subscriptions.pop(token, None) is not None:
                logger.debug(f"Subscription {token} on '{collection}' released")

        subscription.on_snapshot(self.snapshot(collection, order_by, descending))
        return unsubscribe

    # ========== Mutation (source side) ==========

    def put(self, collection: str, doc_id: str, data: Dict[str, Any]) -> None:
        self._collections.setdefault(collection, {})[doc_id] = dict(data)
        self._publish(collection)

    def delete(self, collection: str, doc_id: str) -> None:
        self._collections.get(collection, {}).pop(doc_id, None)
        self._publish(collection)

    def replace_all(self, collection: str, documents: Iterable[Document]) -> None:
        self._collections[collection] = {doc.id: dict(doc.fields) for doc in documents}
        self._publish(collection)

    def fail(self, collection: str, error: Exception) -> None:
        """Deliver an error to every subscriber of a collection.

        Errors that are not already catalog errors reach subscribers wrapped in
        DocumentSourceError, with the original as its cause.
        """
        if not isinstance(error, CatalogError):
            wrapped = DocumentSourceError(f"Subscription to '{collection}' failed: {error}")
            wrapped.__cause__ = error
            error = wrapped
        logger.warning(f"Delivering error on '{collection}': {error}")
        for subscription in self._subscribers(collection):
            subscription.on_error(error)

    # ========== Queries ==========

    def snapshot(self, collection: str, order_by: str, descending: bool = False) -> List[Document]:
        documents = [
            Document.from_dict(doc_id, data)
            for doc_id, data in self._collections.get(collection, {}).items()
        ]
        # Documents missing the order field go last regardless of direction
        present = [doc for doc in documents if doc.get(order_by) is not None]
        missing = [doc for doc in documents if doc.get(order_by) is None]
        present.sort(key=lambda doc: _order_key(doc.get(order_by)), reverse=descending)
        return present + missing

    def subscriber_count(self, collection: str) -> int:
        return len(self._subscribers(collection))

    def _subscribers(self, collection: str) -> List[_Subscription]:
        return [sub for sub in self._subscriptions.values() if sub.collection == collection]

    def _publish(self, collection: str) -> None:
        for subscription in self._subscribers(collection):
            subscription.on_snapshot(
                self.snapshot(collection, subscription.order_by, subscription.descending)
            )
