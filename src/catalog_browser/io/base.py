"""Protocols for document sources."""

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Mapping, Protocol

# Returned by subscribe(); calling it releases the subscription.
Unsubscribe = Callable[[], None]
SnapshotCallback = Callable[[List["Document"]], None]
ErrorCallback = Callable[[Exception], None]


@dataclass(frozen=True)
class Document:
    """A single document as delivered by a source: identifier plus flat field map."""
    id: str
    fields: Mapping[str, Any] = field(default_factory=dict)

    def get(self, name: str, default: Any = None) -> Any:
        return self.fields.get(name, default)

    @classmethod
    def from_dict(cls, doc_id: str, data: Dict[str, Any]) -> "Document":
        return cls(id=doc_id, fields=dict(data))


class DocumentSource(Protocol):
    """Protocol for live, ordered collection sources.

    Each push delivers the full current snapshot of the collection, already
    ordered. Callbacks may run on any thread.
    """

    def subscribe(
        self,
        collection: str,
        order_by: str,
        descending: bool,
        on_snapshot: SnapshotCallback,
        on_error: ErrorCallback,
    ) -> Unsubscribe:
        ...
