"""
Document source boundary.

The catalog core only depends on the DocumentSource protocol; the in-memory
store is the reference implementation used for embedding and testing.
"""

from .base import Document, DocumentSource, Unsubscribe
from .memory_store import InMemoryDocumentStore
from .exceptions import CatalogError, DocumentSourceError, SemanticSearchError

__all__ = [
    "Document",
    "DocumentSource",
    "Unsubscribe",
    "InMemoryDocumentStore",
    "CatalogError",
    "DocumentSourceError",
    "SemanticSearchError",
]
