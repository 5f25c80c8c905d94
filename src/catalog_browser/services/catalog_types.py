"""
Immutable catalog records mirrored from the document source.

Records are rebuilt wholesale from every snapshot; the core never mutates
them.
"""

from dataclasses import dataclass
from typing import Any, Optional

from catalog_browser.io.base import Document


def _text(document: Document, name: str) -> str:
    value = document.get(name)
    return "" if value is None else str(value)


@dataclass(frozen=True)
class Category:
    """A category as stored in the categories collection."""
    id: str
    name: str
    created_at: Optional[Any] = None

    @classmethod
    def from_document(cls, document: Document) -> "Category":
        return cls(
            id=document.id,
            name=_text(document, "name"),
            created_at=document.get("createdAt"),
        )


@dataclass(frozen=True)
class Item:
    """A catalog entry. category_id may reference a category that does not exist."""
    id: str
    title: str
    image_url: str = ""
    link: str = ""
    category_id: str = ""
    created_at: Optional[Any] = None  # Only used by the source for default ordering

    @classmethod
    def from_document(cls, document: Document) -> "Item":
        return cls(
            id=document.id,
            title=_text(document, "title"),
            image_url=_text(document, "imageUrl"),
            link=_text(document, "link"),
            category_id=_text(document, "categoryId"),
            created_at=document.get("createdAt"),
        )

    def image_url_or(self, fallback: str) -> str:
        return self.image_url or fallback


@dataclass(frozen=True)
class SearchCandidate:
    """Minimal projection of an item sent to the semantic search service."""
    id: str
    title: str
    category: str

    def to_dict(self) -> dict:
        return {"id": self.id, "title": self.title, "category": self.category}
