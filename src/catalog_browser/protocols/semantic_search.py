"""Semantic search service protocol for pluggable generative backends."""

from typing import TYPE_CHECKING, List, Optional, Protocol, Sequence

if TYPE_CHECKING:
    from catalog_browser.services.catalog_types import SearchCandidate


class SemanticSearchServiceProtocol(Protocol):
    """Protocol for services that pick matching items for a free-form query."""

    def find_matching_item_ids(self, query: str, candidates: Sequence["SearchCandidate"]) -> List[str]:
        """Return identifiers of matching candidates (possibly empty).

        Raises:
            SemanticSearchError: On transport, service or reply-format failure
        """
        ...


_semantic_search_service: Optional[SemanticSearchServiceProtocol] = None


def register_semantic_search_service(service: Optional[SemanticSearchServiceProtocol]) -> None:
    """Register a global semantic search service implementation."""
    global _semantic_search_service
    _semantic_search_service = service


def get_semantic_search_service() -> Optional[SemanticSearchServiceProtocol]:
    """Get the registered semantic search service implementation."""
    return _semantic_search_service
