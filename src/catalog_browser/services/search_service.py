"""
Catalog search service.

Computes the filtered item list from the mirrored collections and a
SearchState. The same code path serves both search modes:

- semantic: keep the items whose id is in the resolved semantic set
- lexical: category equality AND case-insensitive substring match on title

Output always preserves the order of the mirrored items.
"""

from typing import Dict, List, Sequence
import logging

from .catalog_types import Category, Item, SearchCandidate
from .search_state import SearchState

logger = logging.getLogger(__name__)


class CatalogSearchService:
    """
    Search service over the mirrored items and categories.

    Key features:
    - Tolerates categories that are not loaded yet or dangling references
    - Builds the minimal item projection used as semantic search context
    """

    def __init__(self,
                 items: Sequence[Item] = (),
                 categories: Sequence[Category] = (),
                 uncategorized_label: str = "Uncategorized"):
        """
        Initialize search service.

        Args:
            items: Mirrored items in display order
            categories: Mirrored categories
            uncategorized_label: Category name sent to the semantic service for dangling references
        """
        self.all_items: List[Item] = list(items)
        self.category_names: Dict[str, str] = {}
        self.uncategorized_label = uncategorized_label
        self.update_categories(categories)

    def update_items(self, new_items: Sequence[Item]):
        """Replace the items being searched."""
        self.all_items = list(new_items)

    def update_categories(self, new_categories: Sequence[Category]):
        """Replace the id -> display name map."""
        self.category_names = {category.id: category.name for category in new_categories}

    def category_name_for(self, item: Item) -> str:
        """Display name of the item's category, blank when unresolved."""
        return self.category_names.get(item.category_id, "")

    def filter(self, state: SearchState) -> List[Item]:
        """
        Filter items for a search state.

        This is the canonical filter used for every view refresh.

        Args:
            state: Current search inputs

        Returns:
            Ordered subsequence of all_items
        """
        if state.semantic_ids is not None:
            return [item for item in self.all_items if item.id in state.semantic_ids]

        filtered = self.all_items
        if state.category_id:
            filtered = [item for item in filtered if item.category_id == state.category_id]
        if state.query_text:
            search_lower = state.query_text.lower()
            filtered = [item for item in filtered if search_lower in item.title.lower()]
        return list(filtered)

    def search_candidates(self) -> List[SearchCandidate]:
        """Project every item to (id, title, resolved category name)."""
        return [
            SearchCandidate(
                id=item.id,
                title=item.title,
                category=self.category_names.get(item.category_id) or self.uncategorized_label,
            )
            for item in self.all_items
        ]
