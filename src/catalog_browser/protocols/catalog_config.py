"""Base configuration class for the catalog core.

Provides hooks for applications to customize collection names, paging,
notification timing, user-facing messages and the semantic search backend.
"""

from typing import List, Optional
from dataclasses import dataclass, field


@dataclass
class CatalogConfig:
    """Configuration for catalog mirroring, search and presentation.

    Applications can subclass this to provide custom configuration.

    Attributes:
        page_size: Number of items per page
        notification_duration_ms: Lifetime of a notification before it is cleared
        notification_fade_ms: Window before expiry in which the notice fades out
        items_collection: Name of the item collection in the document source
        categories_collection: Name of the category collection in the document source
        semantic_endpoint: Generate endpoint of the semantic search backend
        semantic_model: Model name sent to the semantic search backend
    """

    page_size: int = 20
    notification_duration_ms: int = 3000
    notification_fade_ms: int = 300

    items_collection: str = "items"
    items_order_field: str = "createdAt"
    categories_collection: str = "categories"
    categories_order_field: str = "name"

    fallback_image_url: str = "https://picsum.photos/400/300?grayscale"
    uncategorized_label: str = "Uncategorized"

    items_error_message: str = "Failed to load content."
    categories_error_message: str = "Failed to load categories."
    empty_query_message: str = "Please enter a search query."
    semantic_error_message: str = "AI search failed. Please try again."
    empty_result_message: str = "No items found."
    semantic_failed_summary: str = "AI search failed. Showing keyword matches instead."

    semantic_endpoint: str = "http://localhost:11434/api/generate"
    semantic_model: str = "llama3.1"
    semantic_timeout_s: float = 30.0

    log_dir: Optional[str] = None
    log_prefixes: List[str] = field(default_factory=lambda: ["catalog_browser_"])
    log_level: str = "INFO"


# Global config instance (set by application)
_catalog_config: Optional[CatalogConfig] = None


def set_catalog_config(config: Optional[CatalogConfig]) -> None:
    """Set the global catalog configuration.

    Args:
        config: CatalogConfig instance, or None to restore defaults
    """
    global _catalog_config
    _catalog_config = config


def get_catalog_config() -> CatalogConfig:
    """Get the current catalog configuration.

    Returns:
        Current CatalogConfig or default if not set
    """
    if _catalog_config is None:
        return CatalogConfig()
    return _catalog_config
