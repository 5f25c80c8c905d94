"""
Service protocols and global registries.

Applications register their semantic search backend and configuration here;
services fall back to these registries when not given explicit instances.
"""

from .catalog_config import CatalogConfig, set_catalog_config, get_catalog_config
from .semantic_search import (
    SemanticSearchServiceProtocol,
    register_semantic_search_service,
    get_semantic_search_service,
)

__all__ = [
    "CatalogConfig",
    "set_catalog_config",
    "get_catalog_config",
    "SemanticSearchServiceProtocol",
    "register_semantic_search_service",
    "get_semantic_search_service",
]
