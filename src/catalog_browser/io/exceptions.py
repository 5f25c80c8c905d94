"""Catalog exceptions."""


class CatalogError(Exception):
    """Base class for recoverable catalog failures."""


class DocumentSourceError(CatalogError):
    """Raised when a collection subscription fails or cannot be established."""


class SemanticSearchError(CatalogError):
    """Raised when the semantic search service fails or replies with something unusable."""
