"""
catalog-browser: reactive catalog core for PyQt6 applications.

Mirrors a remotely hosted, continuously updated catalog of items and
categories, and turns it into a paginated, filterable view model that a
widget layer can bind to.

Architecture:
- Tier 1 (Core): Pure PyQt6 utilities (timers, background tasks, pagination, highlighting)
- Tier 2 (IO): Document source boundary and in-memory reference store
- Tier 3 (Protocols): Pluggable semantic search service and configuration
- Tier 4 (Services): Collection mirror, search state machine, notifications, view model

Key Features:
- Live push-based mirroring of two ordered collections
- Dual-mode search: lexical (category + substring) or semantic (generative AI)
- Explicit, total search state transition function
- Single-slot auto-expiring notifications
"""

__version__ = "0.1.0"

__all__ = [
    "__version__",
]
