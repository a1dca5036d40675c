"""
Persistence for content items, summary records and the concept graph.

Available backends:
- SQLiteStore: aiosqlite-backed implementation of all three stores
"""

from conceptweave.core.stores.base import ConceptGraphStore, ContentStore, SummaryStore
from conceptweave.core.stores.sqlite_store import SQLiteStore

__all__ = [
    "ContentStore",
    "SummaryStore",
    "ConceptGraphStore",
    "SQLiteStore",
]
