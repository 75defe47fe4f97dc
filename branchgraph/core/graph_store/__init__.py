"""
Graph store implementations for BranchGraph.

Provides abstract base and concrete implementations for graph storage.

Available backends:
- SQLiteGraphStore: Local single-file storage via aiosqlite
"""

from branchgraph.core.graph_store.base import GraphStore
from branchgraph.core.graph_store.sqlite_store import SQLiteGraphStore

__all__ = [
    "GraphStore",
    "SQLiteGraphStore",
]
