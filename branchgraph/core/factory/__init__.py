"""
Factory modules for creating BranchGraph components.
"""

from branchgraph.core.factory.graph_factory import GraphStoreFactory

__all__ = [
    "GraphStoreFactory",
]
