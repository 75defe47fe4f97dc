"""
Services for BranchGraph.

High-level operations over the graph store:
- FragmentService: Fragment CRUD scoped by owner
- BranchService: Explicit branch CRUD with undirected uniqueness
- AutoLinker: Heuristic scoring and persistence of new branches
- MemoryTreeBuilder: Whole-graph summary
- VisualizationService: Filtered, focused and styled subgraph
"""

from branchgraph.services.auto_linker import AutoLinker
from branchgraph.services.branch_service import BranchService
from branchgraph.services.fragment_service import FragmentService
from branchgraph.services.memory_tree import MemoryTreeBuilder
from branchgraph.services.visualization_service import VisualizationService

__all__ = [
    "FragmentService",
    "BranchService",
    "AutoLinker",
    "MemoryTreeBuilder",
    "VisualizationService",
]
