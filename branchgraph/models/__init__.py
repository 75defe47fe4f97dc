"""
Data models for BranchGraph.

Core models:
- Fragment, FragmentType: user-authored notes
- Branch, BranchType: typed, weighted connections between fragments
- ConnectionScore, BranchCandidate, BranchWriteResult: auto-linking records
- BranchRecord, FragmentSummary: branch views returned to callers
- MemoryTree*: whole-graph summary
- Visualization*: styled subgraph for rendering
"""

from branchgraph.models.branch import (
    Branch,
    BranchCandidate,
    BranchFilters,
    BranchPatch,
    BranchRecord,
    BranchType,
    BranchWriteResult,
    BranchWriteStatus,
    ConnectionScore,
    canonical_pair,
)
from branchgraph.models.fragment import (
    Fragment,
    FragmentFilters,
    FragmentSummary,
    FragmentType,
)
from branchgraph.models.memory_tree import (
    MemoryTree,
    MemoryTreeEdge,
    MemoryTreeNode,
    MemoryTreeStats,
)
from branchgraph.models.visualization import (
    ColorBy,
    NodeSizeBy,
    SizeLegend,
    TimeSpan,
    VisualizationConfig,
    VisualizationEdge,
    VisualizationLayout,
    VisualizationNode,
    VisualizationQuery,
    VisualizationResult,
    VisualizationStats,
)

__all__ = [
    # Fragment models
    "Fragment",
    "FragmentType",
    "FragmentSummary",
    "FragmentFilters",
    # Branch models
    "Branch",
    "BranchType",
    "BranchPatch",
    "BranchFilters",
    "BranchRecord",
    "BranchCandidate",
    "BranchWriteResult",
    "BranchWriteStatus",
    "ConnectionScore",
    "canonical_pair",
    # Memory tree
    "MemoryTree",
    "MemoryTreeNode",
    "MemoryTreeEdge",
    "MemoryTreeStats",
    # Visualization
    "VisualizationLayout",
    "NodeSizeBy",
    "ColorBy",
    "VisualizationConfig",
    "VisualizationQuery",
    "VisualizationNode",
    "VisualizationEdge",
    "VisualizationStats",
    "VisualizationResult",
    "TimeSpan",
    "SizeLegend",
]
