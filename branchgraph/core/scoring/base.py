"""Common interface for per-dimension connection scorers."""

from abc import ABC, abstractmethod

from branchgraph.models.branch import BranchType, ConnectionScore
from branchgraph.models.fragment import Fragment


def clamp_weight(weight: float) -> float:
    """Clamp a weight into [0, 1]."""
    return max(0.0, min(weight, 1.0))


class DimensionScorer(ABC):
    """Scores one connection dimension between two fragments."""

    branch_type: BranchType

    @abstractmethod
    def score(self, first: Fragment, second: Fragment) -> ConnectionScore | None:
        """
        Score the pair on this dimension.

        Returns:
            ConnectionScore, or None when the dimension doesn't apply
        """
        pass

    def _emit(self, weight: float, metadata: dict) -> ConnectionScore:
        return ConnectionScore(
            type=self.branch_type, weight=clamp_weight(weight), metadata=metadata
        )
