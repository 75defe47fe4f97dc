"""Tag overlap scoring."""

from branchgraph.core.scoring.base import DimensionScorer
from branchgraph.models.branch import BranchType, ConnectionScore
from branchgraph.models.fragment import Fragment


class ThemeScorer(DimensionScorer):
    """
    Shared-tag ratio relative to the larger tag list.

    The ratio must exceed ``min_overlap`` and is boosted by ``boost`` (capped at 1.0).
    """

    branch_type = BranchType.THEME

    def __init__(self, min_overlap: float = 0.2, boost: float = 1.2):
        self.min_overlap = min_overlap
        self.boost = boost

    def score(self, first: Fragment, second: Fragment) -> ConnectionScore | None:
        if not first.tags or not second.tags:
            return None

        second_tags = set(second.tags)
        common = [tag for tag in first.tags if tag in second_tags]
        overlap = len(common) / max(len(first.tags), len(second.tags))

        if overlap <= self.min_overlap:
            return None

        return self._emit(
            min(overlap * self.boost, 1.0),
            {"commonTags": common, "similarity": overlap},
        )
