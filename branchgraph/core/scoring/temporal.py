"""Time proximity scoring: fragments written close together are related."""

from branchgraph.core.scoring.base import DimensionScorer
from branchgraph.models.branch import BranchType, ConnectionScore
from branchgraph.models.fragment import Fragment
from branchgraph.utils.time import days_between, round_half_up

# (max days apart, weight), checked in order
TIME_BANDS: tuple[tuple[float, float], ...] = (
    (1, 0.9),
    (7, 0.7),
    (30, 0.5),
    (90, 0.3),
)


class TemporalScorer(DimensionScorer):
    """Banded weight on the absolute creation-time distance."""

    branch_type = BranchType.TIME

    def __init__(self, bands: tuple[tuple[float, float], ...] = TIME_BANDS):
        self.bands = bands

    def score(self, first: Fragment, second: Fragment) -> ConnectionScore | None:
        days = days_between(first.created_at, second.created_at)

        for max_days, weight in self.bands:
            if days <= max_days:
                return self._emit(weight, {"daysDifference": round_half_up(days)})

        return None
