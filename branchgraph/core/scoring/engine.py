"""
Pairwise connection scoring.

Runs every enabled dimension scorer on a pair of fragments and keeps the
strongest result. Scoring is pure: no I/O and no shared mutable state.
"""

from collections.abc import Iterable, Sequence

from branchgraph.core.scoring.base import DimensionScorer
from branchgraph.core.scoring.emotion import EmotionScorer
from branchgraph.core.scoring.semantic import SemanticScorer
from branchgraph.core.scoring.temporal import TemporalScorer
from branchgraph.core.scoring.theme import ThemeScorer
from branchgraph.models.branch import BranchType, ConnectionScore
from branchgraph.models.fragment import Fragment

NO_CONNECTION = ConnectionScore(type=BranchType.MANUAL, weight=0.0, metadata={})


def default_scorers() -> list[DimensionScorer]:
    """Scorers in evaluation order; earlier scorers win weight ties."""
    return [TemporalScorer(), ThemeScorer(), EmotionScorer(), SemanticScorer()]


class ScoringEngine:
    """Selects the strongest connection type between two fragments."""

    def __init__(self, scorers: Sequence[DimensionScorer] | None = None):
        """
        Initialize scoring engine.

        Args:
            scorers: Dimension scorers in evaluation order (defaults to
                time, theme, emotion, semantic)
        """
        self.scorers = list(scorers) if scorers is not None else default_scorers()

    def score_all(
        self, first: Fragment, second: Fragment, allowed_types: Iterable[BranchType]
    ) -> list[ConnectionScore]:
        """Every applicable dimension score, in evaluation order."""
        allowed = set(allowed_types)
        scores = []

        for scorer in self.scorers:
            if scorer.branch_type not in allowed:
                continue
            result = scorer.score(first, second)
            if result is not None:
                scores.append(result)

        return scores

    def score(
        self, first: Fragment, second: Fragment, allowed_types: Iterable[BranchType]
    ) -> ConnectionScore:
        """
        Strongest connection between two fragments.

        Args:
            first: First fragment
            second: Second fragment
            allowed_types: Dimensions that may be evaluated

        Returns:
            The highest-weight dimension score; ties go to the dimension
            evaluated first. MANUAL with weight 0 if nothing applies.
        """
        best: ConnectionScore | None = None

        for candidate in self.score_all(first, second, allowed_types):
            if best is None or candidate.weight > best.weight:
                best = candidate

        return best if best is not None else NO_CONNECTION.model_copy(deep=True)
