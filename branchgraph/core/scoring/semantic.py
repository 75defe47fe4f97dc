"""Keyword overlap scoring, a lightweight stand-in for semantic similarity."""

from branchgraph.core.scoring.base import DimensionScorer
from branchgraph.models.branch import BranchType, ConnectionScore
from branchgraph.models.fragment import Fragment


def keywords(content: str, min_length: int = 4) -> set[str]:
    """Lower-cased whitespace tokens of at least ``min_length`` characters."""
    return {token for token in content.lower().split() if len(token) >= min_length}


def keyword_similarity(first: str, second: str) -> tuple[float, set[str]]:
    """
    Shared keywords relative to the larger keyword set.

    Returns:
        (similarity, common keywords); similarity is 0.0 if either side has no keywords
    """
    first_words = keywords(first)
    second_words = keywords(second)

    if not first_words or not second_words:
        return 0.0, set()

    common = first_words & second_words
    return len(common) / max(len(first_words), len(second_words)), common


class SemanticScorer(DimensionScorer):
    branch_type = BranchType.SEMANTIC

    def __init__(self, min_similarity: float = 0.3, boost: float = 1.5):
        self.min_similarity = min_similarity
        self.boost = boost

    def score(self, first: Fragment, second: Fragment) -> ConnectionScore | None:
        similarity, common = keyword_similarity(first.content, second.content)

        if similarity <= self.min_similarity:
            return None

        return self._emit(
            min(similarity * self.boost, 1.0),
            {"contentSimilarity": similarity, "commonKeywords": sorted(common)},
        )
