"""Mood scoring: identical moods, or moods from the same emotional family."""

from branchgraph.core.scoring.base import DimensionScorer
from branchgraph.models.branch import BranchType, ConnectionScore
from branchgraph.models.fragment import Fragment

# A mood may belong to several groups (e.g. "excited").
EMOTION_GROUPS: dict[str, frozenset[str]] = {
    "positive": frozenset(
        {"happy", "joy", "excited", "grateful", "content", "peaceful", "optimistic"}
    ),
    "negative": frozenset(
        {"sad", "angry", "frustrated", "anxious", "worried", "stressed", "overwhelmed"}
    ),
    "neutral": frozenset({"calm", "thoughtful", "reflective", "curious", "focused"}),
    "energetic": frozenset({"excited", "motivated", "energetic", "passionate", "enthusiastic"}),
    "low": frozenset({"tired", "drained", "melancholy", "quiet", "subdued"}),
}

SAME_MOOD_WEIGHT = 0.8
SAME_GROUP_WEIGHT = 0.6


def mood_groups(mood: str) -> set[str]:
    """Groups a mood belongs to (case-insensitive)."""
    key = mood.lower()
    return {group for group, members in EMOTION_GROUPS.items() if key in members}


class EmotionScorer(DimensionScorer):
    branch_type = BranchType.EMOTION

    def score(self, first: Fragment, second: Fragment) -> ConnectionScore | None:
        if not first.mood or not second.mood:
            return None

        if first.mood == second.mood:
            return self._emit(SAME_MOOD_WEIGHT, {"sharedMood": first.mood})

        if mood_groups(first.mood) & mood_groups(second.mood):
            return self._emit(
                SAME_GROUP_WEIGHT,
                {"mood1": first.mood, "mood2": second.mood, "similarity": SAME_GROUP_WEIGHT},
            )

        return None
