"""Connection scoring dimensions and the engine combining them."""

from .base import DimensionScorer, clamp_weight
from .emotion import EMOTION_GROUPS, EmotionScorer, mood_groups
from .engine import ScoringEngine, default_scorers
from .semantic import SemanticScorer, keyword_similarity, keywords
from .temporal import TIME_BANDS, TemporalScorer
from .theme import ThemeScorer

__all__ = [
    "DimensionScorer",
    "ScoringEngine",
    "TemporalScorer",
    "ThemeScorer",
    "EmotionScorer",
    "SemanticScorer",
    "default_scorers",
    "clamp_weight",
    "mood_groups",
    "keywords",
    "keyword_similarity",
    "EMOTION_GROUPS",
    "TIME_BANDS",
]
