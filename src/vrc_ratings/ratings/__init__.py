"""Alliance Elo rating system."""

from .elo import (
    alliance_rating,
    calculate_rating_change,
    predict_match,
    predicted_margin,
)
from .engine import RatingEngine, RatingTable, match_order_key, sort_matches
from .models import (
    K_FACTOR,
    PLACEHOLDER_TEAM_NAME,
    BaselineStatistics,
    CompletedMatch,
    MatchPrediction,
    PlaceholderPolicy,
    RatingUpdate,
)
from .normalizer import (
    MatchNotScored,
    MissingTimestamp,
    NormalizationError,
    NormalizationReport,
    TimestampParseError,
    normalize_match,
    normalize_reports,
    parse_timestamp,
)
from .statistics import EmptyDataSet, calculate_statistics

__all__ = [
    # Models
    "K_FACTOR",
    "PLACEHOLDER_TEAM_NAME",
    "BaselineStatistics",
    "CompletedMatch",
    "MatchPrediction",
    "PlaceholderPolicy",
    "RatingUpdate",
    # Elo functions
    "alliance_rating",
    "calculate_rating_change",
    "predict_match",
    "predicted_margin",
    # Normalization
    "MatchNotScored",
    "MissingTimestamp",
    "NormalizationError",
    "NormalizationReport",
    "TimestampParseError",
    "normalize_match",
    "normalize_reports",
    "parse_timestamp",
    # Statistics
    "EmptyDataSet",
    "calculate_statistics",
    # Engine
    "RatingEngine",
    "RatingTable",
    "match_order_key",
    "sort_matches",
]
