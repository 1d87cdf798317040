"""Data models for the rating system."""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

# K-factor for rating updates (higher = more volatile)
K_FACTOR = 72.0 / 250.0

# Stand-in for a missing second alliance member
PLACEHOLDER_TEAM_NAME = "0A"


class PlaceholderPolicy(Enum):
    """How the rating engine treats the placeholder team."""

    EXCLUDE_MATCH = "exclude_match"  # Skip rating updates for the whole match
    HIDE_FROM_TABLE = "hide_from_table"  # Rate it, but drop it from the snapshot
    LEGACY = "legacy"  # Treat it as a real team


@dataclass(frozen=True)
class CompletedMatch:
    """A scored, timestamped match ready for rating."""

    id: int
    red: tuple[str, str]
    blue: tuple[str, str]
    red_score: int
    blue_score: int
    round: int
    event_id: int
    started_timestamp: int  # Unix seconds
    delta_elo: Optional[float] = None

    @property
    def teams(self) -> tuple[str, str, str, str]:
        """All four slots in update order: red0, red1, blue0, blue1."""
        return (*self.red, *self.blue)

    @property
    def has_placeholder(self) -> bool:
        return PLACEHOLDER_TEAM_NAME in self.teams

    @property
    def actual_margin(self) -> int:
        return self.red_score - self.blue_score

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "red": list(self.red),
            "blue": list(self.blue),
            "red_score": self.red_score,
            "blue_score": self.blue_score,
            "round": self.round,
            "delta_elo": self.delta_elo,
            "started_timestamp": self.started_timestamp,
            "event_id": self.event_id,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "CompletedMatch":
        return cls(
            id=data["id"],
            red=tuple(data["red"]),
            blue=tuple(data["blue"]),
            red_score=data["red_score"],
            blue_score=data["blue_score"],
            round=data["round"],
            event_id=data["event_id"],
            started_timestamp=data["started_timestamp"],
            delta_elo=data.get("delta_elo"),
        )


@dataclass(frozen=True)
class BaselineStatistics:
    """Population statistics of a match set."""

    match_count: int
    mean: float
    variance: float
    standard_deviation: float

    @property
    def baseline_rating(self) -> float:
        """Initial rating for a team seen for the first time."""
        return self.mean / 2.0

    def to_dict(self) -> dict:
        return {
            "match_count": self.match_count,
            "mean": self.mean,
            "variance": self.variance,
            "standard_deviation": self.standard_deviation,
            "baseline_rating": self.baseline_rating,
        }


@dataclass
class RatingUpdate:
    """Record of one team's rating change from a match."""

    match_id: int
    started_timestamp: int
    team: str
    old_rating: float
    new_rating: float
    delta: float


@dataclass
class MatchPrediction:
    """Predicted outcome of a 2v2 match from current ratings."""

    red: tuple[str, str]
    blue: tuple[str, str]
    red_rating: float
    blue_rating: float
    unknown_teams: list[str]

    @property
    def predicted_margin(self) -> float:
        """Predicted red score minus blue score."""
        return self.red_rating - self.blue_rating

    @property
    def red_predicted_score(self) -> int:
        return round(self.red_rating)

    @property
    def blue_predicted_score(self) -> int:
        return round(self.blue_rating)

    @property
    def favored(self) -> str:
        if self.predicted_margin > 0:
            return "red"
        if self.predicted_margin < 0:
            return "blue"
        return "even"
