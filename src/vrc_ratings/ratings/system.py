"""Main rating pipeline orchestration."""

import logging
from dataclasses import dataclass, field
from typing import Iterable, Mapping, Optional

from ..scraper.storage import DataStorage
from .elo import predict_match
from .engine import RatingEngine, sort_matches
from .models import (
    K_FACTOR,
    BaselineStatistics,
    CompletedMatch,
    MatchPrediction,
    PlaceholderPolicy,
    RatingUpdate,
)
from .statistics import calculate_statistics

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


@dataclass
class RatingRun:
    """Everything produced by one rating pass."""

    statistics: BaselineStatistics
    matches: list[CompletedMatch]
    ratings: Mapping[str, float]
    updates: list[RatingUpdate] = field(default_factory=list)
    skipped_matches: int = 0

    def top_teams(self, limit: int = 10) -> list[tuple[str, float]]:
        """Highest rated teams first."""
        ranked = sorted(self.ratings.items(), key=lambda item: item[1], reverse=True)
        return ranked[:limit]

    def team_history(self, team: str) -> list[RatingUpdate]:
        """Rating updates for one team in match order."""
        return [u for u in self.updates if u.team == team]

    def predict(self, red: tuple[str, str], blue: tuple[str, str]) -> MatchPrediction:
        """Predict a future match from the final ratings."""
        return predict_match(self.ratings, red, blue, baseline=self.statistics.baseline_rating)


class RatingSystem:
    """
    Alliance Elo rating pipeline.

    Sorts normalized matches, computes the baseline from the whole set
    and runs a fresh RatingEngine pass over them.
    """

    def __init__(
        self,
        k_factor: float = K_FACTOR,
        placeholder_policy: PlaceholderPolicy = PlaceholderPolicy.EXCLUDE_MATCH,
    ):
        self.k_factor = k_factor
        self.placeholder_policy = placeholder_policy

    def run(self, matches: Iterable[CompletedMatch]) -> RatingRun:
        """
        Rate a set of matches.

        Args:
            matches: Normalized matches in any order

        Returns:
            RatingRun with annotated matches and final ratings

        Raises:
            EmptyDataSet: If there are no matches
        """
        ordered = sort_matches(matches)

        stats = calculate_statistics(ordered)
        logger.info(
            f"mean: {stats.mean:.3f} var: {stats.variance:.3f} "
            f"std: {stats.standard_deviation:.3f} baseline: {stats.baseline_rating:.3f}"
        )

        engine = RatingEngine(k_factor=self.k_factor, placeholder_policy=self.placeholder_policy)
        annotated, ratings = engine.process_sequentially(ordered, stats.baseline_rating)

        logger.info(f"Rated {len(annotated)} matches, {len(ratings)} teams")

        return RatingRun(
            statistics=stats,
            matches=annotated,
            ratings=ratings,
            updates=engine.get_update_history(),
            skipped_matches=engine.skipped_matches,
        )

    def replay(self, storage: Optional[DataStorage] = None) -> RatingRun:
        """
        Rate the stored match set and save both outputs.

        Raises:
            EmptyDataSet: If no matches are stored
            OSError: If the outputs cannot be written
        """
        storage = storage or DataStorage()
        matches = storage.load_completed_matches()
        logger.info(f"Loaded {len(matches)} matches")

        result = self.run(matches)

        storage.save_match_records(result.matches)
        storage.save_ratings(result.ratings)
        logger.info("Data saved")

        return result
