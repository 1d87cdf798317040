"""Sequential rating engine."""

import logging
from dataclasses import replace
from types import MappingProxyType
from typing import Iterable, Iterator, Mapping, Sequence

from .elo import alliance_rating, calculate_rating_change, predicted_margin
from .models import (
    K_FACTOR,
    PLACEHOLDER_TEAM_NAME,
    CompletedMatch,
    PlaceholderPolicy,
    RatingUpdate,
)

logger = logging.getLogger(__name__)


def match_order_key(match: CompletedMatch) -> tuple[int, int]:
    """Chronological order; matches started in the same second go by id."""
    return match.started_timestamp, match.id


def sort_matches(matches: Iterable[CompletedMatch]) -> list[CompletedMatch]:
    """Sort matches into the order the engine consumes them."""
    return sorted(matches, key=match_order_key)


class RatingTable:
    """
    Team name -> rating for a single engine pass.

    Teams are added on first lookup with the baseline rating.
    """

    def __init__(self, baseline: float):
        self.baseline = baseline
        self._ratings: dict[str, float] = {}

    def __contains__(self, team: str) -> bool:
        return team in self._ratings

    def __len__(self) -> int:
        return len(self._ratings)

    def __iter__(self) -> Iterator[str]:
        return iter(self._ratings)

    def get(self, team: str) -> float:
        """Current rating, seeding the team with the baseline if unseen."""
        if not team:
            raise ValueError("Team name must be a non-empty string")
        if team not in self._ratings:
            self._ratings[team] = self.baseline
        return self._ratings[team]

    def adjust(self, team: str, delta: float) -> tuple[float, float]:
        """Add delta to a team's rating. Returns (old, new)."""
        old = self.get(team)
        new = old + delta
        self._ratings[team] = new
        return old, new

    def snapshot(self, exclude: Iterable[str] = ()) -> Mapping[str, float]:
        """Read-only copy of the table."""
        excluded = set(exclude)
        return MappingProxyType(
            {team: rating for team, rating in self._ratings.items() if team not in excluded}
        )


class RatingEngine:
    """
    Walks matches in chronological order and updates team ratings.

    Every match's prediction depends on all earlier matches involving the
    same teams, so the pass is a strict left fold over the sorted input.
    """

    def __init__(
        self,
        k_factor: float = K_FACTOR,
        placeholder_policy: PlaceholderPolicy = PlaceholderPolicy.EXCLUDE_MATCH,
    ):
        self.k_factor = k_factor
        self.placeholder_policy = placeholder_policy
        self._update_history: list[RatingUpdate] = []
        self._skipped_matches = 0

    def apply_match(self, table: RatingTable, match: CompletedMatch) -> CompletedMatch:
        """
        Rate a single match against the table.

        Args:
            table: Ratings after every earlier match; updated in place
            match: Match to rate

        Returns:
            The match annotated with its rating delta, or unchanged if
            the placeholder policy excludes it
        """
        if match.has_placeholder and self.placeholder_policy == PlaceholderPolicy.EXCLUDE_MATCH:
            for team in match.teams:
                if team != PLACEHOLDER_TEAM_NAME:
                    table.get(team)
            self._skipped_matches += 1
            logger.debug(f"Not rating match {match.id}: alliance has a missing team")
            return match

        red_1, red_2 = (table.get(team) for team in match.red)
        blue_1, blue_2 = (table.get(team) for team in match.blue)

        expected = predicted_margin(
            alliance_rating(red_1, red_2),
            alliance_rating(blue_1, blue_2),
        )
        delta = calculate_rating_change(match.actual_margin, expected, self.k_factor)

        # Slot by slot, so a team listed twice gets the sum of its deltas
        signed = ((match.red[0], delta), (match.red[1], delta),
                  (match.blue[0], -delta), (match.blue[1], -delta))
        for team, change in signed:
            old, new = table.adjust(team, change)
            self._update_history.append(RatingUpdate(
                match_id=match.id,
                started_timestamp=match.started_timestamp,
                team=team,
                old_rating=old,
                new_rating=new,
                delta=change,
            ))

        return replace(match, delta_elo=delta)

    def process_sequentially(
        self,
        matches: Sequence[CompletedMatch],
        baseline: float,
    ) -> tuple[list[CompletedMatch], Mapping[str, float]]:
        """
        Rate every match in order, starting from an empty table.

        Args:
            matches: Matches sorted by (started_timestamp, id)
            baseline: Initial rating for teams on first appearance

        Returns:
            Tuple of (annotated matches, read-only final ratings)

        Raises:
            ValueError: If matches are out of order
        """
        self._update_history = []
        self._skipped_matches = 0
        table = RatingTable(baseline)

        annotated = []
        previous = None
        for match in matches:
            key = match_order_key(match)
            if previous is not None and key < previous:
                raise ValueError(
                    f"Match {match.id} is out of order; sort by start time before rating"
                )
            previous = key
            annotated.append(self.apply_match(table, match))

        if self._skipped_matches:
            logger.info(f"Skipped {self._skipped_matches} matches with a missing team")

        exclude = ()
        if self.placeholder_policy == PlaceholderPolicy.HIDE_FROM_TABLE:
            exclude = (PLACEHOLDER_TEAM_NAME,)

        return annotated, table.snapshot(exclude=exclude)

    def get_update_history(self) -> list[RatingUpdate]:
        """Get the rating updates from the last pass."""
        return self._update_history.copy()

    @property
    def skipped_matches(self) -> int:
        return self._skipped_matches
