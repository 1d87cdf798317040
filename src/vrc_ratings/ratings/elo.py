"""Core margin-based Elo calculation functions."""

from typing import Mapping, Optional

from .models import K_FACTOR, MatchPrediction


def alliance_rating(rating_1: float, rating_2: float) -> float:
    """
    Combined rating of a two-team alliance.

    A team's rating estimates the points it contributes to its alliance,
    so the alliance rating is the plain sum.
    """
    return rating_1 + rating_2


def predicted_margin(red_rating: float, blue_rating: float) -> float:
    """Predicted red score minus blue score."""
    return red_rating - blue_rating


def calculate_rating_change(
    actual_margin: float,
    expected_margin: float,
    k_factor: float = K_FACTOR,
) -> float:
    """
    Calculate the rating change (delta) for the red alliance.

    delta = K * (actual_margin - predicted_margin)

    Each red team gains delta and each blue team loses delta; the change
    is not split between alliance partners.

    Args:
        actual_margin: Red score minus blue score
        expected_margin: Predicted red score minus blue score
        k_factor: K-factor controlling rating volatility

    Returns:
        Rating change (positive when red outperformed its prediction)
    """
    return k_factor * (actual_margin - expected_margin)


def predict_match(
    ratings: Mapping[str, float],
    red: tuple[str, str],
    blue: tuple[str, str],
    baseline: Optional[float] = None,
) -> MatchPrediction:
    """
    Predict the outcome of a match that has not been played.

    Args:
        ratings: Team name -> rating
        red: Red alliance team names
        blue: Blue alliance team names
        baseline: Rating for teams missing from the table

    Returns:
        MatchPrediction with alliance ratings and predicted scores

    Raises:
        KeyError: If a team is unrated and no baseline was given
    """
    unknown = [team for team in (*red, *blue) if team not in ratings]
    if unknown and baseline is None:
        raise KeyError(f"No rating for teams: {', '.join(unknown)}")

    def lookup(team: str) -> float:
        return ratings[team] if team in ratings else baseline

    return MatchPrediction(
        red=red,
        blue=blue,
        red_rating=alliance_rating(lookup(red[0]), lookup(red[1])),
        blue_rating=alliance_rating(lookup(blue[0]), lookup(blue[1])),
        unknown_teams=unknown,
    )
