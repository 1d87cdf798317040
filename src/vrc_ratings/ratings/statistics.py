"""Baseline statistics over a match set."""

import math
from typing import Sequence

from .models import BaselineStatistics, CompletedMatch


class EmptyDataSet(ValueError):
    """No analyzable matches, so no baseline can be computed."""


def calculate_statistics(matches: Sequence[CompletedMatch]) -> BaselineStatistics:
    """
    Compute population statistics of match scores.

    mean = sum(|red + blue|) / (2 * n), the average points one team adds
    variance = sum(((red - blue) - mean)^2) / n

    Args:
        matches: Analyzable matches in any order

    Returns:
        BaselineStatistics for the set

    Raises:
        EmptyDataSet: If there are no matches
    """
    count = len(matches)
    if count == 0:
        raise EmptyDataSet("Cannot compute baseline statistics without matches")

    total_score = sum(abs(m.red_score + m.blue_score) for m in matches)
    mean = total_score / (2 * count)

    variance = sum((m.actual_margin - mean) ** 2 for m in matches) / count

    return BaselineStatistics(
        match_count=count,
        mean=mean,
        variance=variance,
        standard_deviation=math.sqrt(variance),
    )
