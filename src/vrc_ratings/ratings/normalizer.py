"""Conversion of raw match reports into rateable matches."""

import logging
import re
from dataclasses import dataclass, field
from datetime import datetime
from typing import TYPE_CHECKING, Iterable, Optional

from .models import PLACEHOLDER_TEAM_NAME, CompletedMatch

if TYPE_CHECKING:
    from ..scraper.models import Alliance, MatchReport

logger = logging.getLogger(__name__)

RFC3339_PATTERN = re.compile(
    r"(\d{4}-\d{2}-\d{2})[Tt ](\d{2}:\d{2}:\d{2})(?:\.\d+)?([Zz]|[+-]\d{2}:\d{2})"
)


class NormalizationError(Exception):
    """A raw report could not be turned into a completed match."""

    def __init__(self, match_id: int, message: str):
        super().__init__(f"Match {match_id}: {message}")
        self.match_id = match_id


class MatchNotScored(NormalizationError):
    """The report does not have exactly two alliances."""


class MissingTimestamp(NormalizationError):
    """The match was scheduled but never started."""


class TimestampParseError(NormalizationError):
    """The start time is not a valid RFC 3339 timestamp."""


@dataclass
class NormalizationReport:
    """Counts of accepted and rejected reports from a batch."""

    accepted: int = 0
    not_scored: int = 0
    missing_timestamp: int = 0
    bad_timestamp: int = 0
    rejected_ids: list[int] = field(default_factory=list)

    @property
    def rejected(self) -> int:
        return self.not_scored + self.missing_timestamp + self.bad_timestamp

    def record_rejection(self, error: NormalizationError) -> None:
        if isinstance(error, MatchNotScored):
            self.not_scored += 1
        elif isinstance(error, MissingTimestamp):
            self.missing_timestamp += 1
        elif isinstance(error, TimestampParseError):
            self.bad_timestamp += 1
        self.rejected_ids.append(error.match_id)

    def merge(self, other: "NormalizationReport") -> None:
        self.accepted += other.accepted
        self.not_scored += other.not_scored
        self.missing_timestamp += other.missing_timestamp
        self.bad_timestamp += other.bad_timestamp
        self.rejected_ids.extend(other.rejected_ids)

    def to_dict(self) -> dict:
        return {
            "accepted": self.accepted,
            "rejected": self.rejected,
            "not_scored": self.not_scored,
            "missing_timestamp": self.missing_timestamp,
            "bad_timestamp": self.bad_timestamp,
        }


def parse_timestamp(value: str) -> int:
    """
    Parse an RFC 3339 timestamp into Unix seconds.

    Only the RFC 3339 profile is accepted: extended date and time, 'T',
    't' or a space between them, optional fractional seconds of any
    length, and a 'Z' or +HH:MM offset. Timestamps without a UTC offset
    are rejected since their instant is ambiguous. Fractional seconds
    are truncated.

    Raises:
        ValueError: If the value is not a valid RFC 3339 timestamp
    """
    if not isinstance(value, str):
        raise ValueError(f"timestamp must be a string, got {type(value).__name__}")

    m = RFC3339_PATTERN.fullmatch(value.strip())
    if not m:
        raise ValueError(f"not an RFC 3339 timestamp: {value!r}")

    day, clock, offset = m.groups()
    if offset in ("Z", "z"):
        offset = "+00:00"
    parsed = datetime.fromisoformat(f"{day}T{clock}{offset}")
    return int(parsed.timestamp())


def _alliance_pair(alliance: "Alliance") -> tuple[str, str]:
    """
    First two team names in report order, padded with the placeholder.

    A slot whose team has no name counts as missing.
    """
    names = [
        str(slot.team.name or "").strip() or PLACEHOLDER_TEAM_NAME
        for slot in alliance.teams[:2]
    ]
    while len(names) < 2:
        names.append(PLACEHOLDER_TEAM_NAME)
    return names[0], names[1]


def normalize_match(report: "MatchReport") -> CompletedMatch:
    """
    Convert one raw report into a CompletedMatch.

    The report's first alliance is the blue side and the second is red.

    Args:
        report: Raw match report from the API

    Returns:
        CompletedMatch with delta_elo unset

    Raises:
        MatchNotScored: Alliance count is not two
        MissingTimestamp: No start time
        TimestampParseError: Start time is not RFC 3339
    """
    if len(report.alliances) != 2:
        raise MatchNotScored(report.id, f"expected 2 alliances, got {len(report.alliances)}")

    if report.started is None:
        raise MissingTimestamp(report.id, "no start time")

    try:
        started_timestamp = parse_timestamp(report.started)
    except ValueError as e:
        raise TimestampParseError(report.id, f"bad start time {report.started!r}: {e}") from e

    blue_alliance, red_alliance = report.alliances

    return CompletedMatch(
        id=report.id,
        red=_alliance_pair(red_alliance),
        blue=_alliance_pair(blue_alliance),
        red_score=red_alliance.score,
        blue_score=blue_alliance.score,
        round=report.round,
        event_id=report.event.id,
        started_timestamp=started_timestamp,
    )


def normalize_reports(
    reports: Iterable["MatchReport"],
    report: Optional[NormalizationReport] = None,
) -> tuple[list[CompletedMatch], NormalizationReport]:
    """
    Normalize a batch of reports, skipping the ones that are rejected.

    Args:
        reports: Raw match reports in any order
        report: Existing counters to add to

    Returns:
        Tuple of (completed matches in input order, normalization counters)
    """
    if report is None:
        report = NormalizationReport()

    matches = []
    for raw in reports:
        try:
            match = normalize_match(raw)
        except MissingTimestamp as e:
            # Scheduled matches are routine, keep them out of the info log
            logger.debug(f"Skipping {e}")
            report.record_rejection(e)
            continue
        except NormalizationError as e:
            logger.info(f"Skipping {e}")
            report.record_rejection(e)
            continue

        matches.append(match)
        report.accepted += 1

    return matches, report
