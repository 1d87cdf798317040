"""Data models for RobotEvents API responses."""

from dataclasses import dataclass, field
from datetime import date
from typing import Optional


@dataclass
class IdInfo:
    """Reference to another RobotEvents object (team, event, division)."""

    id: int
    name: str
    code: Optional[str] = None


@dataclass
class AllianceTeam:
    """One team slot in an alliance."""

    team: IdInfo
    sitting: bool = False


@dataclass
class Alliance:
    """One side of a match as reported by the API."""

    color: str  # "red" or "blue"
    score: int = 0
    teams: list[AllianceTeam] = field(default_factory=list)


@dataclass
class MatchReport:
    """A raw match report, scored or not."""

    id: int
    event: IdInfo
    round: int
    alliances: list[Alliance] = field(default_factory=list)
    started: Optional[str] = None  # ISO-8601 / RFC 3339
    scheduled: Optional[str] = None
    name: Optional[str] = None
    instance: Optional[int] = None
    matchnum: Optional[int] = None
    division: Optional[IdInfo] = None


@dataclass
class PageMeta:
    """Pagination metadata for a list endpoint."""

    current_page: int = 1
    last_page: int = 1
    per_page: int = 0
    total: int = 0


@dataclass
class EventSummary:
    """A competition event listed for a season."""

    event_id: int
    name: str
    sku: Optional[str] = None
    start_date: Optional[date] = None
    division_ids: list[int] = field(default_factory=list)
