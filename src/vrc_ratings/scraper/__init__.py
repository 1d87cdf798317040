"""RobotEvents API fetching and storage."""

from .client import RobotEventsClient
from .models import Alliance, AllianceTeam, EventSummary, IdInfo, MatchReport, PageMeta
from .scraper import MatchFetcher
from .storage import DataStorage

__all__ = [
    "Alliance",
    "AllianceTeam",
    "EventSummary",
    "IdInfo",
    "MatchReport",
    "PageMeta",
    "RobotEventsClient",
    "MatchFetcher",
    "DataStorage",
]
