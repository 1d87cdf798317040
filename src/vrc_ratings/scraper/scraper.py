"""Paginated match fetching from RobotEvents."""

import logging
from typing import Callable, Iterable, Optional, TypeVar

import requests

from ..ratings.models import CompletedMatch
from ..ratings.normalizer import NormalizationReport, normalize_reports
from .client import DEFAULT_PER_PAGE, RobotEventsClient
from .models import EventSummary, MatchReport, PageMeta
from .parsers import parse_events_page, parse_matches_page
from .storage import DataStorage

# VEX Robotics Competition season the original ratings were built for
DEFAULT_SEASON_ID = 181

# Every VRC qualifier has at least a division 1
DEFAULT_DIVISION_ID = 1

logging.basicConfig(level=logging.INFO, format="%(asctime)s - %(levelname)s - %(message)s")
logger = logging.getLogger(__name__)

T = TypeVar("T")

FETCH_ERRORS = (requests.RequestException, KeyError, ValueError)


class MatchFetcher:
    """Fetches events and match reports, and turns them into completed matches."""

    def __init__(
        self,
        client: RobotEventsClient,
        storage: Optional[DataStorage] = None,
        per_page: int = DEFAULT_PER_PAGE,
    ):
        """Initialize fetcher with an API client and storage."""
        self.client = client
        self.storage = storage or DataStorage()
        self.per_page = per_page

    def _fetch_all_pages(
        self,
        label: str,
        get_page: Callable[[int], dict],
        parse_page: Callable[[dict], tuple[list[T], PageMeta]],
    ) -> list[T]:
        """
        Fetch page 1 to learn the page count, then the rest.

        A failed page is logged and skipped; the items from the pages
        that succeeded are still returned.
        """
        try:
            items, meta = parse_page(get_page(1))
        except FETCH_ERRORS as e:
            logger.error(f"Couldn't get {label}: {e}")
            return []

        items = list(items)
        for page in range(2, meta.last_page + 1):
            try:
                page_items, _ = parse_page(get_page(page))
            except FETCH_ERRORS as e:
                logger.error(f"Unable to get {label} page {page}/{meta.last_page}: {e}")
                continue
            items.extend(page_items)

        return items

    def fetch_season_events(
        self,
        season_id: int = DEFAULT_SEASON_ID,
        end: Optional[str] = None,
    ) -> list[EventSummary]:
        """
        Fetch all events for a season.

        Args:
            season_id: RobotEvents season ID
            end: Only events ending before this ISO timestamp

        Returns:
            List of EventSummary objects
        """
        logger.info(f"Fetching events for season {season_id}...")
        events = self._fetch_all_pages(
            f"events for season {season_id}",
            lambda page: self.client.get_events_page(season_id, page, self.per_page, end),
            parse_events_page,
        )
        logger.info(f"Found {len(events)} events")
        return events

    def fetch_event_reports(
        self,
        event_id: int,
        division_id: int = DEFAULT_DIVISION_ID,
    ) -> list[MatchReport]:
        """Fetch every match report for one event division."""
        return self._fetch_all_pages(
            f"matches for event {event_id}",
            lambda page: self.client.get_division_matches_page(
                event_id, division_id, page, self.per_page
            ),
            parse_matches_page,
        )

    def fetch_matches(
        self,
        event_ids: Iterable[int],
        division_id: int = DEFAULT_DIVISION_ID,
    ) -> tuple[list[CompletedMatch], NormalizationReport]:
        """
        Fetch and normalize matches for many events.

        Reports seen more than once are kept once. The result is not
        sorted; callers sort by start time before rating.

        Args:
            event_ids: Events to fetch
            division_id: Division to fetch within each event

        Returns:
            Tuple of (completed matches, normalization counters)
        """
        event_ids = list(event_ids)
        seen: set[int] = set()
        matches: list[CompletedMatch] = []
        report = NormalizationReport()

        for index, event_id in enumerate(event_ids, start=1):
            reports = []
            for r in self.fetch_event_reports(event_id, division_id):
                # Pages can shift while an event is live
                if r.id in seen:
                    continue
                seen.add(r.id)
                reports.append(r)

            completed, _ = normalize_reports(reports, report)
            matches.extend(completed)
            logger.info(
                f"Event {event_id} ({index}/{len(event_ids)}): "
                f"{len(completed)} completed of {len(reports)} reports, {len(matches)} total"
            )

        logger.info(f"Normalization: {report.to_dict()}")
        return matches, report

    def fetch_and_store_events(
        self,
        season_id: int = DEFAULT_SEASON_ID,
        end: Optional[str] = None,
    ) -> list[EventSummary]:
        """Fetch a season's events and save them."""
        events = self.fetch_season_events(season_id, end)
        self.storage.save_events(events)
        return events

    def fetch_and_store_matches(
        self,
        event_ids: Optional[Iterable[int]] = None,
        division_id: int = DEFAULT_DIVISION_ID,
    ) -> dict:
        """
        Fetch matches for the given or stored events and save them.

        Returns:
            Dict with counts of fetched and rejected matches
        """
        if event_ids is None:
            event_ids = [e.event_id for e in self.storage.load_events()]

        matches, report = self.fetch_matches(event_ids, division_id)
        self.storage.save_completed_matches(matches)

        return {"matches": len(matches), **report.to_dict()}
