"""HTTP client for the RobotEvents v2 API."""

import time
from typing import Optional

import requests

BASE_URL = "https://www.robotevents.com/api/v2"

DEFAULT_PER_PAGE = 100

HEADERS = {
    "Accept": "application/json",
    "User-Agent": "vrc-ratings/0.1 (+https://www.robotevents.com/api/v2)",
}


class RobotEventsClient:
    """HTTP client with rate limiting for the RobotEvents API."""

    def __init__(self, token: str, delay_seconds: float = 0.5):
        """Initialize client with a bearer token and rate limiting delay."""
        self.session = requests.Session()
        self.session.headers.update(HEADERS)
        self.session.headers["Authorization"] = f"Bearer {token}"
        self.delay = delay_seconds
        self._last_request_time: Optional[float] = None

    def _rate_limit(self) -> None:
        """Enforce rate limiting between requests."""
        if self._last_request_time is not None:
            elapsed = time.time() - self._last_request_time
            if elapsed < self.delay:
                time.sleep(self.delay - elapsed)
        self._last_request_time = time.time()

    def get(self, path: str, params: Optional[dict] = None) -> dict:
        """Fetch an API path and return the decoded JSON body."""
        self._rate_limit()
        response = self.session.get(f"{BASE_URL}{path}", params=params, timeout=30)
        response.raise_for_status()
        return response.json()

    def get_events_page(
        self,
        season_id: int,
        page: int = 1,
        per_page: int = DEFAULT_PER_PAGE,
        end: Optional[str] = None,
    ) -> dict:
        """Get one page of events for a season."""
        params = {"season[]": season_id, "per_page": per_page, "page": page}
        if end:
            params["end"] = end
        return self.get("/events", params=params)

    def get_division_matches_page(
        self,
        event_id: int,
        division_id: int,
        page: int = 1,
        per_page: int = DEFAULT_PER_PAGE,
    ) -> dict:
        """Get one page of matches for an event division."""
        params = {"per_page": per_page, "page": page}
        return self.get(f"/events/{event_id}/divisions/{division_id}/matches", params=params)
