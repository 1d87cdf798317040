"""Data storage utilities for JSON flat files."""

import json
import os
import tempfile
from dataclasses import asdict
from datetime import date
from pathlib import Path
from typing import Mapping, Optional

from ..ratings.engine import sort_matches
from ..ratings.models import CompletedMatch
from .models import EventSummary

# Default data directory (relative to project root)
DEFAULT_DATA_DIR = Path(__file__).parent.parent.parent.parent / "data"

EVENTS_FILE = "events.json"
MATCHES_FILE = "matches.json"
MATCH_RECORDS_FILE = "match_data.json"
RATINGS_FILE = "team_data.json"


class DateEncoder(json.JSONEncoder):
    """JSON encoder that handles date objects."""

    def default(self, obj):
        if isinstance(obj, date):
            return obj.isoformat()
        return super().default(obj)


def _date_decoder(dct: dict) -> dict:
    """Decode ISO date strings back to date objects."""
    for key in ["start_date"]:
        if key in dct and dct[key] is not None:
            try:
                dct[key] = date.fromisoformat(dct[key])
            except (ValueError, TypeError):
                pass
    return dct


class DataStorage:
    """
    Handles reading/writing match and rating data to JSON files.

    Write errors are not caught here; a failed save must stop the run.
    """

    def __init__(self, data_dir: Optional[Path] = None):
        """Initialize storage with data directory."""
        self.data_dir = data_dir or DEFAULT_DATA_DIR
        self.data_dir.mkdir(parents=True, exist_ok=True)

    def _write_json(self, filename: str, data, **kwargs) -> Path:
        """Write to a temp file and swap it in, so a failed save keeps the old file."""
        filepath = self.data_dir / filename
        fd, tmp_name = tempfile.mkstemp(dir=self.data_dir, prefix=f".{filename}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "w") as f:
                json.dump(data, f, **kwargs)
            os.replace(tmp_name, filepath)
        except Exception:
            os.unlink(tmp_name)
            raise
        return filepath

    def _read_json(self, filename: str, **kwargs):
        filepath = self.data_dir / filename
        if not filepath.exists():
            return None
        with open(filepath) as f:
            return json.load(f, **kwargs)

    # -------------------------------------------------------------------------
    # Events
    # -------------------------------------------------------------------------

    def save_events(self, events: list[EventSummary]) -> Path:
        """Save the list of events to fetch matches for."""
        return self._write_json(
            EVENTS_FILE, [asdict(e) for e in events], cls=DateEncoder, indent=2
        )

    def load_events(self) -> list[EventSummary]:
        """Load stored events."""
        data = self._read_json(EVENTS_FILE, object_hook=_date_decoder)
        if data is None:
            return []
        return [EventSummary(**item) for item in data]

    # -------------------------------------------------------------------------
    # Matches
    # -------------------------------------------------------------------------

    def save_completed_matches(self, matches: list[CompletedMatch]) -> Path:
        """Save fetched, not yet rated matches."""
        return self._write_json(MATCHES_FILE, [m.to_dict() for m in matches])

    def load_completed_matches(self) -> list[CompletedMatch]:
        """Load fetched matches, in stored order."""
        data = self._read_json(MATCHES_FILE)
        if data is None:
            return []
        return [CompletedMatch.from_dict(item) for item in data]

    def save_match_records(self, matches: list[CompletedMatch]) -> Path:
        """Save rated matches, sorted by start time."""
        return self._write_json(MATCH_RECORDS_FILE, [m.to_dict() for m in sort_matches(matches)])

    def load_match_records(self) -> list[CompletedMatch]:
        """Load rated matches."""
        data = self._read_json(MATCH_RECORDS_FILE)
        if data is None:
            return []
        return [CompletedMatch.from_dict(item) for item in data]

    # -------------------------------------------------------------------------
    # Ratings
    # -------------------------------------------------------------------------

    def save_ratings(self, ratings: Mapping[str, float]) -> Path:
        """Save the final team rating table."""
        return self._write_json(RATINGS_FILE, dict(ratings))

    def load_ratings(self) -> dict[str, float]:
        """Load the team rating table."""
        return self._read_json(RATINGS_FILE) or {}

    # -------------------------------------------------------------------------
    # Utilities
    # -------------------------------------------------------------------------

    def get_stats(self) -> dict:
        """Get counts of stored data."""
        return {
            "events": len(self.load_events()),
            "matches": len(self.load_completed_matches()),
            "rated_matches": len(self.load_match_records()),
            "teams": len(self.load_ratings()),
        }
