"""Tests for RobotEvents fetching and storage."""

import json
import tempfile
from datetime import date
from pathlib import Path

import pytest
import requests

from vrc_ratings.ratings import CompletedMatch
from vrc_ratings.scraper import DataStorage, EventSummary, MatchFetcher
from vrc_ratings.scraper.parsers import (
    _parse_date,
    _parse_int,
    parse_events_page,
    parse_match,
    parse_matches_page,
)


def match_json(match_id, started="2024-01-06T09:15:32-05:00", alliances=None):
    """A match object shaped like the RobotEvents v2 API returns it."""
    if alliances is None:
        alliances = [
            {
                "color": "blue",
                "score": 30,
                "teams": [
                    {"team": {"id": 1, "name": "1234A", "code": None}, "sitting": False},
                    {"team": {"id": 2, "name": "5678B", "code": None}, "sitting": False},
                ],
            },
            {
                "color": "red",
                "score": 50,
                "teams": [
                    {"team": {"id": 3, "name": "9999Z", "code": None}, "sitting": False},
                    {"team": {"id": 4, "name": "2222C", "code": None}, "sitting": False},
                ],
            },
        ]
    return {
        "id": match_id,
        "event": {"id": 51818, "name": "Test Event", "code": "RE-VRC-23-1818"},
        "division": {"id": 1, "name": "Division 1", "code": None},
        "round": 2,
        "instance": 1,
        "matchnum": match_id,
        "scheduled": "2024-01-06T09:10:00-05:00",
        "started": started,
        "field": "Field 1",
        "scored": started is not None,
        "name": f"Qualifier #{match_id}",
        "alliances": alliances,
    }


def page_json(items, page, last_page):
    return {
        "meta": {"current_page": page, "last_page": last_page, "per_page": 100, "total": 0},
        "data": items,
    }


class FakeClient:
    """Serves canned pages instead of calling the API."""

    def __init__(self, match_pages=None, event_pages=None, failing_pages=()):
        self.match_pages = match_pages or {}
        self.event_pages = event_pages or []
        self.failing_pages = set(failing_pages)
        self.calls = []

    def get_division_matches_page(self, event_id, division_id, page=1, per_page=100):
        self.calls.append((event_id, division_id, page))
        if (event_id, page) in self.failing_pages:
            raise requests.HTTPError(f"500 Server Error for event {event_id} page {page}")
        pages = self.match_pages[event_id]
        return page_json(pages[page - 1], page, len(pages))

    def get_events_page(self, season_id, page=1, per_page=100, end=None):
        self.calls.append((season_id, page, end))
        return page_json(self.event_pages[page - 1], page, len(self.event_pages))


class TestParsers:
    """Test API payload parsing."""

    def test_parse_int(self):
        assert _parse_int(5) == 5
        assert _parse_int("7") == 7
        assert _parse_int(None) == 0
        assert _parse_int("", 1) == 1
        assert _parse_int("abc") == 0

    def test_parse_date(self):
        assert _parse_date("2024-01-06T00:00:00-05:00") == date(2024, 1, 6)
        assert _parse_date(None) is None
        assert _parse_date("soon") is None

    def test_parse_match(self):
        report = parse_match(match_json(101))
        assert report.id == 101
        assert report.event.id == 51818
        assert report.round == 2
        assert report.started == "2024-01-06T09:15:32-05:00"
        assert [a.color for a in report.alliances] == ["blue", "red"]
        assert report.alliances[0].score == 30
        assert [t.team.name for t in report.alliances[1].teams] == ["9999Z", "2222C"]

    def test_parse_unscored_match(self):
        report = parse_match(match_json(102, started=None, alliances=[]))
        assert report.started is None
        assert report.alliances == []

    def test_parse_null_score(self):
        data = match_json(103)
        data["alliances"][0]["score"] = None
        assert parse_match(data).alliances[0].score == 0

    def test_parse_matches_page(self):
        reports, meta = parse_matches_page(page_json([match_json(1), match_json(2)], 1, 3))
        assert [r.id for r in reports] == [1, 2]
        assert meta.current_page == 1
        assert meta.last_page == 3

    def test_parse_events_page(self):
        payload = page_json(
            [{
                "id": 51818,
                "sku": "RE-VRC-23-1818",
                "name": "Signature Event",
                "start": "2024-01-06T00:00:00-05:00",
                "divisions": [{"id": 1, "name": "Division 1"}, {"id": 2, "name": "Division 2"}],
            }],
            1,
            1,
        )
        events, meta = parse_events_page(payload)
        assert events[0].event_id == 51818
        assert events[0].start_date == date(2024, 1, 6)
        assert events[0].division_ids == [1, 2]
        assert meta.last_page == 1


class TestDataStorage:
    """Test data storage operations."""

    @pytest.fixture
    def temp_storage(self):
        """Create temporary storage directory."""
        with tempfile.TemporaryDirectory() as tmpdir:
            yield DataStorage(Path(tmpdir))

    def test_save_load_events(self, temp_storage):
        events = [
            EventSummary(event_id=51818, name="Signature Event", sku="RE-VRC-23-1818",
                         start_date=date(2024, 1, 6), division_ids=[1]),
            EventSummary(event_id=51785, name="League"),
        ]
        temp_storage.save_events(events)
        assert temp_storage.load_events() == events

    def test_match_records_sorted_by_start(self, temp_storage):
        later = CompletedMatch(2, ("A", "B"), ("C", "D"), 1, 0, 1, 10, 2000, delta_elo=-1.5)
        earlier = CompletedMatch(1, ("A", "B"), ("C", "D"), 1, 0, 1, 10, 1000, delta_elo=2.0)

        temp_storage.save_match_records([later, earlier])
        loaded = temp_storage.load_match_records()

        assert loaded == [earlier, later]

    def test_match_record_format(self, temp_storage):
        match = CompletedMatch(7, ("A", "B"), ("C", "D"), 50, 30, 2, 51818, 1000)
        filepath = temp_storage.save_match_records([match])

        with open(filepath) as f:
            data = json.load(f)
        assert data == [{
            "id": 7,
            "red": ["A", "B"],
            "blue": ["C", "D"],
            "red_score": 50,
            "blue_score": 30,
            "round": 2,
            "delta_elo": None,
            "started_timestamp": 1000,
            "event_id": 51818,
        }]

    def test_save_load_ratings(self, temp_storage):
        temp_storage.save_ratings({"1234A": 28.5, "5678B": 11.25})
        assert temp_storage.load_ratings() == {"1234A": 28.5, "5678B": 11.25}

    def test_empty_storage(self, temp_storage):
        assert temp_storage.load_events() == []
        assert temp_storage.load_completed_matches() == []
        assert temp_storage.load_ratings() == {}
        assert temp_storage.get_stats() == {
            "events": 0,
            "matches": 0,
            "rated_matches": 0,
            "teams": 0,
        }

    def test_write_failure_raises(self, temp_storage):
        """A save that cannot be written must not pass silently."""
        (temp_storage.data_dir / "team_data.json").mkdir()
        with pytest.raises(OSError):
            temp_storage.save_ratings({"1234A": 1.0})

    def test_failed_write_keeps_previous_file(self, temp_storage):
        temp_storage.save_ratings({"A": 1.0})

        with pytest.raises(TypeError):
            temp_storage.save_ratings({"A": 2.0, "B": object()})

        assert temp_storage.load_ratings() == {"A": 1.0}
        assert [p.name for p in temp_storage.data_dir.iterdir()] == ["team_data.json"]


class TestMatchFetcher:
    """Test paginated fetching with a fake client."""

    @pytest.fixture
    def temp_storage(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            yield DataStorage(Path(tmpdir))

    def test_fetches_all_pages(self, temp_storage):
        client = FakeClient(match_pages={
            10: [[match_json(1), match_json(2)], [match_json(3)]],
        })
        fetcher = MatchFetcher(client, storage=temp_storage)

        matches, report = fetcher.fetch_matches([10])

        assert sorted(m.id for m in matches) == [1, 2, 3]
        assert report.accepted == 3
        assert [call[2] for call in client.calls] == [1, 2]

    def test_failed_page_skipped(self, temp_storage):
        client = FakeClient(
            match_pages={10: [[match_json(1)], [match_json(2)], [match_json(3)]]},
            failing_pages=[(10, 2)],
        )
        fetcher = MatchFetcher(client, storage=temp_storage)

        matches, _ = fetcher.fetch_matches([10])

        assert sorted(m.id for m in matches) == [1, 3]

    def test_failed_first_page_skips_event(self, temp_storage):
        client = FakeClient(
            match_pages={10: [[match_json(1)]], 11: [[match_json(2)]]},
            failing_pages=[(10, 1)],
        )
        fetcher = MatchFetcher(client, storage=temp_storage)

        matches, _ = fetcher.fetch_matches([10, 11])

        assert [m.id for m in matches] == [2]

    def test_duplicates_kept_once(self, temp_storage):
        client = FakeClient(match_pages={
            10: [[match_json(1), match_json(2)]],
            11: [[match_json(2), match_json(3)]],
        })
        fetcher = MatchFetcher(client, storage=temp_storage)

        matches, report = fetcher.fetch_matches([10, 11])

        assert sorted(m.id for m in matches) == [1, 2, 3]
        assert report.accepted == 3

    def test_duplicate_within_event_kept_once(self, temp_storage):
        client = FakeClient(match_pages={
            10: [[match_json(1), match_json(2)], [match_json(2)]],
        })
        fetcher = MatchFetcher(client, storage=temp_storage)

        matches, report = fetcher.fetch_matches([10])

        assert sorted(m.id for m in matches) == [1, 2]
        assert report.accepted == 2

    def test_rejections_counted(self, temp_storage):
        client = FakeClient(match_pages={
            10: [[match_json(1), match_json(2, started=None), match_json(3, alliances=[])]],
        })
        fetcher = MatchFetcher(client, storage=temp_storage)

        matches, report = fetcher.fetch_matches([10])

        assert [m.id for m in matches] == [1]
        assert report.missing_timestamp == 1
        assert report.not_scored == 1

    def test_fetch_and_store_matches_uses_stored_events(self, temp_storage):
        temp_storage.save_events([EventSummary(event_id=10, name="Event")])
        client = FakeClient(match_pages={10: [[match_json(1), match_json(2, started=None)]]})
        fetcher = MatchFetcher(client, storage=temp_storage)

        result = fetcher.fetch_and_store_matches()

        assert result["matches"] == 1
        assert result["rejected"] == 1
        assert [m.id for m in temp_storage.load_completed_matches()] == [1]

    def test_fetch_and_store_events(self, temp_storage):
        client = FakeClient(event_pages=[
            [{"id": 1, "name": "A", "divisions": [{"id": 1}]}],
            [{"id": 2, "name": "B", "divisions": [{"id": 1}]}],
        ])
        fetcher = MatchFetcher(client, storage=temp_storage)

        events = fetcher.fetch_and_store_events(season_id=181, end="2024-01-04T04:02:16")

        assert [e.event_id for e in events] == [1, 2]
        assert [e.event_id for e in temp_storage.load_events()] == [1, 2]
        assert client.calls[0] == (181, 1, "2024-01-04T04:02:16")
