"""Tests for the command-line entry points."""

import tempfile
from pathlib import Path

import pytest

from vrc_ratings.ratings import CompletedMatch
from vrc_ratings.ratings import cli as ratings_cli
from vrc_ratings.scraper import DataStorage
from vrc_ratings.scraper import cli as fetch_cli


class StubClient:
    """Returns one page with a single event."""

    def __init__(self, token, delay_seconds=0.5):
        self.token = token

    def get_events_page(self, season_id, page=1, per_page=100, end=None):
        return {
            "meta": {"current_page": 1, "last_page": 1},
            "data": [{"id": 10, "name": "Event", "divisions": [{"id": 1}]}],
        }


@pytest.fixture
def temp_storage(monkeypatch):
    """Point both CLIs at a temporary data directory."""
    with tempfile.TemporaryDirectory() as tmpdir:
        storage = DataStorage(Path(tmpdir))
        monkeypatch.setattr(ratings_cli, "DataStorage", lambda: storage)
        monkeypatch.setattr(fetch_cli, "DataStorage", lambda: storage)
        yield storage


def run_cli(monkeypatch, main, *argv):
    monkeypatch.setattr("sys.argv", ["prog", *argv])
    main()


class TestRatingsCli:
    """Test the vrc-ratings commands."""

    def test_replay_saves_ratings(self, monkeypatch, temp_storage, capsys):
        temp_storage.save_completed_matches([
            CompletedMatch(1, ("A", "B"), ("C", "D"), 50, 30, 2, 10, 1000),
        ])

        run_cli(monkeypatch, ratings_cli.main, "replay")

        assert "Rated 4 teams" in capsys.readouterr().out
        assert set(temp_storage.load_ratings()) == {"A", "B", "C", "D"}

    def test_replay_without_matches_exits(self, monkeypatch, temp_storage):
        with pytest.raises(SystemExit) as exc_info:
            run_cli(monkeypatch, ratings_cli.main, "replay")
        assert exc_info.value.code == 1

    def test_replay_write_failure_exits(self, monkeypatch, temp_storage):
        temp_storage.save_completed_matches([
            CompletedMatch(1, ("A", "B"), ("C", "D"), 50, 30, 2, 10, 1000),
        ])
        (temp_storage.data_dir / "team_data.json").mkdir()

        with pytest.raises(SystemExit) as exc_info:
            run_cli(monkeypatch, ratings_cli.main, "replay")
        assert exc_info.value.code == 1


class TestFetchCli:
    """Test the vrc-fetch commands."""

    @pytest.fixture(autouse=True)
    def stub_client(self, monkeypatch):
        monkeypatch.setattr(fetch_cli, "RobotEventsClient", StubClient)

    def test_events_saved(self, monkeypatch, temp_storage):
        run_cli(monkeypatch, fetch_cli.main, "events", "--token", "t")
        assert [e.event_id for e in temp_storage.load_events()] == [10]

    def test_missing_token_exits(self, monkeypatch, temp_storage):
        monkeypatch.delenv(fetch_cli.TOKEN_ENV_VAR, raising=False)
        with pytest.raises(SystemExit) as exc_info:
            run_cli(monkeypatch, fetch_cli.main, "events")
        assert exc_info.value.code == 2

    def test_write_failure_exits(self, monkeypatch, temp_storage):
        (temp_storage.data_dir / "events.json").mkdir()
        with pytest.raises(SystemExit) as exc_info:
            run_cli(monkeypatch, fetch_cli.main, "events", "--token", "t")
        assert exc_info.value.code == 1

    def test_matches_without_events_exits(self, monkeypatch, temp_storage):
        with pytest.raises(SystemExit) as exc_info:
            run_cli(monkeypatch, fetch_cli.main, "matches", "--token", "t")
        assert exc_info.value.code == 1
