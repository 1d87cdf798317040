"""Command-line interface for fetching RobotEvents data."""

import argparse
import os
import sys

from .client import RobotEventsClient
from .scraper import DEFAULT_DIVISION_ID, DEFAULT_SEASON_ID, MatchFetcher
from .storage import DataStorage

TOKEN_ENV_VAR = "ROBOTEVENTS_TOKEN"


def main():
    """Run the fetch CLI."""
    parser = argparse.ArgumentParser(description="Fetch VRC match data from RobotEvents")
    parser.add_argument(
        "command",
        choices=["events", "matches", "stats"],
        help="Command to run",
    )
    parser.add_argument(
        "--token",
        default=os.environ.get(TOKEN_ENV_VAR),
        help=f"RobotEvents API token (default: ${TOKEN_ENV_VAR})",
    )
    parser.add_argument(
        "--season",
        type=int,
        default=DEFAULT_SEASON_ID,
        help=f"Season ID for 'events' command (default: {DEFAULT_SEASON_ID})",
    )
    parser.add_argument(
        "--end",
        help="Only events ending before this ISO timestamp, e.g. 2024-01-04T04:02:16",
    )
    parser.add_argument(
        "--event-id",
        type=int,
        action="append",
        dest="event_ids",
        help="Event ID for 'matches' command (repeatable; default: stored events)",
    )
    parser.add_argument(
        "--division",
        type=int,
        default=DEFAULT_DIVISION_ID,
        help=f"Division ID within each event (default: {DEFAULT_DIVISION_ID})",
    )
    parser.add_argument(
        "--delay",
        type=float,
        default=0.5,
        help="Delay between requests in seconds (default: 0.5)",
    )

    args = parser.parse_args()

    storage = DataStorage()

    if args.command == "stats":
        stats = storage.get_stats()
        print(f"Events:        {stats['events']}")
        print(f"Matches:       {stats['matches']}")
        print(f"Rated matches: {stats['rated_matches']}")
        print(f"Teams:         {stats['teams']}")
        return

    if not args.token:
        print(f"Error: --token or ${TOKEN_ENV_VAR} required for '{args.command}' command")
        sys.exit(2)

    client = RobotEventsClient(args.token, delay_seconds=args.delay)
    fetcher = MatchFetcher(client, storage=storage)

    try:
        if args.command == "events":
            events = fetcher.fetch_and_store_events(season_id=args.season, end=args.end)
            print(f"Saved {len(events)} events")

        elif args.command == "matches":
            if args.event_ids is None and not storage.load_events():
                print("No events stored. Run 'events' first or pass --event-id.")
                sys.exit(1)
            result = fetcher.fetch_and_store_matches(args.event_ids, division_id=args.division)
            print(f"Saved {result['matches']} completed matches")
            print(f"Rejected {result['rejected']} reports "
                  f"({result['not_scored']} not scored, "
                  f"{result['missing_timestamp']} not started, "
                  f"{result['bad_timestamp']} bad timestamps)")
    except OSError as e:
        print(f"Error: could not save data: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
