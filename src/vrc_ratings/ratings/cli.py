"""Command-line interface for rating system."""

import argparse
import sys

from ..scraper.storage import DataStorage
from .elo import predict_match
from .models import PlaceholderPolicy
from .statistics import EmptyDataSet, calculate_statistics
from .system import RatingSystem


def main():
    """Run the rating system CLI."""
    parser = argparse.ArgumentParser(description="VRC alliance Elo ratings")
    parser.add_argument(
        "command",
        choices=["replay", "show", "top", "predict"],
        help="Command to run",
    )
    parser.add_argument(
        "--team",
        help="Team name for 'show' command, e.g. 1234A",
    )
    parser.add_argument(
        "--red",
        nargs=2,
        metavar="TEAM",
        help="Red alliance for 'predict' command",
    )
    parser.add_argument(
        "--blue",
        nargs=2,
        metavar="TEAM",
        help="Blue alliance for 'predict' command",
    )
    parser.add_argument(
        "--limit",
        type=int,
        default=25,
        help="Number of teams for 'top' command (default: 25)",
    )
    parser.add_argument(
        "--placeholder",
        choices=[p.value for p in PlaceholderPolicy],
        default=PlaceholderPolicy.EXCLUDE_MATCH.value,
        help="How to rate alliances with a missing team (default: exclude_match)",
    )

    args = parser.parse_args()

    storage = DataStorage()

    if args.command == "replay":
        print("Starting rating replay...")
        system = RatingSystem(placeholder_policy=PlaceholderPolicy(args.placeholder))
        try:
            result = system.replay(storage)
        except EmptyDataSet:
            print("Error: no matches stored. Run 'vrc-fetch matches' first.")
            sys.exit(1)
        except OSError as e:
            print(f"Error: could not save ratings: {e}")
            sys.exit(1)

        stats = result.statistics
        print(f"mean: {stats.mean:.3f} var: {stats.variance:.3f} std: {stats.standard_deviation:.3f}")
        print(f"Total matches: {len(result.matches)} ({result.skipped_matches} not rated)")
        print(f"Rated {len(result.ratings)} teams")
        print("Data saved")

    elif args.command == "show":
        if not args.team:
            print("Error: --team required for 'show' command")
            return

        ratings = storage.load_ratings()
        if args.team not in ratings:
            print(f"No rating for {args.team}. Run 'replay' first.")
            return

        matches = [m for m in storage.load_match_records() if args.team in m.teams]
        rank = sorted(ratings.values(), reverse=True).index(ratings[args.team]) + 1

        print(f"Team: {args.team}")
        print(f"Rating: {ratings[args.team]:.3f} (rank {rank} of {len(ratings)})")
        print(f"Matches: {len(matches)}")
        print("\nRecent matches:")
        for m in matches[-10:]:
            side = "red" if args.team in m.red else "blue"
            delta = m.delta_elo
            if delta is not None and side == "blue":
                delta = -delta
            delta_str = f"{delta:+7.3f}" if delta is not None else "  n/a  "
            print(f"  {m.id:>8d} {' '.join(m.red):>12s} {m.red_score:3d} - "
                  f"{m.blue_score:<3d} {' '.join(m.blue):<12s} [{side}] {delta_str}")

    elif args.command == "top":
        ratings = storage.load_ratings()
        if not ratings:
            print("No ratings data found. Run 'replay' first.")
            return

        ranked = sorted(ratings.items(), key=lambda x: x[1], reverse=True)
        print(f"Top {min(args.limit, len(ranked))} of {len(ranked)} teams:")
        for i, (team, rating) in enumerate(ranked[:args.limit], start=1):
            print(f"  {i:3d}. {team:<8s} {rating:8.3f}")

    elif args.command == "predict":
        if not args.red or not args.blue:
            print("Error: --red and --blue required for 'predict' command")
            return

        ratings = storage.load_ratings()
        matches = storage.load_match_records()
        baseline = calculate_statistics(matches).baseline_rating if matches else None

        try:
            prediction = predict_match(ratings, tuple(args.red), tuple(args.blue), baseline)
        except KeyError as e:
            print(f"Error: {e.args[0]}")
            return

        print(f"Red  {' '.join(prediction.red):<12s} {prediction.red_predicted_score:4d} "
              f"({prediction.red_rating:.1f})")
        print(f"Blue {' '.join(prediction.blue):<12s} {prediction.blue_predicted_score:4d} "
              f"({prediction.blue_rating:.1f})")
        print(f"Predicted margin: {prediction.predicted_margin:+.1f} ({prediction.favored})")
        if prediction.unknown_teams:
            print(f"Unrated teams at baseline: {', '.join(prediction.unknown_teams)}")


if __name__ == "__main__":
    main()
