#!/usr/bin/env python3
"""League Schedule Builder.

Generate mode (default):
    leaguesched [config.yaml] --league ID [--seed N] [-o DIR]

    Builds a schedule preview for one league and writes:
      {DIR}/schedule.txt  - Human-readable week-by-week + per-player schedule
      {DIR}/schedule.csv  - One row per match, makeups last
      {DIR}/stats.txt     - Validation report + statistics

    With --save the preview is committed to the bookings (occupancy is
    re-checked first) and all bookings are written to {DIR}/bookings.yaml,
    which later runs for other leagues can load with --bookings.
    A league that already has saved matches is not regenerated: its saved
    schedule is written instead, and --save is refused.

Verify mode:
    leaguesched --verify <schedule.csv> --league ID [config.yaml]

Examples:
    leaguesched --league spring-singles --seed 42
    leaguesched --league spring-singles --bookings output/bookings.yaml --save
    leaguesched --verify output/schedule.csv --league spring-singles
"""

import argparse
import sys
from pathlib import Path

from leaguesched.config import dump_bookings, load_bookings, load_config
from leaguesched.constraints import validate_preview, format_validation_report
from leaguesched.errors import (
    LeagueNotFoundError, ScheduleConflictError, ScheduleExistsError,
)
from leaguesched.output import write_schedule
from leaguesched.scheduler import generate_league_schedule
from leaguesched.stats import compute_stats, format_stats_report


def main():
    parser = argparse.ArgumentParser(
        description="League Schedule Builder",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""\
Exit codes:
  0  Schedule valid (makeup matches are allowed)
  1  Missing config, unknown league, constraint violations or save conflict
""",
    )
    parser.add_argument(
        "config", nargs="?", default="config.yaml",
        help="Path to config YAML file (default: config.yaml)"
    )
    parser.add_argument(
        "--league", "-l",
        help="League id to schedule (default: the only league in config)"
    )
    parser.add_argument(
        "--seed", type=int, default=None,
        help="Random seed for reproducible schedules"
    )
    parser.add_argument(
        "--output-prefix", "-o", default="output",
        help="Output directory for generated files (default: output/)"
    )
    parser.add_argument(
        "--bookings", metavar="YAML",
        help="Extra bookings file (as written by --save) to treat as occupied"
    )
    parser.add_argument(
        "--save", action="store_true",
        help="Commit the preview and write bookings.yaml"
    )
    parser.add_argument(
        "--verify", metavar="CSV",
        help="Verify an existing schedule CSV instead of generating"
    )
    args = parser.parse_args()

    config_path = args.config
    if not Path(config_path).exists():
        print(f"Error: config file {config_path} not found")
        sys.exit(1)

    print(f"Loading config from {config_path}...")
    store = load_config(config_path)
    if args.bookings:
        extra = load_bookings(args.bookings)
        print(f"Loaded {len(extra)} bookings from {args.bookings}")
        store.matches.extend(extra)

    league_id = args.league
    if league_id is None:
        if len(store.leagues) != 1:
            print(f"Error: --league required, choose one of: "
                  f"{', '.join(sorted(store.leagues))}")
            sys.exit(1)
        league_id = next(iter(store.leagues))

    try:
        league = store.get_league(league_id)
    except LeagueNotFoundError as e:
        print(f"Error: {e}")
        sys.exit(1)

    if args.verify:
        from leaguesched.verify import parse_csv_schedule
        print(f"Verifying schedule from {args.verify}...")
        preview = parse_csv_schedule(args.verify, league)
        print(f"Loaded {len(preview.all_matches)} matches")
        result = validate_preview(preview, league,
                                  store.conflicting_bookings(league))
        print(format_validation_report(result))
        sys.exit(0 if result["valid"] else 1)

    saved = store.saved_schedule(league_id)
    if saved is not None:
        if args.save:
            print(f"Error: schedule already generated for league {league_id}")
            sys.exit(1)
        print(f"{league.name} already has a saved schedule "
              f"({len(saved.all_matches)} matches), not regenerating")
        write_schedule(saved, league, output_prefix=args.output_prefix)
        return

    # Generation mode
    print(f"Generating schedule for {league.name} (seed={args.seed})...")
    preview = generate_league_schedule(store, league_id, seed=args.seed)

    if not preview.all_matches:
        print("Error: no matches were generated!")
        sys.exit(1)

    print("\nValidating...")
    result = validate_preview(preview, league, store.conflicting_bookings(league))
    report = format_validation_report(result)
    print(report)

    stats_text = format_stats_report(compute_stats(preview, league))
    print("\n" + stats_text)

    print("\nWriting output files...")
    write_schedule(preview, league, output_prefix=args.output_prefix)
    stats_path = Path(args.output_prefix) / "stats.txt"
    stats_path.write_text(report + "\n\n" + stats_text)
    print(f"Written: {stats_path}")

    if not result["valid"]:
        print(f"\nSchedule has {len(result['errors'])} constraint violations.")
        sys.exit(1)

    if args.save:
        try:
            store.save_schedule(league_id, preview)
        except ScheduleExistsError as e:
            print(f"Error: {e}")
            sys.exit(1)
        except ScheduleConflictError as e:
            print(f"Error: {e}")
            for m in e.conflicts:
                print(f"  Court {m.court_number} at {m.scheduled_time}: "
                      f"{' vs '.join(m.player_ids)}")
            print("Regenerate the preview and try again.")
            sys.exit(1)
        bookings_path = Path(args.output_prefix) / "bookings.yaml"
        dump_bookings(store.matches, bookings_path)
        print(f"Written: {bookings_path}")

    print("\nSchedule generated successfully!")


if __name__ == "__main__":
    main()
