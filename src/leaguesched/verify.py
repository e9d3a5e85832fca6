"""Standalone verifier for league schedules.

Reads a schedule CSV written by the generator back into a preview and
checks it against the league in config.yaml.
Usage: python verify.py <schedule_csv> <league_id> [config_yaml]
"""

import csv
import sys
from datetime import datetime
from pathlib import Path

from leaguesched.config import load_config
from leaguesched.constraints import validate_preview, format_validation_report
from leaguesched.errors import LeagueNotFoundError
from leaguesched.models import League, SchedulePreview, ScheduledMatch


def parse_csv_schedule(csv_path: str | Path, league: League) -> SchedulePreview:
    """Parse a schedule CSV back into a SchedulePreview."""
    preview = SchedulePreview(league_id=league.id)

    with open(csv_path, newline="") as f:
        reader = csv.DictReader(f)
        for row in reader:
            players = tuple(p for p in row.get("Players", "").split(";") if p)
            if not players:
                continue
            is_makeup = row.get("Makeup", "").strip().upper() == "Y"
            when = datetime.strptime(
                f"{row['Date'].strip()} {row['Time'].strip()}", "%Y-%m-%d %H:%M"
            )
            court = row.get("Court", "").strip()
            match = ScheduledMatch(
                player_ids=players,
                court_number=int(court) if court else 1,
                scheduled_time=when,
                week_number=int(row.get("Week") or 0),
                division_id=row.get("Division", "").strip(),
                is_makeup=is_makeup,
            )
            if is_makeup:
                preview.makeup_matches.append(match)
            else:
                preview.scheduled_matches.append(match)

    preview.total_weeks = max(
        (m.week_number for m in preview.scheduled_matches), default=0)
    preview.projected_games = len(preview.all_matches)
    return preview


def main():
    if len(sys.argv) < 3:
        print("Usage: python verify.py <schedule.csv> <league_id> [config.yaml]")
        print("  Validates a schedule CSV against the league in config.")
        sys.exit(1)

    csv_path = sys.argv[1]
    league_id = sys.argv[2]
    config_path = sys.argv[3] if len(sys.argv) > 3 else "config.yaml"

    for p in (csv_path, config_path):
        if not Path(p).exists():
            print(f"Error: {p} not found")
            sys.exit(1)

    print(f"Loading config from {config_path}...")
    store = load_config(config_path)
    try:
        league = store.get_league(league_id)
    except LeagueNotFoundError as e:
        print(f"Error: {e}")
        sys.exit(1)

    print(f"Parsing schedule from {csv_path}...")
    preview = parse_csv_schedule(csv_path, league)
    print(f"Loaded {len(preview.all_matches)} matches")

    result = validate_preview(preview, league, store.conflicting_bookings(league))
    print(format_validation_report(result))
    sys.exit(0 if result["valid"] else 1)


if __name__ == "__main__":
    main()
