"""Constraint validation for schedule previews.

Used on freshly generated previews and on schedules re-imported from CSV.
"""

from collections import defaultdict

from leaguesched.models import Booking, League, SchedulePreview
from leaguesched.occupancy import OccupancyTracker


def validate_preview(preview: SchedulePreview, league: League,
                     bookings: list[Booking] | None = None) -> dict:
    """Validate a preview against the league and other leagues' bookings.

    Returns dict with:
    - valid: bool (True if no hard constraint violations)
    - errors: list of hard constraint violations
    - warnings: list of soft constraint issues
    """
    errors = []
    warnings = []

    group_size = league.game_type.group_size
    rosters = {d.id: set(d.player_ids) for d in league.divisions}
    external = OccupancyTracker(bookings)
    seen_slots: dict[tuple, tuple] = {}

    pair_counts: dict[tuple[str, str], int] = defaultdict(int)
    player_week_counts = defaultdict(lambda: defaultdict(int))

    for match in preview.all_matches:
        label = " vs ".join(match.player_ids)

        if len(match.player_ids) != group_size:
            errors.append(
                f"{label}: {len(match.player_ids)} players, "
                f"{league.game_type.value} needs {group_size}"
            )
        if len(set(match.player_ids)) != len(match.player_ids):
            errors.append(f"{label}: a player appears twice in one match")

        roster = rosters.get(match.division_id)
        if roster is None:
            errors.append(f"{label}: unknown division {match.division_id}")
        else:
            for p in match.player_ids:
                if p not in roster:
                    errors.append(
                        f"{label}: {p} is not on division "
                        f"{match.division_id} roster"
                    )

        if group_size == 2 and len(match.player_ids) == 2:
            a, b = sorted(match.player_ids)
            pair_counts[(a, b)] += 1

        if match.is_makeup:
            if match.scheduled_time != league.end_date:
                errors.append(
                    f"Makeup {label} (week {match.week_number}) is at "
                    f"{match.scheduled_time}, expected {league.end_date}"
                )
            continue

        if not league.in_range(match.scheduled_time):
            errors.append(
                f"{label} at {match.scheduled_time} is outside the season "
                f"{league.start_date} - {league.end_date}"
            )

        key = OccupancyTracker.key(match.scheduled_time, match.court_number)
        if key in seen_slots:
            errors.append(
                f"Court {match.court_number} at {match.scheduled_time} "
                f"double-booked: {label} and {' vs '.join(seen_slots[key])}"
            )
        else:
            seen_slots[key] = match.player_ids
        if external.is_occupied(match.scheduled_time, match.court_number):
            errors.append(
                f"Court {match.court_number} at {match.scheduled_time} "
                f"already booked by another league ({label})"
            )

        for p in match.player_ids:
            player_week_counts[p][match.week_number] += 1

    # Round robin: every pair should meet once
    for (a, b), count in sorted(pair_counts.items()):
        if count > 1:
            warnings.append(f"{a} vs {b} played {count} times")

    if group_size == 2:
        for p, weeks in sorted(player_week_counts.items()):
            for week, count in sorted(weeks.items()):
                if count > 1:
                    warnings.append(f"{p} plays {count} matches in week {week}")

    if preview.makeup_matches:
        warnings.append(
            f"{len(preview.makeup_matches)} makeup matches need manual placement"
        )

    return {
        "valid": len(errors) == 0,
        "errors": errors,
        "warnings": warnings,
    }


def format_validation_report(result: dict) -> str:
    """Format validation results as text."""
    lines = []
    lines.append("=" * 60)
    lines.append("SCHEDULE VALIDATION REPORT")
    lines.append("=" * 60)

    if result["valid"]:
        lines.append("\nRESULT: VALID (no hard constraint violations)")
    else:
        lines.append(f"\nRESULT: INVALID ({len(result['errors'])} violations)")

    if result["errors"]:
        lines.append(f"\n--- ERRORS ({len(result['errors'])}) ---")
        for e in result["errors"]:
            lines.append(f"  ERROR: {e}")

    if result["warnings"]:
        lines.append(f"\n--- WARNINGS ({len(result['warnings'])}) ---")
        for w in result["warnings"]:
            lines.append(f"  WARN: {w}")

    return "\n".join(lines)
