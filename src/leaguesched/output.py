"""Output formatters for schedule previews."""

import csv
from datetime import date
from io import StringIO
from pathlib import Path

from leaguesched.models import League, SchedulePreview, ScheduledMatch

CSV_HEADER = ["Week", "Date", "Day", "Time", "Court", "Division",
              "Players", "Makeup"]


def _names(league: League) -> dict[str, str]:
    return {p.id: p.name for d in league.divisions for p in d.players}


def _label(match: ScheduledMatch, names: dict[str, str]) -> str:
    return " vs ".join(names.get(p, p) for p in match.player_ids)


def _fmt_time(m: ScheduledMatch) -> str:
    return m.scheduled_time.strftime("%-I:%M%p").lower()


def format_schedule(preview: SchedulePreview, league: League) -> str:
    """Format schedule as human-readable text, organized by week."""
    names = _names(league)
    lines = []
    lines.append("=" * 80)
    lines.append(f"{league.name.upper()} SCHEDULE ({league.game_type.value})")
    lines.append("=" * 80)

    by_week: dict[int, list[ScheduledMatch]] = {}
    for m in preview.scheduled_matches:
        by_week.setdefault(m.week_number, []).append(m)

    for week_num in sorted(by_week):
        lines.append(f"\n--- WEEK {week_num} ---")

        by_date: dict[date, list[ScheduledMatch]] = {}
        for m in by_week[week_num]:
            by_date.setdefault(m.scheduled_time.date(), []).append(m)

        for d in sorted(by_date):
            lines.append(f"\n  {d.strftime('%A')} {d.strftime('%m/%d/%Y')}")
            for m in sorted(by_date[d], key=lambda x: (x.scheduled_time, x.court_number)):
                lines.append(
                    f"    {_fmt_time(m):>7}  Court {m.court_number}  "
                    f"[{m.division_id}] {_label(m, names)}"
                )

    if preview.makeup_matches:
        lines.append(f"\n{'=' * 80}")
        lines.append(f"MAKEUP MATCHES ({len(preview.makeup_matches)})")
        lines.append("=" * 80)
        for m in sorted(preview.makeup_matches, key=lambda x: x.week_number):
            lines.append(
                f"  Week {m.week_number:>2}  [{m.division_id}] {_label(m, names)}"
            )

    # Per-player schedule
    lines.append("\n" + "=" * 80)
    lines.append("PER-PLAYER SCHEDULES")
    lines.append("=" * 80)

    for div in league.divisions:
        for player in div.players:
            mine = sorted(
                (m for m in preview.scheduled_matches if player.id in m.player_ids),
                key=lambda m: m.scheduled_time,
            )
            makeups = [m for m in preview.makeup_matches if player.id in m.player_ids]
            if not mine and not makeups:
                continue
            lines.append(f"\n{player.name} ({div.name}):")
            for i, m in enumerate(mine, 1):
                others = ", ".join(names.get(p, p) for p in m.player_ids
                                   if p != player.id)
                day = m.scheduled_time.strftime("%a %m/%d")
                lines.append(
                    f"  {i:>2}. {day} {_fmt_time(m):>7} Court {m.court_number} "
                    f"vs {others}"
                )
            for m in makeups:
                others = ", ".join(names.get(p, p) for p in m.player_ids
                                   if p != player.id)
                lines.append(f"      MAKEUP         vs {others}  (Week {m.week_number})")

    return "\n".join(lines)


def format_schedule_csv(preview: SchedulePreview, league: League) -> str:
    """Format schedule as CSV, one row per match, makeups last."""
    output = StringIO()
    writer = csv.writer(output)
    writer.writerow(CSV_HEADER)

    scheduled = sorted(preview.scheduled_matches,
                       key=lambda m: (m.scheduled_time, m.court_number))
    makeups = sorted(preview.makeup_matches, key=lambda m: m.week_number)
    for m in scheduled + makeups:
        writer.writerow([
            m.week_number,
            m.scheduled_time.strftime("%Y-%m-%d"),
            m.scheduled_time.strftime("%a"),
            m.scheduled_time.strftime("%H:%M"),
            "" if m.is_makeup else m.court_number,
            m.division_id,
            ";".join(m.player_ids),
            "Y" if m.is_makeup else "",
        ])

    return output.getvalue()


def write_schedule(preview: SchedulePreview, league: League,
                   output_prefix: str = "output"):
    """Write all output files into {output_prefix}/ directory."""
    out_dir = Path(output_prefix)
    out_dir.mkdir(parents=True, exist_ok=True)

    schedule_path = out_dir / "schedule.txt"
    schedule_path.write_text(format_schedule(preview, league))
    print(f"Written: {schedule_path}")

    csv_path = out_dir / "schedule.csv"
    csv_path.write_text(format_schedule_csv(preview, league))
    print(f"Written: {csv_path}")
