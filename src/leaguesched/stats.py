"""Statistics and balance reporting for schedule previews."""

from collections import defaultdict
from itertools import combinations

from leaguesched.cutthroat import sit_outs
from leaguesched.models import DayOfWeek, GameType, League, SchedulePreview


def compute_stats(preview: SchedulePreview, league: League) -> dict:
    """Compute per-player and per-week statistics for a preview."""
    names = {}
    division_of = {}
    for div in league.divisions:
        for p in div.players:
            names[p.id] = p.name
            division_of[p.id] = div.id

    scheduled_counts = defaultdict(int)
    makeup_counts = defaultdict(int)
    matches_per_week = defaultdict(int)
    court_usage = defaultdict(int)
    day_counts = defaultdict(int)
    pair_counts: dict[tuple[str, str], int] = defaultdict(int)

    for m in preview.scheduled_matches:
        for p in m.player_ids:
            scheduled_counts[p] += 1
        matches_per_week[m.week_number] += 1
        court_usage[m.court_number] += 1
        day_counts[DayOfWeek.of(m.scheduled_time.date()).name] += 1

    for m in preview.makeup_matches:
        for p in m.player_ids:
            makeup_counts[p] += 1

    for m in preview.all_matches:
        for a, b in combinations(sorted(m.player_ids), 2):
            pair_counts[(a, b)] += 1

    # Who sat out which cutthroat week
    idle_weeks: dict[str, list[int]] = defaultdict(list)
    if league.game_type is GameType.CUTTHROAT:
        for div in league.divisions:
            weekly = defaultdict(list)
            for m in preview.all_matches:
                if m.division_id == div.id:
                    weekly[m.week_number].append(m.player_ids)
            weeks = [weekly.get(w, []) for w in range(1, league.weeks_for_cutthroat + 1)]
            if not any(weeks):
                continue
            for week, idle in sit_outs(div.player_ids, weeks).items():
                for p in idle:
                    idle_weeks[p].append(week)

    repeats = {k: v for k, v in pair_counts.items() if v > 1}

    return {
        "players": sorted(names, key=lambda p: (division_of[p], names[p])),
        "names": names,
        "division_of": division_of,
        "scheduled_counts": dict(scheduled_counts),
        "makeup_counts": dict(makeup_counts),
        "matches_per_week": dict(matches_per_week),
        "court_usage": dict(court_usage),
        "day_counts": dict(day_counts),
        "pair_counts": dict(pair_counts),
        "repeat_pairs": repeats,
        "sit_outs": dict(idle_weeks),
        "scheduled_total": len(preview.scheduled_matches),
        "makeup_total": len(preview.makeup_matches),
        "total_weeks": preview.total_weeks,
    }


def format_stats_report(stats: dict) -> str:
    """Format statistics into a human-readable report."""
    lines = []
    lines.append("=" * 70)
    lines.append("SCHEDULE STATISTICS")
    lines.append("=" * 70)
    lines.append(f"\nScheduled: {stats['scheduled_total']}  "
                 f"Makeup: {stats['makeup_total']}  "
                 f"Weeks: {stats['total_weeks']}")

    lines.append("\n--- PLAYER BALANCE ---")
    lines.append(f"{'Player':<24} {'Div':<8} {'Sched':>5} {'Mkup':>5} {'Out':>4}")
    lines.append("-" * 50)
    for p in stats["players"]:
        sched = stats["scheduled_counts"].get(p, 0)
        mk = stats["makeup_counts"].get(p, 0)
        out = len(stats["sit_outs"].get(p, []))
        lines.append(f"{stats['names'][p]:<24} {stats['division_of'][p]:<8} "
                     f"{sched:>5} {mk:>5} {out:>4}")

    lines.append("\n--- MATCHES PER WEEK ---")
    for week in sorted(stats["matches_per_week"]):
        lines.append(f"  W{week:>2}: {stats['matches_per_week'][week]}")

    lines.append("\n--- COURT / DAY USAGE ---")
    for court in sorted(stats["court_usage"]):
        lines.append(f"  Court {court}: {stats['court_usage'][court]}")
    for day in DayOfWeek:
        c = stats["day_counts"].get(day.name, 0)
        if c:
            lines.append(f"  {day.name}: {c}")

    if stats["repeat_pairs"]:
        lines.append(f"\n--- REPEATED PAIRS ({len(stats['repeat_pairs'])}) ---")
        for (a, b), c in sorted(stats["repeat_pairs"].items(),
                                key=lambda kv: -kv[1]):
            lines.append(f"  {stats['names'].get(a, a)} & "
                         f"{stats['names'].get(b, b)}: {c}")

    if stats["sit_outs"]:
        lines.append("\n--- SIT-OUTS ---")
        for p in stats["players"]:
            weeks = stats["sit_outs"].get(p)
            if weeks:
                lines.append(f"  {stats['names'][p]}: weeks "
                             f"{', '.join(str(w) for w in weeks)}")

    return "\n".join(lines)
