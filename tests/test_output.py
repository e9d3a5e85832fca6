"""Tests for output.py, stats.py and verify.py."""

import random
from datetime import datetime, time, timedelta

from leaguesched.constraints import validate_preview
from leaguesched.models import (
    AvailabilityWindow, DayOfWeek, Division, GameType, League, Player,
)
from leaguesched.output import (
    CSV_HEADER, format_schedule, format_schedule_csv, write_schedule,
)
from leaguesched.scheduler import assemble_schedule
from leaguesched.slots import generate_time_slots
from leaguesched.stats import compute_stats, format_stats_report
from leaguesched.verify import parse_csv_schedule

START = datetime(2026, 3, 2)
END = START + timedelta(days=21) - timedelta(minutes=1)
WINDOWS = [AvailabilityWindow(DayOfWeek.Mon, time(18, 0), time(20, 0))]


def _make_league(game_type=GameType.SINGLES, n=6, weeks=4):
    players = [Player(f"p{i}", f"Player {i}", "d1") for i in range(n)]
    return League(id="L1", name="Test League", start_date=START, end_date=END,
                  game_type=game_type, weeks_for_cutthroat=weeks,
                  divisions=[Division("d1", "Div One", players)])


def _build(league, seed=1):
    slots = generate_time_slots(START, END, WINDOWS, league.match_duration)
    return assemble_schedule(league, slots, rng=random.Random(seed))


class TestFormatSchedule:
    def test_sections(self):
        league = _make_league()
        preview = _build(league)
        # 15 pairings at 3 a week need 5 weeks; the season has 3
        assert preview.makeup_matches
        text = format_schedule(preview, league)
        assert "TEST LEAGUE SCHEDULE (SINGLES)" in text
        assert "--- WEEK 1 ---" in text
        assert f"MAKEUP MATCHES ({len(preview.makeup_matches)})" in text
        assert "Player 0 (Div One):" in text

    def test_uses_player_names(self):
        league = _make_league(n=2)
        text = format_schedule(_build(league), league)
        assert "Player 0 vs Player 1" in text


class TestFormatCsv:
    def test_rows(self):
        league = _make_league()
        preview = _build(league)
        lines = format_schedule_csv(preview, league).strip().splitlines()
        assert lines[0].split(",") == CSV_HEADER
        assert len(lines) == 1 + len(preview.all_matches)

    def test_roundtrip_through_verify(self, tmp_path):
        league = _make_league()
        preview = _build(league)
        path = tmp_path / "schedule.csv"
        path.write_text(format_schedule_csv(preview, league))

        parsed = parse_csv_schedule(path, league)
        assert len(parsed.scheduled_matches) == len(preview.scheduled_matches)
        assert len(parsed.makeup_matches) == len(preview.makeup_matches)
        assert parsed.total_weeks == preview.total_weeks
        assert (sorted((m.scheduled_time, m.court_number) for m in parsed.scheduled_matches)
                == sorted((m.scheduled_time, m.court_number) for m in preview.scheduled_matches))
        result = validate_preview(parsed, league)
        assert result["valid"], result["errors"]


class TestWriteSchedule:
    def test_writes_files(self, tmp_path):
        league = _make_league()
        out = tmp_path / "out"
        write_schedule(_build(league), league, output_prefix=str(out))
        assert (out / "schedule.txt").exists()
        assert (out / "schedule.csv").exists()


class TestStats:
    def test_counts(self):
        league = _make_league()
        preview = _build(league)
        stats = compute_stats(preview, league)
        assert stats["scheduled_total"] == len(preview.scheduled_matches)
        assert stats["makeup_total"] == len(preview.makeup_matches)
        assert sum(stats["scheduled_counts"].values()) == 2 * len(preview.scheduled_matches)
        assert sum(stats["matches_per_week"].values()) == len(preview.scheduled_matches)
        assert stats["day_counts"] == {"Mon": len(preview.scheduled_matches)}
        # Round robin never repeats a pair
        assert stats["repeat_pairs"] == {}

    def test_cutthroat_sit_outs(self):
        league = _make_league(GameType.CUTTHROAT, n=7, weeks=3)
        stats = compute_stats(_build(league), league)
        # One of seven players sits out each of the three weeks
        assert sum(len(w) for w in stats["sit_outs"].values()) == 3

    def test_report(self):
        league = _make_league(GameType.CUTTHROAT, n=7, weeks=3)
        text = format_stats_report(compute_stats(_build(league), league))
        assert "SCHEDULE STATISTICS" in text
        assert "--- PLAYER BALANCE ---" in text
        assert "--- SIT-OUTS ---" in text
