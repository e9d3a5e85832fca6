"""Tests for constraints.py: preview validation."""

from datetime import datetime, timedelta

from leaguesched.constraints import format_validation_report, validate_preview
from leaguesched.models import (
    Booking, Division, GameType, League, Player, SchedulePreview,
    ScheduledMatch,
)

START = datetime(2026, 3, 2)
END = START + timedelta(days=28) - timedelta(minutes=1)


def _make_league(game_type=GameType.SINGLES, n=6):
    players = [Player(f"p{i}", f"P{i}", "d1") for i in range(n)]
    return League(id="L1", name="L1", start_date=START, end_date=END,
                  game_type=game_type, divisions=[Division("d1", "D1", players)])


def _match(players, hour=18, court=1, week=1, days=0, makeup=False,
           division="d1"):
    when = END if makeup else START + timedelta(days=days, hours=hour)
    return ScheduledMatch(tuple(players), court, when, week, division,
                          is_makeup=makeup)


def _preview(*matches):
    return SchedulePreview(
        "L1",
        [m for m in matches if not m.is_makeup],
        [m for m in matches if m.is_makeup],
    )


class TestValidatePreview:
    def test_valid(self):
        preview = _preview(
            _match(["p0", "p1"]),
            _match(["p2", "p3"], court=2),
            _match(["p4", "p5"], hour=19),
        )
        result = validate_preview(preview, _make_league())
        assert result["valid"], result["errors"]
        assert result["warnings"] == []

    def test_double_booking(self):
        preview = _preview(_match(["p0", "p1"]), _match(["p2", "p3"]))
        result = validate_preview(preview, _make_league())
        assert not result["valid"]
        assert any("double-booked" in e for e in result["errors"])

    def test_makeups_may_share_time(self):
        preview = _preview(_match(["p0", "p1"], makeup=True),
                           _match(["p2", "p3"], makeup=True))
        result = validate_preview(preview, _make_league())
        assert result["valid"], result["errors"]
        assert any("makeup" in w for w in result["warnings"])

    def test_external_collision(self):
        preview = _preview(_match(["p0", "p1"]))
        bookings = [Booking("L2", START + timedelta(hours=18), 1)]
        result = validate_preview(preview, _make_league(), bookings)
        assert not result["valid"]
        assert any("another league" in e for e in result["errors"])

    def test_outside_season(self):
        preview = _preview(_match(["p0", "p1"], days=40))
        result = validate_preview(preview, _make_league())
        assert any("outside the season" in e for e in result["errors"])

    def test_makeup_not_pinned(self):
        bad = _match(["p0", "p1"])
        bad.is_makeup = True
        preview = _preview(bad)
        result = validate_preview(preview, _make_league())
        assert any("expected" in e for e in result["errors"])

    def test_wrong_group_size(self):
        preview = _preview(_match(["p0", "p1"]))
        result = validate_preview(preview, _make_league(GameType.CUTTHROAT))
        assert not result["valid"]
        assert any("needs 3" in e for e in result["errors"])

    def test_cutthroat_valid(self):
        preview = _preview(_match(["p0", "p1", "p2"]),
                           _match(["p3", "p4", "p5"], court=2))
        result = validate_preview(preview, _make_league(GameType.CUTTHROAT))
        assert result["valid"], result["errors"]

    def test_repeated_player_in_match(self):
        preview = _preview(_match(["p0", "p1", "p0"]))
        result = validate_preview(preview, _make_league(GameType.CUTTHROAT))
        assert any("appears twice" in e for e in result["errors"])

    def test_player_not_on_roster(self):
        preview = _preview(_match(["p0", "zz"]))
        result = validate_preview(preview, _make_league())
        assert any("zz is not on division" in e for e in result["errors"])

    def test_unknown_division(self):
        preview = _preview(_match(["p0", "p1"], division="nope"))
        result = validate_preview(preview, _make_league())
        assert any("unknown division" in e for e in result["errors"])

    def test_repeat_pair_warning(self):
        preview = _preview(_match(["p0", "p1"]),
                           _match(["p1", "p0"], days=7, week=2))
        result = validate_preview(preview, _make_league())
        assert result["valid"]
        assert any("p0 vs p1 played 2 times" in w for w in result["warnings"])

    def test_two_matches_in_week_warning(self):
        preview = _preview(_match(["p0", "p1"]), _match(["p0", "p2"], hour=19))
        result = validate_preview(preview, _make_league())
        assert any("p0 plays 2 matches in week 1" in w for w in result["warnings"])


class TestFormatValidationReport:
    def test_valid_report(self):
        text = format_validation_report({"valid": True, "errors": [], "warnings": []})
        assert "VALID" in text

    def test_invalid_report(self):
        text = format_validation_report({
            "valid": False, "errors": ["boom"], "warnings": ["hmm"],
        })
        assert "INVALID (1 violations)" in text
        assert "ERROR: boom" in text
        assert "WARN: hmm" in text
