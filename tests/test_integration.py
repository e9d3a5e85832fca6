"""Integration test: full end-to-end schedule generation and validation."""

import sys
from collections import Counter
from pathlib import Path

import pytest

from leaguesched.config import load_bookings, load_config
from leaguesched.constraints import validate_preview
from leaguesched.errors import ScheduleExistsError
from leaguesched.schedule import main
from leaguesched.scheduler import generate_league_schedule

CONFIG = Path(__file__).resolve().parent.parent / "config.yaml"


class TestEndToEnd:
    def test_generate_and_validate(self):
        store = load_config(CONFIG)
        league = store.get_league("spring-singles")
        preview = generate_league_schedule(store, "spring-singles", seed=42)

        assert len(preview.scheduled_matches) > 0
        result = validate_preview(preview, league,
                                  store.conflicting_bookings(league))
        assert result["valid"], result["errors"]

    def test_round_robin_complete(self):
        store = load_config(CONFIG)
        preview = generate_league_schedule(store, "spring-singles", seed=42)
        # 6 players -> 15 pairs, 5 players -> 10 pairs
        by_div = Counter(m.division_id for m in preview.all_matches)
        assert by_div == {"a": 15, "b": 10}
        assert preview.projected_games == 25

    def test_cutthroat_groups(self):
        store = load_config(CONFIG)
        preview = generate_league_schedule(store, "tuesday-cutthroat", seed=42)
        # 7 players -> 2 groups a week for 8 weeks
        assert preview.projected_games == 16
        assert all(len(set(m.player_ids)) == 3 for m in preview.all_matches)

    def test_two_leagues_share_courts(self):
        store = load_config(CONFIG)
        singles = generate_league_schedule(store, "spring-singles", seed=1)
        store.save_schedule("spring-singles", singles)

        # The cutthroat league already has a saved booking in config
        cutthroat = generate_league_schedule(store, "tuesday-cutthroat", seed=1)
        with pytest.raises(ScheduleExistsError):
            store.save_schedule("tuesday-cutthroat", cutthroat)
        store.clear_schedule("tuesday-cutthroat")
        cutthroat = generate_league_schedule(store, "tuesday-cutthroat", seed=1)
        store.save_schedule("tuesday-cutthroat", cutthroat)

        keys = [(b.scheduled_time, b.court_number) for b in store.matches
                if b.blocks_court]
        assert len(keys) == len(set(keys))

    def test_reproducible(self):
        p1 = generate_league_schedule(load_config(CONFIG), "spring-singles", seed=5)
        p2 = generate_league_schedule(load_config(CONFIG), "spring-singles", seed=5)
        assert p1 == p2


class TestCommandLine:
    def _run(self, monkeypatch, *args):
        monkeypatch.setattr(sys, "argv", ["leaguesched", str(CONFIG), *args])
        main()

    def test_generate_and_save(self, monkeypatch, tmp_path):
        out = tmp_path / "out"
        self._run(monkeypatch, "--league", "spring-singles", "--seed", "3",
                  "-o", str(out), "--save")
        for name in ("schedule.txt", "schedule.csv", "stats.txt", "bookings.yaml"):
            assert (out / name).exists()
        saved = [b for b in load_bookings(out / "bookings.yaml")
                 if b.league_id == "spring-singles"]
        assert len(saved) == 25

    def test_verify_generated_csv(self, monkeypatch, tmp_path):
        out = tmp_path / "out"
        self._run(monkeypatch, "--league", "spring-singles", "--seed", "3",
                  "-o", str(out))
        with pytest.raises(SystemExit) as exc:
            self._run(monkeypatch, "--league", "spring-singles",
                      "--verify", str(out / "schedule.csv"))
        assert exc.value.code == 0

    def test_saved_schedule_not_regenerated(self, monkeypatch, tmp_path):
        first = tmp_path / "first"
        self._run(monkeypatch, "--league", "spring-singles", "--seed", "3",
                  "-o", str(first), "--save")
        second = tmp_path / "second"
        self._run(monkeypatch, "--league", "spring-singles", "--seed", "4",
                  "--bookings", str(first / "bookings.yaml"), "-o", str(second))
        assert (second / "schedule.csv").read_text() == \
            (first / "schedule.csv").read_text()
        assert not (second / "stats.txt").exists()

    def test_save_refused_when_saved(self, monkeypatch, tmp_path):
        first = tmp_path / "first"
        self._run(monkeypatch, "--league", "spring-singles", "--seed", "3",
                  "-o", str(first), "--save")
        with pytest.raises(SystemExit) as exc:
            self._run(monkeypatch, "--league", "spring-singles",
                      "--bookings", str(first / "bookings.yaml"),
                      "-o", str(tmp_path / "second"), "--save")
        assert exc.value.code == 1

    def test_unknown_league(self, monkeypatch, tmp_path):
        with pytest.raises(SystemExit) as exc:
            self._run(monkeypatch, "--league", "nope", "-o", str(tmp_path))
        assert exc.value.code == 1

    def test_league_required_with_several(self, monkeypatch, tmp_path):
        with pytest.raises(SystemExit) as exc:
            self._run(monkeypatch, "-o", str(tmp_path))
        assert exc.value.code == 1
