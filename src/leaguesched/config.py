"""Config loading and validation for the league scheduler."""

import re
from datetime import date, datetime, time
from pathlib import Path

import yaml

from leaguesched.errors import ConfigError
from leaguesched.models import (
    AvailabilityWindow, Booking, DayOfWeek, Division, GameType, League,
    MatchStatus, Player,
)
from leaguesched.store import LeagueStore


def parse_time(s) -> time:
    """Parse time strings like '18:00', '6:30pm', '10am'.

    PyYAML reads an unquoted 18:00 as the base-60 integer 1080, so ints are
    taken as minutes past midnight.
    """
    if isinstance(s, time):
        return s
    if isinstance(s, int):
        return time(s // 60, s % 60)

    s_lower = str(s).strip().lower()
    is_pm = s_lower.endswith("pm")
    is_am = s_lower.endswith("am")

    # Strip am/pm suffix
    s_clean = s_lower
    if is_pm or is_am:
        s_clean = s_clean[:-2].strip()

    try:
        if ":" in s_clean:
            parts = s_clean.split(":")
            h = int(parts[0])
            m = int(parts[1])
        else:
            h = int(s_clean)
            m = 0

        if is_pm and h < 12:
            h += 12
        elif is_am and h == 12:
            h = 0

        return time(h, m)
    except ValueError:
        raise ConfigError(f"Invalid time: {s!r}") from None


def parse_date(s) -> date:
    """Parse date string YYYY-MM-DD."""
    if isinstance(s, datetime):
        return s.date()
    if isinstance(s, date):
        return s
    try:
        parts = str(s).strip().split("-")
        return date(int(parts[0]), int(parts[1]), int(parts[2]))
    except (ValueError, IndexError):
        raise ConfigError(f"Invalid date: {s!r}") from None


def parse_datetime(s, end_of_day: bool = False) -> datetime:
    """Parse 'YYYY-MM-DD', 'YYYY-MM-DD HH:MM' or 'YYYY-MM-DDTHH:MM'.

    A bare date means midnight, or 23:59 when end_of_day is set so the
    last day of a season stays playable.
    """
    if isinstance(s, datetime):
        return s
    if isinstance(s, date):
        d, t = s, None
    else:
        parts = re.split(r"[ T]", str(s).strip(), maxsplit=1)
        d = parse_date(parts[0])
        t = parse_time(parts[1]) if len(parts) > 1 else None
    if t is None:
        t = time(23, 59) if end_of_day else time(0, 0)
    return datetime.combine(d, t)


def _slug(name: str) -> str:
    return re.sub(r"[^a-z0-9]+", "-", name.lower()).strip("-")


def _parse_players(raw_players: list, division_id: str) -> list[Player]:
    players = []
    for p in raw_players or []:
        if isinstance(p, dict):
            pid = str(p.get("id") or _slug(str(p["name"])))
            name = str(p.get("name", pid))
        else:
            pid, name = _slug(str(p)), str(p)
        players.append(Player(id=pid, name=name, division_id=division_id))
    return players


def _parse_league(code: str, ldata: dict) -> League:
    try:
        start = parse_datetime(ldata["start_date"])
        end = parse_datetime(ldata["end_date"], end_of_day=True)
    except KeyError as e:
        raise ConfigError(f"League {code}: missing {e.args[0]}") from None

    try:
        game_type = GameType.from_str(str(ldata.get("game_type", "singles")))
    except ValueError:
        raise ConfigError(
            f"League {code}: unknown game_type {ldata.get('game_type')!r}"
        ) from None

    divisions = []
    for div_id, ddata in (ldata.get("divisions") or {}).items():
        div_id = str(div_id)
        ddata = ddata or {}
        divisions.append(Division(
            id=div_id,
            name=str(ddata.get("name", div_id)),
            players=_parse_players(ddata.get("players", []), div_id),
        ))

    return League(
        id=code,
        name=str(ldata.get("name", code)),
        start_date=start,
        end_date=end,
        game_type=game_type,
        weeks_for_cutthroat=int(ldata.get("weeks_for_cutthroat", 8)),
        match_duration=int(ldata.get("match_duration", 60)),
        divisions=divisions,
    )


def _parse_window(wdata: dict) -> AvailabilityWindow:
    try:
        raw_day = wdata["day"]
        if isinstance(raw_day, int):
            day = DayOfWeek(raw_day)
        else:
            day = DayOfWeek.from_str(str(raw_day))
    except (KeyError, ValueError):
        raise ConfigError(f"Invalid availability day: {wdata.get('day')!r}") from None
    court = wdata.get("court")
    return AvailabilityWindow(
        day=day,
        start_time=parse_time(wdata.get("start", "18:00")),
        end_time=parse_time(wdata.get("end", "21:00")),
        is_active=bool(wdata.get("active", True)),
        court_number=int(court) if court is not None else None,
    )


def _parse_booking(mdata: dict) -> Booking:
    court = mdata.get("court")
    try:
        status = MatchStatus.from_str(str(mdata.get("status", "scheduled")))
    except ValueError:
        raise ConfigError(f"Unknown match status {mdata.get('status')!r}") from None
    return Booking(
        league_id=str(mdata["league"]),
        scheduled_time=parse_datetime(mdata["time"]),
        court_number=int(court) if court is not None else None,
        status=status,
        player_ids=tuple(str(p) for p in mdata.get("players", [])),
        week_number=int(mdata.get("week", 0)),
        division_id=str(mdata.get("division", "")),
        is_makeup=bool(mdata.get("makeup", False)),
    )


def _parse_bookings(raw_matches: list) -> list[Booking]:
    bookings = []
    for mdata in raw_matches or []:
        try:
            bookings.append(_parse_booking(mdata))
        except KeyError as e:
            raise ConfigError(f"Match entry missing {e.args[0]}: {mdata}") from None
    return bookings


def load_config(path: str | Path) -> LeagueStore:
    """Load config YAML into a LeagueStore.

    Top-level keys:
    - availability: list of weekly windows {day, start, end, active, court}
    - leagues: dict[id -> {name, start_date, end_date, game_type,
      match_duration, weeks_for_cutthroat, divisions}]
    - matches: existing bookings {league, time, court, status, ...}
    """
    path = Path(path)
    with open(path) as f:
        raw = yaml.safe_load(f) or {}

    leagues = {}
    for code, ldata in (raw.get("leagues") or {}).items():
        leagues[str(code)] = _parse_league(str(code), ldata or {})

    availability = [_parse_window(w) for w in raw.get("availability") or []]
    matches = _parse_bookings(raw.get("matches"))

    # Validate
    warnings = []
    for league in leagues.values():
        if league.end_date < league.start_date:
            raise ConfigError(f"League {league.id}: end_date before start_date")
        seen: dict[str, str] = {}
        for div in league.divisions:
            for p in div.players:
                if p.id in seen:
                    warnings.append(
                        f"Player {p.id} in both {seen[p.id]} and {div.id} "
                        f"of league {league.id}"
                    )
                seen[p.id] = div.id
    for m in matches:
        if m.league_id not in leagues:
            warnings.append(f"Match at {m.scheduled_time} belongs to "
                            f"unknown league {m.league_id}")
    if not any(w.is_active for w in availability):
        warnings.append("No active availability windows; every match "
                        "will be a makeup")

    if warnings:
        print("Config warnings:")
        for w in warnings:
            print(f"  {w}")

    return LeagueStore(leagues=leagues, availability=availability,
                       matches=matches)


def load_bookings(path: str | Path) -> list[Booking]:
    """Load a bookings file written by dump_bookings."""
    with open(Path(path)) as f:
        raw = yaml.safe_load(f) or {}
    return _parse_bookings(raw.get("matches"))


def dump_bookings(bookings: list[Booking], path: str | Path):
    """Write bookings as a YAML `matches:` list."""
    entries = []
    for b in bookings:
        entry = {
            "league": b.league_id,
            "time": b.scheduled_time.strftime("%Y-%m-%d %H:%M"),
            "court": b.court_number,
            "status": b.status.value.lower(),
            "players": list(b.player_ids),
            "week": b.week_number,
            "division": b.division_id,
        }
        if b.is_makeup:
            entry["makeup"] = True
        entries.append(entry)

    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w") as f:
        yaml.safe_dump({"matches": entries}, f, sort_keys=False)
