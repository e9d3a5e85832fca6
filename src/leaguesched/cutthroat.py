"""Weekly three-player groupings for cutthroat leagues.

Groups are picked greedily: a handful of random candidates are scored
against how often their members have already shared a group, and the
least-repeated one wins. When every candidate is rejected the first three
remaining players are taken so the week always fills.
"""

import random
from collections import defaultdict
from typing import Callable, Optional

Group = tuple[str, str, str]


class PairHistory:
    """Counts how often each unordered pair of players has been grouped."""

    def __init__(self):
        self._counts: dict[tuple[str, str], int] = defaultdict(int)

    @staticmethod
    def key(a: str, b: str) -> tuple[str, str]:
        return (a, b) if a < b else (b, a)

    def count(self, a: str, b: str) -> int:
        return self._counts.get(self.key(a, b), 0)

    def pair_counts(self, group: Group) -> list[int]:
        a, b, c = group
        return [self.count(a, b), self.count(a, c), self.count(b, c)]

    def record(self, group: Group):
        a, b, c = group
        for x, y in ((a, b), (a, c), (b, c)):
            self._counts[self.key(x, y)] += 1

    def items(self):
        return self._counts.items()


Scorer = Callable[[Group, PairHistory], Optional[int]]


def repeat_score(group: Group, history: PairHistory) -> Optional[int]:
    """Sum of pairwise repeats, or None when all three pairs have met."""
    counts = history.pair_counts(group)
    if all(c > 0 for c in counts):
        return None
    return sum(counts)


def _pick_group(pool: list[str], history: PairHistory,
                rng: random.Random, scorer: Scorer,
                attempts: int) -> tuple[Group, bool]:
    """Choose one group from pool. Second value is True on fallback."""
    best: Optional[Group] = None
    best_score = None
    for _ in range(attempts):
        candidate = tuple(rng.sample(pool, 3))
        score = scorer(candidate, history)
        if score is None:
            continue
        if best_score is None or score < best_score:
            best = candidate
            best_score = score

    if best is None:
        return (pool[0], pool[1], pool[2]), True
    return best, False


def generate_cutthroat_groups(players: list[str], weeks: int,
                              rng: random.Random | None = None,
                              scorer: Scorer = repeat_score,
                              attempts: int = 10,
                              history: PairHistory | None = None,
                              ) -> list[list[Group]]:
    """Generate groups of three for each of `weeks` weeks.

    Pair history accumulates across the weeks of one call (or across calls
    when the caller passes its own `history`). Players left over when the
    roster is not a multiple of three sit out that week.

    Returns a list (one entry per week) of lists of 3-tuples of player ids.
    """
    rng = rng or random.Random()
    history = history if history is not None else PairHistory()
    weekly_groups = []
    fallbacks = 0

    for _ in range(weeks):
        shuffled = list(players)
        rng.shuffle(shuffled)
        used: set[str] = set()
        week_groups = []

        while True:
            pool = [p for p in shuffled if p not in used]
            if len(pool) < 3:
                break
            group, fell_back = _pick_group(pool, history, rng, scorer, attempts)
            if fell_back:
                fallbacks += 1
            week_groups.append(group)
            used.update(group)
            history.record(group)

        weekly_groups.append(week_groups)

    if fallbacks:
        print(f"  Cutthroat: {fallbacks} groups taken without a fresh pairing")
    return weekly_groups


def sit_outs(players: list[str], weekly_groups: list[list[Group]]) -> dict[int, list[str]]:
    """Players with no group, keyed by 1-based week number."""
    result = {}
    for week, groups in enumerate(weekly_groups, 1):
        playing = {p for g in groups for p in g}
        idle = [p for p in players if p not in playing]
        if idle:
            result[week] = idle
    return result
