"""Round-robin pairing generation for singles and doubles leagues."""

from leaguesched.models import Round

BYE = "__BYE__"


def generate_round_robin(players: list[str]) -> list[Round]:
    """Generate a full round-robin schedule using the circle method.

    For N players: N-1 rounds if even, N rounds (one bye each) if odd.
    Position 0 stays fixed; after every round the last entry moves to
    position 1. The result depends only on roster order, so callers that
    want variety shuffle the output.
    """
    order = list(players)
    n = len(order)
    if n < 2:
        return []

    # For odd number of players, add a dummy for byes
    if n % 2 == 1:
        order.append(BYE)
        n += 1

    rounds = []
    for r in range(n - 1):
        matchups = []
        bye_players = []
        for i in range(n // 2):
            p1 = order[i]
            p2 = order[n - 1 - i]
            if p1 == BYE:
                bye_players.append(p2)
            elif p2 == BYE:
                bye_players.append(p1)
            else:
                matchups.append((p1, p2))

        rounds.append(Round(number=r + 1, matchups=matchups,
                            bye_players=bye_players))

        order = [order[0]] + [order[-1]] + order[1:-1]

    return rounds


def round_robin_pairings(players: list[str]) -> list[tuple[str, str]]:
    """Every distinct pair of players exactly once, in round order."""
    pairings = []
    for rnd in generate_round_robin(players):
        pairings.extend(rnd.matchups)
    return pairings


def verify_round_robin(rounds: list[Round], players: list[str]) -> dict:
    """Verify a round-robin schedule is valid and complete.

    Returns dict with:
    - valid: bool
    - errors: list of error strings
    - pair_counts: dict of sorted (a, b) -> count
    - games_per_player: dict of player -> game count
    """
    errors = []
    pair_counts: dict[tuple[str, str], int] = {}
    games_per_player: dict[str, int] = {p: 0 for p in players}

    for rnd in rounds:
        in_round = set()
        for a, b in rnd.matchups:
            if a == b:
                errors.append(f"Round {rnd.number}: {a} paired with itself")
            for p in (a, b):
                if p in in_round:
                    errors.append(f"Round {rnd.number}: {p} appears twice")
                in_round.add(p)

            key = tuple(sorted([a, b]))
            pair_counts[key] = pair_counts.get(key, 0) + 1
            games_per_player[a] = games_per_player.get(a, 0) + 1
            games_per_player[b] = games_per_player.get(b, 0) + 1

    # Check every pair plays exactly once
    for i, p1 in enumerate(players):
        for p2 in players[i + 1:]:
            key = tuple(sorted([p1, p2]))
            count = pair_counts.get(key, 0)
            if count != 1:
                errors.append(f"{p1} vs {p2}: played {count} times (expected 1)")

    return {
        "valid": len(errors) == 0,
        "errors": errors,
        "pair_counts": pair_counts,
        "games_per_player": games_per_player,
    }
