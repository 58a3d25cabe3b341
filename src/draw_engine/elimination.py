"""
Single elimination bracket generation and advancement.
"""
import math
from typing import Dict, List

from draw_engine.models import BYE, COMPLETED, ELIMINATION_PHASE, PENDING, SCHEDULED, Match


def get_round_name(players_in_round: int) -> str:
    """Get the name of a round based on number of players."""
    if players_in_round == 2:
        return "Final"
    elif players_in_round == 4:
        return "Semifinal"
    elif players_in_round == 8:
        return "Quarterfinal"
    else:
        return f"Round of {players_in_round}"


def calculate_bracket_size(num_players: int) -> int:
    """Calculate the bracket size (next power of 2)."""
    if num_players <= 0:
        return 0
    return 2 ** math.ceil(math.log2(num_players))


def calculate_byes(num_players: int) -> int:
    """Calculate number of byes needed."""
    return calculate_bracket_size(num_players) - num_players


def match_code(round_number: int, slot: int) -> str:
    return f"E{round_number}-M{slot}"


def _generate_bracket_order(bracket_size: int) -> List[int]:
    """
    Generate the standard tournament bracket order.
    This ensures that if all higher seeds win, they meet in the proper rounds.

    For 8 players: [1, 8, 4, 5, 2, 7, 3, 6]
    This gives matchups: 1v8, 4v5, 2v7, 3v6
    Winners: 1v4 side, 2v3 side
    Final: 1v2 (if chalk)
    """
    if bracket_size == 2:
        return [1, 2]

    half_size = bracket_size // 2
    upper_half = _generate_bracket_order(half_size)

    # Lower half is the complement of each upper seed
    lower_half = [bracket_size + 1 - seed for seed in upper_half]

    result = []
    for u, l in zip(upper_half, lower_half):
        result.extend([u, l])

    return result


def seed_from_group_standings(standings: Dict[str, List[Dict]], teams_advancing: int) -> List[str]:
    """
    Order the participants advancing from the group phase by seed.

    Seeding is done by group finish position:
    - All group winners get top seeds
    - All runners-up get next seeds
    - etc.
    Within a finishing position groups are taken in label order.
    """
    seeded = []
    for position in range(1, teams_advancing + 1):
        for label in sorted(standings):
            group_standings = standings[label]
            if len(group_standings) >= position:
                seeded.append(group_standings[position - 1]['participant'])
    return seeded


def propagate_winner(match: Match, matches_by_id: Dict[str, Match]):
    """Write a resolved match's winner into the slot that waits for it."""
    if match.next_match_id is None:
        return
    next_match = matches_by_id[match.next_match_id]
    next_match.set_player(match.next_slot, match.winner)
    if next_match.status == PENDING and next_match.player1 is not None and next_match.player2 is not None:
        next_match.status = SCHEDULED


def build_bracket(entrants: List[str]) -> List[Match]:
    """
    Build every match of a single elimination bracket.

    ``entrants`` is ordered by seed (index 0 is seed 1). First-round matches
    follow the standard bracket order; later rounds are placeholders wired to
    the matches that feed them. Byes are resolved here: the participant is
    placed in the second round and the bye match ends up completed.

    Returns matches ordered by (round, slot); a bracket of N slots has N-1.
    """
    num_entrants = len(entrants)
    if num_entrants < 2:
        return []

    bracket_size = calculate_bracket_size(num_entrants)
    total_rounds = int(math.log2(bracket_size))
    seed_to_participant = {seed: pid for seed, pid in enumerate(entrants, start=1)}
    bracket_order = _generate_bracket_order(bracket_size)

    matches = []
    first_round_name = get_round_name(bracket_size)
    for i in range(0, len(bracket_order), 2):
        slot = i // 2 + 1
        player1 = seed_to_participant.get(bracket_order[i])
        player2 = seed_to_participant.get(bracket_order[i + 1])
        match = Match(match_code(1, slot), ELIMINATION_PHASE, 1, slot,
                      round_name=first_round_name, player1=player1, player2=player2)
        # Higher seed gets the bye
        if player2 is None:
            match.status = BYE
            match.winner = player1
        elif player1 is None:
            match.status = BYE
            match.winner = player2
        matches.append(match)

    players_in_round = bracket_size // 2
    for round_number in range(2, total_rounds + 1):
        round_name = get_round_name(players_in_round)
        for slot in range(1, players_in_round // 2 + 1):
            matches.append(Match(
                match_code(round_number, slot), ELIMINATION_PHASE, round_number, slot,
                round_name=round_name,
                source1=match_code(round_number - 1, 2 * slot - 1),
                source2=match_code(round_number - 1, 2 * slot),
                status=PENDING,
            ))
        players_in_round //= 2

    matches_by_id = {m.id: m for m in matches}
    for match in matches:
        if match.round < total_rounds:
            match.next_match_id = match_code(match.round + 1, (match.slot + 1) // 2)
            match.next_slot = 1 if match.slot % 2 == 1 else 2

    for match in matches:
        if match.status == BYE:
            propagate_winner(match, matches_by_id)
            match.status = COMPLETED

    return matches
