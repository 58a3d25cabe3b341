"""
Tennis score handling.

A score is a list of sets, each ``[player1_games, player2_games]`` in the
match's slot order. The booking site also sends sets as
``{'player1_score': 6, 'player2_score': 3}``; both shapes are accepted.
"""
import math
from typing import List, Optional, Tuple

from draw_engine.errors import InvalidScore


def normalize_score(score) -> List[List[int]]:
    """Convert a raw score into a list of [games1, games2] pairs."""
    if not isinstance(score, (list, tuple)) or not score:
        raise InvalidScore('Score must be a non-empty list of sets')

    sets = []
    for raw in score:
        if isinstance(raw, dict):
            pair = (raw.get('player1_score'), raw.get('player2_score'))
        elif isinstance(raw, (list, tuple)) and len(raw) == 2:
            pair = tuple(raw)
        else:
            raise InvalidScore(f'Invalid set: {raw!r}')
        for games in pair:
            if isinstance(games, bool) or not isinstance(games, int) or games < 0:
                raise InvalidScore(f'Invalid set: {raw!r}')
        sets.append([pair[0], pair[1]])
    return sets


def validate_set(games1: int, games2: int):
    """A set is won with six games and a two-game margin, or 7-6 on a tiebreak."""
    high, low = max(games1, games2), min(games1, games2)
    if high == 7 and low == 6:
        return
    if high < 6:
        raise InvalidScore(f'Invalid set {games1}-{games2}: a set needs at least 6 games')
    if high - low < 2:
        raise InvalidScore(f'Invalid set {games1}-{games2}: a set is won by two games')


def determine_winner(sets, best_of: int = 3) -> Tuple[Optional[int], Tuple[int, int]]:
    """Determine winner from set scores. Returns (winner_index, set_wins)."""
    wins = [0, 0]
    for games1, games2 in sets:
        if games1 > games2:
            wins[0] += 1
        elif games2 > games1:
            wins[1] += 1

    sets_to_win = math.ceil(best_of / 2)
    if wins[0] >= sets_to_win:
        return 0, tuple(wins)
    if wins[1] >= sets_to_win:
        return 1, tuple(wins)
    return None, tuple(wins)


def check_score(score, best_of: int = 3) -> List[List[int]]:
    """Normalize and validate a score; returns the normalized sets.

    A score that stops before the match is decided is accepted (retirement),
    but no set may follow the one that decided it.
    """
    sets = normalize_score(score)
    if len(sets) > best_of:
        raise InvalidScore(f'A best of {best_of} match has at most {best_of} sets')
    for games1, games2 in sets:
        validate_set(games1, games2)
    for played in range(1, len(sets)):
        winner_idx, _ = determine_winner(sets[:played], best_of)
        if winner_idx is not None:
            raise InvalidScore('Sets were recorded after the match was already decided')
    return sets


def score_totals(sets) -> Tuple[int, int, int, int]:
    """Return (sets1, sets2, games1, games2) for a normalized score."""
    sets1 = sets2 = games1 = games2 = 0
    for g1, g2 in sets or []:
        games1 += g1
        games2 += g2
        if g1 > g2:
            sets1 += 1
        elif g2 > g1:
            sets2 += 1
    return sets1, sets2, games1, games2
