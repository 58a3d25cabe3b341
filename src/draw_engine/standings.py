"""
Group standings.

Ranking: points, then the tournament's configured tiebreakers applied to
participants level on points, then the order participants were drawn into
the group. Head-to-head counts only the wins among the participants who are
level on points.
"""
from itertools import groupby
from typing import Dict, List

from draw_engine.formats import TournamentOptions
from draw_engine.models import COMPLETED
from draw_engine.scoring import score_totals


def _head_to_head_wins(participant_ids, matches) -> Dict[str, int]:
    tied = set(participant_ids)
    wins = {pid: 0 for pid in participant_ids}
    for match in matches:
        if match.status != COMPLETED:
            continue
        if match.player1 in tied and match.player2 in tied:
            wins[match.winner] += 1
    return wins


def _tiebreak_key(row, h2h_wins, tiebreak_order, member_index):
    key = []
    for tiebreaker in tiebreak_order:
        if tiebreaker == 'head_to_head':
            key.append(-h2h_wins[row['participant']])
        elif tiebreaker == 'set_difference':
            key.append(-row['set_diff'])
        elif tiebreaker == 'game_difference':
            key.append(-row['game_diff'])
        elif tiebreaker == 'games_won':
            key.append(-row['games_won'])
    key.append(member_index[row['participant']])
    return tuple(key)


def compute_group_standings(group, matches, options: TournamentOptions = None) -> List[Dict]:
    """
    Calculate standings for a group from its matches.

    Returns: [{'participant': id, 'position': n, 'played': n, 'wins': n,
               'losses': n, 'points': n, 'sets_won': n, 'sets_lost': n,
               'set_diff': n, 'games_won': n, 'games_lost': n,
               'game_diff': n}, ...] best first.
    """
    options = options or TournamentOptions()
    member_index = {pid: i for i, pid in enumerate(group.members)}

    stats = {}
    for pid in group.members:
        stats[pid] = {
            'participant': pid,
            'played': 0,
            'wins': 0,
            'losses': 0,
            'points': 0,
            'sets_won': 0,
            'sets_lost': 0,
            'games_won': 0,
            'games_lost': 0,
        }

    for match in matches:
        if match.status != COMPLETED:
            continue
        if match.player1 not in stats or match.player2 not in stats:
            continue
        sets1, sets2, games1, games2 = score_totals(match.score)
        for pid, s_for, s_against, g_for, g_against in (
            (match.player1, sets1, sets2, games1, games2),
            (match.player2, sets2, sets1, games2, games1),
        ):
            row = stats[pid]
            row['played'] += 1
            row['sets_won'] += s_for
            row['sets_lost'] += s_against
            row['games_won'] += g_for
            row['games_lost'] += g_against
            if match.winner == pid:
                row['wins'] += 1
                row['points'] += options.points_per_win
            else:
                row['losses'] += 1

    for row in stats.values():
        row['set_diff'] = row['sets_won'] - row['sets_lost']
        row['game_diff'] = row['games_won'] - row['games_lost']

    by_points = sorted(stats.values(), key=lambda r: (-r['points'], member_index[r['participant']]))

    ranked = []
    for _, level in groupby(by_points, key=lambda r: r['points']):
        level = list(level)
        if len(level) > 1:
            h2h_wins = _head_to_head_wins([r['participant'] for r in level], matches)
            level.sort(key=lambda r: _tiebreak_key(r, h2h_wins, options.tiebreak_order, member_index))
        ranked.extend(level)

    for position, row in enumerate(ranked, start=1):
        row['position'] = position
    return ranked


def is_group_complete(matches) -> bool:
    return all(match.status == COMPLETED for match in matches)
