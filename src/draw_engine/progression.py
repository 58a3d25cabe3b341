"""
Progression: recording results, advancing winners, moving from the group
phase to the elimination phase and detecting the end of a tournament.

Every operation works on a copy and returns the new tournament, so a
rejected operation leaves the caller's state untouched.
"""
import logging
from typing import Optional

from draw_engine.elimination import calculate_byes, propagate_winner
from draw_engine.errors import (
    GroupPhaseLocked, InvalidScore, InvalidWinner, MatchAlreadyCompleted,
    MatchNotCompleted, MatchNotReady, PrematurePhaseTransition,
)
from draw_engine.formats import GroupsThenElimination, RoundRobin
from draw_engine.generator import build_elimination_from_groups
from draw_engine.models import (
    COMPLETED, ELIMINATION_PHASE, GROUP_PHASE, PENDING, REGISTRATION, SCHEDULED,
)
from draw_engine.round_robin import LEAGUE_LABEL
from draw_engine.scoring import check_score, determine_winner
from draw_engine.standings import is_group_complete
from draw_engine.tournament import Tournament, elimination_exists

logger = logging.getLogger(__name__)


def record_result(tournament: Tournament, match_id: str, winner_id: str, score=None) -> Tournament:
    """
    Record the winner (and optionally the score) of a scheduled match.

    The winner moves into the slot of the next match that waits for it.
    Finishing the last group match opens the elimination phase; finishing the
    final, or the last league match, completes the tournament.
    """
    result = tournament.copy()
    match = result.get_match(match_id)

    if match.is_resolved:
        raise MatchAlreadyCompleted(match_id)
    if match.status == PENDING or match.player1 is None or match.player2 is None:
        raise MatchNotReady(match_id)
    if winner_id not in match.players:
        raise InvalidWinner(match_id, winner_id)

    sets = None
    if score is not None:
        best_of = result.config.options.best_of
        sets = check_score(score, best_of)
        winner_idx, _ = determine_winner(sets, best_of)
        if winner_idx is not None and match.players[winner_idx] != winner_id:
            raise InvalidScore(f'Score gives match {match_id} to {match.players[winner_idx]}')

    match.status = COMPLETED
    match.winner = winner_id
    match.score = sets

    matches_by_id = {m.id: m for m in result.matches}
    propagate_winner(match, matches_by_id)

    if match.phase == GROUP_PHASE:
        if is_group_complete(result.matches_in_phase(GROUP_PHASE)):
            if isinstance(result.config, GroupsThenElimination):
                _enter_elimination(result)
            elif isinstance(result.config, RoundRobin):
                leader = result.standings()[LEAGUE_LABEL][0]['participant']
                _complete(result, leader)
    elif match.next_match_id is None:
        _complete(result, winner_id)

    return result


def _enter_elimination(tournament: Tournament):
    # Check, generate, mark: a tournament whose bracket exists is left alone
    if elimination_exists(tournament):
        return
    tournament.transition_phase(GROUP_PHASE, ELIMINATION_PHASE)
    bracket = build_elimination_from_groups(tournament)
    tournament.matches.extend(bracket)
    qualifiers = tournament.config.num_groups * tournament.config.teams_advancing
    logger.info(f'Tournament {tournament.id}: group phase complete, '
                f'{len(bracket)} elimination matches generated, {calculate_byes(qualifiers)} byes')


def _complete(tournament: Tournament, champion: Optional[str]):
    tournament.transition_phase(tournament.current_phase, COMPLETED)
    tournament.champion = champion
    logger.info(f'Tournament {tournament.id} completed, champion {champion}')


def advance_phase(tournament: Tournament) -> Tournament:
    """Explicitly move a finished group phase on to the elimination phase."""
    if not isinstance(tournament.config, GroupsThenElimination):
        raise PrematurePhaseTransition(
            f'A {tournament.config.tournament_type} tournament has no group phase to leave'
        )
    if tournament.current_phase == REGISTRATION:
        raise PrematurePhaseTransition('The group phase has not been generated yet')

    result = tournament.copy()
    if elimination_exists(result):
        return result

    open_matches = [m for m in result.matches_in_phase(GROUP_PHASE) if m.status != COMPLETED]
    if open_matches:
        raise PrematurePhaseTransition(
            f'{len(open_matches)} group matches are still open'
        )
    _enter_elimination(result)
    return result


def unwind_result(tournament: Tournament, match_id: str) -> Tournament:
    """
    Reopen a completed match.

    Every later match that already used its winner is cleared as well,
    following the bracket forward until a match that had not been played.
    Group results are locked once the elimination bracket exists.
    """
    result = tournament.copy()
    match = result.get_match(match_id)

    if match.status != COMPLETED or match.is_bye:
        raise MatchNotCompleted(match_id)
    if match.phase == GROUP_PHASE and elimination_exists(result):
        raise GroupPhaseLocked(match_id)

    if result.current_phase == COMPLETED:
        result.transition_phase(COMPLETED, match.phase)
        result.champion = None

    match.status = SCHEDULED
    match.winner = None
    match.score = None

    matches_by_id = {m.id: m for m in result.matches}
    cleared = []
    current = match
    while current.next_match_id is not None:
        next_match = matches_by_id[current.next_match_id]
        next_match.set_player(current.next_slot, None)
        was_played = next_match.status == COMPLETED
        next_match.status = PENDING
        next_match.winner = None
        next_match.score = None
        cleared.append(next_match.id)
        if not was_played:
            break
        current = next_match

    logger.info(f'Tournament {result.id}: unwound {match_id}, cleared {cleared}')
    return result


def reset_structure(tournament: Tournament) -> Tournament:
    """Drop every group and match and reopen registration."""
    result = tournament.copy()
    result.groups = []
    result.matches = []
    result.phases = []
    result.champion = None
    result.random_seed = None
    result.current_phase = REGISTRATION
    logger.info(f'Tournament {result.id}: structure reset, registration reopened')
    return result
