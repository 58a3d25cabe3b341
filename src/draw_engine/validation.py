"""
Configuration validation for new tournaments.

Rules run in order and the first failure wins:
1. the tournament type must be recognised
2. every field the type needs must be present and within bounds
3. group tournaments must fill their groups exactly
"""
from typing import Dict, Optional, Tuple

from draw_engine.errors import InconsistentCapacity, InvalidField, UnknownType, ValidationError
from draw_engine.formats import (
    MATCH_FORMATS, ROUND_ROBIN, SEEDING_MODES, SINGLE_ELIMINATION,
    TIEBREAKERS, TYPE_ALIASES, VALID_BRACKET_SIZES, GroupsThenElimination, RoundRobin,
    SingleElimination, TournamentConfig, TournamentOptions,
)

MAX_GROUPS = 26  # one letter per group label


def _require_int(data: Dict, name: str, minimum: int) -> int:
    value = data.get(name)
    if value is None:
        raise InvalidField(name, 'is required')
    # bool is an int subclass; JSON true must not pass as 1
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidField(name, 'must be an integer')
    if value < minimum:
        raise InvalidField(name, f'must be at least {minimum}')
    return value


def _check_options(data: Dict) -> TournamentOptions:
    match_format = data.get('match_format', 'best_of_3')
    if not isinstance(match_format, str) or match_format not in MATCH_FORMATS:
        raise InvalidField('match_format', f"must be one of: {', '.join(MATCH_FORMATS)}")

    points_per_win = data.get('points_per_win', 2)
    if isinstance(points_per_win, bool) or not isinstance(points_per_win, int) or points_per_win < 1:
        raise InvalidField('points_per_win', 'must be a positive integer')

    tiebreak_order = data.get('tiebreak_order', None)
    if tiebreak_order is None:
        tiebreak_order = TournamentOptions().tiebreak_order
    if isinstance(tiebreak_order, str) or not isinstance(tiebreak_order, (list, tuple)):
        raise InvalidField('tiebreak_order', 'must be a list')
    unknown = [t for t in tiebreak_order if t not in TIEBREAKERS]
    if unknown:
        raise InvalidField('tiebreak_order', f"unknown tiebreakers: {', '.join(map(str, unknown))}")
    if len(set(tiebreak_order)) != len(tiebreak_order):
        raise InvalidField('tiebreak_order', 'must not repeat a tiebreaker')

    seeding = data.get('seeding', 'registration')
    if seeding not in SEEDING_MODES:
        raise InvalidField('seeding', f"must be one of: {', '.join(SEEDING_MODES)}")

    return TournamentOptions(
        match_format=match_format,
        points_per_win=points_per_win,
        tiebreak_order=tuple(tiebreak_order),
        seeding=seeding,
    )


def check_config(data: Dict) -> TournamentConfig:
    """Build a typed config from a request body, raising ValidationError."""
    if not isinstance(data, dict):
        raise InvalidField('body', 'must be an object')

    raw_type = data.get('tournament_type')
    tournament_type = TYPE_ALIASES.get(raw_type) if isinstance(raw_type, str) else None
    if tournament_type is None:
        raise UnknownType(raw_type)

    title = data.get('title')
    if not isinstance(title, str) or not title.strip():
        raise InvalidField('title', 'is required')
    title = title.strip()

    max_participants = _require_int(data, 'max_participants', 1)

    if tournament_type == SINGLE_ELIMINATION:
        if max_participants not in VALID_BRACKET_SIZES:
            raise InvalidField(
                'max_participants',
                f"must be one of: {', '.join(str(s) for s in VALID_BRACKET_SIZES)}",
            )
        return SingleElimination(title, max_participants, _check_options(data))

    if tournament_type == ROUND_ROBIN:
        if max_participants < 3:
            raise InvalidField('max_participants', 'must be at least 3')
        return RoundRobin(title, max_participants, _check_options(data))

    num_groups = _require_int(data, 'num_groups', 2)
    if num_groups > MAX_GROUPS:
        raise InvalidField('num_groups', f'must be at most {MAX_GROUPS}')
    teams_per_group = _require_int(data, 'teams_per_group', 3)
    teams_advancing = _require_int(data, 'teams_advancing', 1)
    if teams_advancing >= teams_per_group:
        raise InvalidField('teams_advancing', 'must be between 1 and teams_per_group - 1')
    if num_groups * teams_advancing > VALID_BRACKET_SIZES[-1]:
        raise InvalidField(
            'teams_advancing',
            f'num_groups * teams_advancing must be at most {VALID_BRACKET_SIZES[-1]}',
        )
    options = _check_options(data)

    if num_groups * teams_per_group != max_participants:
        raise InconsistentCapacity(num_groups, teams_per_group, max_participants)

    return GroupsThenElimination(
        title, max_participants, num_groups, teams_per_group, teams_advancing, options,
    )


def validate_config(data: Dict) -> Tuple[Optional[TournamentConfig], Optional[ValidationError]]:
    """Validate a proposed configuration. Returns (config, None) or (None, error)."""
    try:
        return check_config(data), None
    except ValidationError as e:
        return None, e
