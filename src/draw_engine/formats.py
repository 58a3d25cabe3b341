"""
Tournament formats.

Each tournament type is its own frozen dataclass carrying only the fields
that type needs, so a round robin can never have a group count and a
knockout can never have an advancing count.
"""
from dataclasses import dataclass, field
from typing import ClassVar, Dict, Tuple, Union

SINGLE_ELIMINATION = 'single_elimination'
GROUPS_THEN_ELIMINATION = 'groups_then_elimination'
ROUND_ROBIN = 'round_robin'

# Names used by the academy's booking site map onto the canonical ones.
TYPE_ALIASES = {
    SINGLE_ELIMINATION: SINGLE_ELIMINATION,
    'eliminazione_diretta': SINGLE_ELIMINATION,
    GROUPS_THEN_ELIMINATION: GROUPS_THEN_ELIMINATION,
    'girone_eliminazione': GROUPS_THEN_ELIMINATION,
    ROUND_ROBIN: ROUND_ROBIN,
    'campionato': ROUND_ROBIN,
}

VALID_BRACKET_SIZES = (2, 4, 8, 16, 32, 64, 128)
MATCH_FORMATS = {'best_of_3': 3, 'best_of_5': 5}
TIEBREAKERS = ('head_to_head', 'set_difference', 'game_difference', 'games_won')
DEFAULT_TIEBREAK_ORDER = ('head_to_head', 'set_difference', 'game_difference')
SEEDING_MODES = ('registration', 'random')


@dataclass(frozen=True)
class TournamentOptions:
    """Settings shared by every format."""

    match_format: str = 'best_of_3'
    points_per_win: int = 2
    tiebreak_order: Tuple[str, ...] = DEFAULT_TIEBREAK_ORDER
    seeding: str = 'registration'

    @property
    def best_of(self) -> int:
        return MATCH_FORMATS[self.match_format]

    def to_dict(self) -> Dict:
        return {
            'match_format': self.match_format,
            'points_per_win': self.points_per_win,
            'tiebreak_order': list(self.tiebreak_order),
            'seeding': self.seeding,
        }

    @classmethod
    def from_dict(cls, data: Dict) -> 'TournamentOptions':
        return cls(
            match_format=data.get('match_format', 'best_of_3'),
            points_per_win=data.get('points_per_win', 2),
            tiebreak_order=tuple(data.get('tiebreak_order', DEFAULT_TIEBREAK_ORDER)),
            seeding=data.get('seeding', 'registration'),
        )


@dataclass(frozen=True)
class SingleElimination:
    tournament_type: ClassVar[str] = SINGLE_ELIMINATION

    title: str
    max_participants: int
    options: TournamentOptions = field(default_factory=TournamentOptions)

    @property
    def phases(self) -> Tuple[str, ...]:
        return ('elimination_phase',)

    def to_dict(self) -> Dict:
        return {
            'tournament_type': self.tournament_type,
            'title': self.title,
            'max_participants': self.max_participants,
            **self.options.to_dict(),
        }


@dataclass(frozen=True)
class GroupsThenElimination:
    tournament_type: ClassVar[str] = GROUPS_THEN_ELIMINATION

    title: str
    max_participants: int
    num_groups: int
    teams_per_group: int
    teams_advancing: int
    options: TournamentOptions = field(default_factory=TournamentOptions)

    @property
    def phases(self) -> Tuple[str, ...]:
        return ('group_phase', 'elimination_phase')

    def to_dict(self) -> Dict:
        return {
            'tournament_type': self.tournament_type,
            'title': self.title,
            'max_participants': self.max_participants,
            'num_groups': self.num_groups,
            'teams_per_group': self.teams_per_group,
            'teams_advancing': self.teams_advancing,
            **self.options.to_dict(),
        }


@dataclass(frozen=True)
class RoundRobin:
    tournament_type: ClassVar[str] = ROUND_ROBIN

    title: str
    max_participants: int
    options: TournamentOptions = field(default_factory=TournamentOptions)

    @property
    def phases(self) -> Tuple[str, ...]:
        return ('group_phase',)

    def to_dict(self) -> Dict:
        return {
            'tournament_type': self.tournament_type,
            'title': self.title,
            'max_participants': self.max_participants,
            **self.options.to_dict(),
        }


TournamentConfig = Union[SingleElimination, GroupsThenElimination, RoundRobin]


def config_from_dict(data: Dict) -> TournamentConfig:
    """Rebuild a config that was validated before it was stored."""
    tournament_type = TYPE_ALIASES[data['tournament_type']]
    options = TournamentOptions.from_dict(data)
    if tournament_type == SINGLE_ELIMINATION:
        return SingleElimination(data['title'], data['max_participants'], options)
    if tournament_type == GROUPS_THEN_ELIMINATION:
        return GroupsThenElimination(
            data['title'], data['max_participants'],
            data['num_groups'], data['teams_per_group'], data['teams_advancing'],
            options,
        )
    return RoundRobin(data['title'], data['max_participants'], options)
