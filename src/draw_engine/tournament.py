"""
The tournament aggregate: configuration, participants, groups, matches and
the single ``current_phase`` pointer.
"""
import copy
from typing import Dict, List, Optional

from draw_engine.errors import MatchNotFound, PhaseConflict
from draw_engine.formats import TournamentConfig, config_from_dict
from draw_engine.models import (
    ACTIVE, COMPLETED, ELIMINATION_PHASE, GROUP_PHASE, REGISTRATION,
    Group, Match, Participant, Phase,
)
from draw_engine.standings import compute_group_standings


class Tournament:
    def __init__(self, id: str, config: TournamentConfig, participants=None, groups=None,
                 matches=None, phases=None, current_phase: str = REGISTRATION,
                 champion: Optional[str] = None, random_seed: Optional[int] = None,
                 version: int = 0, created: Optional[str] = None):
        self.id = id
        self.config = config
        self.participants: List[Participant] = participants if participants else []
        self.groups: List[Group] = groups if groups else []
        self.matches: List[Match] = matches if matches else []
        self.phases: List[Phase] = phases if phases else []
        self.current_phase = current_phase
        self.champion = champion
        self.random_seed = random_seed
        self.version = version
        self.created = created

    # ========== Lookups ==========

    def get_match(self, match_id: str) -> Match:
        for match in self.matches:
            if match.id == match_id:
                return match
        raise MatchNotFound(match_id)

    def matches_in_phase(self, phase: str) -> List[Match]:
        return [m for m in self.matches if m.phase == phase]

    def matches_in_group(self, label: str) -> List[Match]:
        return [m for m in self.matches if m.phase == GROUP_PHASE and m.group == label]

    def get_phase(self, name: str) -> Optional[Phase]:
        for phase in self.phases:
            if phase.name == name:
                return phase
        return None

    def participant_ids(self) -> List[str]:
        return [p.id for p in self.participants]

    def get_participant(self, participant_id: str) -> Optional[Participant]:
        for participant in self.participants:
            if participant.id == participant_id:
                return participant
        return None

    def standings(self) -> Dict[str, List[Dict]]:
        return {
            group.label: compute_group_standings(
                group, self.matches_in_group(group.label), self.config.options
            )
            for group in self.groups
        }

    # ========== State ==========

    def transition_phase(self, expected: str, new: str):
        """Move the current phase pointer only if it still reads ``expected``."""
        if self.current_phase != expected:
            raise PhaseConflict(expected, self.current_phase)
        old = self.get_phase(expected)
        if old is not None:
            old.status = COMPLETED
        new_phase = self.get_phase(new)
        if new_phase is not None:
            new_phase.status = ACTIVE
        self.current_phase = new

    def copy(self) -> 'Tournament':
        return copy.deepcopy(self)

    # ========== Serialization ==========

    def to_dict(self) -> Dict:
        return {
            'id': self.id,
            'config': self.config.to_dict(),
            'participants': [p.to_dict() for p in self.participants],
            'groups': [g.to_dict() for g in self.groups],
            'matches': [m.to_dict() for m in self.matches],
            'phases': [p.to_dict() for p in self.phases],
            'current_phase': self.current_phase,
            'champion': self.champion,
            'random_seed': self.random_seed,
            'version': self.version,
            'created': self.created,
        }

    @classmethod
    def from_dict(cls, data: Dict) -> 'Tournament':
        return cls(
            id=data['id'],
            config=config_from_dict(data['config']),
            participants=[Participant.from_dict(p) for p in data.get('participants') or []],
            groups=[Group.from_dict(g) for g in data.get('groups') or []],
            matches=[Match.from_dict(m) for m in data.get('matches') or []],
            phases=[Phase.from_dict(p) for p in data.get('phases') or []],
            current_phase=data.get('current_phase', REGISTRATION),
            champion=data.get('champion'),
            random_seed=data.get('random_seed'),
            version=data.get('version', 0),
            created=data.get('created'),
        )

    def __repr__(self):
        return (f"Tournament(id={self.id}, type={self.config.tournament_type}, "
                f"current_phase={self.current_phase}, matches={len(self.matches)})")


def snapshot(tournament: Tournament) -> Dict:
    """
    Read-only projection for the presentation layer.

    Per match: both slot labels (participant id, "Winner <match>" or "BYE"),
    status, and whether it was a bye (a bye is completed and cannot be
    unwound). Per group: ranked standings.
    """
    standings = tournament.standings()
    return {
        'id': tournament.id,
        'title': tournament.config.title,
        'config': tournament.config.to_dict(),
        'current_phase': tournament.current_phase,
        'champion': tournament.champion,
        'random_seed': tournament.random_seed,
        'version': tournament.version,
        'phases': [p.to_dict() for p in tournament.phases],
        'participants': [p.to_dict() for p in tournament.participants],
        'groups': [
            {
                'label': group.label,
                'members': list(group.members),
                'standings': standings[group.label],
            }
            for group in tournament.groups
        ],
        'matches': [
            {
                'id': m.id,
                'phase': m.phase,
                'group': m.group,
                'round': m.round,
                'round_name': m.round_name,
                'slot': m.slot,
                'slots': [m.slot_label(1), m.slot_label(2)],
                'status': m.status,
                'bye': m.is_bye,
                'winner': m.winner,
                'score': m.score,
            }
            for m in tournament.matches
        ],
    }


def elimination_exists(tournament: Tournament) -> bool:
    return any(m.phase == ELIMINATION_PHASE for m in tournament.matches)
