"""
Structure generation: turns a tournament in registration into its groups
and matches.

Generation never touches the input tournament; it returns one complete new
aggregate for the caller to persist in a single write.
"""
import logging
import random
from typing import List, Optional

from draw_engine.elimination import build_bracket, seed_from_group_standings
from draw_engine.errors import ParticipantCountMismatch, StructureAlreadyGenerated
from draw_engine.formats import GroupsThenElimination, RoundRobin, SingleElimination
from draw_engine.models import REGISTRATION, Group, Match, Participant, Phase
from draw_engine.round_robin import LEAGUE_LABEL, distribute_into_groups, generate_round_robin_matches
from draw_engine.tournament import Tournament

logger = logging.getLogger(__name__)


def order_entrants(participants: List[Participant], seeding: str = 'registration',
                   random_seed: Optional[int] = None) -> List[str]:
    """
    Order participants for placement, best seed first.

    Seeded participants come first by ascending seed, the rest follow in
    registration order, or shuffled by ``random_seed`` when seeding is random.
    """
    seeded = sorted((p for p in participants if p.seed is not None), key=lambda p: p.seed)
    unseeded = [p for p in participants if p.seed is None]
    if seeding == 'random':
        random.Random(random_seed).shuffle(unseeded)
    return [p.id for p in seeded + unseeded]


def generate_structure(tournament: Tournament, random_seed: Optional[int] = None) -> Tournament:
    """
    Generate the initial structure of a tournament.

    Single elimination gets its full bracket, groups-then-elimination gets
    its groups and their round-robin matches, round robin gets one league.
    ``random_seed`` is only used with random seeding; when omitted one is
    drawn and recorded on the tournament so the draw can be reproduced.
    """
    if tournament.current_phase != REGISTRATION:
        raise StructureAlreadyGenerated(tournament.current_phase)

    config = tournament.config
    if len(tournament.participants) != config.max_participants:
        raise ParticipantCountMismatch(config.max_participants, len(tournament.participants))

    result = tournament.copy()
    if config.options.seeding == 'random':
        if random_seed is None:
            random_seed = random.SystemRandom().randrange(2 ** 32)
        result.random_seed = random_seed
    else:
        result.random_seed = None

    entrants = order_entrants(result.participants, config.options.seeding, result.random_seed)
    result.phases = [Phase(name, order) for order, name in enumerate(config.phases, start=1)]
    result.champion = None

    if isinstance(config, SingleElimination):
        result.groups = []
        result.matches = build_bracket(entrants)
    elif isinstance(config, GroupsThenElimination):
        result.groups = distribute_into_groups(entrants, config.num_groups)
        result.matches = []
        for group in result.groups:
            result.matches.extend(generate_round_robin_matches(group, f"G{group.letter}"))
    elif isinstance(config, RoundRobin):
        result.groups = [Group(LEAGUE_LABEL, entrants)]
        result.matches = generate_round_robin_matches(result.groups[0], 'L')

    result.transition_phase(REGISTRATION, config.phases[0])
    logger.info(f'Generated {config.tournament_type} structure for {result.id}: '
                f'{len(result.groups)} groups, {len(result.matches)} matches')
    return result


def build_elimination_from_groups(tournament: Tournament) -> List[Match]:
    """Bracket for the participants advancing from a finished group phase."""
    entrants = seed_from_group_standings(tournament.standings(), tournament.config.teams_advancing)
    return build_bracket(entrants)
