import string
from typing import List, Optional, Tuple

from draw_engine.models import GROUP_PHASE, SCHEDULED, Group, Match

LEAGUE_LABEL = 'League'


def group_label(index: int) -> str:
    return f"Group {string.ascii_uppercase[index]}"


def distribute_into_groups(entrants: List[str], num_groups: int) -> List[Group]:
    """Deal seeded entrants across groups: group 1 gets entrants 1, g+1, 2g+1, ..."""
    groups = [Group(group_label(i)) for i in range(num_groups)]
    for position, participant_id in enumerate(entrants):
        groups[position % num_groups].members.append(participant_id)
    return groups


def circle_schedule(participant_ids: List[str]) -> List[List[Tuple[str, str]]]:
    """
    Round-robin rounds by the circle method.

    The first participant stays fixed while the others rotate one place per
    round, so nobody plays twice in a round. With an odd count one
    participant sits out each round.
    """
    ids: List[Optional[str]] = list(participant_ids)
    if len(ids) < 2:
        return []
    if len(ids) % 2 != 0:
        ids.append(None)

    num_rounds = len(ids) - 1
    half = len(ids) // 2
    order = list(range(len(ids)))

    rounds = []
    for _ in range(num_rounds):
        pairings = []
        for i in range(half):
            home = ids[order[i]]
            away = ids[order[len(ids) - 1 - i]]
            if home is not None and away is not None:
                pairings.append((home, away))
        rounds.append(pairings)
        order.insert(1, order.pop())
    return rounds


def generate_round_robin_matches(group: Group, id_prefix: str) -> List[Match]:
    """Every pairing of the group's members, k(k-1)/2 matches."""
    matches = []
    for round_number, pairings in enumerate(circle_schedule(group.members), start=1):
        for slot, (player1, player2) in enumerate(pairings, start=1):
            matches.append(Match(
                f"{id_prefix}-R{round_number}-M{slot}", GROUP_PHASE, round_number, slot,
                round_name=f"Matchday {round_number}",
                group=group.label,
                player1=player1,
                player2=player2,
                status=SCHEDULED,
            ))
    return matches
