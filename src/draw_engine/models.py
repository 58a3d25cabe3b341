GROUP_PHASE = 'group_phase'
ELIMINATION_PHASE = 'elimination_phase'
REGISTRATION = 'registration'
COMPLETED = 'completed'

# Match statuses
PENDING = 'pending'  # at least one slot still waits on another match
SCHEDULED = 'scheduled'
BYE = 'bye'

# Phase statuses
ACTIVE = 'active'

BYE_LABEL = 'BYE'


class Participant:
    def __init__(self, id, name=None, seed=None):
        self.id = id
        self.name = name if name else id
        self.seed = seed

    def to_dict(self):
        return {'id': self.id, 'name': self.name, 'seed': self.seed}

    @classmethod
    def from_dict(cls, data):
        return cls(data['id'], data.get('name'), data.get('seed'))

    def __repr__(self):
        return f"Participant(id={self.id}, name={self.name}, seed={self.seed})"


class Match:
    """A fixture between two slots.

    A slot holds a participant id, or None while it waits for the winner of
    ``source1``/``source2``. ``next_match_id``/``next_slot`` point at the slot
    this match's winner fills.
    """

    def __init__(self, id, phase, round, slot, round_name=None, group=None,
                 player1=None, player2=None, source1=None, source2=None,
                 next_match_id=None, next_slot=None, status=SCHEDULED,
                 winner=None, score=None):
        self.id = id
        self.phase = phase
        self.round = round
        self.slot = slot
        self.round_name = round_name
        self.group = group
        self.player1 = player1
        self.player2 = player2
        self.source1 = source1
        self.source2 = source2
        self.next_match_id = next_match_id
        self.next_slot = next_slot
        self.status = status
        self.winner = winner
        self.score = score

    @property
    def players(self):
        return (self.player1, self.player2)

    @property
    def is_bye(self):
        """A first-round match with one empty slot, won without being played."""
        return self.winner is not None and None in self.players

    @property
    def is_resolved(self):
        """True once the match has a winner, whether played or a bye."""
        return self.status in (COMPLETED, BYE)

    def get_player(self, slot):
        return self.player1 if slot == 1 else self.player2

    def set_player(self, slot, participant_id):
        if slot == 1:
            self.player1 = participant_id
        else:
            self.player2 = participant_id

    def get_source(self, slot):
        return self.source1 if slot == 1 else self.source2

    def slot_label(self, slot):
        player = self.get_player(slot)
        if player is not None:
            return player
        source = self.get_source(slot)
        if source is not None:
            return f"Winner {source}"
        return BYE_LABEL

    def to_dict(self):
        return {
            'id': self.id,
            'phase': self.phase,
            'round': self.round,
            'slot': self.slot,
            'round_name': self.round_name,
            'group': self.group,
            'player1': self.player1,
            'player2': self.player2,
            'source1': self.source1,
            'source2': self.source2,
            'next_match_id': self.next_match_id,
            'next_slot': self.next_slot,
            'status': self.status,
            'winner': self.winner,
            'score': self.score,
        }

    @classmethod
    def from_dict(cls, data):
        return cls(**data)

    def __repr__(self):
        return (f"Match(id={self.id}, players=({self.slot_label(1)}, {self.slot_label(2)}), "
                f"status={self.status}, winner={self.winner})")


class Group:
    def __init__(self, label, members=None):
        self.label = label
        self.members = members if members else []

    @property
    def letter(self):
        return self.label.split()[-1]

    def to_dict(self):
        return {'label': self.label, 'members': list(self.members)}

    @classmethod
    def from_dict(cls, data):
        return cls(data['label'], list(data.get('members', [])))

    def __repr__(self):
        return f"Group(label={self.label}, members={self.members})"


class Phase:
    def __init__(self, name, order, status=PENDING):
        self.name = name
        self.order = order
        self.status = status

    def to_dict(self):
        return {'name': self.name, 'order': self.order, 'status': self.status}

    @classmethod
    def from_dict(cls, data):
        return cls(data['name'], data['order'], data.get('status', PENDING))

    def __repr__(self):
        return f"Phase(name={self.name}, order={self.order}, status={self.status})"
