"""
Error taxonomy for tournament configuration, generation and progression.

Core functions raise these; TournamentService catches them at its boundary
and hands them back to the caller as values.
"""
from typing import Optional


class TournamentError(Exception):
    """Base class for every error raised by the draw engine."""

    code = 'tournament_error'

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)

    def to_dict(self) -> dict:
        return {'error': self.code, 'message': self.message}


# ========== Validation ==========

class ValidationError(TournamentError):
    """Configuration is malformed; the user can correct it."""

    code = 'validation_error'


class UnknownType(ValidationError):
    code = 'unknown_type'

    def __init__(self, tournament_type):
        self.tournament_type = tournament_type
        super().__init__(f'Unknown tournament type: {tournament_type!r}')


class InvalidField(ValidationError):
    code = 'invalid_field'

    def __init__(self, field: str, reason: str):
        self.field = field
        self.reason = reason
        super().__init__(f'{field}: {reason}')

    def to_dict(self) -> dict:
        data = super().to_dict()
        data['field'] = self.field
        data['reason'] = self.reason
        return data


class InconsistentCapacity(ValidationError):
    code = 'inconsistent_capacity'

    def __init__(self, num_groups: int, teams_per_group: int, max_participants: int):
        self.expected = num_groups * teams_per_group
        super().__init__(
            f'{num_groups} groups of {teams_per_group} need max_participants={self.expected}, '
            f'got {max_participants}'
        )


# ========== Generation ==========

class GenerationError(TournamentError):
    """Structure generation or registration was invoked too early or too late."""

    code = 'generation_error'


class ParticipantCountMismatch(GenerationError):
    code = 'participant_count_mismatch'

    def __init__(self, expected: int, actual: int):
        self.expected = expected
        self.actual = actual
        super().__init__(f'Expected exactly {expected} participants, found {actual}')


class StructureAlreadyGenerated(GenerationError):
    code = 'structure_already_generated'

    def __init__(self, current_phase: str):
        super().__init__(f'Structure already generated (current phase: {current_phase})')


class RegistrationClosed(GenerationError):
    code = 'registration_closed'

    def __init__(self, current_phase: str):
        super().__init__(f'Participants are frozen once the draw exists (current phase: {current_phase})')


class TournamentFull(GenerationError):
    code = 'tournament_full'

    def __init__(self, max_participants: int):
        super().__init__(f'Tournament is full ({max_participants} participants)')


class DuplicateParticipant(GenerationError):
    code = 'duplicate_participant'

    def __init__(self, participant_id: str):
        super().__init__(f'Participant {participant_id} is already registered')


class ParticipantNotFound(GenerationError):
    code = 'participant_not_found'

    def __init__(self, participant_id: str):
        super().__init__(f'Participant {participant_id} not found')


# ========== Progression ==========

class ProgressionError(TournamentError):
    """Illegal match-result transition."""

    code = 'progression_error'


class MatchNotFound(ProgressionError):
    code = 'match_not_found'

    def __init__(self, match_id: str):
        self.match_id = match_id
        super().__init__(f'Match {match_id} not found')


class MatchAlreadyCompleted(ProgressionError):
    code = 'match_already_completed'

    def __init__(self, match_id: str):
        self.match_id = match_id
        super().__init__(f'Match {match_id} already has a result; unwind it first')


class MatchNotReady(ProgressionError):
    code = 'match_not_ready'

    def __init__(self, match_id: str):
        self.match_id = match_id
        super().__init__(f'Match {match_id} is still waiting for its participants')


class InvalidWinner(ProgressionError):
    code = 'invalid_winner'

    def __init__(self, match_id: str, winner_id):
        self.match_id = match_id
        self.winner_id = winner_id
        super().__init__(f'{winner_id} is not a participant of match {match_id}')


class InvalidScore(ProgressionError):
    code = 'invalid_score'


class MatchNotCompleted(ProgressionError):
    code = 'match_not_completed'

    def __init__(self, match_id: str):
        self.match_id = match_id
        super().__init__(f'Match {match_id} has no result to unwind')


class GroupPhaseLocked(ProgressionError):
    code = 'group_phase_locked'

    def __init__(self, match_id: str):
        self.match_id = match_id
        super().__init__(f'Match {match_id} belongs to a closed group phase')


class PrematurePhaseTransition(ProgressionError):
    code = 'premature_phase_transition'


class PhaseConflict(ProgressionError):
    code = 'phase_conflict'

    def __init__(self, expected: str, actual: str):
        self.expected = expected
        self.actual = actual
        super().__init__(f'Expected current phase {expected}, found {actual}')


# ========== Storage ==========

class StoreError(TournamentError):
    code = 'store_error'


class TournamentNotFound(StoreError):
    code = 'tournament_not_found'

    def __init__(self, tournament_id: str):
        self.tournament_id = tournament_id
        super().__init__(f'Tournament {tournament_id} not found')


class StaleWrite(StoreError):
    code = 'stale_write'

    def __init__(self, tournament_id: str, expected: Optional[int], actual: Optional[int]):
        super().__init__(
            f'Tournament {tournament_id} changed underneath this write '
            f'(expected version {expected}, found {actual})'
        )


class TournamentBusy(StoreError):
    code = 'tournament_busy'

    def __init__(self, tournament_id: str):
        self.tournament_id = tournament_id
        super().__init__(f'Tournament {tournament_id} is being updated, try again')
