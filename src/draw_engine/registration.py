from draw_engine.errors import (
    DuplicateParticipant, InvalidField, ParticipantNotFound, RegistrationClosed, TournamentFull,
)
from draw_engine.models import REGISTRATION, Participant
from draw_engine.tournament import Tournament


def register_participant(tournament: Tournament, participant: Participant) -> Tournament:
    """Add a participant while registration is open."""
    if tournament.current_phase != REGISTRATION:
        raise RegistrationClosed(tournament.current_phase)
    if participant.id in tournament.participant_ids():
        raise DuplicateParticipant(participant.id)
    if len(tournament.participants) >= tournament.config.max_participants:
        raise TournamentFull(tournament.config.max_participants)
    seed = participant.seed
    if seed is not None and (isinstance(seed, bool) or not isinstance(seed, int) or seed < 1):
        raise InvalidField('seed', 'must be a positive integer')

    result = tournament.copy()
    result.participants.append(participant)
    return result


def withdraw_participant(tournament: Tournament, participant_id: str) -> Tournament:
    """Remove a participant; only possible before the draw exists."""
    if tournament.current_phase != REGISTRATION:
        raise RegistrationClosed(tournament.current_phase)
    if tournament.get_participant(participant_id) is None:
        raise ParticipantNotFound(participant_id)

    result = tournament.copy()
    result.participants = [p for p in result.participants if p.id != participant_id]
    return result
