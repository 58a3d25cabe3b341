"""
Entry points for web request handlers.

Every operation returns ``(value, error)``: the value on success, or None and
the TournamentError describing why the operation was rejected. Mutations run
load, transform and save under the tournament's lock, so each one sees the
state left by the previous one.
"""
import logging
from datetime import datetime
from typing import Callable, Dict, Optional, Tuple

from filelock import Timeout

from draw_engine import generator, progression, registration
from draw_engine.errors import TournamentBusy, TournamentError, TournamentNotFound
from draw_engine.models import Participant
from draw_engine.store import TournamentStore
from draw_engine.tournament import Tournament, snapshot
from draw_engine.validation import check_config

logger = logging.getLogger(__name__)

Outcome = Tuple[Optional[object], Optional[TournamentError]]


class TournamentService:
    def __init__(self, store: TournamentStore):
        self.store = store

    def _update(self, tournament_id: str, operation: str,
                transform: Callable[[Tournament], Tournament]) -> Outcome:
        if not self.store.exists(tournament_id):
            return None, TournamentNotFound(str(tournament_id))
        try:
            with self.store.locked(tournament_id):
                current = self.store.load(tournament_id)
                updated = transform(current)
                self.store.save(updated, expected_version=current.version)
        except Timeout:
            logger.warning(f'{operation} on {tournament_id}: lock timeout')
            return None, TournamentBusy(tournament_id)
        except TournamentError as e:
            logger.warning(f'{operation} on {tournament_id} rejected: {e.code}: {e.message}')
            return None, e
        return updated, None

    # ========== Setup ==========

    def create_tournament(self, data: Dict) -> Outcome:
        """Validate a configuration and store a new tournament in registration."""
        try:
            config = check_config(data)
        except TournamentError as e:
            logger.info(f'Tournament configuration rejected: {e.message}')
            return None, e

        tournament_id = self.store.new_id(config.title)
        tournament = Tournament(tournament_id, config, created=datetime.now().isoformat())
        try:
            with self.store.locked(tournament_id):
                self.store.save(tournament, expected_version=None)
        except Timeout:
            return None, TournamentBusy(tournament_id)
        except TournamentError as e:
            return None, e
        logger.info(f'Created {config.tournament_type} tournament {tournament_id}')
        return tournament, None

    def register_participant(self, tournament_id: str, participant_id, name: str = None,
                             seed: int = None) -> Outcome:
        participant = Participant(str(participant_id), name, seed)
        return self._update(
            tournament_id, 'register',
            lambda t: registration.register_participant(t, participant),
        )

    def withdraw_participant(self, tournament_id: str, participant_id) -> Outcome:
        return self._update(
            tournament_id, 'withdraw',
            lambda t: registration.withdraw_participant(t, str(participant_id)),
        )

    def generate(self, tournament_id: str, random_seed: Optional[int] = None) -> Outcome:
        return self._update(
            tournament_id, 'generate',
            lambda t: generator.generate_structure(t, random_seed),
        )

    def reset_structure(self, tournament_id: str) -> Outcome:
        return self._update(tournament_id, 'reset', progression.reset_structure)

    # ========== Results ==========

    def record_result(self, tournament_id: str, match_id: str, winner_id, score=None) -> Outcome:
        winner = str(winner_id) if winner_id is not None else None
        return self._update(
            tournament_id, 'record_result',
            lambda t: progression.record_result(t, match_id, winner, score),
        )

    def unwind_result(self, tournament_id: str, match_id: str) -> Outcome:
        return self._update(
            tournament_id, 'unwind',
            lambda t: progression.unwind_result(t, match_id),
        )

    def advance_phase(self, tournament_id: str) -> Outcome:
        return self._update(tournament_id, 'advance_phase', progression.advance_phase)

    # ========== Reads ==========

    def list_tournaments(self) -> Outcome:
        summaries = []
        for tournament_id in self.store.list_ids():
            tournament = self.store.load(tournament_id)
            summaries.append({
                'id': tournament.id,
                'title': tournament.config.title,
                'tournament_type': tournament.config.tournament_type,
                'current_phase': tournament.current_phase,
                'participants': len(tournament.participants),
                'max_participants': tournament.config.max_participants,
            })
        return summaries, None

    def get_tournament(self, tournament_id: str) -> Outcome:
        try:
            return self.store.load(tournament_id), None
        except TournamentError as e:
            return None, e

    def get_snapshot(self, tournament_id: str) -> Outcome:
        tournament, error = self.get_tournament(tournament_id)
        if error:
            return None, error
        return snapshot(tournament), None

    def list_participants(self, tournament_id: str) -> Outcome:
        tournament, error = self.get_tournament(tournament_id)
        if error:
            return None, error
        return [p.to_dict() for p in tournament.participants], None
