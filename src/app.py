"""
Flask web application for the academy's tournament draws.
"""
import os
from flask import Flask, request, jsonify
from draw_engine.errors import (
    InvalidScore, MatchNotFound, ParticipantNotFound, TournamentBusy, TournamentNotFound,
    ValidationError,
)
from draw_engine.service import TournamentService
from draw_engine.store import TournamentStore
from draw_engine.tournament import snapshot

app = Flask(__name__)

BASE_DIR = os.path.dirname(os.path.dirname(__file__))
DATA_DIR = os.environ.get('TOURNAMENT_DATA_DIR', os.path.join(BASE_DIR, 'data'))
LOCK_TIMEOUT = float(os.environ.get('TOURNAMENT_LOCK_TIMEOUT', '10'))


def get_service() -> TournamentService:
    """Service bound to the configured data directory."""
    return TournamentService(TournamentStore(DATA_DIR, lock_timeout=LOCK_TIMEOUT))


def error_response(error):
    """Map a core error onto an HTTP response."""
    if isinstance(error, (ValidationError, InvalidScore)):
        status = 400
    elif isinstance(error, (TournamentNotFound, MatchNotFound, ParticipantNotFound)):
        status = 404
    elif isinstance(error, TournamentBusy):
        status = 503
    else:
        status = 409
    return jsonify(error.to_dict()), status


def _json_body() -> dict:
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}


@app.route('/api/tournaments', methods=['POST'])
def api_create_tournament():
    """Create a tournament from a validated configuration."""
    tournament, error = get_service().create_tournament(_json_body())
    if error:
        return error_response(error)
    app.logger.info(f'Tournament created: {tournament.id}')
    return jsonify(snapshot(tournament)), 201


@app.route('/api/tournaments', methods=['GET'])
def api_list_tournaments():
    tournaments, error = get_service().list_tournaments()
    if error:
        return error_response(error)
    return jsonify({'tournaments': tournaments})


@app.route('/api/tournaments/<tournament_id>', methods=['GET'])
def api_get_tournament(tournament_id):
    """Read-only projection of groups, standings and matches."""
    data, error = get_service().get_snapshot(tournament_id)
    if error:
        return error_response(error)
    return jsonify(data)


@app.route('/api/tournaments/<tournament_id>/participants', methods=['GET'])
def api_list_participants(tournament_id):
    participants, error = get_service().list_participants(tournament_id)
    if error:
        return error_response(error)
    return jsonify({'participants': participants})


@app.route('/api/tournaments/<tournament_id>/participants', methods=['POST'])
def api_register_participant(tournament_id):
    data = _json_body()
    participant_id = data.get('id')
    if participant_id is None or str(participant_id).strip() == '':
        return jsonify({'error': 'invalid_field', 'field': 'id', 'reason': 'is required',
                        'message': 'id: is required'}), 400

    tournament, error = get_service().register_participant(
        tournament_id, str(participant_id).strip(), data.get('name'), data.get('seed'),
    )
    if error:
        return error_response(error)
    return jsonify({'success': True, 'participants': [p.to_dict() for p in tournament.participants]}), 201


@app.route('/api/tournaments/<tournament_id>/participants/<participant_id>', methods=['DELETE'])
def api_withdraw_participant(tournament_id, participant_id):
    tournament, error = get_service().withdraw_participant(tournament_id, participant_id)
    if error:
        return error_response(error)
    return jsonify({'success': True, 'participants': [p.to_dict() for p in tournament.participants]})


@app.route('/api/tournaments/<tournament_id>/generate', methods=['POST'])
def api_generate(tournament_id):
    """Generate groups and matches once registration is full."""
    random_seed = _json_body().get('random_seed')
    if random_seed is not None and (isinstance(random_seed, bool) or not isinstance(random_seed, int)):
        return jsonify({'error': 'invalid_field', 'field': 'random_seed',
                        'reason': 'must be an integer', 'message': 'random_seed: must be an integer'}), 400

    tournament, error = get_service().generate(tournament_id, random_seed)
    if error:
        return error_response(error)
    app.logger.info(f'Structure generated for {tournament_id}: {len(tournament.matches)} matches')
    return jsonify(snapshot(tournament))


@app.route('/api/tournaments/<tournament_id>/matches/<match_id>/result', methods=['POST'])
def api_record_result(tournament_id, match_id):
    """Record a match result; winners advance and phases move on automatically."""
    data = _json_body()
    winner_id = data.get('winner_id')
    if winner_id is None:
        return jsonify({'error': 'invalid_field', 'field': 'winner_id', 'reason': 'is required',
                        'message': 'winner_id: is required'}), 400

    tournament, error = get_service().record_result(tournament_id, match_id, winner_id, data.get('score'))
    if error:
        return error_response(error)
    return jsonify(snapshot(tournament))


@app.route('/api/tournaments/<tournament_id>/matches/<match_id>/unwind', methods=['POST'])
def api_unwind_result(tournament_id, match_id):
    """Administrative correction: reopen a match and everything that followed from it."""
    tournament, error = get_service().unwind_result(tournament_id, match_id)
    if error:
        return error_response(error)
    app.logger.info(f'Result unwound: {tournament_id}/{match_id}')
    return jsonify(snapshot(tournament))


@app.route('/api/tournaments/<tournament_id>/advance', methods=['POST'])
def api_advance_phase(tournament_id):
    tournament, error = get_service().advance_phase(tournament_id)
    if error:
        return error_response(error)
    return jsonify(snapshot(tournament))


@app.route('/api/tournaments/<tournament_id>/reset', methods=['POST'])
def api_reset_structure(tournament_id):
    """Delete all groups and matches and reopen registration."""
    tournament, error = get_service().reset_structure(tournament_id)
    if error:
        return error_response(error)
    app.logger.info(f'Structure reset: {tournament_id}')
    return jsonify(snapshot(tournament))


if __name__ == '__main__':
    app.run(debug=True, port=5000)
