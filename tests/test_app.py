"""
Tests for the HTTP routes.
"""
import pytest
import sys
import os

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

KNOCKOUT_4 = {
    'tournament_type': 'eliminazione_diretta',
    'title': 'Junior Open',
    'max_participants': 4,
}


def create(client, body=None):
    response = client.post('/api/tournaments', json=body or KNOCKOUT_4)
    assert response.status_code == 201
    return response.get_json()['id']


def fill(client, tournament_id, count=4):
    for i in range(1, count + 1):
        response = client.post(f'/api/tournaments/{tournament_id}/participants',
                               json={'id': f'P{i}', 'name': f'Player {i}'})
        assert response.status_code == 201


@pytest.fixture
def generated_id(client, temp_data_dir):
    tournament_id = create(client)
    fill(client, tournament_id)
    response = client.post(f'/api/tournaments/{tournament_id}/generate')
    assert response.status_code == 200
    return tournament_id


class TestCreateTournament:
    """POST /api/tournaments"""

    def test_create(self, client, temp_data_dir):
        response = client.post('/api/tournaments', json=KNOCKOUT_4)
        assert response.status_code == 201
        data = response.get_json()
        assert data['id'] == 'junior-open'
        assert data['current_phase'] == 'registration'
        assert data['config']['tournament_type'] == 'single_elimination'
        assert os.path.exists(os.path.join(temp_data_dir, 'junior-open', 'tournament.yaml'))

    def test_inconsistent_capacity(self, client, temp_data_dir):
        response = client.post('/api/tournaments', json={
            'tournament_type': 'groups_then_elimination', 'title': 'Cup',
            'max_participants': 13, 'num_groups': 3, 'teams_per_group': 4, 'teams_advancing': 2,
        })
        assert response.status_code == 400
        assert response.get_json()['error'] == 'inconsistent_capacity'

    def test_unknown_type(self, client, temp_data_dir):
        response = client.post('/api/tournaments', json={'tournament_type': 'ladder'})
        assert response.status_code == 400
        assert response.get_json()['error'] == 'unknown_type'

    def test_no_body(self, client, temp_data_dir):
        response = client.post('/api/tournaments')
        assert response.status_code == 400


class TestGetTournament:
    """GET /api/tournaments/<id>"""

    def test_list(self, client, temp_data_dir):
        assert client.get('/api/tournaments').get_json() == {'tournaments': []}
        tournament_id = create(client)
        fill(client, tournament_id, 2)
        listed = client.get('/api/tournaments').get_json()['tournaments']
        assert listed == [{
            'id': 'junior-open', 'title': 'Junior Open',
            'tournament_type': 'single_elimination', 'current_phase': 'registration',
            'participants': 2, 'max_participants': 4,
        }]

    def test_not_found(self, client, temp_data_dir):
        response = client.get('/api/tournaments/missing')
        assert response.status_code == 404
        assert response.get_json()['error'] == 'tournament_not_found'

    def test_unsafe_id(self, client, temp_data_dir):
        assert client.get('/api/tournaments/..%2Fsecret').status_code == 404

    def test_snapshot(self, client, generated_id):
        data = client.get(f'/api/tournaments/{generated_id}').get_json()
        assert data['current_phase'] == 'elimination_phase'
        final = [m for m in data['matches'] if m['id'] == 'E2-M1'][0]
        assert final['slots'] == ['Winner E1-M1', 'Winner E1-M2']
        assert final['round_name'] == 'Final'


class TestParticipants:
    """Registration routes."""

    def test_register_and_list(self, client, temp_data_dir):
        tournament_id = create(client)
        response = client.post(f'/api/tournaments/{tournament_id}/participants',
                               json={'id': 'P1', 'name': 'Anna', 'seed': 1})
        assert response.status_code == 201
        assert response.get_json()['participants'] == [{'id': 'P1', 'name': 'Anna', 'seed': 1}]

        listed = client.get(f'/api/tournaments/{tournament_id}/participants').get_json()
        assert listed['participants'][0]['id'] == 'P1'

    def test_missing_id(self, client, temp_data_dir):
        tournament_id = create(client)
        response = client.post(f'/api/tournaments/{tournament_id}/participants', json={'name': 'Anna'})
        assert response.status_code == 400
        assert response.get_json()['field'] == 'id'

    def test_duplicate(self, client, temp_data_dir):
        tournament_id = create(client)
        fill(client, tournament_id, 1)
        response = client.post(f'/api/tournaments/{tournament_id}/participants', json={'id': 'P1'})
        assert response.status_code == 409
        assert response.get_json()['error'] == 'duplicate_participant'

    def test_full(self, client, temp_data_dir):
        tournament_id = create(client)
        fill(client, tournament_id)
        response = client.post(f'/api/tournaments/{tournament_id}/participants', json={'id': 'P5'})
        assert response.status_code == 409
        assert response.get_json()['error'] == 'tournament_full'

    def test_bad_seed(self, client, temp_data_dir):
        tournament_id = create(client)
        response = client.post(f'/api/tournaments/{tournament_id}/participants',
                               json={'id': 'P1', 'seed': 0})
        assert response.status_code == 400

    def test_withdraw(self, client, temp_data_dir):
        tournament_id = create(client)
        fill(client, tournament_id, 2)
        response = client.delete(f'/api/tournaments/{tournament_id}/participants/P1')
        assert response.status_code == 200
        assert [p['id'] for p in response.get_json()['participants']] == ['P2']

    def test_withdraw_unknown(self, client, temp_data_dir):
        tournament_id = create(client)
        response = client.delete(f'/api/tournaments/{tournament_id}/participants/P9')
        assert response.status_code == 404


class TestGenerate:
    """POST /api/tournaments/<id>/generate"""

    def test_not_full(self, client, temp_data_dir):
        tournament_id = create(client)
        fill(client, tournament_id, 3)
        response = client.post(f'/api/tournaments/{tournament_id}/generate')
        assert response.status_code == 409
        assert response.get_json()['error'] == 'participant_count_mismatch'

    def test_twice(self, client, generated_id):
        response = client.post(f'/api/tournaments/{generated_id}/generate')
        assert response.status_code == 409
        assert response.get_json()['error'] == 'structure_already_generated'

    def test_bad_random_seed(self, client, temp_data_dir):
        tournament_id = create(client)
        fill(client, tournament_id)
        response = client.post(f'/api/tournaments/{tournament_id}/generate', json={'random_seed': 'abc'})
        assert response.status_code == 400

    def test_random_seed_recorded(self, client, temp_data_dir):
        tournament_id = create(client, dict(KNOCKOUT_4, seeding='random'))
        fill(client, tournament_id)
        response = client.post(f'/api/tournaments/{tournament_id}/generate', json={'random_seed': 31})
        assert response.get_json()['random_seed'] == 31


class TestResults:
    """Result recording, corrections and reset."""

    def test_record_result(self, client, generated_id):
        response = client.post(f'/api/tournaments/{generated_id}/matches/E1-M1/result',
                               json={'winner_id': 'P1', 'score': [[6, 3], [6, 4]]})
        assert response.status_code == 200
        final = [m for m in response.get_json()['matches'] if m['id'] == 'E2-M1'][0]
        assert final['slots'] == ['P1', 'Winner E1-M2']

    def test_missing_winner(self, client, generated_id):
        response = client.post(f'/api/tournaments/{generated_id}/matches/E1-M1/result', json={})
        assert response.status_code == 400

    def test_unknown_match(self, client, generated_id):
        response = client.post(f'/api/tournaments/{generated_id}/matches/E5-M1/result',
                               json={'winner_id': 'P1'})
        assert response.status_code == 404

    def test_invalid_winner(self, client, generated_id):
        response = client.post(f'/api/tournaments/{generated_id}/matches/E1-M1/result',
                               json={'winner_id': 'P2'})
        assert response.status_code == 409
        assert response.get_json()['error'] == 'invalid_winner'

    def test_invalid_score(self, client, generated_id):
        response = client.post(f'/api/tournaments/{generated_id}/matches/E1-M1/result',
                               json={'winner_id': 'P1', 'score': [[6, 5]]})
        assert response.status_code == 400
        assert response.get_json()['error'] == 'invalid_score'

    def test_champion(self, client, generated_id):
        for match_id, winner in (('E1-M1', 'P4'), ('E1-M2', 'P2'), ('E2-M1', 'P4')):
            response = client.post(f'/api/tournaments/{generated_id}/matches/{match_id}/result',
                                   json={'winner_id': winner})
            assert response.status_code == 200
        data = response.get_json()
        assert data['current_phase'] == 'completed'
        assert data['champion'] == 'P4'

    def test_unwind(self, client, generated_id):
        client.post(f'/api/tournaments/{generated_id}/matches/E1-M1/result', json={'winner_id': 'P1'})
        response = client.post(f'/api/tournaments/{generated_id}/matches/E1-M1/unwind')
        assert response.status_code == 200
        match = [m for m in response.get_json()['matches'] if m['id'] == 'E1-M1'][0]
        assert match['status'] == 'scheduled'
        assert match['winner'] is None

    def test_unwind_unplayed(self, client, generated_id):
        response = client.post(f'/api/tournaments/{generated_id}/matches/E1-M1/unwind')
        assert response.status_code == 409

    def test_advance_on_knockout(self, client, generated_id):
        response = client.post(f'/api/tournaments/{generated_id}/advance')
        assert response.status_code == 409
        assert response.get_json()['error'] == 'premature_phase_transition'

    def test_reset(self, client, generated_id):
        response = client.post(f'/api/tournaments/{generated_id}/reset')
        assert response.status_code == 200
        data = response.get_json()
        assert data['current_phase'] == 'registration'
        assert data['matches'] == []
        assert len(data['participants']) == 4


class TestGroupTournamentFlow:
    """End-to-end through the HTTP layer."""

    def test_groups_then_knockout(self, client, temp_data_dir):
        tournament_id = create(client, {
            'tournament_type': 'girone_eliminazione', 'title': 'Summer Cup',
            'max_participants': 6, 'num_groups': 2, 'teams_per_group': 3, 'teams_advancing': 1,
        })
        fill(client, tournament_id, 6)
        data = client.post(f'/api/tournaments/{tournament_id}/generate').get_json()
        assert data['current_phase'] == 'group_phase'
        assert [g['members'] for g in data['groups']] == [['P1', 'P3', 'P5'], ['P2', 'P4', 'P6']]

        response = client.post(f'/api/tournaments/{tournament_id}/advance')
        assert response.status_code == 409

        for match in data['matches']:
            response = client.post(
                f"/api/tournaments/{tournament_id}/matches/{match['id']}/result",
                json={'winner_id': match['slots'][0], 'score': [[6, 0], [6, 0]]},
            )
            assert response.status_code == 200
        data = response.get_json()
        assert data['current_phase'] == 'elimination_phase'
        final = [m for m in data['matches'] if m['phase'] == 'elimination_phase']
        assert len(final) == 1
        assert final[0]['status'] == 'scheduled'

        locked = client.post(f"/api/tournaments/{tournament_id}/matches/{data['matches'][0]['id']}/unwind")
        assert locked.status_code == 409
        assert locked.get_json()['error'] == 'group_phase_locked'
