"""
Shared pytest fixtures for tournament draw tests.

Running tests:
    pytest tests/                  - full suite
    pytest tests/ -m "not slow"   - fast subset
"""
import pytest
import sys
import os

# Add src directory to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from draw_engine.formats import GroupsThenElimination, RoundRobin, SingleElimination
from draw_engine.models import Participant
from draw_engine.tournament import Tournament


@pytest.fixture
def client():
    """Create a test client."""
    from app import app
    app.config['TESTING'] = True
    with app.test_client() as client:
        yield client


@pytest.fixture
def temp_data_dir(tmp_path, monkeypatch):
    """Point the app at a temporary data directory."""
    import app as app_module

    data_dir = tmp_path / "data"
    data_dir.mkdir()
    monkeypatch.setattr(app_module, 'DATA_DIR', str(data_dir))
    monkeypatch.setattr(app_module, 'LOCK_TIMEOUT', 5)
    return str(data_dir)


@pytest.fixture
def make_participants():
    """Factory for participants P1..Pn in registration order."""
    def _make(count, seeds=None):
        seeds = seeds or {}
        return [Participant(f"P{i}", f"Player {i}", seeds.get(f"P{i}")) for i in range(1, count + 1)]
    return _make


@pytest.fixture
def single_elimination_8(make_participants):
    """An 8-player knockout with registration full."""
    config = SingleElimination("Spring Open", 8)
    return Tournament("spring-open", config, participants=make_participants(8))


@pytest.fixture
def groups_2x4(make_participants):
    """Two groups of four, top two advance."""
    config = GroupsThenElimination("Club Championship", 8, 2, 4, 2)
    return Tournament("club-championship", config, participants=make_participants(8))


@pytest.fixture
def league_5(make_participants):
    """A five-player round robin league."""
    config = RoundRobin("Winter League", 5)
    return Tournament("winter-league", config, participants=make_participants(5))
