"""
YAML persistence for tournaments.

Each tournament lives in its own directory with a ``tournament.yaml`` and a
``.lock`` file. Writers hold the tournament's FileLock for the whole
load-modify-save cycle, and ``save`` refuses to overwrite a version it did
not load.
"""
import logging
import os
import re
from typing import List, Optional

import yaml
from filelock import FileLock

from draw_engine.errors import StaleWrite, TournamentNotFound
from draw_engine.tournament import Tournament

logger = logging.getLogger(__name__)

TOURNAMENT_FILE = 'tournament.yaml'
_ID_PATTERN = re.compile(r'^[a-z0-9][a-z0-9-]*$')


def slugify(name: str) -> str:
    """Convert tournament name to filesystem-safe slug."""
    slug = name.lower().strip()
    slug = re.sub(r'[^a-z0-9\s-]', '', slug)
    slug = re.sub(r'[\s-]+', '-', slug)
    slug = slug.strip('-')
    return slug or 'tournament'


class TournamentStore:
    def __init__(self, data_dir: str, lock_timeout: float = 10):
        self.data_dir = data_dir
        self.lock_timeout = lock_timeout

    def _tournament_dir(self, tournament_id: str) -> str:
        # Ids become directory names; reject anything that could escape data_dir
        if not isinstance(tournament_id, str) or not _ID_PATTERN.match(tournament_id):
            raise TournamentNotFound(str(tournament_id))
        return os.path.join(self.data_dir, tournament_id)

    def _file_path(self, tournament_id: str) -> str:
        return os.path.join(self._tournament_dir(tournament_id), TOURNAMENT_FILE)

    def exists(self, tournament_id: str) -> bool:
        try:
            return os.path.exists(self._file_path(tournament_id))
        except TournamentNotFound:
            return False

    def list_ids(self) -> List[str]:
        if not os.path.isdir(self.data_dir):
            return []
        return sorted(
            name for name in os.listdir(self.data_dir)
            if os.path.exists(os.path.join(self.data_dir, name, TOURNAMENT_FILE))
        )

    def new_id(self, title: str) -> str:
        """
        Slug of the title, suffixed until it is unused. The tournament
        directory is created here, so two concurrent creates never get the
        same id.
        """
        os.makedirs(self.data_dir, exist_ok=True)
        base = slugify(title)
        candidate = base
        n = 2
        while True:
            try:
                os.mkdir(os.path.join(self.data_dir, candidate))
                return candidate
            except FileExistsError:
                candidate = f'{base}-{n}'
                n += 1

    def locked(self, tournament_id: str) -> FileLock:
        """The lock serializing every writer of one tournament."""
        tournament_dir = self._tournament_dir(tournament_id)
        os.makedirs(tournament_dir, exist_ok=True)
        return FileLock(os.path.join(tournament_dir, '.lock'), timeout=self.lock_timeout)

    def _stored_version(self, tournament_id: str) -> Optional[int]:
        path = self._file_path(tournament_id)
        if not os.path.exists(path):
            return None
        with open(path, 'r', encoding='utf-8') as f:
            data = yaml.safe_load(f)
        return data.get('version', 0) if data else None

    def load(self, tournament_id: str) -> Tournament:
        path = self._file_path(tournament_id)
        if not os.path.exists(path):
            raise TournamentNotFound(tournament_id)
        with open(path, 'r', encoding='utf-8') as f:
            data = yaml.safe_load(f)
        if not data:
            raise TournamentNotFound(tournament_id)
        return Tournament.from_dict(data)

    def save(self, tournament: Tournament, expected_version: Optional[int]) -> Tournament:
        """
        Write a tournament if the stored version is still ``expected_version``
        (None for a tournament that has never been saved). Bumps the version.
        """
        current = self._stored_version(tournament.id)
        if current != expected_version:
            logger.warning(f'Stale write to {tournament.id}: expected {expected_version}, found {current}')
            raise StaleWrite(tournament.id, expected_version, current)

        tournament.version = (current or 0) + 1
        path = self._file_path(tournament.id)
        os.makedirs(os.path.dirname(path), exist_ok=True)
        tmp_path = path + '.tmp'
        with open(tmp_path, 'w', encoding='utf-8') as f:
            yaml.dump(tournament.to_dict(), f, default_flow_style=False, sort_keys=False)
        os.replace(tmp_path, path)
        return tournament
