"""Time-versioned player and team database built from snapshot dumps.

Snapshot dumps are gzip-compressed files of newline-delimited JSON records,
each tagged with an `endpoint`. Player and team batches are folded into one
History per entity id, keyed by the batch's capture timestamp. The built
database is cached on disk under a fingerprint of the dump directory's file
metadata (name, size, mtime), so unchanged inputs skip re-parsing.

The fingerprint does not hash file contents: a file replaced in place with
identical name, size and mtime will serve a stale cache.
"""

import gzip
import hashlib
import json
import logging
import pickle
import zlib
from dataclasses import dataclass, field
from pathlib import Path
from uuid import UUID

from pydantic import ValidationError

from blaseball.config import get_config
from blaseball.db.entries import Entry, read_dir
from blaseball.db.history import History
from blaseball.db.models import RECORD_TYPES, Endpoint, Player, Team

logger = logging.getLogger(__name__)

# Bump whenever Database, History or the snapshot models change shape
DATABASE_VERSION = 1


class IngestionError(Exception):
    """A snapshot dump contained a record that could not be parsed."""


@dataclass
class Database:
    """Per-entity snapshot histories for teams and players."""

    teams: dict[UUID, History[Team]] = field(default_factory=dict)
    players: dict[UUID, History[Player]] = field(default_factory=dict)

    def team_at(self, team_id: UUID, time: int) -> Team | None:
        """Return the team snapshot in effect at `time`, or None."""
        history = self.teams.get(team_id)
        if history is None:
            return None
        return history.get(time)

    def player_at(self, player_id: UUID, time: int) -> Player | None:
        """Return the player snapshot in effect at `time`, or None."""
        history = self.players.get(player_id)
        if history is None:
            return None
        return history.get(time)

    @classmethod
    def load(cls, directory: Path | str, cache_dir: Path | None = None) -> "Database":
        """Load the database for a snapshot directory, using the cache if possible.

        Args:
            directory: Directory of gzip-compressed snapshot dumps
            cache_dir: Cache root (None = use config default)

        Returns:
            Fully built Database

        Raises:
            OSError: If the directory is missing or unreadable
            IngestionError: If any record in any dump fails to parse
        """
        directory = Path(directory)
        if cache_dir is None:
            cache_dir = get_config().cache_dir

        entries = read_dir(directory)
        cache_path = get_cache_path(cache_dir, entries)

        cached = _load_from_cache(cache_path)
        if cached is not None:
            logger.info(f"Loaded database from cache {cache_path}")
            return cached

        database = cls()
        for entry in entries:
            database._ingest_file(directory / entry.file_name)

        for team_history in database.teams.values():
            team_history.dedup()
        for player_history in database.players.values():
            player_history.dedup()

        logger.info(
            f"Built database from {len(entries)} files: "
            f"{len(database.teams)} teams, {len(database.players)} players"
        )

        _save_to_cache(database, cache_path)
        return database

    def _ingest_file(self, path: Path) -> None:
        """Fold every player and team batch in one dump into the histories."""
        logger.debug(f"Ingesting {path}")
        line_no = 0
        try:
            with gzip.open(path, "rt", encoding="utf-8") as f:
                for line_no, line in enumerate(f, start=1):
                    if not line.strip():
                        continue
                    record = _parse_line(line, path, line_no)
                    if record is None:
                        continue

                    timestamp = record.client_meta.timestamp
                    if record.endpoint == Endpoint.PLAYERS:
                        for player in record.data:
                            self.players.setdefault(player.id, History()).insert(
                                timestamp, player
                            )
                    else:
                        for team in record.data:
                            self.teams.setdefault(team.id, History()).insert(
                                timestamp, team
                            )
        except (EOFError, UnicodeDecodeError, gzip.BadGzipFile, zlib.error) as e:
            # Failure is in the line after the last one read
            raise IngestionError(f"{path}:{line_no + 1}: unreadable dump: {e}") from e


def _parse_line(line: str, path: Path, line_no: int):
    """Parse one dump line into a batch record.

    Returns:
        PlayersRecord / AllTeamsRecord, or None for endpoints we don't use

    Raises:
        IngestionError: If the line is not a valid tagged record
    """
    try:
        raw = json.loads(line)
    except json.JSONDecodeError as e:
        raise IngestionError(f"{path}:{line_no}: invalid JSON: {e}") from e

    if not isinstance(raw, dict) or not isinstance(raw.get("endpoint"), str):
        raise IngestionError(f"{path}:{line_no}: record has no endpoint tag")

    record_type = RECORD_TYPES.get(raw["endpoint"])
    if record_type is None:
        return None

    try:
        return record_type.model_validate(raw)
    except ValidationError as e:
        raise IngestionError(
            f"{path}:{line_no}: invalid {raw['endpoint']} record: {e}"
        ) from e


def fingerprint(entries: list[Entry]) -> str:
    """Hash the schema version and the sorted file metadata into a cache key."""
    key = {
        "version": DATABASE_VERSION,
        "entries": [
            [entry.file_name, entry.size, entry.modified_ns]
            for entry in sorted(entries)
        ],
    }
    payload = json.dumps(key, separators=(",", ":")).encode("utf-8")
    return hashlib.sha256(payload).hexdigest()


def get_cache_path(cache_dir: Path, entries: list[Entry]) -> Path:
    """Cache blob location for a given directory listing."""
    return Path(cache_dir) / f"db-{fingerprint(entries)[:16]}.pickle.gz"


def _load_from_cache(cache_path: Path) -> Database | None:
    """Read a cached Database, or None on any miss, corruption or version mismatch."""
    if not cache_path.exists():
        logger.info(f"No database cache at {cache_path}, rebuilding")
        return None

    try:
        with gzip.open(cache_path, "rb") as f:
            blob = pickle.load(f)
        if blob.get("version") != DATABASE_VERSION:
            raise ValueError(f"cache version {blob.get('version')} != {DATABASE_VERSION}")
        database = blob["database"]
        if not isinstance(database, Database):
            raise TypeError(f"unexpected cache payload {type(database).__name__}")
        return database
    except Exception as e:
        # Conservative fallback: a bad cache only costs a rebuild
        logger.warning(f"Ignoring unreadable database cache {cache_path}: {e}")
        return None


def _save_to_cache(database: Database, cache_path: Path) -> None:
    """Best-effort write of the built Database; failures are logged and ignored."""
    try:
        cache_path.parent.mkdir(parents=True, exist_ok=True)
        data = gzip.compress(
            pickle.dumps(
                {"version": DATABASE_VERSION, "database": database},
                protocol=pickle.HIGHEST_PROTOCOL,
            )
        )
        cache_path.write_bytes(data)
        logger.info(f"Saved database cache: {cache_path}")
    except Exception as e:
        logger.warning(f"Failed to write database cache {cache_path}: {e}")
