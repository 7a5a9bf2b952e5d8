"""Podcast persistence: record repository, audio blob store, and the store facade.

The repository and blob store are the two collaborators the pipeline talks
to. Local implementations back them with SQLite and the output directory;
anything implementing the same methods can be injected instead.
"""

import logging
import os
import sqlite3
import uuid
from abc import ABC, abstractmethod
from contextlib import closing
from datetime import datetime, timezone
from pathlib import Path

from podcast_producer.constants import (
    AUDIO_CONTENT_TYPE,
    AUDIO_EXTENSION,
    AUDIO_SUBDIR,
    DEFAULT_LIST_LIMIT,
)
from podcast_producer.errors import NotFound, PersistenceError, PodcastError
from podcast_producer.models import PodcastRecord

logger = logging.getLogger(__name__)


def _now() -> datetime:
    return datetime.now(timezone.utc)


class PodcastRepository(ABC):
    @abstractmethod
    def create(self, topic: str, script: str) -> PodcastRecord: ...

    @abstractmethod
    def get(self, record_id: str) -> PodcastRecord: ...

    @abstractmethod
    def list(self, limit: int = DEFAULT_LIST_LIMIT) -> list[PodcastRecord]: ...

    @abstractmethod
    def update(self, record_id: str, **fields) -> PodcastRecord: ...

    @abstractmethod
    def delete(self, record_id: str) -> None: ...


class BlobStore(ABC):
    @abstractmethod
    def put(self, key: str, data: bytes, content_type: str) -> str: ...

    @abstractmethod
    def delete(self, key: str) -> None: ...


_SCHEMA = """
CREATE TABLE IF NOT EXISTS podcasts (
    id TEXT PRIMARY KEY,
    topic TEXT NOT NULL,
    script TEXT NOT NULL,
    summary TEXT,
    audio_url TEXT,
    created_at TEXT NOT NULL,
    updated_at TEXT NOT NULL
)
"""

_UPDATABLE = {"summary": "summary", "audio_location": "audio_url"}


def _row_to_record(row: sqlite3.Row) -> PodcastRecord:
    return PodcastRecord(
        id=row["id"],
        topic=row["topic"],
        script=row["script"],
        summary=row["summary"],
        audio_location=row["audio_url"],
        created_at=datetime.fromisoformat(row["created_at"]),
        updated_at=datetime.fromisoformat(row["updated_at"]),
    )


class SqlitePodcastRepository(PodcastRepository):
    """Records in a single SQLite table.

    A connection is opened per call so the repository can be used from the
    worker threads the pipeline hands blocking calls to.
    """

    def __init__(self, db_path: str):
        self.db_path = db_path
        parent = os.path.dirname(db_path)
        if parent:
            os.makedirs(parent, exist_ok=True)
        self._execute(_SCHEMA)

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row
        return conn

    def _execute(self, sql: str, params: tuple = ()) -> tuple[list[sqlite3.Row], int]:
        """Run one statement in its own transaction; return (rows, rowcount)."""
        try:
            with closing(self._connect()) as conn:
                with conn:
                    cursor = conn.execute(sql, params)
                    return cursor.fetchall(), cursor.rowcount
        except sqlite3.Error as e:
            raise PersistenceError(f"Database error: {e}") from e

    def create(self, topic: str, script: str) -> PodcastRecord:
        now = _now()
        record = PodcastRecord(
            id=str(uuid.uuid4()),
            topic=topic,
            script=script,
            created_at=now,
            updated_at=now,
        )
        self._execute(
            "INSERT INTO podcasts (id, topic, script, created_at, updated_at) VALUES (?, ?, ?, ?, ?)",
            (record.id, topic, script, now.isoformat(), now.isoformat()),
        )
        return record

    def get(self, record_id: str) -> PodcastRecord:
        rows, _ = self._execute("SELECT * FROM podcasts WHERE id = ?", (record_id,))
        if not rows:
            raise NotFound(record_id)
        return _row_to_record(rows[0])

    def list(self, limit: int = DEFAULT_LIST_LIMIT) -> list[PodcastRecord]:
        rows, _ = self._execute(
            "SELECT * FROM podcasts ORDER BY created_at DESC, rowid DESC LIMIT ?", (limit,)
        )
        return [_row_to_record(row) for row in rows]

    def update(self, record_id: str, **fields) -> PodcastRecord:
        unknown = set(fields) - set(_UPDATABLE)
        if unknown:
            raise ValueError(f"Cannot update fields: {', '.join(sorted(unknown))}")

        assignments = [f"{_UPDATABLE[name]} = ?" for name in fields]
        params = list(fields.values())
        assignments.append("updated_at = ?")
        params.append(_now().isoformat())
        params.append(record_id)

        _, updated = self._execute(
            f"UPDATE podcasts SET {', '.join(assignments)} WHERE id = ?", tuple(params)
        )
        if updated == 0:
            raise NotFound(record_id)
        return self.get(record_id)

    def delete(self, record_id: str) -> None:
        self._execute("DELETE FROM podcasts WHERE id = ?", (record_id,))


class LocalBlobStore(BlobStore):
    """Audio files under <root>/audio/, addressed by file:// URIs."""

    def __init__(self, root: str):
        self.root = Path(root) / AUDIO_SUBDIR

    def _path(self, key: str) -> Path:
        path = (self.root / key).resolve()
        if self.root.resolve() not in path.parents:
            raise PersistenceError(f"Invalid blob key: {key}")
        return path

    def put(self, key: str, data: bytes, content_type: str) -> str:
        path = self._path(key)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_bytes(data)
        except OSError as e:
            raise PersistenceError(f"Failed to upload audio: {e}") from e
        logger.debug("Stored %d bytes (%s) at %s", len(data), content_type, path)
        return path.as_uri()

    def delete(self, key: str) -> None:
        try:
            self._path(key).unlink(missing_ok=True)
        except OSError as e:
            raise PersistenceError(f"Failed to delete audio: {e}") from e


def audio_key(record_id: str) -> str:
    return f"{record_id}.{AUDIO_EXTENSION}"


class PodcastStore:
    """Record and audio operations the pipeline and CLI need."""

    def __init__(self, repository: PodcastRepository, blobs: BlobStore):
        self.repository = repository
        self.blobs = blobs

    def create(self, topic: str, script: str) -> PodcastRecord:
        return self.repository.create(topic, script)

    def get(self, record_id: str) -> PodcastRecord:
        return self.repository.get(record_id)

    def list(self, limit: int = DEFAULT_LIST_LIMIT) -> list[PodcastRecord]:
        return self.repository.list(limit)

    def update_summary(self, record_id: str, summary: str) -> PodcastRecord:
        return self.repository.update(record_id, summary=summary)

    def update_audio_location(self, record_id: str, location: str) -> PodcastRecord:
        return self.repository.update(record_id, audio_location=location)

    def save_audio(self, record_id: str, audio: bytes) -> PodcastRecord:
        """Upload audio as <id>.mp3 and point the record at it.

        If the record update fails the uploaded audio is removed again, so a
        record deleted mid-run leaves no orphaned file behind.
        """
        key = audio_key(record_id)
        location = self.blobs.put(key, audio, AUDIO_CONTENT_TYPE)
        try:
            return self.update_audio_location(record_id, location)
        except PodcastError:
            try:
                self.blobs.delete(key)
            except Exception as e:
                logger.warning("Failed to remove orphaned audio for %s: %s", record_id, e)
            raise

    def delete(self, record_id: str) -> None:
        """Delete a record, removing its audio first on a best-effort basis.

        A failed audio delete is logged and never blocks the record delete.
        """
        try:
            self.blobs.delete(audio_key(record_id))
        except Exception as e:
            logger.warning("Failed to delete audio for %s: %s", record_id, e)
        self.repository.delete(record_id)

    @classmethod
    def local(cls, db_path: str, output_dir: str) -> "PodcastStore":
        return cls(SqlitePodcastRepository(db_path), LocalBlobStore(output_dir))
