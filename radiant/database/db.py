"""
SQLite observation store for Radiant.

Handles persistence of the observation log, the cache (stats and
engagement counters), and favorite showers.
Database file: ~/.radiant/radiant.db
"""

import json
import logging
import sqlite3
from datetime import datetime
from pathlib import Path
from typing import Optional

from radiant.models.observation import (
    InvalidObservationError,
    Observation,
    ObservationStats,
)
from radiant.utils.config import Config

logger = logging.getLogger(__name__)

SCHEMA_FILE = Path(__file__).parent / "schema.sql"

STATS_KEY = "observation_stats"


class StorageError(Exception):
    """The observation store failed to read or write."""


class Database:
    """SQLite database wrapper for Radiant data persistence."""

    def __init__(self, db_path: Optional[Path] = None):
        self.db_path = db_path or Config.get_db_path()
        self.conn: Optional[sqlite3.Connection] = None
        self._init_db()

    def _init_db(self):
        """Initialize database connection and create tables."""
        try:
            self.conn = sqlite3.connect(str(self.db_path))
            self.conn.row_factory = sqlite3.Row
            self.conn.execute("PRAGMA journal_mode=WAL")

            # Create tables from schema
            schema = SCHEMA_FILE.read_text()
            self.conn.executescript(schema)
            self.conn.commit()
        except sqlite3.Error as e:
            raise StorageError(f"Cannot open database {self.db_path}: {e}") from e
        logger.info(f"Database initialized at {self.db_path}")

    def close(self):
        """Close the database connection."""
        if self.conn:
            self.conn.close()
            self.conn = None

    # =========================================================================
    # Observations
    # =========================================================================

    def list_observations(self) -> list[Observation]:
        """Every stored observation, in store order."""
        try:
            rows = self.conn.execute(
                "SELECT record_json FROM observations ORDER BY position"
            ).fetchall()
            return [Observation.from_dict(json.loads(r["record_json"])) for r in rows]
        except (sqlite3.Error, json.JSONDecodeError, InvalidObservationError) as e:
            raise StorageError(f"Failed to load observations: {e}") from e

    def upsert_observation(self, observation: Observation,
                           stats: Optional[ObservationStats] = None):
        """Insert a new observation or replace the one with the same id.

        A replaced record keeps its position in the log. When ``stats`` is
        given it is written to the cache in the same transaction, so either
        both land or neither does.
        """
        record = json.dumps(observation.to_dict())
        try:
            with self.conn:
                cur = self.conn.execute(
                    "UPDATE observations SET record_json = ? WHERE id = ?",
                    (record, observation.id),
                )
                if cur.rowcount == 0:
                    self.conn.execute("""
                        INSERT INTO observations (id, position, record_json)
                        VALUES (?, (SELECT COALESCE(MAX(position), -1) + 1
                                    FROM observations), ?)
                    """, (observation.id, record))
                if stats is not None:
                    self._put_cache(STATS_KEY, stats.to_dict())
        except sqlite3.Error as e:
            raise StorageError(f"Failed to save observation {observation.id}: {e}") from e

    def delete_observation(self, observation_id: str,
                           stats: Optional[ObservationStats] = None):
        """Remove an observation by id. Unknown ids are ignored.

        ``stats`` is written in the same transaction, as for upserts.
        """
        try:
            with self.conn:
                self.conn.execute(
                    "DELETE FROM observations WHERE id = ?", (observation_id,)
                )
                if stats is not None:
                    self._put_cache(STATS_KEY, stats.to_dict())
        except sqlite3.Error as e:
            raise StorageError(f"Failed to delete observation {observation_id}: {e}") from e

    # =========================================================================
    # Cache (stats, engagement counters)
    # =========================================================================

    def _put_cache(self, key: str, value: dict):
        # Caller owns the transaction
        self.conn.execute("""
            INSERT INTO cache (key, value_json, updated_at)
            VALUES (?, ?, ?)
            ON CONFLICT(key) DO UPDATE SET
                value_json = excluded.value_json,
                updated_at = excluded.updated_at
        """, (key, json.dumps(value), datetime.now().isoformat()))

    def read_cache(self, key: str) -> Optional[dict]:
        """Decoded cache entry, or None if absent."""
        try:
            row = self.conn.execute(
                "SELECT value_json FROM cache WHERE key = ?", (key,)
            ).fetchone()
            return None if row is None else json.loads(row["value_json"])
        except (sqlite3.Error, json.JSONDecodeError) as e:
            raise StorageError(f"Failed to read cache entry {key}: {e}") from e

    def write_cache(self, key: str, value: dict):
        try:
            with self.conn:
                self._put_cache(key, value)
        except sqlite3.Error as e:
            raise StorageError(f"Failed to write cache entry {key}: {e}") from e

    def read_stats(self) -> Optional[ObservationStats]:
        """Cached stats, or None if nothing has been written yet."""
        data = self.read_cache(STATS_KEY)
        if data is None:
            return None
        try:
            return ObservationStats.from_dict(data)
        except (KeyError, TypeError, ValueError) as e:
            raise StorageError(f"Malformed stats cache: {e}") from e

    def write_stats(self, stats: ObservationStats):
        self.write_cache(STATS_KEY, stats.to_dict())

    # =========================================================================
    # Favorites
    # =========================================================================

    def add_favorite(self, shower_id: str):
        try:
            with self.conn:
                self.conn.execute(
                    "INSERT OR IGNORE INTO favorite_showers (shower_id) VALUES (?)",
                    (shower_id,),
                )
        except sqlite3.Error as e:
            raise StorageError(f"Failed to add favorite {shower_id}: {e}") from e

    def remove_favorite(self, shower_id: str):
        try:
            with self.conn:
                self.conn.execute(
                    "DELETE FROM favorite_showers WHERE shower_id = ?", (shower_id,)
                )
        except sqlite3.Error as e:
            raise StorageError(f"Failed to remove favorite {shower_id}: {e}") from e

    def get_favorites(self) -> list[str]:
        """Favorite shower ids in the order they were added."""
        try:
            rows = self.conn.execute(
                "SELECT shower_id FROM favorite_showers ORDER BY rowid"
            ).fetchall()
        except sqlite3.Error as e:
            raise StorageError(f"Failed to load favorites: {e}") from e
        return [r["shower_id"] for r in rows]

    def is_favorite(self, shower_id: str) -> bool:
        return shower_id in self.get_favorites()

    def clear_all(self):
        """Delete every stored record (observations, cache, favorites)."""
        try:
            with self.conn:
                self.conn.execute("DELETE FROM observations")
                self.conn.execute("DELETE FROM cache")
                self.conn.execute("DELETE FROM favorite_showers")
        except sqlite3.Error as e:
            raise StorageError(f"Failed to clear data: {e}") from e
        logger.info("All stored data cleared")
