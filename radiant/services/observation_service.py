"""
Observation log service for Radiant.

The write boundary between the UI and the observation store. Every save
or delete follows the same sequence:

    load full list -> mutate in memory -> recompute stats
        -> persist record and stats in one transaction

so the stored stats always equal compute_stats() over the stored list,
and a failed write leaves both untouched.
Listeners are told about changes through Qt signals.

Reads degrade to "no data yet" (empty list / zero stats) when the store
fails; writes propagate the failure to the caller.
"""

import logging
from dataclasses import replace
from datetime import date, datetime
from typing import Callable, Optional

from PyQt6.QtCore import QMutex, QMutexLocker, QObject, pyqtSignal

from radiant.database.db import Database, StorageError
from radiant.models.observation import (
    Observation,
    ObservationStats,
    generate_observation_id,
)
from radiant.stats import compute_stats, empty_stats

logger = logging.getLogger(__name__)


class ObservationService(QObject):
    """Validates, stores, and aggregates the user's observation log.

    Signals:
        observations_changed: Emitted with the new full list after a save/delete.
        stats_updated: Emitted with the recomputed ObservationStats.
        error_occurred: Emitted with a message when a store call fails.
    """

    observations_changed = pyqtSignal(object)  # list[Observation]
    stats_updated = pyqtSignal(object)         # ObservationStats
    error_occurred = pyqtSignal(str)

    def __init__(self, db: Database,
                 clock: Callable[[], datetime] = datetime.now,
                 parent=None):
        """
        Args:
            db: Observation store.
            clock: Returns the current time; injected so tests can pin it.
            parent: Optional Qt parent.
        """
        super().__init__(parent)
        self.db = db
        self._clock = clock
        self._write_mutex = QMutex()

    @staticmethod
    def generate_observation_id() -> str:
        return generate_observation_id()

    # =========================================================================
    # Reads
    # =========================================================================

    def get_observations(self) -> list[Observation]:
        """All observations in store order ([] if the store fails)."""
        try:
            return self.db.list_observations()
        except StorageError as e:
            logger.error(f"Error loading observations: {e}")
            self.error_occurred.emit(str(e))
            return []

    def get_observations_newest_first(self) -> list[Observation]:
        return sorted(self.get_observations(), key=lambda o: o.date, reverse=True)

    def get_observations_by_shower(self, shower_id: str) -> list[Observation]:
        return [o for o in self.get_observations() if o.shower_id == shower_id]

    def get_observations_by_date_range(self, start: date, end: date) -> list[Observation]:
        """Observations dated between start and end, inclusive."""
        return [o for o in self.get_observations() if start <= o.date <= end]

    def get_stats(self) -> ObservationStats:
        """Cached stats, recomputed if no cache exists yet.

        Falls back to the zero record if the store fails.
        """
        try:
            stats = self.db.read_stats()
            if stats is None:
                stats = compute_stats(self.db.list_observations(),
                                      as_of=self._clock())
            return stats
        except StorageError as e:
            logger.error(f"Error loading stats: {e}")
            self.error_occurred.emit(str(e))
            return empty_stats()

    # =========================================================================
    # Writes
    # =========================================================================

    def save_observation(self, observation: Observation) -> Observation:
        """Insert or update an observation and refresh the stats cache.

        Args:
            observation: The record to save. Its id decides insert vs. update.

        Returns:
            The stored record, with updated_at set to the save time.

        Raises:
            InvalidObservationError: The record is malformed.
            StorageError: The store could not be read or written.
        """
        observation.validate()
        now = self._clock()
        stored = replace(observation, updated_at=now)

        with QMutexLocker(self._write_mutex):
            try:
                observations = self.db.list_observations()
                for i, existing in enumerate(observations):
                    if existing.id == stored.id:
                        observations[i] = stored
                        break
                else:
                    observations.append(stored)
                stats = compute_stats(observations, as_of=now)
                self.db.upsert_observation(stored, stats=stats)
            except StorageError as e:
                logger.error(f"Error saving observation {observation.id}: {e}")
                self.error_occurred.emit(str(e))
                raise

        logger.info(f"Observation saved: id={stored.id} shower={stored.shower_id}")
        self.observations_changed.emit(observations)
        self.stats_updated.emit(stats)
        return stored

    def delete_observation(self, observation_id: str):
        """Remove an observation by id and refresh the stats cache.

        Raises:
            StorageError: The store could not be read or written.
        """
        with QMutexLocker(self._write_mutex):
            try:
                observations = [o for o in self.db.list_observations()
                                if o.id != observation_id]
                stats = compute_stats(observations, as_of=self._clock())
                self.db.delete_observation(observation_id, stats=stats)
            except StorageError as e:
                logger.error(f"Error deleting observation {observation_id}: {e}")
                self.error_occurred.emit(str(e))
                raise

        logger.info(f"Observation deleted: id={observation_id}")
        self.observations_changed.emit(observations)
        self.stats_updated.emit(stats)

    def refresh_stats(self) -> ObservationStats:
        """Rebuild the stats cache from the stored log.

        Raises:
            StorageError: The store could not be read or written.
        """
        with QMutexLocker(self._write_mutex):
            stats = compute_stats(self.db.list_observations(), as_of=self._clock())
            self.db.write_stats(stats)
        self.stats_updated.emit(stats)
        return stats

    def new_observation(self, shower_id: str, **fields) -> Observation:
        """Build an unsaved Observation stamped with the service clock."""
        now = self._clock()
        fields.setdefault("created_at", now)
        fields.setdefault("updated_at", now)
        return Observation(shower_id=shower_id, **fields)


def build_service(db: Optional[Database] = None) -> ObservationService:
    """Service over the configured database."""
    return ObservationService(db or Database())
