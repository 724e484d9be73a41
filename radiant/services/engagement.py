"""
Engagement tracking for Radiant.

Counts app launches, shower views, and notification interactions for
the notification research study. Tracking never interrupts the user: a
store failure is logged and the event is dropped.
"""

import logging
from dataclasses import replace
from datetime import datetime
from typing import Callable

from radiant.database.db import Database, StorageError
from radiant.models.engagement import UserEngagement

logger = logging.getLogger(__name__)

ENGAGEMENT_KEY = "user_engagement"


class EngagementTracker:
    """Reads and updates the UserEngagement record in the store."""

    def __init__(self, db: Database,
                 clock: Callable[[], datetime] = datetime.now):
        self.db = db
        self._clock = clock

    def get(self) -> UserEngagement:
        """Current counters (all zero if nothing is stored or the store fails)."""
        try:
            data = self.db.read_cache(ENGAGEMENT_KEY)
            return UserEngagement.from_dict(data) if data else UserEngagement()
        except (StorageError, TypeError, ValueError) as e:
            logger.warning(f"Engagement data unavailable: {e}")
            return UserEngagement()

    def update(self, **changes) -> UserEngagement:
        """Apply field changes and persist. Raises StorageError."""
        engagement = replace(self.get(), **changes)
        self.db.write_cache(ENGAGEMENT_KEY, engagement.to_dict())
        return engagement

    def _record(self, event: str, **changes):
        try:
            self.update(**changes)
        except StorageError as e:
            logger.warning(f"Dropped engagement event {event}: {e}")

    def record_app_open(self):
        current = self.get()
        self._record("app_open", app_opens=current.app_opens + 1,
                     last_active=self._clock())

    def record_shower_viewed(self, shower_id: str):
        viewed = self.get().showers_viewed
        if shower_id in viewed:
            return
        self._record("shower_viewed", showers_viewed=[*viewed, shower_id])

    def record_notification_interaction(self):
        current = self.get()
        self._record("notification_interaction",
                     notification_interactions=current.notification_interactions + 1)
