"""
Reminder planning for Radiant.

Turns notification settings and the shower catalog into the list of
reminders the platform notification scheduler should register. Nothing
here schedules anything; the plan is handed off as plain records.

Three reminders per qualifying shower:
  - advance_reminder: ``days_before`` days ahead of the peak date
  - peak_reminder: ``hours_before_peak`` hours ahead of the peak date
  - peak_now: at the catalog peak time on the peak date
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional

from radiant.catalog import ShowerCatalog
from radiant.models.shower import NotificationSettings, ShowerDefinition

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Reminder:
    """One notification for the external scheduler.

    Attributes:
        shower_id: Catalog id the reminder is about.
        kind: "advance_reminder", "peak_reminder" or "peak_now".
        fire_at: Local time the notification should fire.
        title: Notification title.
        body: Notification body text.
    """
    shower_id: str
    kind: str
    fire_at: datetime
    title: str
    body: str

    def to_dict(self) -> dict:
        return {
            "showerId": self.shower_id,
            "type": self.kind,
            "fireAt": self.fire_at.isoformat(),
            "title": self.title,
            "body": self.body,
        }


def _shower_reminders(shower: ShowerDefinition,
                      settings: NotificationSettings,
                      now: datetime) -> list[Reminder]:
    peak_date = datetime.combine(shower.peak.day, datetime.min.time())
    if peak_date <= now:
        return []

    reminders = []

    if settings.peak_reminder and settings.days_before > 0:
        plural = "s" if settings.days_before > 1 else ""
        reminders.append(Reminder(
            shower_id=shower.id,
            kind="advance_reminder",
            fire_at=peak_date - timedelta(days=settings.days_before),
            title=f"{shower.name} Peak Approaching",
            body=(
                f"The {shower.name} meteor shower peaks in "
                f"{settings.days_before} day{plural}! "
                f"Expected rate: {shower.zhr} meteors/hour."
            ),
        ))

    if settings.hours_before_peak > 0:
        reminders.append(Reminder(
            shower_id=shower.id,
            kind="peak_reminder",
            fire_at=peak_date - timedelta(hours=settings.hours_before_peak),
            title=f"{shower.name} Peaks Tonight!",
            body=(
                f"Peak viewing in {settings.hours_before_peak} hours. "
                f"{shower.best_viewing_time}. "
                f"Up to {shower.zhr} meteors/hour expected!"
            ),
        ))

    reminders.append(Reminder(
        shower_id=shower.id,
        kind="peak_now",
        fire_at=shower.peak.moment,
        title=f"{shower.name} is Peaking Now!",
        body=(
            f"The {shower.name} meteor shower is at peak activity. "
            f"Look toward the {shower.radiant} constellation. "
            f"{shower.best_viewing_time}"
        ),
    ))

    return [r for r in reminders if r.fire_at > now]


def plan_reminders(catalog: ShowerCatalog,
                   settings: NotificationSettings,
                   as_of: Optional[datetime] = None) -> list[Reminder]:
    """Build the reminder schedule for every qualifying shower.

    Args:
        catalog: Showers to consider.
        settings: User notification preferences.
        as_of: Current local time. Defaults to now.

    Returns:
        Future reminders sorted by fire time ([] when notifications are off).
    """
    if not settings.enabled:
        return []

    now = as_of or datetime.now()
    reminders = []
    for shower in catalog.for_notifications(settings):
        reminders.extend(_shower_reminders(shower, settings, now))

    reminders.sort(key=lambda r: r.fire_at)
    logger.info(
        f"Planned {len(reminders)} reminders "
        f"(minimum ZHR {settings.minimum_zhr})"
    )
    return reminders
