"""
Meteor shower data models for Radiant.

ShowerDefinition: One entry of the read-only shower catalog.
UserLocation: Observer coordinates supplied by the device.
NotificationSettings: Reminder preferences handed to the notification layer.
ViewingConditions: Transient viewing score for a (shower, location, date).
"""

from dataclasses import dataclass, field
from datetime import date, datetime, time
from enum import Enum
from typing import Optional

from radiant.utils.constants import MAJOR_SHOWER_ZHR


class Hemisphere(str, Enum):
    """Hemispheres from which a shower can be seen."""
    NORTHERN = "northern"
    SOUTHERN = "southern"
    BOTH = "both"


class MoonImpact(str, Enum):
    """How strongly moonlight washes out a shower."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class Difficulty(str, Enum):
    EASY = "easy"
    MODERATE = "moderate"
    DIFFICULT = "difficult"


@dataclass(frozen=True)
class ActiveWindow:
    start: date
    end: date

    def contains(self, day: date) -> bool:
        return self.start <= day <= self.end


@dataclass(frozen=True)
class Peak:
    """Peak date and optional local clock time of maximum activity."""
    day: date
    time_of_day: Optional[time] = None

    @property
    def moment(self) -> datetime:
        """Peak as a naive datetime (midnight when no time is given)."""
        return datetime.combine(self.day, self.time_of_day or time(0, 0))


@dataclass(frozen=True)
class ShowerDefinition:
    """A meteor shower as described by the catalog.

    Attributes:
        id: Stable catalog identifier (e.g. "perseids").
        name: Display name.
        radiant: Constellation the radiant lies in.
        active: Date window during which meteors are seen.
        peak: Date (and optional time) of maximum activity.
        zhr: Zenithal Hourly Rate at peak.
        velocity: Entry velocity (km/s).
        parent: Parent comet or asteroid.
        description: Free-text description.
        best_viewing_time: Free-text viewing advice ("After midnight until dawn").
        radiant_ra: Radiant right ascension (degrees).
        radiant_dec: Radiant declination (degrees).
        hemisphere: Hemisphere(s) the shower is visible from.
        months_visible: Calendar months (1-12) with activity.
        difficulty: Observing difficulty.
        moon_phase_impact: Sensitivity to moonlight.
    """
    id: str
    name: str
    radiant: str
    active: ActiveWindow
    peak: Peak
    zhr: int
    velocity: float = 0.0
    parent: str = ""
    description: str = ""
    best_viewing_time: str = ""
    radiant_ra: float = 0.0
    radiant_dec: float = 0.0
    hemisphere: Hemisphere = Hemisphere.BOTH
    months_visible: tuple[int, ...] = ()
    difficulty: Difficulty = Difficulty.MODERATE
    moon_phase_impact: MoonImpact = MoonImpact.MEDIUM

    @property
    def is_major(self) -> bool:
        return self.zhr >= MAJOR_SHOWER_ZHR


@dataclass(frozen=True)
class UserLocation:
    """Observer position. Timezone is an IANA name ("Europe/Berlin")."""
    latitude: float
    longitude: float
    timezone: str = "UTC"
    city: Optional[str] = None
    country: Optional[str] = None

    def to_dict(self) -> dict:
        data = {
            "latitude": self.latitude,
            "longitude": self.longitude,
            "timezone": self.timezone,
        }
        if self.city is not None:
            data["city"] = self.city
        if self.country is not None:
            data["country"] = self.country
        return data

    @classmethod
    def from_dict(cls, data: dict) -> "UserLocation":
        return cls(
            latitude=float(data["latitude"]),
            longitude=float(data["longitude"]),
            timezone=data.get("timezone", "UTC"),
            city=data.get("city"),
            country=data.get("country"),
        )


@dataclass
class NotificationSettings:
    """Reminder preferences consumed by the notification layer."""
    enabled: bool = True
    peak_reminder: bool = True
    days_before: int = 2
    hours_before_peak: int = 6
    show_magnitude_filter: bool = False
    minimum_zhr: int = 15

    def to_dict(self) -> dict:
        return {
            "enabled": self.enabled,
            "peakReminder": self.peak_reminder,
            "daysBefore": self.days_before,
            "hoursBeforePeak": self.hours_before_peak,
            "showMagnitudeFilter": self.show_magnitude_filter,
            "minimumZHR": self.minimum_zhr,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "NotificationSettings":
        defaults = cls()
        return cls(
            enabled=bool(data.get("enabled", defaults.enabled)),
            peak_reminder=bool(data.get("peakReminder", defaults.peak_reminder)),
            days_before=int(data.get("daysBefore", defaults.days_before)),
            hours_before_peak=int(
                data.get("hoursBeforePeak", defaults.hours_before_peak)
            ),
            show_magnitude_filter=bool(
                data.get("showMagnitudeFilter", defaults.show_magnitude_filter)
            ),
            minimum_zhr=int(data.get("minimumZHR", defaults.minimum_zhr)),
        )


@dataclass(frozen=True)
class ViewingConditions:
    """Viewing score for one shower at one place and date.

    Attributes:
        visibility: Composite score, 0 (hopeless) to 1 (ideal).
        moon_phase: Fractional position in the lunar cycle, 0-1.
        moon_illumination: Approximate lit fraction, 0-100.
        optimal_viewing_hours: (start, end) local clock times as "HH:MM".
        light_pollution_impact: "low", "medium" or "high".
    """
    visibility: float
    moon_phase: float
    moon_illumination: int
    optimal_viewing_hours: tuple[str, str] = field(default=("22:00", "06:00"))
    light_pollution_impact: str = "medium"

    def to_dict(self) -> dict:
        start, end = self.optimal_viewing_hours
        return {
            "visibility": self.visibility,
            "moonPhase": self.moon_phase,
            "moonIllumination": self.moon_illumination,
            "optimalViewingHours": {"start": start, "end": end},
            "lightPollutionImpact": self.light_pollution_impact,
        }
