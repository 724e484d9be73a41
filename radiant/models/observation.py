"""
Observation log models for Radiant.

Observation: One user-recorded viewing session.
ObservationStats: Aggregate analytics derived from the full observation log.

Records persist in the same camelCase shape the mobile app has always
written (showerId, startTime, observations.meteorsCount, ...), so
to_dict/from_dict are the only place field names are translated.
"""

import random
import string
from dataclasses import dataclass, field
from datetime import date, datetime, time
from typing import Optional

from radiant.utils.constants import RATING_RANGE, WEATHER_TYPES


class InvalidObservationError(ValueError):
    """Observation rejected at the write boundary."""


def generate_observation_id() -> str:
    """Create an id like "obs_1723420800000_k3j9x0a2b"."""
    millis = int(datetime.now().timestamp() * 1000)
    suffix = "".join(random.choices(string.ascii_lowercase + string.digits, k=9))
    return f"obs_{millis}_{suffix}"


def _format_clock(value: time) -> str:
    return value.strftime("%H:%M")


def _parse_clock(text: str) -> time:
    try:
        return time.fromisoformat(text)
    except (TypeError, ValueError) as e:
        raise InvalidObservationError(f"Invalid clock time: {text!r}") from e


@dataclass
class ObservationLocation:
    latitude: float
    longitude: float
    city: Optional[str] = None
    country: Optional[str] = None


@dataclass
class SkyConditions:
    """Sky and weather conditions during a session.

    Attributes:
        sky_clarity: 1 (poor) to 5 (excellent).
        light_pollution: 1 (heavy) to 5 (none).
        weather: One of clear, partly_cloudy, cloudy, rainy, foggy.
        temperature: Air temperature (optional).
        humidity: Relative humidity percent (optional).
    """
    sky_clarity: int
    light_pollution: int
    weather: str = "clear"
    temperature: Optional[float] = None
    humidity: Optional[float] = None


@dataclass
class MeteorCounts:
    """What was seen during a session."""
    meteors_count: int = 0
    fireballs: int = 0
    colors_seen: list[str] = field(default_factory=list)
    brightest_magnitude: Optional[float] = None
    peak_activity: Optional[str] = None


@dataclass
class Equipment:
    camera: bool = False
    telescope: bool = False
    binoculars: bool = False
    other: Optional[str] = None


@dataclass
class Observation:
    """A single viewing session from the user's log.

    Attributes:
        shower_id: Catalog id of the observed shower. May reference a
                   shower the catalog no longer carries.
        date: Local calendar date of the session.
        start_time: Local clock time the session started.
        end_time: Local clock time it ended. Earlier than start_time when
                  the session ran past midnight.
        conditions: Sky and weather conditions.
        observations: Meteor counts and details.
        rating: Overall session rating, 1-5.
        shower_name: Display name captured when the entry was logged.
        notes: Free text.
        location: Where the session took place (optional).
        equipment: Gear used (optional).
        photos: Photo paths or URIs (optional).
        id: Opaque unique id, fixed at creation.
        created_at: Creation timestamp, never changed.
        updated_at: Refreshed on every save.
    """
    shower_id: str
    date: date
    start_time: time
    end_time: time
    conditions: SkyConditions
    observations: MeteorCounts
    rating: int
    shower_name: str = ""
    notes: str = ""
    location: Optional[ObservationLocation] = None
    equipment: Optional[Equipment] = None
    photos: Optional[list[str]] = None
    id: str = field(default_factory=generate_observation_id)
    created_at: datetime = field(default_factory=datetime.now)
    updated_at: datetime = field(default_factory=datetime.now)

    @property
    def meteors_count(self) -> int:
        return self.observations.meteors_count

    @property
    def duration_hours(self) -> float:
        """Session length in hours, rolling over midnight when end < start."""
        start = datetime.combine(self.date, self.start_time)
        end = datetime.combine(self.date, self.end_time)
        hours = (end - start).total_seconds() / 3600
        if hours < 0:
            hours += 24
        return hours

    def validate(self):
        """Raise InvalidObservationError if the record is malformed."""
        low, high = RATING_RANGE
        if not self.id:
            raise InvalidObservationError("Observation id is required")
        if not self.shower_id:
            raise InvalidObservationError("Observation must reference a shower")
        if not isinstance(self.date, date):
            raise InvalidObservationError(f"Invalid date: {self.date!r}")
        for name in ("start_time", "end_time"):
            if not isinstance(getattr(self, name), time):
                raise InvalidObservationError(f"Invalid {name}: {getattr(self, name)!r}")

        checks = [
            ("rating", self.rating),
            ("sky clarity", self.conditions.sky_clarity),
            ("light pollution", self.conditions.light_pollution),
        ]
        for label, value in checks:
            if not isinstance(value, int) or isinstance(value, bool) \
                    or not low <= value <= high:
                raise InvalidObservationError(
                    f"{label} must be an integer {low}-{high}, got {value!r}"
                )

        if self.conditions.weather not in WEATHER_TYPES:
            raise InvalidObservationError(
                f"Unknown weather {self.conditions.weather!r}"
            )
        counts = [
            ("meteor count", self.observations.meteors_count),
            ("fireball count", self.observations.fireballs),
        ]
        for label, value in counts:
            if not isinstance(value, int) or isinstance(value, bool) or value < 0:
                raise InvalidObservationError(
                    f"{label} must be a non-negative integer, got {value!r}"
                )

    def to_dict(self) -> dict:
        """Serialize to the persisted camelCase record shape."""
        cond = self.conditions
        seen = self.observations

        conditions = {
            "skyClarity": cond.sky_clarity,
            "lightPollution": cond.light_pollution,
            "weather": cond.weather,
        }
        if cond.temperature is not None:
            conditions["temperature"] = cond.temperature
        if cond.humidity is not None:
            conditions["humidity"] = cond.humidity

        observations = {
            "meteorsCount": seen.meteors_count,
            "fireballs": seen.fireballs,
            "colorsSeen": list(seen.colors_seen),
        }
        if seen.brightest_magnitude is not None:
            observations["brightestMagnitude"] = seen.brightest_magnitude
        if seen.peak_activity is not None:
            observations["peakActivity"] = seen.peak_activity

        data = {
            "id": self.id,
            "showerId": self.shower_id,
            "showerName": self.shower_name,
            "date": self.date.isoformat(),
            "startTime": _format_clock(self.start_time),
            "endTime": _format_clock(self.end_time),
            "conditions": conditions,
            "observations": observations,
            "notes": self.notes,
            "rating": self.rating,
            "createdAt": self.created_at.isoformat(),
            "updatedAt": self.updated_at.isoformat(),
        }

        if self.location is not None:
            loc = {
                "latitude": self.location.latitude,
                "longitude": self.location.longitude,
            }
            if self.location.city is not None:
                loc["city"] = self.location.city
            if self.location.country is not None:
                loc["country"] = self.location.country
            data["location"] = loc

        if self.equipment is not None:
            eq = {
                "camera": self.equipment.camera,
                "telescope": self.equipment.telescope,
                "binoculars": self.equipment.binoculars,
            }
            if self.equipment.other is not None:
                eq["other"] = self.equipment.other
            data["equipment"] = eq

        if self.photos is not None:
            data["photos"] = list(self.photos)

        return data

    @classmethod
    def from_dict(cls, data: dict) -> "Observation":
        """Rebuild an Observation from its persisted shape."""
        try:
            cond = data["conditions"]
            seen = data["observations"]
            location = None
            if data.get("location"):
                loc = data["location"]
                location = ObservationLocation(
                    latitude=loc["latitude"],
                    longitude=loc["longitude"],
                    city=loc.get("city"),
                    country=loc.get("country"),
                )
            equipment = None
            if data.get("equipment"):
                eq = data["equipment"]
                equipment = Equipment(
                    camera=eq.get("camera", False),
                    telescope=eq.get("telescope", False),
                    binoculars=eq.get("binoculars", False),
                    other=eq.get("other"),
                )

            return cls(
                id=data["id"],
                shower_id=data["showerId"],
                shower_name=data.get("showerName", ""),
                date=date.fromisoformat(data["date"]),
                start_time=_parse_clock(data["startTime"]),
                end_time=_parse_clock(data["endTime"]),
                conditions=SkyConditions(
                    sky_clarity=cond["skyClarity"],
                    light_pollution=cond["lightPollution"],
                    weather=cond.get("weather", "clear"),
                    temperature=cond.get("temperature"),
                    humidity=cond.get("humidity"),
                ),
                observations=MeteorCounts(
                    meteors_count=seen.get("meteorsCount", 0),
                    fireballs=seen.get("fireballs", 0),
                    colors_seen=list(seen.get("colorsSeen", [])),
                    brightest_magnitude=seen.get("brightestMagnitude"),
                    peak_activity=seen.get("peakActivity"),
                ),
                rating=data["rating"],
                notes=data.get("notes", ""),
                location=location,
                equipment=equipment,
                photos=data.get("photos"),
                created_at=datetime.fromisoformat(data["createdAt"]),
                updated_at=datetime.fromisoformat(data["updatedAt"]),
            )
        except InvalidObservationError:
            raise
        except (KeyError, TypeError, ValueError) as e:
            raise InvalidObservationError(f"Malformed observation record: {e}") from e


# =============================================================================
# Aggregate statistics
# =============================================================================

@dataclass
class BestSession:
    """The single best session logged for a shower."""
    date: str
    meteors: int
    rating: int


@dataclass
class ShowerStats:
    observations: int
    total_meteors: int
    average_rating: float
    best_session: BestSession

    def to_dict(self) -> dict:
        return {
            "observations": self.observations,
            "totalMeteors": self.total_meteors,
            "averageRating": self.average_rating,
            "bestSession": {
                "date": self.best_session.date,
                "meteors": self.best_session.meteors,
                "rating": self.best_session.rating,
            },
        }

    @classmethod
    def from_dict(cls, data: dict) -> "ShowerStats":
        best = data["bestSession"]
        return cls(
            observations=data["observations"],
            total_meteors=data["totalMeteors"],
            average_rating=float(data["averageRating"]),
            best_session=BestSession(
                date=best["date"],
                meteors=best["meteors"],
                rating=best["rating"],
            ),
        )


@dataclass
class ObservationStats:
    """Analytics over the whole observation log.

    Always regenerable from the raw log; any stored copy is only a cache.

    Attributes:
        total_observations: Number of logged sessions.
        total_meteors: Sum of meteor counts.
        total_hours: Sum of session durations (hours).
        average_rating: Mean session rating.
        favorite_shower: Shower id with the most sessions ("" when empty).
        longest_session: Longest single session (hours).
        current_streak: Length of the active streak, 0 once it lapses.
        longest_streak: Longest streak ever recorded.
        monthly_stats: "August 2025" -> number of sessions that month.
        shower_stats: Shower id -> per-shower breakdown.
    """
    total_observations: int = 0
    total_meteors: int = 0
    total_hours: float = 0.0
    average_rating: float = 0.0
    favorite_shower: str = ""
    longest_session: float = 0.0
    current_streak: int = 0
    longest_streak: int = 0
    monthly_stats: dict[str, int] = field(default_factory=dict)
    shower_stats: dict[str, ShowerStats] = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {
            "totalObservations": self.total_observations,
            "totalMeteors": self.total_meteors,
            "totalHours": self.total_hours,
            "averageRating": self.average_rating,
            "favoriteShower": self.favorite_shower,
            "longestSession": self.longest_session,
            "currentStreak": self.current_streak,
            "longestStreak": self.longest_streak,
            "monthlyStats": dict(self.monthly_stats),
            "showerStats": {
                shower_id: stats.to_dict()
                for shower_id, stats in self.shower_stats.items()
            },
        }

    @classmethod
    def from_dict(cls, data: dict) -> "ObservationStats":
        return cls(
            total_observations=data.get("totalObservations", 0),
            total_meteors=data.get("totalMeteors", 0),
            total_hours=float(data.get("totalHours", 0)),
            average_rating=float(data.get("averageRating", 0)),
            favorite_shower=data.get("favoriteShower", ""),
            longest_session=float(data.get("longestSession", 0)),
            current_streak=data.get("currentStreak", 0),
            longest_streak=data.get("longestStreak", 0),
            monthly_stats=dict(data.get("monthlyStats", {})),
            shower_stats={
                shower_id: ShowerStats.from_dict(stats)
                for shower_id, stats in data.get("showerStats", {}).items()
            },
        )
