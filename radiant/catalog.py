"""
Read-only meteor shower catalog for Radiant.

The catalog is passed to whatever needs it rather than read from a
module-level global, so tests can build small synthetic catalogs.
ShowerCatalog.default() loads the bundled 2025 dataset.
"""

import json
import logging
from datetime import date, datetime, time, timedelta
from pathlib import Path
from typing import Iterable, Iterator, Optional

from radiant.astronomy import is_visible
from radiant.models.shower import (
    ActiveWindow,
    Difficulty,
    Hemisphere,
    MoonImpact,
    NotificationSettings,
    Peak,
    ShowerDefinition,
    UserLocation,
)
from radiant.utils.constants import MAJOR_SHOWER_ZHR, UPCOMING_WINDOW_DAYS

logger = logging.getLogger(__name__)

DEFAULT_DATA_FILE = Path(__file__).parent / "data" / "meteor_showers_2025.json"


def shower_from_dict(data: dict) -> ShowerDefinition:
    """Build a ShowerDefinition from its camelCase JSON record."""
    peak = data["peak"]
    position = data.get("radiantPosition", {})
    visibility = data.get("visibility", {})
    return ShowerDefinition(
        id=data["id"],
        name=data["name"],
        radiant=data.get("radiant", ""),
        active=ActiveWindow(
            start=date.fromisoformat(data["active"]["start"]),
            end=date.fromisoformat(data["active"]["end"]),
        ),
        peak=Peak(
            day=date.fromisoformat(peak["date"]),
            time_of_day=time.fromisoformat(peak["time"]) if peak.get("time") else None,
        ),
        zhr=int(data["zhr"]),
        velocity=float(data.get("velocity", 0)),
        parent=data.get("parent", ""),
        description=data.get("description", ""),
        best_viewing_time=data.get("bestViewingTime", ""),
        radiant_ra=float(position.get("ra", 0)),
        radiant_dec=float(position.get("dec", 0)),
        hemisphere=Hemisphere(visibility.get("hemisphere", "both")),
        months_visible=tuple(visibility.get("monthsVisible", ())),
        difficulty=Difficulty(data.get("difficulty", "moderate")),
        moon_phase_impact=MoonImpact(data.get("moonPhaseImpact", "medium")),
    )


class ShowerCatalog:
    """Immutable, ordered collection of shower definitions."""

    def __init__(self, showers: Iterable[ShowerDefinition]):
        self._showers = tuple(showers)
        self._by_id = {s.id: s for s in self._showers}

    @classmethod
    def from_file(cls, path: Path) -> "ShowerCatalog":
        with open(path, encoding="utf-8") as f:
            records = json.load(f)
        catalog = cls(shower_from_dict(r) for r in records)
        logger.info(f"Loaded {len(catalog)} showers from {path}")
        return catalog

    @classmethod
    def default(cls) -> "ShowerCatalog":
        return cls.from_file(DEFAULT_DATA_FILE)

    def __iter__(self) -> Iterator[ShowerDefinition]:
        return iter(self._showers)

    def __len__(self) -> int:
        return len(self._showers)

    def all(self) -> list[ShowerDefinition]:
        return list(self._showers)

    def by_id(self, shower_id: str) -> Optional[ShowerDefinition]:
        return self._by_id.get(shower_id)

    def by_ids(self, shower_ids: Iterable[str]) -> list[ShowerDefinition]:
        """Known showers for the given ids, ordered by peak date.

        Unknown ids are skipped.
        """
        showers = [self._by_id[i] for i in shower_ids if i in self._by_id]
        return sorted(showers, key=lambda s: s.peak.day)

    # =========================================================================
    # Queries
    # =========================================================================

    def active_on(self, day: date) -> list[ShowerDefinition]:
        """Showers whose activity window contains the day."""
        return [s for s in self._showers if s.active.contains(day)]

    def on_date(self, day: date) -> list[ShowerDefinition]:
        """Showers peaking on, or active during, the day (calendar view)."""
        return [
            s for s in self._showers
            if s.peak.day == day or s.active.contains(day)
        ]

    def upcoming(self, as_of: date,
                 days: int = UPCOMING_WINDOW_DAYS) -> list[ShowerDefinition]:
        """Showers peaking within ``days`` days from ``as_of`` (inclusive)."""
        if isinstance(as_of, datetime):
            as_of = as_of.date()
        until = as_of + timedelta(days=days)
        return [s for s in self._showers if as_of <= s.peak.day <= until]

    def major(self, min_zhr: int = MAJOR_SHOWER_ZHR) -> list[ShowerDefinition]:
        return [s for s in self._showers if s.zhr >= min_zhr]

    def next_major(self, as_of: date) -> Optional[ShowerDefinition]:
        """First major shower in catalog order peaking after ``as_of``."""
        if isinstance(as_of, datetime):
            as_of = as_of.date()
        for shower in self._showers:
            if shower.peak.day > as_of and shower.is_major:
                return shower
        return None

    def search(self, query: str) -> list[ShowerDefinition]:
        """Case-insensitive match on name, radiant, or parent body."""
        needle = query.strip().lower()
        if not needle:
            return self.all()
        return [
            s for s in self._showers
            if needle in s.name.lower()
            or needle in s.radiant.lower()
            or needle in s.parent.lower()
        ]

    def visible_from(self, location: UserLocation) -> list[ShowerDefinition]:
        return [s for s in self._showers if is_visible(s, location)]

    def for_notifications(self, settings: NotificationSettings) -> list[ShowerDefinition]:
        """Showers bright enough to be worth a reminder."""
        return [s for s in self._showers if s.zhr >= settings.minimum_zhr]
