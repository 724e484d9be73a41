"""
Astronomy calculator for Radiant.

Moon phase and illumination, hemisphere visibility, and a composite
viewing-conditions score for a (shower, location, date) triple.

The moon model is a mean-cycle approximation anchored to a known new
moon; illumination is |cos(phase * 2pi)|, which reports a full 100% at
new moon as well as at full moon. Scores from this module are only
meaningful relative to each other.
"""

import logging
import math
from datetime import date, datetime, time, timezone
from typing import Optional

from radiant.models.shower import (
    Hemisphere,
    ShowerDefinition,
    UserLocation,
    ViewingConditions,
)
from radiant.utils.constants import (
    DEFAULT_VIEWING_WINDOW,
    HIGH_POLLUTION_LATITUDE,
    LIGHT_POLLUTION_MULTIPLIER,
    LOW_POLLUTION_LATITUDE,
    MOON_PHASE_NAMES,
    MOONLIGHT_PENALTY,
    POOR_RECOMMENDATION,
    RECOMMENDATION_THRESHOLDS,
    REFERENCE_NEW_MOON,
    SECONDS_PER_DAY,
    SYNODIC_MONTH_DAYS,
    VIEWING_WINDOWS,
)

logger = logging.getLogger(__name__)


def _to_utc(when: date) -> datetime:
    """Normalize a date or datetime to an aware UTC datetime.

    Plain dates are read as UTC midnight, naive datetimes as UTC.
    """
    if isinstance(when, datetime):
        if when.tzinfo is None:
            return when.replace(tzinfo=timezone.utc)
        return when.astimezone(timezone.utc)
    return datetime.combine(when, time(0, 0), tzinfo=timezone.utc)


# =============================================================================
# Moon
# =============================================================================

def moon_phase(when: date) -> float:
    """Position in the synodic cycle: 0 = new, 0.5 = full, approaching 1 = new.

    Args:
        when: Date or datetime to evaluate.

    Returns:
        Phase fraction in [0, 1).
    """
    days_since = (_to_utc(when) - REFERENCE_NEW_MOON).total_seconds() / SECONDS_PER_DAY
    cycles = days_since / SYNODIC_MONTH_DAYS
    return cycles - math.floor(cycles)


def moon_illumination(when: date) -> int:
    """Approximate moon illumination percentage, 0-100."""
    phase = moon_phase(when)
    return round(abs(math.cos(phase * 2 * math.pi)) * 100)


def moon_phase_name(when: date) -> str:
    """Named phase ("new_moon", "waxing_crescent", ...) for a date."""
    phase = moon_phase(when)
    for low, high, name in MOON_PHASE_NAMES:
        if low <= phase < high:
            return name
    return "new_moon"


# =============================================================================
# Visibility
# =============================================================================

def is_visible(shower: ShowerDefinition, location: UserLocation) -> bool:
    """Hemisphere check only; the activity window is not considered."""
    if shower.hemisphere == Hemisphere.NORTHERN and location.latitude < 0:
        return False
    if shower.hemisphere == Hemisphere.SOUTHERN and location.latitude > 0:
        return False
    return True


def light_pollution_impact(latitude: float) -> str:
    """Crude light-pollution estimate from latitude alone."""
    abs_lat = abs(latitude)
    if abs_lat > LOW_POLLUTION_LATITUDE:
        return "low"
    if abs_lat < HIGH_POLLUTION_LATITUDE:
        return "high"
    return "medium"


def optimal_viewing_hours(shower: ShowerDefinition) -> tuple[str, str]:
    """Viewing window from keywords in the shower's best-viewing text."""
    for keyword, window in VIEWING_WINDOWS:
        if keyword in shower.best_viewing_time:
            return window
    return DEFAULT_VIEWING_WINDOW


def viewing_conditions(shower: ShowerDefinition,
                       location: UserLocation,
                       when: date) -> ViewingConditions:
    """Score how well a shower can be seen from a location on a date.

    visibility = (1 - illumination * moon penalty) * light-pollution multiplier

    Args:
        shower: Catalog entry.
        location: Observer position.
        when: Date or datetime to evaluate.

    Returns:
        ViewingConditions with the composite score and its inputs.
    """
    phase = moon_phase(when)
    illumination = moon_illumination(when)

    penalty = MOONLIGHT_PENALTY.get(shower.moon_phase_impact.value,
                                    MOONLIGHT_PENALTY["low"])
    visibility = 1.0 * (1 - (illumination / 100) * penalty)

    impact = light_pollution_impact(location.latitude)
    visibility *= LIGHT_POLLUTION_MULTIPLIER[impact]

    return ViewingConditions(
        visibility=max(0.0, visibility),
        moon_phase=phase,
        moon_illumination=illumination,
        optimal_viewing_hours=optimal_viewing_hours(shower),
        light_pollution_impact=impact,
    )


def viewing_recommendation(conditions: ViewingConditions,
                           shower: ShowerDefinition) -> str:
    """One-line advice text for a viewing score."""
    for threshold, template in RECOMMENDATION_THRESHOLDS:
        if conditions.visibility > threshold:
            return template.format(name=shower.name)
    return POOR_RECOMMENDATION.format(name=shower.name)


def days_until_peak(shower: ShowerDefinition,
                    as_of: Optional[datetime] = None) -> int:
    """Whole days until the shower's peak date, rounded up.

    Negative once the peak has passed.

    Args:
        shower: Catalog entry.
        as_of: Evaluation time. Defaults to now.
    """
    now = _to_utc(as_of or datetime.now(timezone.utc))
    peak = _to_utc(shower.peak.day)
    return math.ceil((peak - now).total_seconds() / SECONDS_PER_DAY)
