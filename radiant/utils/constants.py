"""
Astronomy constants, scoring tables, and engine thresholds for Radiant.

The viewing-conditions multipliers are a heuristic model, not a radiative
calculation. They must stay fixed so scores remain comparable with values
users have already seen.
"""

from datetime import datetime, timezone

# =============================================================================
# Moon
# =============================================================================

SYNODIC_MONTH_DAYS = 29.53059  # Mean lunar cycle length (days)

# Known new moon used as the phase anchor
REFERENCE_NEW_MOON = datetime(2000, 1, 6, tzinfo=timezone.utc)

SECONDS_PER_DAY = 24 * 60 * 60

# Named phases by synodic fraction: (low, high, name)
MOON_PHASE_NAMES = [
    (0.000, 0.0625, "new_moon"),
    (0.0625, 0.1875, "waxing_crescent"),
    (0.1875, 0.3125, "first_quarter"),
    (0.3125, 0.4375, "waxing_gibbous"),
    (0.4375, 0.5625, "full_moon"),
    (0.5625, 0.6875, "waning_gibbous"),
    (0.6875, 0.8125, "last_quarter"),
    (0.8125, 0.9375, "waning_crescent"),
    (0.9375, 1.000, "new_moon"),
]

# =============================================================================
# Viewing Conditions Scoring
# =============================================================================

# Maximum visibility reduction from a fully lit moon, by shower sensitivity
MOONLIGHT_PENALTY = {
    "high":   0.8,
    "medium": 0.5,
    "low":    0.2,
}

# Latitude bands for the light-pollution estimate (absolute degrees)
LOW_POLLUTION_LATITUDE = 60.0   # above this: sparsely populated
HIGH_POLLUTION_LATITUDE = 30.0  # below this: densely populated

LIGHT_POLLUTION_MULTIPLIER = {
    "low":    1.0,
    "medium": 0.8,
    "high":   0.6,
}

# Optimal viewing windows, matched in order against "best viewing time" text
VIEWING_WINDOWS = [
    ("midnight", ("23:00", "05:00")),
    ("evening",  ("21:00", "02:00")),
    ("dawn",     ("02:00", "06:00")),
]
DEFAULT_VIEWING_WINDOW = ("22:00", "06:00")  # All night

# Recommendation text thresholds (visibility strictly greater than)
RECOMMENDATION_THRESHOLDS = [
    (0.8, "Excellent viewing conditions! {name} should be clearly visible."),
    (0.6, "Good viewing conditions. Look for {name} in a dark location."),
    (0.4, "Fair conditions. {name} may be visible from dark sky locations."),
    (0.2, "Poor conditions due to moonlight. Try viewing {name} late at night."),
]
POOR_RECOMMENDATION = (
    "Very poor conditions. {name} will be difficult to see due to bright moonlight."
)

# =============================================================================
# Observation Log
# =============================================================================

STREAK_MAX_GAP_DAYS = 7        # Sessions at most this far apart continue a streak
RATING_RANGE = (1, 5)          # Inclusive bounds for ratings and sky scales
WEATHER_TYPES = ("clear", "partly_cloudy", "cloudy", "rainy", "foggy")
MONTH_NAMES = (
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
)

# =============================================================================
# Catalog
# =============================================================================

MAJOR_SHOWER_ZHR = 50          # ZHR at which a shower counts as "major"
UPCOMING_WINDOW_DAYS = 30

DEFAULT_NOTIFICATION_SETTINGS = {
    "enabled": True,
    "peakReminder": True,
    "daysBefore": 2,
    "hoursBeforePeak": 6,
    "showMagnitudeFilter": False,
    "minimumZHR": 15,
}
