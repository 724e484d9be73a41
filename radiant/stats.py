"""
Observation statistics and streak engine for Radiant.

Recomputes the complete ObservationStats aggregate from the full
observation log on every call. There is no incremental state: the same
list in the same order always yields the same result.

Tie-breaks depend on input order:
  - best session per shower: most meteors, then highest rating, then
    the first one seen
  - favorite shower: most sessions, then the shower that appears first
Callers that need reproducible results across differently-ordered
loads should sort their input first.
"""

import logging
from dataclasses import dataclass
from datetime import date, datetime
from statistics import fmean
from typing import Iterable, Optional

from radiant.models.observation import (
    BestSession,
    Observation,
    ObservationStats,
    ShowerStats,
)
from radiant.utils.constants import MONTH_NAMES, STREAK_MAX_GAP_DAYS

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Streaks:
    current: int
    longest: int


def _as_day(as_of: Optional[date]) -> date:
    """Reduce an evaluation timestamp to a calendar date (today if None)."""
    if as_of is None:
        return date.today()
    if isinstance(as_of, datetime):
        return as_of.date()
    return as_of


def month_label(day: date) -> str:
    """Human month label, e.g. "August 2025"."""
    return f"{MONTH_NAMES[day.month - 1]} {day.year}"


# =============================================================================
# Streaks
# =============================================================================

def compute_streaks(sorted_observations: list[Observation],
                    as_of: Optional[date] = None) -> Streaks:
    """Find the current and longest observing streaks.

    A streak is a run of sessions where each one is at most
    STREAK_MAX_GAP_DAYS after the previous. The current streak is the
    trailing run, or 0 once the last session is more than
    STREAK_MAX_GAP_DAYS before ``as_of``.

    Args:
        sorted_observations: Observations sorted ascending by date.
        as_of: Evaluation date (a datetime is reduced to its date).
               Defaults to today.

    Returns:
        Streaks(current, longest).
    """
    if not sorted_observations:
        return Streaks(current=0, longest=0)

    longest = 1
    run = 1
    for prev, curr in zip(sorted_observations, sorted_observations[1:]):
        gap = (curr.date - prev.date).days
        if gap <= STREAK_MAX_GAP_DAYS:
            run += 1
        else:
            longest = max(longest, run)
            run = 1
    longest = max(longest, run)

    today = _as_day(as_of)
    since_last = (today - sorted_observations[-1].date).days
    current = run if since_last <= STREAK_MAX_GAP_DAYS else 0

    return Streaks(current=current, longest=longest)


# =============================================================================
# Aggregate stats
# =============================================================================

def empty_stats() -> ObservationStats:
    """The canonical zero-valued stats record."""
    return ObservationStats()


def _shower_breakdown(observations: Iterable[Observation]) -> dict[str, ShowerStats]:
    """Group sessions by shower, preserving first-appearance order."""
    groups: dict[str, list[Observation]] = {}
    for obs in observations:
        groups.setdefault(obs.shower_id, []).append(obs)

    breakdown = {}
    for shower_id, group in groups.items():
        best = group[0]
        for obs in group[1:]:
            if obs.meteors_count > best.meteors_count or (
                obs.meteors_count == best.meteors_count
                and obs.rating > best.rating
            ):
                best = obs

        breakdown[shower_id] = ShowerStats(
            observations=len(group),
            total_meteors=sum(o.meteors_count for o in group),
            average_rating=fmean(o.rating for o in group),
            best_session=BestSession(
                date=best.date.isoformat(),
                meteors=best.meteors_count,
                rating=best.rating,
            ),
        )
    return breakdown


def _favorite_shower(breakdown: dict[str, ShowerStats]) -> str:
    favorite = ""
    most = 0
    for shower_id, stats in breakdown.items():
        if stats.observations > most:
            favorite = shower_id
            most = stats.observations
    return favorite


def compute_stats(observations: list[Observation],
                  as_of: Optional[date] = None) -> ObservationStats:
    """Compute the full ObservationStats aggregate for a log.

    Pure: the input list is not modified.

    Args:
        observations: Every observation in the log, in store order.
        as_of: Evaluation date for the current streak. Defaults to today.

    Returns:
        ObservationStats for the log (the zero record when empty).
    """
    if not observations:
        return empty_stats()

    durations = [obs.duration_hours for obs in observations]

    monthly: dict[str, int] = {}
    for obs in observations:
        label = month_label(obs.date)
        monthly[label] = monthly.get(label, 0) + 1

    breakdown = _shower_breakdown(observations)

    # sorted() is stable, so same-day sessions keep their store order
    by_date = sorted(observations, key=lambda o: o.date)
    streaks = compute_streaks(by_date, as_of=as_of)

    stats = ObservationStats(
        total_observations=len(observations),
        total_meteors=sum(obs.meteors_count for obs in observations),
        total_hours=sum(durations),
        average_rating=fmean(obs.rating for obs in observations),
        favorite_shower=_favorite_shower(breakdown),
        longest_session=max(durations),
        current_streak=streaks.current,
        longest_streak=streaks.longest,
        monthly_stats=monthly,
        shower_stats=breakdown,
    )
    logger.debug(
        f"Stats computed: {stats.total_observations} sessions, "
        f"{stats.total_meteors} meteors, streak={stats.current_streak}"
    )
    return stats
