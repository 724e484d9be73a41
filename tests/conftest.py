"""Shared fixtures and factories for Radiant tests."""

import os
from datetime import date, time

import pytest

from radiant.models.observation import MeteorCounts, Observation, SkyConditions
from radiant.models.shower import (
    ActiveWindow,
    Hemisphere,
    MoonImpact,
    Peak,
    ShowerDefinition,
)
from radiant.utils.config import Config

# Run Qt headless when no display is available.
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    """Point the config singleton at a throwaway directory."""
    monkeypatch.setenv("RADIANT_HOME", str(tmp_path / "radiant_home"))
    Config.reset()
    yield
    Config.reset()


def make_obs(shower_id="perseids", day="2025-08-12", start="22:00", end="23:00",
             meteors=10, rating=3, **kwargs):
    """Build an Observation with sensible defaults."""
    return Observation(
        shower_id=shower_id,
        date=date.fromisoformat(day),
        start_time=time.fromisoformat(start),
        end_time=time.fromisoformat(end),
        conditions=kwargs.pop("conditions", SkyConditions(4, 3, "clear")),
        observations=kwargs.pop("observations", MeteorCounts(meteors_count=meteors)),
        rating=rating,
        **kwargs,
    )


def make_shower(shower_id="perseids", name="Perseids", zhr=60,
                peak="2025-08-12", peak_time="21:00",
                active=("2025-07-17", "2025-08-24"),
                hemisphere=Hemisphere.BOTH,
                moon_phase_impact=MoonImpact.MEDIUM,
                best_viewing_time="All night",
                radiant="Perseus"):
    """Build a synthetic ShowerDefinition."""
    return ShowerDefinition(
        id=shower_id,
        name=name,
        radiant=radiant,
        active=ActiveWindow(date.fromisoformat(active[0]), date.fromisoformat(active[1])),
        peak=Peak(
            day=date.fromisoformat(peak),
            time_of_day=time.fromisoformat(peak_time) if peak_time else None,
        ),
        zhr=zhr,
        best_viewing_time=best_viewing_time,
        hemisphere=hemisphere,
        moon_phase_impact=moon_phase_impact,
    )
