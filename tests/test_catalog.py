"""Tests for the shower catalog and its queries (bundled 2025 dataset)."""

from datetime import date, datetime, time

import pytest

from conftest import make_shower
from radiant.catalog import ShowerCatalog, shower_from_dict
from radiant.models.shower import Hemisphere, MoonImpact, NotificationSettings, UserLocation


@pytest.fixture
def catalog():
    return ShowerCatalog.default()


def _ids(showers):
    return [s.id for s in showers]


class TestDefaultCatalog:

    def test_loads_all_showers(self, catalog):
        assert len(catalog) == 7
        assert _ids(catalog)[0] == "quadrantids"

    def test_by_id(self, catalog):
        perseids = catalog.by_id("perseids")
        assert perseids.name == "Perseids"
        assert perseids.zhr == 60
        assert perseids.hemisphere == Hemisphere.NORTHERN
        assert perseids.moon_phase_impact == MoonImpact.LOW
        assert perseids.peak.day == date(2025, 8, 12)
        assert perseids.peak.time_of_day == time(21, 0)
        assert perseids.months_visible == (7, 8)

    def test_unknown_id(self, catalog):
        assert catalog.by_id("nope") is None

    def test_peak_moment(self, catalog):
        assert catalog.by_id("quadrantids").peak.moment == datetime(2025, 1, 3, 14, 30)


class TestQueries:

    def test_active_on(self, catalog):
        assert _ids(catalog.active_on(date(2025, 8, 1))) == ["perseids"]
        assert _ids(catalog.active_on(date(2025, 12, 18))) == ["geminids", "ursids"]
        assert catalog.active_on(date(2025, 3, 1)) == []

    def test_active_window_inclusive(self, catalog):
        assert "lyrids" in _ids(catalog.active_on(date(2025, 4, 16)))
        assert "lyrids" in _ids(catalog.active_on(date(2025, 4, 30)))

    def test_on_date(self, catalog):
        assert _ids(catalog.on_date(date(2025, 11, 6))) == ["orionids", "leonids"]

    def test_upcoming(self, catalog):
        assert _ids(catalog.upcoming(date(2025, 12, 1), days=30)) == ["geminids", "ursids"]

    def test_upcoming_includes_today(self, catalog):
        assert _ids(catalog.upcoming(date(2025, 11, 17), days=0)) == ["leonids"]

    def test_upcoming_accepts_datetime(self, catalog):
        assert _ids(catalog.upcoming(datetime(2025, 8, 1, 20, 0), days=14)) == ["perseids"]

    def test_major(self, catalog):
        assert _ids(catalog.major()) == ["quadrantids", "perseids", "geminids"]

    def test_next_major(self, catalog):
        assert catalog.next_major(date(2025, 8, 12)).id == "geminids"
        assert catalog.next_major(date(2025, 1, 1)).id == "quadrantids"
        assert catalog.next_major(date(2025, 12, 31)) is None

    @pytest.mark.parametrize("query,expected", [
        ("GEM", ["geminids"]),
        ("lyra", ["lyrids"]),
        ("halley", ["orionids"]),
        ("tuttle", ["perseids", "leonids", "ursids"]),
        ("zzz", []),
    ])
    def test_search(self, catalog, query, expected):
        assert _ids(catalog.search(query)) == expected

    def test_blank_search_returns_all(self, catalog):
        assert len(catalog.search("   ")) == 7

    def test_visible_from_south(self, catalog):
        visible = _ids(catalog.visible_from(UserLocation(-33.9, 151.2)))
        assert visible == ["lyrids", "orionids", "leonids", "geminids"]

    def test_for_notifications(self, catalog):
        showers = catalog.for_notifications(NotificationSettings(minimum_zhr=15))
        assert "ursids" not in _ids(showers)
        assert "leonids" in _ids(showers)
        assert len(showers) == 6

    def test_by_ids_sorted_by_peak(self, catalog):
        favorites = catalog.by_ids(["geminids", "missing", "lyrids"])
        assert _ids(favorites) == ["lyrids", "geminids"]


class TestSyntheticCatalog:
    """Consumers take any catalog, not just the bundled one."""

    def test_custom_showers(self):
        catalog = ShowerCatalog([make_shower("test-a", zhr=5), make_shower("test-b", zhr=500)])
        assert _ids(catalog.major()) == ["test-b"]
        assert catalog.by_id("test-a").zhr == 5

    def test_record_without_peak_time(self):
        shower = shower_from_dict({
            "id": "x",
            "name": "X",
            "active": {"start": "2025-01-01", "end": "2025-01-02"},
            "peak": {"date": "2025-01-01"},
            "zhr": 3,
        })
        assert shower.peak.time_of_day is None
        assert shower.hemisphere == Hemisphere.BOTH
        assert shower.peak.moment == datetime(2025, 1, 1, 0, 0)
