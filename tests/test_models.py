"""Tests for observation and shower data models."""

import json
import re
from datetime import date, datetime, time

import pytest

from conftest import make_obs
from radiant.models.observation import (
    Equipment,
    InvalidObservationError,
    MeteorCounts,
    Observation,
    ObservationLocation,
    ObservationStats,
    SkyConditions,
    generate_observation_id,
)
from radiant.models.shower import ActiveWindow, NotificationSettings, UserLocation
from radiant.stats import compute_stats


class TestObservationId:

    def test_format(self):
        assert re.fullmatch(r"obs_\d+_[a-z0-9]{9}", generate_observation_id())

    def test_unique(self):
        assert len({generate_observation_id() for _ in range(200)}) == 200

    def test_default_id_assigned(self):
        assert make_obs().id != make_obs().id


class TestValidation:

    def test_valid(self):
        make_obs().validate()

    @pytest.mark.parametrize("rating", [1, 5])
    def test_rating_bounds(self, rating):
        make_obs(rating=rating).validate()

    @pytest.mark.parametrize("rating", [0, 6, 3.5, True])
    def test_bad_rating(self, rating):
        with pytest.raises(InvalidObservationError):
            make_obs(rating=rating).validate()

    def test_bad_weather(self):
        obs = make_obs(conditions=SkyConditions(3, 3, weather="snow"))
        with pytest.raises(InvalidObservationError, match="weather"):
            obs.validate()

    def test_negative_fireballs(self):
        obs = make_obs(observations=MeteorCounts(meteors_count=3, fireballs=-1))
        with pytest.raises(InvalidObservationError):
            obs.validate()

    @pytest.mark.parametrize("count", [2.5, None, "7", True])
    def test_meteor_count_must_be_int(self, count):
        obs = make_obs(observations=MeteorCounts(meteors_count=count))
        with pytest.raises(InvalidObservationError, match="meteor count"):
            obs.validate()

    def test_zero_counts_allowed(self):
        make_obs(observations=MeteorCounts(meteors_count=0, fireballs=0)).validate()

    def test_error_is_value_error(self):
        assert issubclass(InvalidObservationError, ValueError)


class TestDuration:

    @pytest.mark.parametrize("start,end,hours", [
        ("22:00", "23:30", 1.5),
        ("23:30", "00:15", 0.75),
        ("21:00", "05:00", 8.0),
        ("22:00", "22:00", 0.0),
    ])
    def test_duration(self, start, end, hours):
        assert make_obs(start=start, end=end).duration_hours == pytest.approx(hours)


class TestSerialization:

    def test_record_shape(self):
        obs = make_obs(meteors=42, rating=5, shower_name="Perseids")
        data = obs.to_dict()
        assert data["showerId"] == "perseids"
        assert data["date"] == "2025-08-12"
        assert data["startTime"] == "22:00"
        assert data["endTime"] == "23:00"
        assert data["observations"] == {"meteorsCount": 42, "fireballs": 0, "colorsSeen": []}
        assert data["conditions"] == {"skyClarity": 4, "lightPollution": 3, "weather": "clear"}
        assert "location" not in data
        assert "photos" not in data

    def test_optional_sections(self):
        obs = make_obs(
            location=ObservationLocation(47.6, -122.3, city="Seattle"),
            equipment=Equipment(binoculars=True),
            photos=["img/1.jpg"],
        )
        data = obs.to_dict()
        assert data["location"] == {"latitude": 47.6, "longitude": -122.3, "city": "Seattle"}
        assert data["equipment"]["binoculars"] is True
        assert Observation.from_dict(data) == obs

    def test_from_mobile_record(self):
        record = {
            "id": "obs_1723420800000_k3j9x0a2b",
            "showerId": "perseids",
            "showerName": "Perseids",
            "date": "2025-08-12",
            "startTime": "22:00",
            "endTime": "01:30",
            "conditions": {"skyClarity": 5, "lightPollution": 4, "weather": "clear"},
            "observations": {"meteorsCount": 40, "fireballs": 2, "colorsSeen": ["green"]},
            "notes": "",
            "rating": 5,
            "createdAt": "2025-08-13T02:00:00",
            "updatedAt": "2025-08-13T02:00:00",
        }
        obs = Observation.from_dict(record)
        assert obs.start_time == time(22, 0)
        assert obs.observations.colors_seen == ["green"]
        assert obs.created_at == datetime(2025, 8, 13, 2, 0)
        assert obs.to_dict() == record

    @pytest.mark.parametrize("mutate", [
        lambda d: d.pop("showerId"),
        lambda d: d.update(date="12/08/2025"),
        lambda d: d.update(startTime="late"),
        lambda d: d.update(conditions=None),
    ])
    def test_malformed_record(self, mutate):
        data = make_obs().to_dict()
        mutate(data)
        with pytest.raises(InvalidObservationError):
            Observation.from_dict(data)


class TestStatsSerialization:

    def test_round_trip(self):
        stats = compute_stats(
            [make_obs(), make_obs("geminids", "2025-12-14", meteors=60)],
            as_of=date(2025, 12, 20),
        )
        data = stats.to_dict()
        assert data["showerStats"]["geminids"]["bestSession"] == {
            "date": "2025-12-14", "meteors": 60, "rating": 3,
        }
        assert type(stats).from_dict(data) == stats

    def test_average_rating_always_float(self):
        """Whole-number and fractional means serialize the same JSON type."""
        whole = compute_stats([make_obs(rating=4), make_obs(rating=4)],
                              as_of=date(2025, 8, 12))
        fractional = compute_stats([make_obs(rating=4), make_obs(rating=5)],
                                   as_of=date(2025, 8, 12))
        assert isinstance(whole.average_rating, float)
        assert isinstance(whole.shower_stats["perseids"].average_rating, float)
        assert isinstance(fractional.average_rating, float)
        assert json.dumps(whole.to_dict()["averageRating"]) == "4.0"

    def test_zero_record_float_fields(self):
        zero = ObservationStats()
        assert isinstance(zero.average_rating, float)
        assert isinstance(zero.total_hours, float)
        assert isinstance(ObservationStats.from_dict({"averageRating": 3}).average_rating,
                          float)


class TestShowerModels:

    def test_active_window_inclusive(self):
        window = ActiveWindow(date(2025, 7, 17), date(2025, 8, 24))
        assert window.contains(date(2025, 7, 17))
        assert window.contains(date(2025, 8, 24))
        assert not window.contains(date(2025, 8, 25))

    def test_notification_settings_dict(self):
        settings = NotificationSettings(days_before=3, minimum_zhr=50)
        data = settings.to_dict()
        assert data["minimumZHR"] == 50
        assert NotificationSettings.from_dict(data) == settings
        assert NotificationSettings.from_dict({}) == NotificationSettings()

    def test_user_location_dict(self):
        location = UserLocation(-33.9, 151.2, timezone="Australia/Sydney", city="Sydney")
        assert UserLocation.from_dict(location.to_dict()) == location
