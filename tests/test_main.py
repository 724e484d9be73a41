"""Command-line smoke tests against a throwaway database."""

import json

import pytest

from radiant.main import main


@pytest.fixture
def run(qtbot, tmp_path, capsys):
    """Run the CLI and return (exit code, stdout)."""
    db_path = tmp_path / "cli.db"

    def _run(*argv):
        code = main(["--db", str(db_path), *argv])
        return code, capsys.readouterr().out

    return _run


LOG_ARGS = ("log", "--shower", "perseids", "--date", "2025-08-12",
            "--start", "22:00", "--end", "01:30", "--meteors", "40",
            "--rating", "5")


class TestObservationCommands:

    def test_log_and_list(self, run):
        code, out = run(*LOG_ARGS)
        assert code == 0
        assert out.startswith("Saved obs_")

        code, out = run("list", "--json")
        records = json.loads(out)
        assert code == 0
        assert len(records) == 1
        assert records[0]["showerName"] == "Perseids"
        assert records[0]["observations"]["meteorsCount"] == 40

    def test_stats_json(self, run):
        run(*LOG_ARGS)
        code, out = run("stats", "--json")
        stats = json.loads(out)
        assert code == 0
        assert stats["totalObservations"] == 1
        assert stats["totalHours"] == pytest.approx(3.5)
        assert stats["favoriteShower"] == "perseids"

    def test_empty_stats(self, run):
        code, out = run("stats", "--json")
        assert code == 0
        assert json.loads(out)["totalObservations"] == 0

    def test_invalid_rating_rejected(self, run):
        code, _ = run("log", "--shower", "perseids", "--start", "22:00",
                      "--end", "23:00", "--rating", "9")
        assert code == 2
        code, out = run("list", "--json")
        assert json.loads(out) == []

    def test_delete(self, run):
        _, out = run(*LOG_ARGS)
        obs_id = out.split()[-1]
        code, _ = run("delete", obs_id)
        assert code == 0
        _, out = run("list")
        assert "No observations yet." in out

    def test_list_filters(self, run):
        run(*LOG_ARGS)
        _, out = run("list", "--shower", "geminids", "--json")
        assert json.loads(out) == []
        _, out = run("list", "--from", "2025-08-01", "--to", "2025-08-31", "--json")
        assert len(json.loads(out)) == 1


class TestCatalogCommands:

    def test_major_showers(self, run):
        code, out = run("showers", "--major")
        assert code == 0
        assert "quadrantids" in out
        assert "geminids" in out
        assert "lyrids" not in out

    def test_search_no_match(self, run):
        _, out = run("showers", "--search", "zzz")
        assert "No matching showers." in out

    def test_conditions_json(self, run):
        code, out = run("conditions", "geminids", "--lat", "47.6", "--lon", "-122.3",
                        "--date", "2025-12-14", "--json")
        data = json.loads(out)
        assert code == 0
        assert data["lightPollutionImpact"] == "medium"
        assert 0 <= data["visibility"] <= 1

    def test_conditions_not_visible(self, run):
        code, out = run("conditions", "perseids", "--lat", "-33.9", "--lon", "151.2")
        assert code == 0
        assert "not visible" in out

    def test_conditions_unknown_shower(self, run):
        code, _ = run("conditions", "nope", "--lat", "10", "--lon", "10")
        assert code == 1

    def test_conditions_uses_saved_location(self, run):
        run("location", "--lat", "65.0", "--lon", "25.0", "--tz", "Europe/Helsinki")
        code, out = run("conditions", "geminids", "--json")
        assert code == 0
        assert json.loads(out)["lightPollutionImpact"] == "low"

    def test_favorites(self, run):
        run("favorite", "add", "geminids")
        code, out = run("favorite", "add", "lyrids")
        assert code == 0
        assert out.index("Lyrids") < out.index("Geminids")

        _, out = run("favorite", "remove", "lyrids")
        assert "Lyrids" not in out

    def test_favorite_unknown(self, run):
        code, _ = run("favorite", "add", "nope")
        assert code == 1

    def test_engagement_counts(self, run):
        run("conditions", "geminids", "--lat", "47.6", "--lon", "-122.3")
        code, out = run("engagement", "--json")
        data = json.loads(out)
        assert code == 0
        assert data["appOpens"] == 2
        assert data["showersViewed"] == ["geminids"]

    def test_reminders(self, run):
        code, _ = run("reminders", "--json")
        assert code == 0
