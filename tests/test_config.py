"""Tests for environment-driven settings."""

from pathlib import Path

import pytest

from deadlinesun.config import Settings
from deadlinesun.models import TieBreak

_VARS = (
    "DEADLINESUN_LANDMARKS",
    "DEADLINESUN_TZ_POLYGONS",
    "DEADLINESUN_GLOW_MINUTES",
    "DEADLINESUN_APPARENT_SOLAR",
    "DEADLINESUN_TIE_BREAK",
    "DEADLINESUN_LANG",
)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    for name in _VARS:
        monkeypatch.delenv(name, raising=False)


class TestFromEnv:

    def test_defaults(self):
        assert Settings.from_env(dotenv=False) == Settings()

    def test_reads_variables(self, monkeypatch, tmp_path):
        monkeypatch.setenv("DEADLINESUN_LANDMARKS", str(tmp_path / "landmarks.json"))
        monkeypatch.setenv("DEADLINESUN_TZ_POLYGONS", " ")
        monkeypatch.setenv("DEADLINESUN_GLOW_MINUTES", " 45 ")
        monkeypatch.setenv("DEADLINESUN_APPARENT_SOLAR", "Yes")
        monkeypatch.setenv("DEADLINESUN_TIE_BREAK", "LATER")
        monkeypatch.setenv("DEADLINESUN_LANG", "ko")
        settings = Settings.from_env(dotenv=False)
        assert settings.landmarks_path == tmp_path / "landmarks.json"
        assert settings.tz_polygons_path is None
        assert settings.glow_minutes == 45
        assert settings.apparent_solar is True
        assert settings.tie_break is TieBreak.later
        assert settings.lang == "ko"

    def test_expands_home(self, monkeypatch):
        monkeypatch.setenv("DEADLINESUN_LANDMARKS", "~/landmarks.json")
        assert Settings.from_env(dotenv=False).landmarks_path == Path.home() / "landmarks.json"

    def test_loads_dotenv_only_when_asked(self, monkeypatch):
        calls = []
        monkeypatch.setattr("deadlinesun.config.load_dotenv", lambda: calls.append(1))
        Settings.from_env(dotenv=False)
        assert calls == []
        Settings.from_env()
        assert calls == [1]

    @pytest.mark.parametrize(
        "name,value",
        [
            ("DEADLINESUN_GLOW_MINUTES", "half an hour"),
            ("DEADLINESUN_APPARENT_SOLAR", "maybe"),
            ("DEADLINESUN_TIE_BREAK", "middle"),
        ],
    )
    def test_rejects_bad_values(self, monkeypatch, name, value):
        monkeypatch.setenv(name, value)
        with pytest.raises(ValueError, match=name):
            Settings.from_env(dotenv=False)

