from __future__ import annotations

import pytest

from common.env import env_bool, env_float
from common.settings import get, reload_from_env


def test_defaults() -> None:
    s = get()
    assert (s.ZOOM_LEVEL_MIN, s.ZOOM_LEVEL_MAX) == (1.0, 30000.0)
    assert s.ZOOM_SPEED_EPSILON == 0.005
    assert s.DEBUG_SCHEDULER is False and s.SHADER_DEBUG is False


def test_env_overrides(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("FV_ZOOM_LEVEL_MAX", "100")
    monkeypatch.setenv("FV_ZOOM_SPEED_EPSILON", "0.1")
    monkeypatch.setenv("FV_DEBUG_SCHEDULER", "yes")
    reload_from_env()
    s = get()
    assert s.ZOOM_LEVEL_MAX == 100.0
    assert s.ZOOM_SPEED_EPSILON == 0.1
    assert s.DEBUG_SCHEDULER is True


def test_inverted_zoom_bounds_fall_back(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("FV_ZOOM_LEVEL_MIN", "50")
    monkeypatch.setenv("FV_ZOOM_LEVEL_MAX", "10")
    reload_from_env()
    s = get()
    assert (s.ZOOM_LEVEL_MIN, s.ZOOM_LEVEL_MAX) == (1.0, 30000.0)


def test_env_helpers(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("X_BAD", "abc")
    monkeypatch.setenv("X_NAN", "nan")
    monkeypatch.setenv("X_OFF", "off")
    assert env_float("X_NAN", 2.5) == 2.5
    assert env_float("X_BAD", 1.0) == 1.0
    assert env_bool("X_OFF", True) is False
    assert env_bool("X_BAD", True) is True
    assert env_float("X_MISSING", 4.0) == 4.0
