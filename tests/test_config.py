from __future__ import annotations

import pytest

from config import get_settings_module
from config.config import env_bool, env_float


@pytest.mark.parametrize(
    "value, expected",
    [
        ("production", "config.production"),
        ("PROD", "config.production"),
        ("testing", "config.testing"),
        ("test", "config.testing"),
        ("development", "config.development"),
        ("anything-else", "config.development"),
    ],
)
def test_settings_module_follows_app_env(monkeypatch, value, expected):
    monkeypatch.setenv("APP_ENV", value)
    assert get_settings_module() == expected


def test_settings_module_defaults_to_development(monkeypatch):
    monkeypatch.delenv("APP_ENV", raising=False)
    assert get_settings_module() == "config.development"


def test_env_bool(monkeypatch):
    monkeypatch.setenv("FLAG", "false")
    assert env_bool("FLAG", True) is False
    monkeypatch.setenv("FLAG", "1")
    assert env_bool("FLAG", False) is True
    monkeypatch.delenv("FLAG")
    assert env_bool("FLAG", True) is True


def test_env_float(monkeypatch):
    monkeypatch.setenv("TIMEOUT", "12.5")
    assert env_float("TIMEOUT", 30.0) == 12.5
    monkeypatch.delenv("TIMEOUT")
    assert env_float("TIMEOUT", 30.0) == 30.0
