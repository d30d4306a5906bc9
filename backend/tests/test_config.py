"""Tests for environment-driven settings."""
from renewal_desk.core.config import Settings


def test_frontend_url_is_read_from_environment(monkeypatch):
    monkeypatch.setenv("FRONTEND_URL", "https://desk.example.com")

    assert Settings().FRONTEND_URL == "https://desk.example.com"


def test_frontend_url_defaults_to_none(monkeypatch):
    monkeypatch.delenv("FRONTEND_URL", raising=False)

    assert Settings(_env_file=None).FRONTEND_URL is None
