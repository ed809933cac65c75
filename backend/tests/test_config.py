"""Tests for environment-driven settings and logging bootstrap."""

import logging

import pytest

from panelforge import logging_setup
from panelforge.config import Settings


def test_defaults(monkeypatch):
    monkeypatch.delenv("PANELFORGE_RANDOM_SEED", raising=False)
    s = Settings(_env_file=None)
    assert s.default_page_size == "comic_standard"
    assert s.default_background_color == "#FFFFFF"
    assert s.default_quality == 90
    assert s.random_seed is None
    assert s.caption_fallback_panel_width == 500


def test_env_prefix(monkeypatch):
    monkeypatch.setenv("PANELFORGE_RANDOM_SEED", "42")
    monkeypatch.setenv("PANELFORGE_DEFAULT_PAGE_SIZE", "web_hd")
    s = Settings(_env_file=None)
    assert s.random_seed == 42
    assert s.default_page_size == "web_hd"


def test_bad_env_value(monkeypatch):
    monkeypatch.setenv("PANELFORGE_DEFAULT_QUALITY", "high")
    with pytest.raises(ValueError):
        Settings(_env_file=None)


def test_configure_logging(monkeypatch):
    calls = {}
    monkeypatch.setattr(logging_setup, "load_dotenv", lambda: calls.setdefault("dotenv", True))
    monkeypatch.setattr(logging, "basicConfig", lambda **kw: calls.update(kw))
    logging_setup.configure_logging("warning")
    assert calls["dotenv"] is True
    assert calls["level"] == logging.WARNING
    assert calls["format"] == logging_setup.LOG_FORMAT


def test_configure_logging_unknown_level(monkeypatch):
    calls = {}
    monkeypatch.setattr(logging_setup, "load_dotenv", lambda: None)
    monkeypatch.setattr(logging, "basicConfig", lambda **kw: calls.update(kw))
    logging_setup.configure_logging("chatty")
    assert calls["level"] == logging.INFO
