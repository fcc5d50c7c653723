"""Tests for configuration settings."""
import pytest

from hanzitype.config import Settings, settings


def test_settings_defaults():
    """Test default settings values."""
    assert settings.search.debounce_ms == 300
    assert settings.search.default_limit == 20
    assert settings.search.max_limit == 100
    assert settings.game.duration_seconds == 60
    assert settings.game.tick_seconds == 1.0
    assert settings.game.advance_delay_ms == 100
    assert settings.cookies.words_cookie_name == "addedWords"
    assert settings.cookies.max_age_days == 365
    assert settings.cookies.path == "/"
    assert settings.auth.min_password_length == 6


def test_default_settings_are_valid():
    Settings().validate()


@pytest.mark.parametrize(
    "section, field, value",
    [
        ("search", "debounce_ms", 0),
        ("search", "default_limit", 0),
        ("search", "default_limit", 500),
        ("game", "duration_seconds", 0),
        ("game", "tick_seconds", 0),
        ("game", "advance_delay_ms", -1),
        ("auth", "min_password_length", 0),
        ("cookies", "words_cookie_name", ""),
    ],
)
def test_validate_rejects(section: str, field: str, value):
    test_settings = Settings()
    setattr(getattr(test_settings, section), field, value)
    with pytest.raises(ValueError):
        test_settings.validate()
