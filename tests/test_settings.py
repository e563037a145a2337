"""Tests for settings module."""

import json

import pytest

from voxcpm_tts.constants import DEFAULT_ENDPOINT
from voxcpm_tts.settings import load_settings, settings_from_mapping


def test_defaults_when_nothing_stored():
    settings = settings_from_mapping(None)
    assert settings.provider_endpoint == DEFAULT_ENDPOINT
    assert settings.speed == 1.0
    assert settings.only_bracketed is False
    assert settings.strip_emphasis is False


def test_stored_values_override_defaults():
    settings = settings_from_mapping({"provider_endpoint": "http://gpu:7861", "speed": "1.5", "only_bracketed": True})
    assert settings.provider_endpoint == "http://gpu:7861"
    assert settings.speed == 1.5
    assert settings.only_bracketed is True
    assert settings.strip_emphasis is False


def test_legacy_keys_accepted():
    """Older stores saved only_brackets / ignore_asterisks."""
    settings = settings_from_mapping({"only_brackets": True, "ignore_asterisks": True})
    assert settings.only_bracketed is True
    assert settings.strip_emphasis is True


def test_current_key_wins_over_legacy():
    settings = settings_from_mapping({"only_brackets": True, "only_bracketed": False})
    assert settings.only_bracketed is False


def test_unknown_keys_ignored():
    settings = settings_from_mapping({"voice_map": {"a": "b"}})
    assert settings.provider_endpoint == DEFAULT_ENDPOINT


def test_blank_endpoint_falls_back():
    settings = settings_from_mapping({"provider_endpoint": ""})
    assert settings.provider_endpoint == DEFAULT_ENDPOINT


def test_invalid_speed_raises():
    with pytest.raises(ValueError, match="speed"):
        settings_from_mapping({"speed": "fast"})


def test_load_settings_file(tmp_path):
    path = tmp_path / "voxcpm.json"
    path.write_text(json.dumps({"provider_endpoint": "http://box:9000", "ignore_asterisks": True}))
    settings = load_settings(str(path))
    assert settings.provider_endpoint == "http://box:9000"
    assert settings.strip_emphasis is True


def test_load_settings_missing_file(tmp_path):
    settings = load_settings(str(tmp_path / "missing.json"))
    assert settings.provider_endpoint == DEFAULT_ENDPOINT


def test_load_settings_none():
    assert load_settings(None).provider_endpoint == DEFAULT_ENDPOINT


def test_load_settings_malformed(tmp_path, caplog):
    """Malformed JSON logs a warning and uses defaults."""
    path = tmp_path / "voxcpm.json"
    path.write_text("{not json")
    settings = load_settings(str(path))
    assert settings.provider_endpoint == DEFAULT_ENDPOINT
    assert "Malformed settings file" in caplog.text


def test_load_settings_not_an_object(tmp_path):
    path = tmp_path / "voxcpm.json"
    path.write_text("[1, 2]")
    assert load_settings(str(path)).speed == 1.0


@pytest.mark.parametrize("stored, expected", [
    ("false", False),
    ("False", False),
    ("no", False),
    ("0", False),
    ("", False),
    (None, False),
    (0, False),
    ("true", True),
    (" Yes ", True),
    ("on", True),
    (1, True),
    (True, True),
])
def test_policy_flags_parse_string_forms(stored, expected):
    """A stored "false" must not turn the policy on."""
    settings = settings_from_mapping({"only_bracketed": stored, "ignore_asterisks": stored})
    assert settings.only_bracketed is expected
    assert settings.strip_emphasis is expected


@pytest.mark.parametrize("stored", ["maybe", 2, 0.5, [True]])
def test_policy_flag_unrecognized_raises(stored):
    with pytest.raises(ValueError, match="only_bracketed"):
        settings_from_mapping({"only_bracketed": stored})
