"""Provider settings: defaults, host overrides, and the JSON settings file."""

import json
import logging
import os

from voxcpm_tts.constants import DEFAULT_SETTINGS, LEGACY_SETTING_KEYS
from voxcpm_tts.models import ProviderSettings

logger = logging.getLogger(__name__)


def _normalize_keys(stored: dict) -> dict:
    """Map legacy setting names onto current ones; current names win."""
    normalized = {}
    for key, value in stored.items():
        current = LEGACY_SETTING_KEYS.get(key)
        if current is not None:
            if current not in stored:
                normalized[current] = value
            continue
        normalized[key] = value
    return normalized


_TRUE_STRINGS = {"true", "yes", "on", "1"}
_FALSE_STRINGS = {"false", "no", "off", "0", ""}


def _as_bool(key: str, value) -> bool:
    """Accept real booleans, 0/1, None, and the usual string spellings."""
    if isinstance(value, bool):
        return value
    if value is None:
        return False
    if isinstance(value, int) and value in (0, 1):
        return bool(value)
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in _TRUE_STRINGS:
            return True
        if lowered in _FALSE_STRINGS:
            return False
    raise ValueError(f"Invalid {key}: {value!r}")


def settings_from_mapping(stored: dict | None = None) -> ProviderSettings:
    """Merge host-stored settings over the defaults.

    Unknown keys are ignored. Raises ValueError if speed is not a number
    or a policy flag is not a recognizable boolean.
    """
    merged = dict(DEFAULT_SETTINGS)
    merged.update(_normalize_keys(stored or {}))

    endpoint = str(merged["provider_endpoint"] or DEFAULT_SETTINGS["provider_endpoint"]).strip()
    try:
        speed = float(merged["speed"])
    except (TypeError, ValueError):
        raise ValueError(f"Invalid speed: {merged['speed']!r}") from None

    return ProviderSettings(
        provider_endpoint=endpoint,
        speed=speed,
        only_bracketed=_as_bool("only_bracketed", merged["only_bracketed"]),
        strip_emphasis=_as_bool("strip_emphasis", merged["strip_emphasis"]),
    )


def load_settings(path: str | None) -> ProviderSettings:
    """Load settings from a JSON file if it exists.

    Missing or malformed files fall back to the defaults.
    """
    if not path or not os.path.exists(path):
        return settings_from_mapping({})
    try:
        with open(path) as f:
            stored = json.load(f)
    except json.JSONDecodeError:
        logger.warning("Malformed settings file: %s, using defaults", path)
        return settings_from_mapping({})
    if not isinstance(stored, dict):
        logger.warning("Settings file %s is not a JSON object, using defaults", path)
        return settings_from_mapping({})
    return settings_from_mapping(stored)
