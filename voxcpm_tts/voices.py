"""Voice catalog, remote voice discovery, and identifier resolution."""

import logging

from voxcpm_tts.constants import DEFAULT_VOICE, VOICE_ID_SEPARATOR, VOICE_LIST_LABEL
from voxcpm_tts.models import Voice
from voxcpm_tts.remote import connect, disconnect, run_blocking

logger = logging.getLogger(__name__)


class VoiceCatalog:
    """Known voices, replaced wholesale on every successful refresh."""

    def __init__(self, voices: list[Voice] | None = None):
        self.voices = list(voices or [])

    def __len__(self) -> int:
        return len(self.voices)

    def __iter__(self):
        return iter(list(self.voices))

    @property
    def is_empty(self) -> bool:
        return not self.voices

    def find(self, name: str) -> Voice | None:
        for voice in self.voices:
            if voice.name == name:
                return voice
        return None

    def has_voice_id(self, voice_id: str) -> bool:
        return any(voice.voice_id == voice_id for voice in self.voices)

    def replace(self, voices: list[Voice]) -> None:
        # readers holding the old list keep seeing it
        self.voices = list(voices)


def repair_duplicated_name(identifier: str) -> str | None:
    """Undo a voice id that was joined with copies of itself.

    "Alice,Alice" -> "Alice". Anything else, including "Bob,Carl",
    returns None.
    """
    if VOICE_ID_SEPARATOR not in identifier:
        return None
    parts = identifier.split(VOICE_ID_SEPARATOR)
    if len(parts) > 1 and parts[0] and all(p == parts[0] for p in parts):
        return parts[0]
    return None


def _choice_name(choice) -> str:
    """Dropdown choices are plain values or [label, value] pairs."""
    if isinstance(choice, (list, tuple)):
        if not choice:
            return ""
        return str(choice[1] if len(choice) > 1 else choice[0])
    return str(choice)


def read_voice_choices(config: dict | None) -> list[str]:
    """Find the voice dropdown in an app config and return its choice names."""
    components = (config or {}).get("components") or []
    for component in components:
        props = component.get("props") or {}
        if props.get("label") == VOICE_LIST_LABEL:
            names = [_choice_name(c) for c in props.get("choices") or []]
            return [n for n in names if n]
    return []


async def fetch_voices(endpoint: str) -> list[Voice]:
    """Read the voice list from the remote app.

    Falls back to a single default voice when the app exposes none.
    Returns an empty list if the app cannot be reached.
    """
    try:
        client = await run_blocking(connect, endpoint)
        try:
            names = read_voice_choices(client.config)
        finally:
            await run_blocking(disconnect, client)
    except Exception:
        logger.exception("Fetching voices from %s failed", endpoint)
        return []

    if not names:
        names = [DEFAULT_VOICE]
    logger.debug("Fetched %d voice(s) from %s", len(names), endpoint)
    return [Voice(name=name, voice_id=name) for name in names]


async def refresh_catalog(catalog: VoiceCatalog, endpoint: str) -> list[Voice]:
    """Refetch the catalog; on failure the current voices are kept."""
    voices = await fetch_voices(endpoint)
    if voices:
        catalog.replace(voices)
    return voices


async def resolve_voice(identifier: str, catalog: VoiceCatalog, endpoint: str) -> Voice:
    """Map a requested identifier to a catalog voice.

    Fills an empty catalog first. Unknown identifiers come back as a
    pass-through Voice so the remote app decides whether to accept them.
    """
    if catalog.is_empty:
        await refresh_catalog(catalog, endpoint)

    match = catalog.find(identifier)

    if match is None:
        repaired = repair_duplicated_name(identifier)
        if repaired is not None:
            match = catalog.find(repaired)
            if match is not None:
                logger.info("Duplicated voice name %r, using %r instead", identifier, repaired)

    if match is None:
        return Voice(name=identifier, voice_id=identifier)
    return match
