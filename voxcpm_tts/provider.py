"""Host-facing VoxCPM provider: settings, readiness, voices, and generation."""

import logging

import httpx

from voxcpm_tts.models import ProviderSettings, Voice
from voxcpm_tts.settings import settings_from_mapping
from voxcpm_tts.textfilter import filter_text
from voxcpm_tts.tts import SegmentStream, SynthesisClient
from voxcpm_tts.voices import VoiceCatalog, refresh_catalog, resolve_voice

logger = logging.getLogger(__name__)


class VoxCPMProvider:
    """The provider a chat host talks to.

    Settings are held as an immutable value and replaced on every
    load_settings() call; each request builds its own SynthesisClient
    from whatever settings are current at that moment.
    """

    def __init__(self, settings: ProviderSettings | None = None, catalog: VoiceCatalog | None = None):
        self.settings = settings or ProviderSettings()
        self.catalog = catalog if catalog is not None else VoiceCatalog()
        self.ready = False

    async def load_settings(self, stored: dict | None = None) -> ProviderSettings:
        """Apply host-stored settings over the defaults, then check the endpoint is ready."""
        self.settings = settings_from_mapping(stored)
        await self.check_ready()
        return self.settings

    async def check_ready(self) -> bool:
        """Mark the provider ready if the endpoint answers at all.

        The status code is not inspected; only a transport failure counts.
        """
        try:
            async with httpx.AsyncClient() as client:
                await client.head(self.settings.provider_endpoint)
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            logger.warning("Readiness check failed for %s: %s", self.settings.provider_endpoint, e)
            return self.ready
        self.ready = True
        return self.ready

    async def fetch_voices(self) -> list[Voice]:
        return await refresh_catalog(self.catalog, self.settings.provider_endpoint)

    async def refresh_voices(self) -> list[Voice]:
        """Manual refresh; the only way a non-empty catalog is invalidated."""
        return await self.fetch_voices()

    async def get_voice(self, voice_name: str) -> Voice:
        return await resolve_voice(voice_name, self.catalog, self.settings.provider_endpoint)

    def process_text(self, text: str) -> str:
        return filter_text(text, self.settings.filter_config)

    async def generate_tts(self, text: str, voice_id: str) -> str | SegmentStream | None:
        """Synthesize already-filtered text with the current settings."""
        client = SynthesisClient(
            self.settings.provider_endpoint,
            speed=self.settings.speed,
            catalog=self.catalog,
        )
        return await client.synthesize(text, voice_id)

    async def speak(self, text: str, voice_name: str) -> str | SegmentStream | None:
        """Filter raw chat text, resolve the voice, and synthesize."""
        filtered = self.process_text(text)
        if not filtered.strip():
            return None
        voice = await self.get_voice(voice_name)
        return await self.generate_tts(filtered, voice.voice_id)
