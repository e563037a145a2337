"""Segment-by-segment speech synthesis against the remote VoxCPM app."""

import functools
import logging

from voxcpm_tts.constants import DEFAULT_SPEED, PROMPT_TEXT, SYNTH_JOB, VOICE_ID_SEPARATOR
from voxcpm_tts.remote import connect, disconnect, run_blocking
from voxcpm_tts.segmenter import has_marker, split_segments
from voxcpm_tts.voices import VoiceCatalog, repair_duplicated_name

logger = logging.getLogger(__name__)


class SynthesisError(RuntimeError):
    """The remote app answered, but without any audio."""


def extract_audio_reference(result) -> str:
    """Pull the first audio locator out of a predict() result.

    The app returns either a single output or a sequence of outputs; an
    audio output is a file dict (url/path) or a plain path string.
    """
    first = result
    if isinstance(result, (list, tuple)):
        first = result[0] if result else None

    locator = None
    if isinstance(first, dict):
        locator = first.get("url") or first.get("path")
    elif isinstance(first, str):
        locator = first

    if not locator:
        raise SynthesisError("No audio data in response")
    return locator


class SegmentStream:
    """Audio references for a multi-segment text, produced on demand.

    Forward-only and single-pass. Each step makes exactly one remote call
    and waits for it before returning. A failed call ends the stream at
    that position; segments after it are never attempted. Stopping early
    (or calling aclose()) leaves no call in flight.

    on_close runs once, when the stream is exhausted, fails, or is closed.
    """

    def __init__(self, segments: list[str], synthesize_one, on_close=None):
        self._segments = list(segments)
        self._synthesize_one = synthesize_one
        self._on_close = on_close
        self._position = 0
        self._closed = False
        self._running = False

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def remaining(self) -> int:
        """Segments not yet attempted."""
        if self._closed:
            return 0
        return len(self._segments) - self._position

    def __aiter__(self):
        return self

    async def __anext__(self) -> str:
        if self._running:
            raise RuntimeError("SegmentStream is already waiting on a segment")

        while not self._closed and self._position < len(self._segments):
            segment = self._segments[self._position]
            self._position += 1
            if not segment.strip():
                continue

            self._running = True
            try:
                reference = await self._synthesize_one(segment)
            except BaseException:
                self._running = False
                await self.aclose()
                raise
            self._running = False

            if reference:
                return reference

        await self.aclose()
        raise StopAsyncIteration

    async def aclose(self) -> None:
        self._closed = True
        on_close, self._on_close = self._on_close, None
        if on_close is not None:
            await on_close()

    async def collect(self) -> list[str]:
        """Drain the rest of the stream in order."""
        return [reference async for reference in self]


class SynthesisClient:
    """Turns filtered text into audio references for one voice.

    Build one per request from the current settings; the connection to the
    app is opened lazily, reused for every segment of that request, and
    closed once the request is done.
    """

    def __init__(self, endpoint: str, speed: float = DEFAULT_SPEED, catalog: VoiceCatalog | None = None):
        self.endpoint = endpoint
        self.speed = speed
        self.catalog = catalog if catalog is not None else VoiceCatalog()
        self._client = None

    async def _get_client(self):
        if self._client is None:
            self._client = await run_blocking(connect, self.endpoint)
        return self._client

    async def aclose(self) -> None:
        """Close the connection, if one was opened."""
        client, self._client = self._client, None
        if client is not None:
            await run_blocking(disconnect, client)

    def repair_voice_id(self, voice_id: str) -> str:
        """Collapse "A,A" to "A" unless the catalog knows the id as-is."""
        if VOICE_ID_SEPARATOR in voice_id and not self.catalog.has_voice_id(voice_id):
            repaired = repair_duplicated_name(voice_id)
            if repaired is not None:
                logger.debug("Repaired voice id %r -> %r", voice_id, repaired)
                return repaired
        return voice_id

    async def synthesize_segment(self, text: str, voice_id: str) -> str | None:
        """Synthesize one segment. Blank text yields None without a call.

        Transport errors and empty responses are logged and re-raised.
        """
        if not text or not text.strip():
            return None

        try:
            client = await self._get_client()
            predict = functools.partial(
                client.predict,
                voices_dropdown=voice_id,
                text=text,
                prompt_text=PROMPT_TEXT,
                prompt_audio=None,
                speed=self.speed,
                api_name=SYNTH_JOB,
            )
            result = await run_blocking(predict)
            return extract_audio_reference(result)
        except Exception:
            logger.exception("Synthesis failed for voice %r: %s...", voice_id, text[:50])
            raise

    async def synthesize(self, text: str, voice_id: str) -> str | SegmentStream | None:
        """Synthesize filtered text.

        Returns None for blank text, a single reference when the text is one
        segment, or a SegmentStream when it holds several.
        """
        voice_id = self.repair_voice_id(voice_id)

        if not text or not text.strip():
            return None

        if has_marker(text):
            segments = split_segments(text)
            logger.debug("Streaming %d segment(s) with voice %r", len(segments), voice_id)
            return SegmentStream(
                segments,
                lambda segment: self.synthesize_segment(segment, voice_id),
                on_close=self.aclose,
            )

        try:
            return await self.synthesize_segment(text, voice_id)
        finally:
            await self.aclose()
