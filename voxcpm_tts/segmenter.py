"""Split filtered text into ordered, independently speakable segments."""

from voxcpm_tts.constants import SPLIT_MARKER


def has_marker(text: str) -> bool:
    """True if the text carries more than one utterance."""
    return SPLIT_MARKER in text


def split_segments(text: str) -> list[str]:
    """Split on the reserved marker, trimming and dropping blank parts."""
    if not has_marker(text):
        stripped = text.strip()
        return [stripped] if stripped else []
    return [part.strip() for part in text.split(SPLIT_MARKER) if part.strip()]
