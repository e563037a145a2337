"""Reduce chat text to the parts that should be spoken."""

import logging
import re

from voxcpm_tts.constants import BRACKET_OPEN, BRACKET_CLOSE, EMPHASIS_CHAR, SPLIT_MARKER
from voxcpm_tts.models import FilterConfig

logger = logging.getLogger(__name__)

# 「spoken line」, non-greedy and non-nested
_BRACKET_RE = re.compile(
    rf"{re.escape(BRACKET_OPEN)}([^{re.escape(BRACKET_CLOSE)}]*){re.escape(BRACKET_CLOSE)}"
)

# *action or emphasis*, removed entirely
_EMPHASIS_RE = re.compile(
    rf"{re.escape(EMPHASIS_CHAR)}[^{re.escape(EMPHASIS_CHAR)}]*{re.escape(EMPHASIS_CHAR)}"
)


def extract_bracketed(text: str) -> list[str]:
    """Return the inner contents of every bracketed span, in order."""
    return _BRACKET_RE.findall(text)


def strip_emphasis(text: str) -> str:
    """Remove emphasis spans, chunk by chunk when the text is already split.

    Chunks that become empty are dropped.
    """
    if SPLIT_MARKER in text:
        chunks = [_EMPHASIS_RE.sub("", chunk).strip() for chunk in text.split(SPLIT_MARKER)]
        return SPLIT_MARKER.join(chunk for chunk in chunks if chunk)
    return _EMPHASIS_RE.sub("", text).strip()


def filter_text(text: str, config: FilterConfig) -> str:
    """Apply the bracket and emphasis policies, in that order.

    An empty result means there is nothing to speak.
    """
    processed = text

    if config.only_bracketed:
        spans = extract_bracketed(text)
        if not spans:
            logger.info("No bracketed text found, skipping")
            return ""
        processed = SPLIT_MARKER.join(spans)

    if config.strip_emphasis:
        processed = strip_emphasis(processed)

    return processed
