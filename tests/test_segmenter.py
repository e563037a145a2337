"""Tests for segmenter module."""

import pytest

from voxcpm_tts.constants import SPLIT_MARKER
from voxcpm_tts.segmenter import split_segments, has_marker


@pytest.mark.parametrize("text", ["Hello.", "  padded  ", "line one\nline two"])
def test_no_marker_single_trimmed_segment(text):
    assert split_segments(text) == [text.strip()]


@pytest.mark.parametrize("text", ["", "   ", "\n\t"])
def test_blank_text_no_segments(text):
    assert split_segments(text) == []


@pytest.mark.parametrize("text", [SPLIT_MARKER, f" {SPLIT_MARKER}  {SPLIT_MARKER} \n"])
def test_only_markers_no_segments(text):
    assert split_segments(text) == []


def test_split_preserves_order_and_trims():
    text = f" first {SPLIT_MARKER}second{SPLIT_MARKER}  third  "
    assert split_segments(text) == ["first", "second", "third"]


def test_split_drops_blank_parts():
    text = f"a{SPLIT_MARKER}{SPLIT_MARKER}   {SPLIT_MARKER}b"
    assert split_segments(text) == ["a", "b"]


def test_split_does_not_refilter():
    """Asterisks and brackets pass through untouched."""
    text = f"*x*{SPLIT_MARKER}「y」"
    assert split_segments(text) == ["*x*", "「y」"]


def test_has_marker():
    assert has_marker(f"a{SPLIT_MARKER}b")
    assert not has_marker("a b")
