"""Shared fixtures for VoxCPM provider tests."""

from unittest.mock import patch, MagicMock

import pytest

from voxcpm_tts.constants import VOICE_LIST_LABEL
from voxcpm_tts.models import Voice
from voxcpm_tts.voices import VoiceCatalog


def _make_app_config(choices=None, label=VOICE_LIST_LABEL):
    """Build a Gradio-style app config with a voice dropdown."""
    components = [
        {"id": 1, "type": "textbox", "props": {"label": "text"}},
    ]
    if choices is not None:
        components.append({"id": 2, "type": "dropdown", "props": {"label": label, "choices": choices}})
    return {"components": components}


def _audio_file(url):
    """A FileData-like dict as returned with download_files=False."""
    return {"path": "/tmp/gradio/" + url.rsplit("/", 1)[-1], "url": url, "meta": {"_type": "gradio.FileData"}}


@pytest.fixture
def make_app_config():
    return _make_app_config


@pytest.fixture
def audio_file():
    return _audio_file


@pytest.fixture
def fake_remote():
    """Patch the Gradio client; yields the client instance every connect returns."""
    client = MagicMock()
    client.config = _make_app_config(["Alice", "Bob"])
    client.predict.return_value = _audio_file("http://tts.local/file=out.wav")
    with patch("voxcpm_tts.remote.Client", return_value=client) as client_cls:
        client.client_cls = client_cls
        yield client


@pytest.fixture
def catalog():
    return VoiceCatalog([Voice(name="Alice", voice_id="Alice"), Voice(name="Bob", voice_id="Bob")])
