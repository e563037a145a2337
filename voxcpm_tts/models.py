"""Data models for the VoxCPM provider."""

from dataclasses import dataclass

from voxcpm_tts.constants import DEFAULT_ENDPOINT, DEFAULT_SPEED


@dataclass
class Voice:
    name: str          # also the identifier sent to the remote app
    voice_id: str


@dataclass(frozen=True)
class FilterConfig:
    only_bracketed: bool = False
    strip_emphasis: bool = False


@dataclass(frozen=True)
class ProviderSettings:
    provider_endpoint: str = DEFAULT_ENDPOINT
    speed: float = DEFAULT_SPEED
    only_bracketed: bool = False
    strip_emphasis: bool = False

    @property
    def filter_config(self) -> FilterConfig:
        return FilterConfig(
            only_bracketed=self.only_bracketed,
            strip_emphasis=self.strip_emphasis,
        )
