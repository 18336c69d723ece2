"""Providers that are declared but have no synthesis backend yet.

Callers may select them; every synthesis call is rejected with a typed
``TTSNotImplementedError`` tagged with the provider name.
"""

from ..tts.errors import TTSNotImplementedError
from ..tts.models import COST_PER_1K_CHARS, SynthesisOptions
from .base import ProviderCapabilities, TTSProvider


class UnimplementedProvider(TTSProvider):
    display_name = "Unknown"

    async def synthesize(self, text: str, options: SynthesisOptions) -> bytes:
        raise TTSNotImplementedError(
            f"{self.display_name} TTS not yet implemented",
            provider=self.name,
            retryable=False,
        )

    async def list_voices(self) -> list[dict]:
        return []


class GoogleProvider(UnimplementedProvider):
    name = "google"
    display_name = "Google"
    capabilities = ProviderCapabilities(
        max_characters=4096,
        cost_per_1k_chars=COST_PER_1K_CHARS["google"],
        implemented=False,
    )


class ElevenLabsProvider(UnimplementedProvider):
    name = "elevenlabs"
    display_name = "ElevenLabs"
    capabilities = ProviderCapabilities(
        max_characters=4096,
        cost_per_1k_chars=COST_PER_1K_CHARS["elevenlabs"],
        implemented=False,
    )


class LocalProvider(UnimplementedProvider):
    name = "local"
    display_name = "Local"
    capabilities = ProviderCapabilities(
        max_characters=4096,
        cost_per_1k_chars=COST_PER_1K_CHARS["local"],
        implemented=False,
    )
