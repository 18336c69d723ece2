"""OpenAI text-to-speech provider implementation."""

import asyncio
import logging
import os

from openai import APIConnectionError, APIStatusError, OpenAI

from ..tts.errors import TTSAPIError, TTSAuthError, error_for_status
from ..tts.models import COST_PER_1K_CHARS, SUPPORTED_VOICES, SynthesisOptions
from .base import ProviderCapabilities, TTSProvider

logger = logging.getLogger(__name__)

STANDARD_MODEL = "tts-1"
HD_MODEL = "tts-1-hd"


class OpenAIProvider(TTSProvider):
    """OpenAI TTS provider implementation.

    Synthesizes speech with the OpenAI audio API. Voice, format and speed
    are passed through; ``hd`` quality selects the HD model.
    """

    name = "openai"
    capabilities = ProviderCapabilities(
        max_characters=4096,
        cost_per_1k_chars=COST_PER_1K_CHARS["openai"],
    )

    def __init__(self, api_key: str | None = None) -> None:
        """Initialize OpenAI provider.

        Args:
            api_key: OpenAI API key. If not provided, reads from
                    OPENAI_API_KEY environment variable.

        Raises:
            TTSAuthError: If API key is not provided or the client fails
        """
        self._api_key = api_key or os.getenv("OPENAI_API_KEY")
        if not self._api_key:
            raise TTSAuthError(
                "OpenAI API key not found. Set OPENAI_API_KEY environment "
                "variable or provide api_key parameter.",
                provider=self.name,
            )

        try:
            self._client = OpenAI(api_key=self._api_key)
        except Exception as e:
            raise TTSAuthError(
                f"Failed to initialize OpenAI client: {e}",
                provider=self.name,
                original_error=e,
            ) from e

    async def synthesize(self, text: str, options: SynthesisOptions) -> bytes:
        """Convert text to speech audio bytes.

        Args:
            text: Text to convert to speech
            options: Resolved synthesis options

        Returns:
            Audio data as bytes in the requested format

        Raises:
            TTSRateLimitError: On 429 throttling
            TTSQuotaError: On 429 with an exhausted quota
            TTSInvalidInputError: On 400
            TTSAuthError: On 401
            TTSAPIError: On any other failure (retryable for 5xx)
        """
        model = HD_MODEL if options.quality == "hd" else STANDARD_MODEL

        # Run synchronous OpenAI client in thread to avoid blocking event loop
        def _sync_create() -> bytes:
            response = self._client.audio.speech.create(
                model=model,
                voice=options.voice,
                input=text,
                response_format=options.format,
                speed=options.speed,
            )
            return response.read()

        try:
            audio_bytes = await asyncio.to_thread(_sync_create)
        except APIStatusError as e:
            raise error_for_status(
                e.status_code, e.message, self.name, getattr(e, "code", None), e
            ) from e
        except APIConnectionError as e:
            raise TTSAPIError(
                f"Connection to OpenAI failed: {e}", self.name, original_error=e
            ) from e
        except Exception as e:
            raise TTSAPIError(
                f"OpenAI TTS API error: {e}", self.name, original_error=e
            ) from e

        if not audio_bytes:
            raise TTSAPIError("No audio data received from API", self.name)

        logger.debug(f"OpenAI returned {len(audio_bytes)} bytes using {model}")
        return audio_bytes

    async def list_voices(self) -> list[dict]:
        return [
            {"id": v.voice_id, "name": v.display_name, "provider": self.name}
            for v in SUPPORTED_VOICES
            if v.provider == self.name and v.is_available
        ]
