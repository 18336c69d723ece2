"""Provider interface for speech synthesis backends.

A provider turns text plus resolved options into audio bytes. Validation,
cost ceilings, caching and upload stay in the engine, so providers only
talk to their API.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import ClassVar

from ..tts.models import AUDIO_FORMATS, SynthesisOptions


@dataclass(frozen=True)
class ProviderCapabilities:
    """Static facts about a provider.

    Attributes:
        max_characters: Longest text accepted in one request
        cost_per_1k_chars: Billing rate in currency units
        formats: Output formats the provider can produce
        implemented: False for providers that reject every request
    """

    max_characters: int
    cost_per_1k_chars: float
    formats: tuple[str, ...] = AUDIO_FORMATS
    implemented: bool = True

    def cost_for(self, text: str) -> float:
        return len(text) / 1000 * self.cost_per_1k_chars


class TTSProvider(ABC):
    """Base class every speech provider subclasses.

    Subclasses set the ``name`` and ``capabilities`` class attributes; the
    engine reads both from the registered class before any instance
    exists, to validate and price a request.

    ``list_voices`` entries are dicts with ``id``, ``name`` and
    ``provider`` keys.
    """

    name: ClassVar[str]
    capabilities: ClassVar[ProviderCapabilities]

    @abstractmethod
    async def synthesize(self, text: str, options: SynthesisOptions) -> bytes:
        """Synthesize ``text`` and return the encoded audio.

        Args:
            text: Validated input text
            options: Resolved voice, format, quality, speed and pitch

        Returns:
            Audio bytes encoded as ``options.format``

        Raises:
            TTSError: Any provider failure, already classified
        """

    @abstractmethod
    async def list_voices(self) -> list[dict]:
        """List the voices this provider can use.

        Raises:
            TTSError: If the provider cannot be queried
        """
