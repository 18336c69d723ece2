"""Speech synthesis providers and the name-based registry.

The engine resolves a request's provider name through ``ProviderRegistry``
and instantiates the class on first use.
"""

from typing import TYPE_CHECKING, Any, ClassVar

if TYPE_CHECKING:
    from .base import TTSProvider

from .base import ProviderCapabilities
from .openai import OpenAIProvider
from .unimplemented import ElevenLabsProvider, GoogleProvider, LocalProvider

__all__ = [
    "ElevenLabsProvider",
    "GoogleProvider",
    "LocalProvider",
    "OpenAIProvider",
    "ProviderCapabilities",
    "ProviderRegistry",
]


class ProviderRegistry:
    """Maps provider names to ``TTSProvider`` classes.

    Only classes are stored. Each engine creates and owns its provider
    instances, so API clients are never shared between engines.
    """

    _providers: ClassVar[dict[str, type["TTSProvider"]]] = {}

    @classmethod
    def register(cls, name: str, provider_class: type["TTSProvider"]) -> None:
        """Make ``provider_class`` selectable as ``name``.

        Registering an existing name replaces the previous class.
        """
        cls._providers[name] = provider_class

    @classmethod
    def get(cls, name: str) -> type["TTSProvider"]:
        """Look up the class registered as ``name``.

        Raises:
            KeyError: If nothing is registered under ``name``; the message
                lists the registered names
        """
        try:
            return cls._providers[name]
        except KeyError:
            registered = ", ".join(cls._providers) or "none"
            raise KeyError(
                f"Provider '{name}' not found. Available providers: {registered}"
            ) from None

    @classmethod
    def create(cls, name: str, **kwargs: Any) -> "TTSProvider":
        """Instantiate the provider registered under ``name``."""
        return cls.get(name)(**kwargs)

    @classmethod
    def names(cls) -> list[str]:
        return list(cls._providers)


ProviderRegistry.register(OpenAIProvider.name, OpenAIProvider)
ProviderRegistry.register(GoogleProvider.name, GoogleProvider)
ProviderRegistry.register(ElevenLabsProvider.name, ElevenLabsProvider)
ProviderRegistry.register(LocalProvider.name, LocalProvider)
