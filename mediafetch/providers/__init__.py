"""Provider registry for dynamic provider management."""

from typing import Dict, List

from mediafetch.providers.base import MediaProvider


class ProviderRegistry:
    """Registry for managing catalog providers."""

    _providers: Dict[str, MediaProvider] = {}

    @classmethod
    def register(cls, provider: MediaProvider) -> None:
        """Register a provider instance."""
        cls._providers[provider.name] = provider

    @classmethod
    def unregister(cls, name: str) -> MediaProvider | None:
        """Remove a provider by name."""
        return cls._providers.pop(name, None)

    @classmethod
    def get(cls, name: str) -> MediaProvider | None:
        """Get a provider by name."""
        return cls._providers.get(name)

    @classmethod
    def all(cls) -> List[MediaProvider]:
        """Get all registered providers."""
        return list(cls._providers.values())

    @classmethod
    def names(cls) -> List[str]:
        """Get names of all registered providers."""
        return list(cls._providers.keys())

    @classmethod
    def cancel_all(cls) -> None:
        """Cancel in-flight calls on every registered provider."""
        for provider in cls._providers.values():
            provider.cancel_all()


# Convenience function for registration
def register_provider(provider: MediaProvider) -> None:
    """Register a provider with the global registry."""
    ProviderRegistry.register(provider)
