"""
Name-based provider registry.

Maps string names to providers and forwards every operation to a
container, for call sites that only know a service by name (config files,
plugin lists).
"""

from __future__ import annotations

import threading
from typing import Any

from ..core.container import Container
from ..core.errors import ProviderNotRegisteredError
from ..core.provider import ProviderLike, provider_name, resolve_factory
from ..logging_config import get_logger

logger = get_logger(__name__)


class ProviderRegistry:
    """
    Registry of named providers.

    Usage:
        registry = ProviderRegistry()
        registry.register("config", config_provider)

        cfg = registry.get(container, "config")
    """

    def __init__(self) -> None:
        self._providers: dict[str, ProviderLike] = {}
        self._lock = threading.Lock()

    def register(self, name: str, provider: ProviderLike) -> ProviderLike:
        """
        Register a provider under ``name``.

        Args:
            name: Non-empty lookup key
            provider: Provider object or factory callable

        Returns:
            The provider, unchanged
        """
        if not name:
            raise ValueError("name is required")
        resolve_factory(provider)
        with self._lock:
            previous = self._providers.get(name)
            self._providers[name] = provider
        if previous is not None and previous is not provider:
            logger.warning(
                "provider_replaced",
                name=name,
                previous=provider_name(previous),
                provider=provider_name(provider),
            )
        return provider

    def unregister(self, name: str) -> None:
        with self._lock:
            if self._providers.pop(name, None) is None:
                raise ProviderNotRegisteredError(name)

    def lookup(self, name: str) -> ProviderLike:
        """Return the provider registered under ``name``.

        Raises:
            ProviderNotRegisteredError: If nothing is registered under ``name``
        """
        with self._lock:
            try:
                return self._providers[name]
            except KeyError:
                raise ProviderNotRegisteredError(name) from None

    def names(self) -> list[str]:
        with self._lock:
            return sorted(self._providers)

    def __contains__(self, name: object) -> bool:
        with self._lock:
            return name in self._providers

    def __len__(self) -> int:
        with self._lock:
            return len(self._providers)

    def get(self, container: Container, name: str) -> Any:
        return container.get(self.lookup(name))

    def get_new(self, container: Container, name: str) -> Any:
        return container.get_new(self.lookup(name))

    def set_cache(self, container: Container, name: str, value: Any) -> Any:
        """Override the cached value for ``name``; returns the previous one."""
        return container.set_get(self.lookup(name), value)

    def has_cache(self, container: Container, name: str) -> bool:
        return container.has_cache(self.lookup(name))

    def flash_cache(self, container: Container, name: str) -> None:
        container.flash(self.lookup(name))
