"""
servicebox: a memoizing dependency injection container.

Providers are plain factory functions or objects with a ``new(container)``
method. A ``Container`` builds each provider's value once, caches it by
provider identity and hands the same instance to every caller.
"""

from .core import (
    BaseProvider,
    CloseError,
    ConfigError,
    Container,
    InvalidProviderError,
    Provider,
    ProviderFunc,
    ProviderNotRegisteredError,
    Service,
    ServiceBoxError,
    provider,
    provider_name,
    service,
)
from .registry import ProviderRegistry
from .settings import ContainerSettings

__version__ = "0.1.0"

__all__ = [
    "BaseProvider",
    "CloseError",
    "ConfigError",
    "Container",
    "ContainerSettings",
    "InvalidProviderError",
    "Provider",
    "ProviderFunc",
    "ProviderNotRegisteredError",
    "ProviderRegistry",
    "Service",
    "ServiceBoxError",
    "provider",
    "provider_name",
    "service",
]
