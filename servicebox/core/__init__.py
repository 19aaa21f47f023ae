"""
Core primitives for servicebox.
"""

from .container import Container
from .errors import (
    CloseError,
    ConfigError,
    InvalidProviderError,
    ProviderNotRegisteredError,
    ServiceBoxError,
)
from .provider import BaseProvider, Provider, ProviderFunc, provider, provider_name
from .service import Service, service

__all__ = [
    "BaseProvider",
    "CloseError",
    "ConfigError",
    "Container",
    "InvalidProviderError",
    "Provider",
    "ProviderFunc",
    "ProviderNotRegisteredError",
    "Service",
    "ServiceBoxError",
    "provider",
    "provider_name",
    "service",
]
