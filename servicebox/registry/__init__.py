"""
Optional name-based lookup layered over the container.
"""

from .named import ProviderRegistry

__all__ = ["ProviderRegistry"]
