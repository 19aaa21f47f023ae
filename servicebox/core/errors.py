"""
Exception types raised by the container and its helpers.
"""

from __future__ import annotations

from collections.abc import Iterator


class ServiceBoxError(Exception):
    """Base class for errors raised by servicebox itself."""


class InvalidProviderError(ServiceBoxError, TypeError):
    """Raised when an object is neither callable nor exposes ``new()``."""

    def __init__(self, obj: object):
        self.obj = obj
        super().__init__(
            f"{type(obj).__name__!s} is not a provider: "
            "expected a callable or an object with a new(container) method"
        )


class ProviderNotRegisteredError(ServiceBoxError, KeyError):
    """Raised by the name registry when a name has no provider."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(name)

    def __str__(self) -> str:
        return f"Provider not registered: {self.name!r}"


class ConfigError(ServiceBoxError, ValueError):
    """Raised for invalid settings input."""


class CloseError(ServiceBoxError):
    """
    Aggregate of the failures raised by close hooks.

    Attributes:
        errors: Exceptions in the order their hooks were registered
    """

    def __init__(self, errors: list[BaseException]):
        if not errors:
            raise ValueError("CloseError requires at least one error")
        self.errors = list(errors)
        super().__init__(self.errors)

    def __str__(self) -> str:
        return "; ".join(str(e) for e in self.errors)

    def __iter__(self) -> Iterator[BaseException]:
        return iter(self.errors)

    def __len__(self) -> int:
        return len(self.errors)

    def contains(self, error: BaseException) -> bool:
        """Return True if this exact exception object is in the aggregate."""
        return any(e is error for e in self.errors)
