"""
Typed service handles.

A ``Service`` binds one provider to typed accessors so call sites read
``config_service.get(container)`` and get a ``Config`` back instead of
``Any``:

    @service
    def config_service(container) -> Config:
        return Config.from_json(raw)

    @service(name="client")
    def client_service(container) -> Client:
        return Client(config_service.get(container))

    client = client_service.get(container)
"""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING, Generic, TypeVar, overload

from .provider import ProviderFunc, provider_name

if TYPE_CHECKING:
    from .container import Container

T = TypeVar("T")


class Service(Generic[T]):
    """Handle around a provider whose values are of type ``T``."""

    def __init__(self, factory: Callable[[Container], T], name: str | None = None):
        self._provider = ProviderFunc(factory, name=name)

    @property
    def provider(self) -> ProviderFunc:
        return self._provider

    @property
    def name(self) -> str:
        return provider_name(self._provider)

    def get(self, container: Container) -> T:
        return container.get(self._provider)

    def get_new(self, container: Container) -> T:
        return container.get_new(self._provider)

    def set(self, container: Container, value: T) -> T | None:
        return container.set_get(self._provider, value)

    def flash(self, container: Container) -> None:
        container.flash(self._provider)

    def has_cache(self, container: Container) -> bool:
        return container.has_cache(self._provider)

    def __repr__(self) -> str:
        return f"<Service {self.name}>"


@overload
def service(factory: Callable[[Container], T]) -> Service[T]: ...


@overload
def service(*, name: str | None = None) -> Callable[[Callable[[Container], T]], Service[T]]: ...


def service(factory=None, *, name=None):
    """Decorator building a ``Service`` from a factory function."""

    def wrap(func):
        return Service(func, name=name)

    if factory is not None:
        return wrap(factory)
    return wrap
