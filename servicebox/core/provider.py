"""
Provider abstraction.

A provider is anything the container can ask for a value: an object with a
``new(container)`` method, or a plain callable taking the container. The
container keys its cache on the provider object's identity, never on its
content, so two providers built from the same function are still two
separate singletons.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable
from typing import TYPE_CHECKING, Any, Protocol, overload, runtime_checkable

from .errors import InvalidProviderError

if TYPE_CHECKING:
    from .container import Container


@runtime_checkable
class Provider(Protocol):
    """Object form of a provider."""

    def new(self, container: Container) -> Any: ...


ProviderLike = Provider | Callable[["Container"], Any]


class BaseProvider(ABC):
    """
    Base class for parameterized providers.

    Subclasses implement ``new`` and may carry configuration on the instance.
    The container keys on identity, so dataclass subclasses with value
    equality still get one cache slot per instance.
    """

    name: str | None = None

    @abstractmethod
    def new(self, container: Container) -> Any:
        """Build a value, resolving dependencies through ``container``."""

    def __repr__(self) -> str:
        return f"<{provider_name(self)} provider at {id(self):#x}>"


class ProviderFunc(BaseProvider):
    """Wrap a ``fn(container)`` callable into a provider with its own identity."""

    def __init__(self, fn: Callable[[Container], Any], name: str | None = None):
        if not callable(fn):
            raise InvalidProviderError(fn)
        self.fn = fn
        self.name = name

    def new(self, container: Container) -> Any:
        return self.fn(container)

    def __call__(self, container: Container) -> Any:
        return self.fn(container)


@overload
def provider(fn: Callable[[Container], Any]) -> ProviderFunc: ...


@overload
def provider(*, name: str | None = None) -> Callable[[Callable[[Container], Any]], ProviderFunc]: ...


def provider(fn=None, *, name=None):
    """
    Decorator turning a factory function into a ``ProviderFunc``.

    Usage:
        @provider
        def config(container):
            return load_config()

        @provider(name="db")
        def database(container):
            return Database(container.get(config))
    """

    def wrap(func: Callable[[Container], Any]) -> ProviderFunc:
        return ProviderFunc(func, name=name)

    if fn is not None:
        return wrap(fn)
    return wrap


def resolve_factory(obj: ProviderLike) -> Callable[[Container], Any]:
    """Return the callable that constructs a value for ``obj``."""
    # A class is a factory called with the container, even if it defines new().
    if isinstance(obj, type):
        return obj
    new = getattr(obj, "new", None)
    if callable(new):
        return new
    if callable(obj):
        return obj
    raise InvalidProviderError(obj)


def provider_name(obj: object) -> str:
    """Display name for logs and error messages."""
    name = getattr(obj, "name", None)
    if isinstance(name, str) and name:
        return name
    if isinstance(obj, ProviderFunc):
        obj = obj.fn
    qualname = getattr(obj, "__qualname__", None)
    if qualname:
        return qualname
    return type(obj).__qualname__
