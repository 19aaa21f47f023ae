"""
Memoizing dependency injection container.

Each provider gets a private lock so that concurrent ``get`` calls for the
same provider construct the value once, while calls for different providers
proceed independently. A second, structural lock guards the maps themselves
and is never held while a factory runs.
"""

from __future__ import annotations

import threading
import time
from collections.abc import Callable
from contextlib import AbstractContextManager, nullcontext
from typing import TYPE_CHECKING, Any

from ..logging_config import get_logger
from .errors import CloseError
from .provider import ProviderLike, provider_name, resolve_factory

if TYPE_CHECKING:
    from ..settings import ContainerSettings

logger = get_logger(__name__)

CloseHook = Callable[[], Any]


class Container:
    """
    Dependency injection container.

    Usage:
        container = Container()
        client = container.get(client_provider)

        container.on_close(client.close)
        container.close()

    Providers are passed directly; no registration is needed. A provider's
    factory receives the container and may call ``get`` for its own
    dependencies. Calling ``get`` for the provider currently being built,
    directly or through a chain of dependencies, deadlocks.
    """

    def __init__(self, synchronized: bool = True, name: str = "default") -> None:
        """
        Args:
            synchronized: Guard every operation with locks. Pass False only
                when the container never leaves a single thread.
            name: Label attached to log events
        """
        self.name = name
        self.synchronized = synchronized
        self._mu = self._new_lock()
        # Keyed by id(); _pinned holds the provider objects so ids stay unique.
        self._instances: dict[int, Any] = {}
        self._locks: dict[int, AbstractContextManager[Any]] = {}
        self._pinned: dict[int, ProviderLike] = {}
        self._close_hooks: list[CloseHook] = []

    @classmethod
    def from_settings(cls, settings: ContainerSettings) -> Container:
        return cls(synchronized=settings.synchronized, name=settings.name)

    def _new_lock(self) -> AbstractContextManager[Any]:
        if self.synchronized:
            return threading.Lock()
        return nullcontext()

    def _pin(self, provider: ProviderLike) -> int:
        """Record the provider and return its cache key. Caller holds ``_mu``."""
        key = id(provider)
        self._pinned.setdefault(key, provider)
        return key

    def _provider_lock(self, provider: ProviderLike) -> AbstractContextManager[Any]:
        with self._mu:
            key = self._pin(provider)
            lock = self._locks.get(key)
            if lock is None:
                lock = self._new_lock()
                self._locks[key] = lock
            return lock

    def _construct(self, provider: ProviderLike, *, fresh: bool) -> Any:
        factory = resolve_factory(provider)
        started = time.perf_counter()
        value = factory(self)
        logger.debug(
            "provider_constructed",
            container=self.name,
            provider=provider_name(provider),
            fresh=fresh,
            duration_ms=round((time.perf_counter() - started) * 1000, 3),
        )
        return value

    def get(self, provider: ProviderLike) -> Any:
        """
        Return the memoized value for ``provider``, building it on first use.

        Exceptions raised by the factory propagate unchanged and nothing is
        cached, so the next call tries again.
        """
        resolve_factory(provider)
        with self._provider_lock(provider):
            with self._mu:
                key = id(provider)
                if key in self._instances:
                    return self._instances[key]
            value = self._construct(provider, fresh=False)
            with self._mu:
                self._instances[self._pin(provider)] = value
            return value

    def get_new(self, provider: ProviderLike) -> Any:
        """Build a fresh value without reading or writing the cache."""
        return self._construct(provider, fresh=True)

    def set_get(self, provider: ProviderLike, value: Any) -> Any:
        """
        Install ``value`` as the cached value for ``provider``.

        Returns:
            The previously cached value, or None if there was none
        """
        with self._mu:
            key = self._pin(provider)
            old = self._instances.get(key)
            self._instances[key] = value
        logger.debug("provider_overridden", container=self.name, provider=provider_name(provider))
        return old

    def flash(self, provider: ProviderLike) -> None:
        """
        Drop the cached value so the next ``get`` rebuilds it.

        A construction already in progress is not interrupted and will
        still store its result when it finishes.
        """
        with self._mu:
            self._instances.pop(id(provider), None)

    def has_cache(self, provider: ProviderLike) -> bool:
        with self._mu:
            return id(provider) in self._instances

    def on_close(self, callback: CloseHook) -> CloseHook:
        """Register a teardown callback. Returns it, so it works as a decorator."""
        if not callable(callback):
            raise TypeError("close hook must be callable")
        with self._mu:
            self._close_hooks.append(callback)
        return callback

    def close(self) -> None:
        """
        Run every close hook in registration order.

        All hooks run even if some fail. The cache is left as is and the
        container stays usable.

        Raises:
            CloseError: One or more hooks raised; ``errors`` lists them
        """
        with self._mu:
            hooks = list(self._close_hooks)

        errors: list[Exception] = []
        for hook in hooks:
            try:
                hook()
            except Exception as exc:
                errors.append(exc)

        logger.debug("container_closed", container=self.name, hooks=len(hooks), failed=len(errors))
        if errors:
            raise CloseError(errors)

    def __enter__(self) -> Container:
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        """Close the container when leaving a ``with`` block.

        If the block raised, that exception propagates; hook failures are
        logged as a warning instead of replacing it.
        """
        if exc_type is None:
            self.close()
            return
        try:
            self.close()
        except CloseError as close_error:
            logger.warning(
                "container_close_failed",
                container=self.name,
                errors=[repr(e) for e in close_error.errors],
                during=exc_type.__name__,
            )

    def __repr__(self) -> str:
        mode = "synchronized" if self.synchronized else "unsynchronized"
        return f"<Container {self.name!r} {mode} cached={len(self._instances)}>"
