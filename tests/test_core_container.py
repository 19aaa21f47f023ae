from __future__ import annotations

from dataclasses import dataclass

import pytest

from servicebox.core.container import Container
from servicebox.core.errors import CloseError, InvalidProviderError
from servicebox.core.provider import ProviderFunc


@dataclass(eq=False)
class Node:
    name: str
    dep: Node | None = None


def test_container_singleton(container, counting):
    factory = counting()
    a = container.get(factory)
    b = container.get(factory)
    assert a is b
    assert factory.calls == 1


def test_get_new_always_constructs(container, counting):
    factory = counting()
    values = [container.get_new(factory) for _ in range(3)]
    assert factory.calls == 3
    assert len({id(v) for v in values}) == 3
    assert container.has_cache(factory) is False


def test_get_new_leaves_existing_cache_untouched(container, counting):
    factory = counting()
    cached = container.get(factory)
    fresh = container.get_new(factory)
    assert fresh is not cached
    assert container.get(factory) is cached
    assert factory.calls == 2


def test_flash_forces_reconstruction(container, counting):
    factory = counting()
    first = container.get(factory)
    container.flash(factory)
    assert container.has_cache(factory) is False
    second = container.get(factory)
    assert second is not first
    assert factory.calls == 2


def test_flash_without_entry_is_noop(container, counting):
    factory = counting()
    container.flash(factory)
    assert container.has_cache(factory) is False
    assert factory.calls == 0


def test_set_get_overrides_without_factory(container, counting):
    factory = counting()
    override = object()
    assert container.set_get(factory, override) is None
    assert container.get(factory) is override
    assert factory.calls == 0


def test_set_get_returns_previous_value(container, counting):
    factory = counting()
    built = container.get(factory)
    replacement = object()
    assert container.set_get(factory, replacement) is built
    assert container.set_get(factory, "third") is replacement
    assert container.get(factory) == "third"


def test_failed_construction_is_not_cached(container):
    attempts = []

    def flaky(c):
        attempts.append(1)
        if len(attempts) == 1:
            raise RuntimeError("first attempt fails")
        return "ready"

    with pytest.raises(RuntimeError, match="first attempt fails"):
        container.get(flaky)
    assert container.has_cache(flaky) is False

    assert container.get(flaky) == "ready"
    assert container.has_cache(flaky) is True
    assert len(attempts) == 2


def test_factory_exception_propagates_unchanged(container):
    error = LookupError("missing")

    def broken(c):
        raise error

    with pytest.raises(LookupError) as exc_info:
        container.get(broken)
    assert exc_info.value is error

    with pytest.raises(LookupError):
        container.get_new(broken)


def test_none_is_a_cacheable_value(container, counting):
    factory = counting(make=lambda: None)
    assert container.get(factory) is None
    assert container.get(factory) is None
    assert container.has_cache(factory) is True
    assert factory.calls == 1


def test_dependency_chain_shares_singletons(container):
    a_provider = ProviderFunc(lambda c: Node("A"), name="A")
    b_provider = ProviderFunc(lambda c: Node("B", dep=c.get(a_provider)), name="B")

    b1 = container.get(b_provider)
    b2 = container.get(b_provider)
    a = container.get(a_provider)
    assert b1 is b2
    assert b1.dep is a

    fresh_b = container.get_new(b_provider)
    assert fresh_b is not b1
    assert fresh_b.name == "B"
    assert fresh_b.dep is a


def test_providers_with_same_logic_are_distinct(container):
    def make(c):
        return object()

    first = ProviderFunc(make)
    second = ProviderFunc(make)
    assert container.get(first) is not container.get(second)

    container.flash(first)
    assert container.has_cache(first) is False
    assert container.has_cache(second) is True


def test_value_equal_providers_are_distinct(container):
    @dataclass
    class Constant:
        value: str

        def new(self, c):
            return [self.value]

    one = Constant("x")
    two = Constant("x")
    assert one == two
    assert container.get(one) is not container.get(two)


def test_separate_containers_do_not_share(counting):
    factory = counting()
    assert Container().get(factory) is not Container().get(factory)
    assert factory.calls == 2


def test_invalid_provider_rejected(container):
    with pytest.raises(InvalidProviderError):
        container.get(42)
    with pytest.raises(TypeError):
        container.get_new("not a provider")


def test_close_runs_hooks_in_order(container):
    calls = []
    container.on_close(lambda: calls.append("first"))
    container.on_close(lambda: calls.append("second"))
    container.close()
    assert calls == ["first", "second"]


def test_close_aggregates_failures(container):
    calls = []
    failure = OSError("socket already closed")

    def first():
        calls.append(1)

    def second():
        calls.append(2)
        raise failure

    def third():
        calls.append(3)

    for hook in (first, second, third):
        container.on_close(hook)

    with pytest.raises(CloseError) as exc_info:
        container.close()

    assert calls == [1, 2, 3]
    assert exc_info.value.errors == [failure]
    assert exc_info.value.contains(failure)
    assert str(exc_info.value) == "socket already closed"


def test_close_without_hooks_succeeds(container):
    assert container.close() is None


def test_close_keeps_cache_and_container_usable(container, counting):
    factory = counting()
    value = container.get(factory)
    container.close()
    assert container.has_cache(factory) is True
    assert container.get(factory) is value


def test_on_close_as_decorator(container):
    closed = []

    @container.on_close
    def shutdown():
        closed.append(True)

    assert callable(shutdown)
    container.close()
    assert closed == [True]


def test_on_close_rejects_non_callable(container):
    with pytest.raises(TypeError):
        container.on_close("nope")


def test_hook_may_use_container(container, counting):
    factory = counting()
    container.on_close(lambda: container.flash(factory))
    container.get(factory)
    container.close()
    assert container.has_cache(factory) is False


def test_context_manager_closes(counting):
    closed = []
    with Container(name="scoped") as scoped:
        scoped.on_close(lambda: closed.append(scoped.name))
        scoped.get(counting())
    assert closed == ["scoped"]


def _failing_hook():
    raise RuntimeError("disconnect failed")


def test_context_manager_raises_close_error():
    with pytest.raises(CloseError) as exc_info:
        with Container() as scoped:
            scoped.on_close(_failing_hook)
    assert [str(e) for e in exc_info.value.errors] == ["disconnect failed"]


def test_context_manager_keeps_body_exception(caplog):
    closed = []
    with caplog.at_level("WARNING"):
        with pytest.raises(ValueError, match="bad request"):
            with Container(name="scoped") as scoped:
                scoped.on_close(_failing_hook)
                scoped.on_close(lambda: closed.append(True))
                raise ValueError("bad request")

    assert closed == [True]
    assert any("container_close_failed" in r.getMessage() for r in caplog.records)


def test_unsynchronized_container_behaves_the_same(counting):
    container = Container(synchronized=False)
    a_provider = ProviderFunc(lambda c: Node("A"))
    b_provider = ProviderFunc(lambda c: Node("B", dep=c.get(a_provider)))

    b = container.get(b_provider)
    assert container.get(b_provider) is b
    assert b.dep is container.get(a_provider)

    factory = counting()
    container.get(factory)
    container.flash(factory)
    container.get(factory)
    assert factory.calls == 2


def test_construction_is_logged(container, caplog):
    provider = ProviderFunc(lambda c: "value", name="logged-service")
    with caplog.at_level("DEBUG"):
        container.get(provider)
    messages = [r.getMessage() for r in caplog.records]
    assert any("provider_constructed" in m and "logged-service" in m for m in messages)


def test_repr_mentions_mode():
    assert "unsynchronized" in repr(Container(synchronized=False))
    assert "'default' synchronized" in repr(Container())
