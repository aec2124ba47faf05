"""RefreshCoordinator のユニットテスト"""

from types import SimpleNamespace

import pytest
from conftest import AUTH, StubTransport, make_flag, make_response
from k1s0_flags import (
    ApiError,
    CacheError,
    CircuitBreaker,
    FeatureFlag,
    FlagError,
    InMemoryFlagCache,
    RefreshCoordinator,
    TransportError,
    merge_flags,
)
from k1s0_flags import refresh as refresh_module


def make_coordinator(
    transport: StubTransport,
    cache: InMemoryFlagCache | None = None,
    auth=AUTH,
    max_retries: int = 3,
    breaker: CircuitBreaker | None = None,
    environ: dict[str, str] | None = None,
    errors: list[FlagError] | None = None,
) -> RefreshCoordinator:
    return RefreshCoordinator(
        cache=cache or InMemoryFlagCache(),
        transport=transport,
        auth=auth,
        max_retries=max_retries,
        retry_delay=0.0,
        breaker=breaker,
        error_callback=errors.append if errors is not None else None,
        environ=environ or {},
    )


def test_merge_local_wins() -> None:
    """同名のローカルフラグがリモートを置き換えること。"""
    merged = merge_flags([make_flag("x", False)], [make_flag("x", True, "local_x")])
    assert merged == [make_flag("x", True, "local_x")]


def test_merge_keeps_order_and_appends_unmatched_locals() -> None:
    remote = [make_flag("a", True), make_flag("b", False)]
    local = [make_flag("c", True, "local_c"), make_flag("b", True, "local_b")]
    merged = merge_flags(remote, local)
    assert [(f.details.name, f.details.id) for f in merged] == [
        ("a", "id-a"),
        ("b", "local_b"),
        ("c", "local_c"),
    ]


def test_merge_collapses_duplicate_remote_names() -> None:
    """リモートに同名が複数あってもローカルが勝ち、結果は名前ごとに 1 件。"""
    remote = [make_flag("beta", False, "r1"), make_flag("beta", False, "r2")]
    merged = merge_flags(remote, [make_flag("beta", True, "local_beta")])
    assert merged == [make_flag("beta", True, "local_beta")]


async def test_local_override_beats_remote_names_differing_in_case() -> None:
    """正規化後に衝突するリモート名 (Beta / beta) があってもオーバーライドが優先されること。"""
    transport = StubTransport(make_response(make_flag("Beta", False), make_flag("beta", False)))
    cache = InMemoryFlagCache()
    coordinator = make_coordinator(transport, cache=cache, environ={"FLAGS_BETA": "true"})
    await coordinator.refresh()
    assert await cache.get("beta") == (True, True)
    assert [f.details.id for f in await cache.get_all()] == ["local_beta"]


async def test_local_only_mode_never_fetches() -> None:
    transport = StubTransport(make_response(make_flag("remote", True)))
    cache = InMemoryFlagCache()
    coordinator = make_coordinator(
        transport, cache=cache, auth=None, environ={"FLAGS_BETA_MODE": "true"}
    )
    await coordinator.refresh()
    assert transport.calls == 0
    assert await cache.get("beta-mode") == (True, True)
    assert await cache.get("remote") == (False, False)
    assert cache.ttl == 60


async def test_success_normalizes_and_merges() -> None:
    transport = StubTransport(
        make_response(make_flag("New-Checkout", True), make_flag("x", False), interval=300)
    )
    cache = InMemoryFlagCache()
    coordinator = make_coordinator(transport, cache=cache, environ={"FLAGS_X": "true"})
    await coordinator.refresh()
    assert transport.calls == 1
    assert await cache.get("new-checkout") == (True, True)
    assert await cache.get("New-Checkout") == (False, False)
    assert await cache.get("x") == (True, True)
    assert cache.ttl == 300
    assert coordinator.breaker.failure_count == 0


async def test_retry_then_success() -> None:
    errors: list[FlagError] = []
    transport = StubTransport(
        TransportError("boom"), ApiError("bad"), make_response(make_flag("a", True))
    )
    cache = InMemoryFlagCache()
    coordinator = make_coordinator(transport, cache=cache, errors=errors)
    await coordinator.refresh()
    assert transport.calls == 3
    assert [type(e) for e in errors] == [TransportError, ApiError]
    assert await cache.get("a") == (True, True)
    assert coordinator.breaker.is_open is False


async def test_retry_backoff_is_linear(monkeypatch) -> None:
    delays: list[float] = []

    async def fake_sleep(delay: float) -> None:
        delays.append(delay)

    monkeypatch.setattr(refresh_module, "asyncio", SimpleNamespace(sleep=fake_sleep))
    transport = StubTransport(TransportError("boom"))
    coordinator = RefreshCoordinator(
        cache=InMemoryFlagCache(), transport=transport, auth=AUTH, max_retries=4, environ={}
    )
    with pytest.raises(TransportError):
        await coordinator.refresh()
    assert delays == pytest.approx([0.1, 0.2, 0.3])


async def test_exhausted_retries_fall_back_to_local_and_raise() -> None:
    errors: list[FlagError] = []
    transport = StubTransport(TransportError("down"))
    cache = InMemoryFlagCache()
    coordinator = make_coordinator(
        transport, cache=cache, max_retries=2, environ={"FLAGS_SAFE": "true"}, errors=errors
    )
    with pytest.raises(TransportError):
        await coordinator.refresh()
    assert transport.calls == 2
    assert len(errors) == 2
    assert await cache.get("safe") == (True, True)
    assert cache.ttl == 60
    assert coordinator.breaker.is_open is True
    assert coordinator.breaker.failure_count == 1


async def test_zero_max_retries_still_attempts_once() -> None:
    transport = StubTransport(TransportError("down"))
    coordinator = make_coordinator(transport, max_retries=0)
    with pytest.raises(TransportError):
        await coordinator.refresh()
    assert transport.calls == 1


async def test_non_flag_error_is_wrapped() -> None:
    transport = StubTransport(RuntimeError("socket closed"))
    coordinator = make_coordinator(transport, max_retries=1)
    with pytest.raises(TransportError) as exc_info:
        await coordinator.refresh()
    assert isinstance(exc_info.value.__cause__, RuntimeError)


async def test_open_breaker_short_circuits_silently() -> None:
    """クールダウン中はネットワークにもキャッシュにも触れず、コールバックも呼ばない。"""
    errors: list[FlagError] = []
    transport = StubTransport(TransportError("down"), make_response(make_flag("a", True)))
    cache = InMemoryFlagCache()
    coordinator = make_coordinator(
        transport,
        cache=cache,
        max_retries=1,
        breaker=CircuitBreaker(cooldown=60.0),
        environ={"FLAGS_LOCAL": "true"},
        errors=errors,
    )
    with pytest.raises(TransportError):
        await coordinator.refresh()
    snapshot = await cache.get_all()

    await coordinator.refresh()
    assert transport.calls == 1
    assert len(errors) == 1
    assert await cache.get_all() == snapshot


async def test_breaker_allows_one_cycle_after_cooldown() -> None:
    transport = StubTransport(
        TransportError("down"),
        TransportError("down"),
        make_response(make_flag("a", True)),
    )
    cache = InMemoryFlagCache()
    coordinator = make_coordinator(
        transport, cache=cache, max_retries=2, breaker=CircuitBreaker(cooldown=0.0)
    )
    with pytest.raises(TransportError):
        await coordinator.refresh()
    assert transport.calls == 2

    await coordinator.refresh()
    assert transport.calls == 3
    assert coordinator.breaker.is_open is False
    assert await cache.get("a") == (True, True)


class _BrokenCache(InMemoryFlagCache):
    async def refresh(self, flags: list[FeatureFlag], interval_allowed: int) -> None:
        raise OSError("disk full")


async def test_cache_failure_is_reported_as_cache_error() -> None:
    errors: list[FlagError] = []
    coordinator = make_coordinator(
        StubTransport(make_response()), cache=_BrokenCache(), errors=errors
    )
    with pytest.raises(CacheError):
        await coordinator.refresh()
    assert len(errors) == 1
    assert isinstance(errors[0], CacheError)
