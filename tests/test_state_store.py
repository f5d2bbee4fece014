from __future__ import annotations

from typing import Any

import pytest

from asynchook.exceptions import FetchFailure
from asynchook.state.events import FetchMeta, HookResult
from asynchook.state.store import StateStore


def _append(state: list[Any], result: Any, meta: FetchMeta) -> list[Any]:
    return [*state, (meta.invocation_id, result)]


def test_loading_is_derived_from_latest_issued_id() -> None:
    store = StateStore([], _append)

    assert store.is_loading(None) is False
    assert store.is_loading(1) is True

    store.apply_result("a", FetchMeta(args=("x",), invocation_id=1))
    assert store.is_loading(1) is False
    assert store.is_loading(2) is True


def test_apply_result_replaces_state_without_mutation() -> None:
    initial: list[Any] = []
    store = StateStore(initial, _append)

    store.apply_result("a", FetchMeta(invocation_id=1))
    store.apply_result("b", FetchMeta(invocation_id=2))

    assert initial == []
    assert store.state == [(1, "a"), (2, "b")]
    assert store.accepted_id == 2


def test_apply_failure_keeps_state() -> None:
    store = StateStore("initial", _append)
    failure = FetchFailure("boom", invocation_id=1, cause=ValueError("boom"))

    store.apply_failure(failure)

    snapshot = store.snapshot(1)
    assert snapshot == HookResult(loading=False, state="initial", error=failure)


def test_reducer_error_leaves_store_untouched() -> None:
    def _broken(state: Any, result: Any, meta: FetchMeta) -> Any:
        raise ValueError("bad reducer")

    store = StateStore("initial", _broken)
    with pytest.raises(ValueError):
        store.apply_result("a", FetchMeta(invocation_id=1))

    assert store.state == "initial"
    assert store.accepted_id is None


def test_listeners_can_unsubscribe_during_notify() -> None:
    store = StateStore(None, _append)
    seen: list[str] = []
    unsubscribe_holder: list[Any] = []

    def _once(result: HookResult) -> None:
        seen.append("once")
        unsubscribe_holder[0]()

    unsubscribe_holder.append(store.subscribe(_once))
    store.subscribe(lambda result: seen.append("always"))

    store.notify(lambda: store.snapshot(None))
    store.notify(lambda: store.snapshot(None))

    assert seen == ["once", "always", "always"]


def test_each_listener_sees_result_current_at_its_call() -> None:
    store = StateStore("initial", _append)
    latest: list[int | None] = [1]
    store.apply_failure(FetchFailure("boom", invocation_id=1))
    seen: list[bool] = []

    def _reissue(result: HookResult) -> None:
        seen.append(result.loading)
        latest[0] = 2

    store.subscribe(_reissue)
    store.subscribe(lambda result: seen.append(result.loading))

    store.notify(lambda: store.snapshot(latest[0]))

    assert seen == [False, True]
