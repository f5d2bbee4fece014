from __future__ import annotations

import pytest

from asynchook import AsyncHookConfigError, FetchMeta, HookConfig, create_async_hook
from asynchook._compare import structural_equal


def test_defaults() -> None:
    config = HookConfig()

    assert config.initial_state is None
    assert config.is_equal is structural_equal
    assert config.update(1, 2, FetchMeta(invocation_id=1)) == 2
    assert config.trace_enabled is False


def test_non_callable_update_rejected() -> None:
    with pytest.raises(AsyncHookConfigError):
        HookConfig(update="not callable")  # type: ignore[arg-type]


def test_from_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("ASYNCHOOK_NAME", "orders")
    monkeypatch.setenv("ASYNCHOOK_TRACE_ENABLED", "yes")

    config = HookConfig.from_env(initial_state={})

    assert config.name == "orders"
    assert config.trace_enabled is True
    assert config.initial_state == {}


def test_from_env_overrides_win(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("ASYNCHOOK_TRACE_ENABLED", "on")

    config = HookConfig.from_env(trace_enabled=False, name="explicit")

    assert config.trace_enabled is False
    assert config.name == "explicit"


def test_create_async_hook_merges_fields_into_config() -> None:
    base = HookConfig(name="base", initial_state=1)
    hook = create_async_hook(lambda: None, base, initial_state=2)

    assert hook.config.name == "base"
    assert hook.config.initial_state == 2
    assert hook.result.state == 2


def test_create_async_hook_rejects_unknown_fields() -> None:
    with pytest.raises(AsyncHookConfigError):
        create_async_hook(lambda: None, unknown_option=True)


def test_fetcher_must_be_callable() -> None:
    with pytest.raises(AsyncHookConfigError):
        create_async_hook("not a fetcher")  # type: ignore[arg-type]
