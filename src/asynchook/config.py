"""Hook configuration for asynchook."""

from __future__ import annotations

import dataclasses
import os
from collections.abc import Callable
from typing import TYPE_CHECKING, Any

from asynchook._compare import structural_equal
from asynchook.exceptions import AsyncHookConfigError

if TYPE_CHECKING:
    from asynchook.state.events import FetchMeta


def _env_bool(value: str | None, default: bool) -> bool:
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in {"1", "true", "yes", "y", "on"}:
        return True
    if normalized in {"0", "false", "no", "n", "off"}:
        return False
    return default


def replace_state(previous_state: Any, result: Any, meta: FetchMeta) -> Any:
    """Default reducer: the latest accepted result becomes the state."""
    return result


@dataclasses.dataclass(frozen=True)
class HookConfig:
    """Configuration of a single async hook.

    Parameters
    ----------
    initial_state : Any
        State exposed until the first accepted result is reduced.
    update : callable
        Pure reducer ``update(previous_state, result, meta) -> next_state``.
        Its return value replaces the state wholesale.  ``meta`` is a
        :class:`~asynchook.state.events.FetchMeta` carrying the ``args`` of
        the accepted invocation.
    is_equal : callable
        Comparator deciding whether two parameter snapshots are the same.
        Defaults to :func:`~asynchook._compare.structural_equal`.
    name : str
        Label used in log messages and trace events.
    trace_enabled : bool
        Emit :class:`~asynchook.state.events.HookEvent` objects to the
        hook's ``on_trace`` callback.
    """

    initial_state: Any = None
    update: Callable[[Any, Any, FetchMeta], Any] = replace_state
    is_equal: Callable[[Any, Any], bool] = structural_equal
    name: str = "asynchook"
    trace_enabled: bool = False

    def __post_init__(self) -> None:
        if not callable(self.update):
            raise AsyncHookConfigError(f"update must be callable, got {type(self.update).__name__}")
        if not callable(self.is_equal):
            raise AsyncHookConfigError(f"is_equal must be callable, got {type(self.is_equal).__name__}")
        if not self.name.strip():
            raise AsyncHookConfigError("name must be non-empty")

    @classmethod
    def from_env(cls, **overrides: Any) -> HookConfig:
        """Create configuration from environment variables.

        Reads ``ASYNCHOOK_NAME`` and ``ASYNCHOOK_TRACE_ENABLED``.  Explicit
        keyword arguments override environment values.

        Parameters
        ----------
        **overrides
            Explicit field values that take precedence over env vars.

        Returns
        -------
        HookConfig
            Populated configuration.
        """
        env = os.environ
        config_kwargs: dict[str, Any] = {}

        name = env.get("ASYNCHOOK_NAME")
        if name is not None and "name" not in overrides:
            config_kwargs["name"] = name

        if "trace_enabled" not in overrides:
            config_kwargs["trace_enabled"] = _env_bool(env.get("ASYNCHOOK_TRACE_ENABLED"), False)

        config_kwargs.update(overrides)
        try:
            return cls(**config_kwargs)
        except TypeError as exc:
            raise AsyncHookConfigError(str(exc)) from exc
