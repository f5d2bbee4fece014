"""asynchook - race-safe async data hooks for reactive callers."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("asynchook")
except PackageNotFoundError:
    __version__ = "0+local"
from asynchook._compare import structural_equal
from asynchook.config import HookConfig, replace_state
from asynchook.controller import AsyncHook, create_async_hook
from asynchook.exceptions import (
    AsyncHookClosedError,
    AsyncHookConfigError,
    AsyncHookError,
    AsyncHookRuntimeError,
    FetchFailure,
)
from asynchook.state.events import FetchMeta, HookEvent, HookEventKind, HookResult

__all__ = [
    "__version__",
    "AsyncHook",
    "AsyncHookClosedError",
    "AsyncHookConfigError",
    "AsyncHookError",
    "AsyncHookRuntimeError",
    "FetchFailure",
    "FetchMeta",
    "HookConfig",
    "HookEvent",
    "HookEventKind",
    "HookResult",
    "create_async_hook",
    "replace_state",
    "structural_equal",
]
