"""Custom exception hierarchy for asynchook."""

from __future__ import annotations

from typing import Any


class AsyncHookError(Exception):
    """Base exception for all asynchook errors."""


class AsyncHookConfigError(AsyncHookError):
    """Invalid hook configuration (e.g. a non-callable ``update``)."""


class AsyncHookClosedError(AsyncHookError):
    """The hook was used after :meth:`AsyncHook.close`."""


class AsyncHookRuntimeError(AsyncHookError):
    """The hook was evaluated without a running event loop."""


class FetchFailure(AsyncHookError):
    """The fetcher's awaitable raised.

    Instances are never raised across ``evaluate``; an accepted failure is
    surfaced through :attr:`HookResult.error` instead.  The original
    exception is available as ``__cause__`` and :attr:`cause`.
    """

    def __init__(
        self,
        message: str,
        *,
        invocation_id: int,
        args: tuple[Any, ...] = (),
        cause: BaseException | None = None,
    ) -> None:
        self.invocation_id = invocation_id
        self.args_snapshot = args
        self.cause = cause
        super().__init__(message)
        if cause is not None:
            self.__cause__ = cause
