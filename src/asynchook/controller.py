"""Async hook controller.

Composes dependency tracking, invocation sequencing, the race guard and the
state store behind one synchronous ``evaluate`` call.
"""

from __future__ import annotations

import asyncio
import dataclasses
import functools
import inspect
import logging
from collections.abc import Callable, Sequence
from typing import Any

from asynchook._redact import redact_for_log
from asynchook._tracker import DependencyTracker
from asynchook.config import HookConfig
from asynchook.exceptions import (
    AsyncHookClosedError,
    AsyncHookConfigError,
    AsyncHookRuntimeError,
    FetchFailure,
)
from asynchook.state.events import FetchMeta, HookEvent, HookEventKind, HookResult
from asynchook.state.policy import RaceGuard, Sequencer
from asynchook.state.store import Listener, StateStore

_logger = logging.getLogger(__name__)

Fetcher = Callable[..., Any]


class AsyncHook:
    """Wrap a fetcher and expose ``{loading, state, error}`` to a reactive caller.

    Usage::

        hook = create_async_hook(fetch_user, initial_state={}, update=merge_user)
        unsubscribe = hook.subscribe(lambda result: rerender())

        # on every render cycle
        result = hook.evaluate(args=[user_id])

    ``evaluate`` never blocks.  When the parameters changed structurally since
    the previous call, a new fetch is scheduled on the running event loop.
    Completions of superseded fetches are discarded.
    """

    def __init__(
        self,
        fetcher: Fetcher,
        config: HookConfig | None = None,
        *,
        loop: asyncio.AbstractEventLoop | None = None,
        on_trace: Callable[[HookEvent], None] | None = None,
    ) -> None:
        if not callable(fetcher):
            raise AsyncHookConfigError(f"fetcher must be callable, got {type(fetcher).__name__}")
        self._fetcher = fetcher
        self._config = config if config is not None else HookConfig()
        self._loop = loop
        self._on_trace = on_trace
        self._tracker = DependencyTracker(self._config.is_equal)
        self._sequencer = Sequencer()
        self._guard = RaceGuard(self._sequencer)
        self._store = StateStore(self._config.initial_state, self._config.update)
        self._pending: dict[int, asyncio.Task[None]] = {}
        self._latest_task: asyncio.Task[None] | None = None
        self._closed = False

    # ------------------------------------------------------------------
    # Context manager lifecycle
    # ------------------------------------------------------------------

    async def __aenter__(self) -> AsyncHook:
        return self

    async def __aexit__(self, *exc: Any) -> None:
        self.close()

    def close(self) -> None:
        """Detach listeners and ignore every completion from now on.

        In-flight fetchers keep running; their results are dropped.
        """
        if self._closed:
            return
        self._closed = True
        self._store.clear_listeners()
        _logger.debug("%s: closed with %d pending invocation(s)", self._config.name, len(self._pending))

    # ------------------------------------------------------------------
    # Public surface
    # ------------------------------------------------------------------

    @property
    def config(self) -> HookConfig:
        return self._config

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def result(self) -> HookResult:
        """Current ``{loading, state, error}`` without evaluating."""
        return self._store.snapshot(self._sequencer.latest_issued_id)

    @property
    def invocation_count(self) -> int:
        """How many times the fetcher has been invoked."""
        return self._sequencer.count

    @property
    def pending_count(self) -> int:
        return len(self._pending)

    def __call__(self, args: Sequence[Any] | None = None) -> HookResult:
        return self.evaluate(args)

    def evaluate(self, args: Sequence[Any] | None = None) -> HookResult:
        """Evaluate the hook for the current parameters.

        Parameters
        ----------
        args
            Positional arguments for the fetcher.  Compared structurally
            with the previous call; ``None`` means no arguments.

        Returns
        -------
        HookResult
            ``loading`` is ``True`` while the most recently issued fetch has
            not completed.
        """
        if self._closed:
            raise AsyncHookClosedError(f"{self._config.name}: evaluate() called after close()")
        if isinstance(args, (str, bytes)):
            raise TypeError("args must be a sequence of fetcher arguments, not a string")

        params: tuple[Any, ...] = tuple(args) if args is not None else ()
        if self._tracker.needs_fetch(params):
            try:
                loop = self._loop or asyncio.get_running_loop()
            except RuntimeError as exc:
                # Nothing was dispatched; the next evaluation must retry.
                self._tracker.reset()
                raise AsyncHookRuntimeError(
                    f"{self._config.name}: evaluate() requires a running event loop"
                ) from exc
            self._dispatch(loop, params)
        return self.result

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Call *listener* with the new result after every admitted completion."""
        if self._closed:
            raise AsyncHookClosedError(f"{self._config.name}: subscribe() called after close()")
        return self._store.subscribe(listener)

    def invalidate(self) -> None:
        """Force the next ``evaluate`` to fetch even if the parameters are unchanged."""
        self._tracker.reset()

    async def settled(self) -> HookResult:
        """Wait until the latest issued invocation has completed.

        Re-raises the reducer's exception if folding that result failed.  A
        cancelled invocation task ends the wait with the current result.
        """
        while True:
            task = self._latest_task
            if task is None:
                return self.result
            try:
                await asyncio.shield(task)
            except asyncio.CancelledError:
                if not task.cancelled():
                    raise
            if task is self._latest_task:
                return self.result

    # ------------------------------------------------------------------
    # Dispatch and completion
    # ------------------------------------------------------------------

    def _dispatch(self, loop: asyncio.AbstractEventLoop, params: tuple[Any, ...]) -> None:
        # The id must exist before the fetcher starts so that any later
        # issuance supersedes it.
        invocation_id = self._sequencer.issue()
        _logger.debug(
            "%s: issuing invocation %d args=%s",
            self._config.name,
            invocation_id,
            redact_for_log(list(params)),
        )
        self._trace(HookEventKind.ISSUED, invocation_id, params)

        task = loop.create_task(
            self._run(invocation_id, params),
            name=f"{self._config.name}-{invocation_id}",
        )
        self._pending[invocation_id] = task
        self._latest_task = task
        task.add_done_callback(functools.partial(self._on_task_done, invocation_id))

    async def _run(self, invocation_id: int, params: tuple[Any, ...]) -> None:
        try:
            value = self._fetcher(*params)
            if inspect.isawaitable(value):
                value = await value
        except asyncio.CancelledError as exc:
            task = asyncio.current_task()
            if task is not None and task.cancelling():
                raise
            # Raised by the fetcher itself, not a cancel() of this task.
            self._complete_failure(invocation_id, params, exc)
            return
        except Exception as exc:
            self._complete_failure(invocation_id, params, exc)
            return
        self._complete_success(invocation_id, params, value)

    def _admit(self, invocation_id: int, params: tuple[Any, ...]) -> bool:
        if self._closed:
            _logger.debug("%s: dropping invocation %d, hook closed", self._config.name, invocation_id)
            return False
        if not self._guard.accepts(invocation_id):
            _logger.debug(
                "%s: discarding stale invocation %d (latest is %s)",
                self._config.name,
                invocation_id,
                self._sequencer.latest_issued_id,
            )
            self._trace(HookEventKind.DISCARDED, invocation_id, params)
            return False
        return True

    def _complete_success(self, invocation_id: int, params: tuple[Any, ...], value: Any) -> None:
        if not self._admit(invocation_id, params):
            return
        self._store.apply_result(value, FetchMeta(args=params, invocation_id=invocation_id))
        _logger.debug("%s: accepted invocation %d", self._config.name, invocation_id)
        self._trace(HookEventKind.ACCEPTED, invocation_id, params)
        self._store.notify(lambda: self.result)

    def _complete_failure(self, invocation_id: int, params: tuple[Any, ...], exc: BaseException) -> None:
        if not self._admit(invocation_id, params):
            return
        failure = FetchFailure(
            f"{self._config.name}: invocation {invocation_id} failed: {exc}",
            invocation_id=invocation_id,
            args=params,
            cause=exc,
        )
        self._store.apply_failure(failure)
        _logger.debug("%s: invocation %d failed", self._config.name, invocation_id, exc_info=exc)
        self._trace(HookEventKind.FAILED, invocation_id, params)
        self._store.notify(lambda: self.result)

    def _on_task_done(self, invocation_id: int, task: asyncio.Task[None]) -> None:
        self._pending.pop(invocation_id, None)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            _logger.error(
                "%s: reducing invocation %d failed",
                self._config.name,
                invocation_id,
                exc_info=exc,
            )

    def _trace(self, kind: HookEventKind, invocation_id: int, params: tuple[Any, ...]) -> None:
        if not self._config.trace_enabled or self._on_trace is None:
            return
        event = HookEvent(
            hook=self._config.name,
            kind=kind,
            invocation_id=invocation_id,
            latest_issued_id=self._sequencer.latest_issued_id,
            args=params,
        )
        try:
            self._on_trace(event)
        except Exception:
            _logger.debug("on_trace callback failed", exc_info=True)


def create_async_hook(
    fetcher: Fetcher,
    config: HookConfig | None = None,
    *,
    loop: asyncio.AbstractEventLoop | None = None,
    on_trace: Callable[[HookEvent], None] | None = None,
    **config_fields: Any,
) -> AsyncHook:
    """Create an :class:`AsyncHook` for *fetcher*.

    Configuration can be given as a :class:`HookConfig`, as keyword fields
    (``initial_state=...``, ``update=...``), or both; keyword fields win.
    """
    try:
        if config is None:
            config = HookConfig(**config_fields)
        elif config_fields:
            config = dataclasses.replace(config, **config_fields)
    except TypeError as exc:
        raise AsyncHookConfigError(str(exc)) from exc
    return AsyncHook(fetcher, config, loop=loop, on_trace=on_trace)
