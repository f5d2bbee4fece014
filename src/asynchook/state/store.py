"""Reduced application state of a single hook.

This is the only component allowed to replace the exposed state.  It never
decides *whether* a completion is admitted; that is the race guard's job.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

from asynchook.exceptions import FetchFailure
from asynchook.state.events import FetchMeta, HookResult

_logger = logging.getLogger(__name__)

Reducer = Callable[[Any, Any, FetchMeta], Any]
Listener = Callable[[HookResult], None]


class StateStore:
    """Hold the current state, last error and change listeners.

    ``loading`` is not stored; it is derived from the latest issued id and
    the id of the last admitted completion.
    """

    def __init__(self, initial_state: Any, reducer: Reducer) -> None:
        self._state = initial_state
        self._reducer = reducer
        self._error: FetchFailure | None = None
        self._accepted_id: int | None = None
        self._listeners: list[Listener] = []

    @property
    def state(self) -> Any:
        return self._state

    @property
    def error(self) -> FetchFailure | None:
        return self._error

    @property
    def accepted_id(self) -> int | None:
        return self._accepted_id

    def is_loading(self, latest_issued_id: int | None) -> bool:
        return latest_issued_id is not None and latest_issued_id != self._accepted_id

    def snapshot(self, latest_issued_id: int | None) -> HookResult:
        return HookResult(
            loading=self.is_loading(latest_issued_id),
            state=self._state,
            error=self._error,
        )

    def apply_result(self, result: Any, meta: FetchMeta) -> None:
        """Fold an admitted result into the next state.

        Reducer exceptions propagate; the store is left untouched in that case.
        """
        next_state = self._reducer(self._state, result, meta)
        self._state = next_state
        self._error = None
        self._accepted_id = meta.invocation_id

    def apply_failure(self, failure: FetchFailure) -> None:
        """Record an admitted failure.  The state is kept as is."""
        self._error = failure
        self._accepted_id = failure.invocation_id

    # ------------------------------------------------------------------
    # Listeners
    # ------------------------------------------------------------------

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register *listener*; returns a callable that removes it again."""
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def clear_listeners(self) -> None:
        self._listeners.clear()

    def notify(self, current: Callable[[], HookResult]) -> None:
        """Call every listener with a result taken just before its call.

        A listener that re-evaluates the hook changes what later listeners see.
        """
        # Copy: listeners may unsubscribe while being notified.
        for listener in list(self._listeners):
            try:
                listener(current())
            except Exception:
                _logger.debug("change listener failed", exc_info=True)
