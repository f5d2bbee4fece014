"""Dependency tracking between consecutive evaluations."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from asynchook._compare import structural_equal

_UNSET: Any = object()


class DependencyTracker:
    """Remember the last parameter snapshot and decide when to refetch.

    Only a single snapshot is retained: going ``A -> B -> A`` counts as two
    changes.
    """

    def __init__(self, is_equal: Callable[[Any, Any], bool] = structural_equal) -> None:
        self._is_equal = is_equal
        self._snapshot: Any = _UNSET

    @property
    def has_snapshot(self) -> bool:
        return self._snapshot is not _UNSET

    @property
    def snapshot(self) -> Any:
        """The last seen parameters (``None`` before the first call)."""
        return None if self._snapshot is _UNSET else self._snapshot

    def needs_fetch(self, params: Any) -> bool:
        """Return whether *params* differ from the previous call.

        The first call always returns ``True``.  The stored snapshot is
        replaced on every call, whatever the outcome.
        """
        previous = self._snapshot
        self._snapshot = params
        if previous is _UNSET:
            return True
        return not self._is_equal(previous, params)

    def reset(self) -> None:
        """Forget the snapshot so the next call reports a change."""
        self._snapshot = _UNSET
