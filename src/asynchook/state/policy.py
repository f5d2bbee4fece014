"""Invocation sequencing and stale-result rejection.

Only issuance order matters; completion order is arbitrary.  A completion is
admitted when its id is still the most recently issued one.
"""

from __future__ import annotations


class Sequencer:
    """Issue strictly increasing invocation ids and remember the latest."""

    def __init__(self) -> None:
        self._counter = 0
        self._latest_issued_id: int | None = None

    @property
    def count(self) -> int:
        return self._counter

    @property
    def latest_issued_id(self) -> int | None:
        return self._latest_issued_id

    def issue(self) -> int:
        """Allocate the next id.  Must run before the fetcher is dispatched."""
        self._counter += 1
        self._latest_issued_id = self._counter
        return self._counter


class RaceGuard:
    """Admit a completion only if it belongs to the latest issued invocation."""

    def __init__(self, sequencer: Sequencer) -> None:
        self._sequencer = sequencer

    def accepts(self, invocation_id: int) -> bool:
        return invocation_id == self._sequencer.latest_issued_id

    def is_stale(self, invocation_id: int) -> bool:
        return not self.accepts(invocation_id)
