from __future__ import annotations

from asynchook._tracker import DependencyTracker


def test_first_call_always_fetches() -> None:
    tracker = DependencyTracker()

    assert tracker.has_snapshot is False
    assert tracker.needs_fetch(()) is True
    assert tracker.has_snapshot is True


def test_equal_params_do_not_fetch() -> None:
    tracker = DependencyTracker()
    tracker.needs_fetch(({"deep": {"value": "value"}},))

    assert tracker.needs_fetch(({"deep": {"value": "value"}},)) is False
    assert tracker.needs_fetch(({"deep": {"value": "value"}},)) is False


def test_only_one_snapshot_is_retained() -> None:
    tracker = DependencyTracker()

    assert tracker.needs_fetch(("a",)) is True
    assert tracker.needs_fetch(("b",)) is True
    assert tracker.needs_fetch(("a",)) is True
    assert tracker.snapshot == ("a",)


def test_reset_forces_next_fetch() -> None:
    tracker = DependencyTracker()
    tracker.needs_fetch((1,))
    tracker.reset()

    assert tracker.snapshot is None
    assert tracker.needs_fetch((1,)) is True


def test_custom_comparator() -> None:
    tracker = DependencyTracker(is_equal=lambda a, b: True)
    tracker.needs_fetch((1,))

    assert tracker.needs_fetch((2,)) is False
