"""Common types for integer counters that run callbacks when they reach given values."""

from __future__ import annotations

import queue
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Callable, Optional

TriggerFunc = Callable[[int, int], None]
"""A callback receiving ``(current_value, previous_value)``."""


@dataclass(frozen=True)
class TriggerEntry:
    """A named callback registered on a counter value."""

    name: str
    fn: TriggerFunc


class Counter(ABC):
    """A thread-safe integer counter with value-triggered callbacks.

    Subclasses store the value and the triggers; this base class keeps the
    queue of callbacks added with :meth:`run_after_triggers`, which run once,
    right after the trigger callbacks of the next update.
    """

    def __init__(self) -> None:
        self._run_after: queue.SimpleQueue[TriggerFunc] = queue.SimpleQueue()

    @property
    @abstractmethod
    def value(self) -> int:
        """The current value of the counter."""

    @abstractmethod
    def update(self, upd: int) -> None:
        """Add ``upd`` to the counter and run the triggers of the new value."""

    @abstractmethod
    def get_trigger(self, value: int, name: str) -> Optional[TriggerFunc]:
        """Return the callback registered on ``value`` under ``name``, or None."""

    @abstractmethod
    def set_trigger(self, value: int, name: str, fn: TriggerFunc) -> None:
        """Register ``fn`` to run whenever the counter reaches ``value``."""

    @abstractmethod
    def unset_trigger(self, value: int, name: str) -> None:
        """Remove the callback registered on ``value`` under ``name``."""

    @abstractmethod
    def unset_triggers(self, value: int) -> None:
        """Remove every callback registered on ``value``."""

    def run_after_triggers(self, fn: TriggerFunc) -> None:
        """Queue ``fn`` to run once, just after the current trigger callbacks."""
        self._run_after.put(fn)

    def _drain_run_after(self, current: int, previous: int) -> None:
        """Run and discard every queued run-after callback, oldest first."""
        while True:
            try:
                fn = self._run_after.get_nowait()
            except queue.Empty:
                return
            fn(current, previous)