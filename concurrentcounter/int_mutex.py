"""A counter guarded by locks; triggers run in the thread that updates it."""

from __future__ import annotations

import threading
from typing import Optional

from .counter import Counter, TriggerEntry, TriggerFunc


class IntMutex(Counter):
    """A lock-protected integer counter.

    Trigger callbacks run synchronously inside :meth:`update`, while the
    counter is locked. Locks are re-entrant, so a callback may read the
    value or change triggers from the same thread.
    """

    def __init__(self, value: int = 0) -> None:
        super().__init__()
        self._value = value
        self._lock = threading.RLock()
        self._trigger_lock = threading.RLock()
        self._triggers: dict[int, list[TriggerEntry]] = {}

    @property
    def value(self) -> int:
        with self._lock:
            return self._value

    def update(self, upd: int) -> None:
        with self._lock:
            previous = self._value
            self._value += upd
            self._execute_triggers(self._value, previous)

    def _execute_triggers(self, current: int, previous: int) -> None:
        try:
            with self._trigger_lock:
                for entry in list(self._triggers.get(current, ())):
                    entry.fn(current, previous)
        finally:
            self._drain_run_after(current, previous)

    def get_trigger(self, value: int, name: str) -> Optional[TriggerFunc]:
        with self._trigger_lock:
            for entry in self._triggers.get(value, ()):
                if entry.name == name:
                    return entry.fn
            return None

    def set_trigger(self, value: int, name: str, fn: TriggerFunc) -> None:
        with self._trigger_lock:
            self._triggers.setdefault(value, []).append(TriggerEntry(name, fn))

    def unset_trigger(self, value: int, name: str) -> None:
        with self._trigger_lock:
            entries = self._triggers.get(value)
            if entries is None:
                return
            remaining = [entry for entry in entries if entry.name != name]
            if remaining:
                self._triggers[value] = remaining
            else:
                del self._triggers[value]

    def unset_triggers(self, value: int) -> None:
        with self._trigger_lock:
            self._triggers.pop(value, None)

    def run_after_triggers(self, fn: TriggerFunc) -> None:
        """Queue ``fn`` to run once, right after the next update's triggers."""
        super().run_after_triggers(fn)