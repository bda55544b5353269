"""A counter whose state is owned by worker threads fed through bounded queues."""

from __future__ import annotations

import enum
import logging
import queue
import threading
from concurrent.futures import Future
from dataclasses import dataclass, field
from typing import Any, Optional

from .counter import Counter, TriggerEntry, TriggerFunc

_log = logging.getLogger(__name__)

_VALUE_QUEUE_CAPACITY = 10
_TRIGGER_QUEUE_CAPACITY = 10

_STOP = object()


class _Action(enum.Enum):
    SET = "trigger.action.set"
    GET = "trigger.action.get"
    UNSET = "trigger.action.unset"
    UNSET_ALL = "trigger.action.unset.triggers"
    COLLECT = "trigger.action.execute"


@dataclass
class _ValueRequest:
    update: int
    reply: Optional[Future] = None


@dataclass
class _TriggerRequest:
    action: _Action
    value: int
    name: str = ""
    fn: Optional[TriggerFunc] = None
    reply: Optional[Future] = field(default=None)


class IntChan(Counter):
    """An integer counter served by two worker threads.

    Updates are queued and applied asynchronously, in order; reading
    :attr:`value` waits until every earlier update, with its triggers, is
    done. Trigger callbacks run on the value worker thread. An update of
    zero changes nothing and runs no triggers.
    """

    def __init__(self, value: int = 0) -> None:
        super().__init__()
        self._value = value
        self._triggers: dict[int, list[TriggerEntry]] = {}
        self._values: queue.Queue[Any] = queue.Queue(maxsize=_VALUE_QUEUE_CAPACITY)
        self._requests: queue.Queue[Any] = queue.Queue(maxsize=_TRIGGER_QUEUE_CAPACITY)
        self._closed = False
        self._close_lock = threading.Lock()
        self._value_thread = threading.Thread(
            target=self._value_loop, name="intchan-values", daemon=True
        )
        self._trigger_thread = threading.Thread(
            target=self._trigger_loop, name="intchan-triggers", daemon=True
        )
        self._value_thread.start()
        self._trigger_thread.start()

    def __enter__(self) -> IntChan:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def close(self) -> None:
        """Finish queued work and stop the worker threads. Safe to call twice."""
        if threading.current_thread() is self._value_thread:
            raise RuntimeError("a counter cannot be closed from its own trigger")
        with self._close_lock:
            if self._closed:
                return
            self._closed = True
            self._values.put(_STOP)
        self._value_thread.join()
        self._requests.put(_STOP)
        self._trigger_thread.join()

    def _send(self, target: queue.Queue, item: Any) -> None:
        if threading.current_thread() is self._value_thread:
            target.put(item)
            return
        with self._close_lock:
            if self._closed:
                raise RuntimeError("counter is closed")
            target.put(item)

    @property
    def value(self) -> int:
        if threading.current_thread() is self._value_thread:
            return self._value
        reply: Future = Future()
        self._send(self._values, _ValueRequest(0, reply))
        return reply.result()

    def update(self, upd: int) -> None:
        self._send(self._values, _ValueRequest(upd))

    def get_trigger(self, value: int, name: str) -> Optional[TriggerFunc]:
        reply: Future = Future()
        self._send(self._requests, _TriggerRequest(_Action.GET, value, name, reply=reply))
        return reply.result()

    def set_trigger(self, value: int, name: str, fn: TriggerFunc) -> None:
        self._send(self._requests, _TriggerRequest(_Action.SET, value, name, fn))

    def unset_trigger(self, value: int, name: str) -> None:
        self._send(self._requests, _TriggerRequest(_Action.UNSET, value, name))

    def unset_triggers(self, value: int) -> None:
        reply: Future = Future()
        self._send(self._requests, _TriggerRequest(_Action.UNSET_ALL, value, reply=reply))
        reply.result()

    def run_after_triggers(self, fn: TriggerFunc) -> None:
        """Queue ``fn`` to run once, right after the next update's triggers."""
        super().run_after_triggers(fn)

    def _execute_triggers(self, current: int, previous: int) -> None:
        reply: Future = Future()
        self._requests.put(_TriggerRequest(_Action.COLLECT, current, reply=reply))
        entries = reply.result() or []
        try:
            for entry in entries:
                entry.fn(current, previous)
        finally:
            self._drain_run_after(current, previous)

    def _value_loop(self) -> None:
        while True:
            request = self._values.get()
            if request is _STOP:
                return
            if request.update:
                previous = self._value
                self._value += request.update
                try:
                    self._execute_triggers(self._value, previous)
                except Exception:
                    _log.exception("trigger callback failed at value %d", self._value)
            elif request.reply is not None:
                request.reply.set_result(self._value)

    def _trigger_loop(self) -> None:
        while True:
            request = self._requests.get()
            if request is _STOP:
                return
            action = request.action
            if action is _Action.SET:
                self._triggers.setdefault(request.value, []).append(
                    TriggerEntry(request.name, request.fn)
                )
            elif action is _Action.GET:
                request.reply.set_result(self._find(request.value, request.name))
            elif action is _Action.UNSET:
                if request.value in self._triggers:
                    self._triggers[request.value] = [
                        entry
                        for entry in self._triggers[request.value]
                        if entry.name != request.name
                    ]
            elif action is _Action.UNSET_ALL:
                self._triggers.pop(request.value, None)
                request.reply.set_result(None)
            elif action is _Action.COLLECT:
                entries = self._triggers.get(request.value)
                request.reply.set_result(None if entries is None else list(entries))

    def _find(self, value: int, name: str) -> Optional[TriggerFunc]:
        for entry in self._triggers.get(value, ()):
            if entry.name == name:
                return entry.fn
        return None