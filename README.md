# concurrentcounter

Thread-safe integer counters that call your functions when the counter
reaches a given value.

The package has three modules:

- `concurrentcounter.counter` holds the abstract base class `Counter`, the
  `TriggerEntry` dataclass (a `name` and a function `fn`) and the
  `TriggerFunc` type: a callable taking `(current_value, previous_value)`.
- `concurrentcounter.int_mutex` holds `IntMutex`, which guards its state
  with re-entrant locks and runs trigger functions in the thread that
  called `update`.
- `concurrentcounter.int_chan` holds `IntChan`, which hands every operation
  to two background worker threads through bounded queues. Call `close()`
  when you are done with it, or use it as a context manager.

There are no dependencies beyond the standard library.

## Installation

```
pip install concurrentcounter
```

## Usage

```python
from concurrentcounter.int_mutex import IntMutex

counter = IntMutex(0)

def on_ten(current, previous):
    print(f"reached {current} (was {previous})")

counter.set_trigger(10, "announce", on_ten)
counter.update(7)
counter.update(3)       # prints "reached 10 (was 7)"
print(counter.value)    # 10
```

Both counters start at 0 when no value is given. `value` is a read-only
property; `update(upd)` adds `upd` to it.

Each trigger is registered under a value and a name. Several triggers may
share a value, and they run in the order they were added whenever an update
leaves the counter at that value.

- `set_trigger(value, name, fn)` adds a trigger.
- `get_trigger(value, name)` returns the first function registered on
  `value` under `name`, or `None`.
- `unset_trigger(value, name)` removes every trigger on `value` with that
  name.
- `unset_triggers(value)` removes every trigger on `value`.

### Running work after the triggers

`run_after_triggers(fn)` queues `fn` to run once, right after the trigger
functions of the next update, with the same `(current, previous)`
arguments. Queued functions run in the order they were queued, whether or
not any trigger matched that update:

```python
def on_zero(current, previous):
    counter.run_after_triggers(lambda c, p: counter.unset_trigger(0, "once"))

counter.set_trigger(0, "once", on_zero)
```

### `IntMutex`

Trigger functions run synchronously inside `update`, while the counter is
locked. The locks are re-entrant, so a trigger function may read `value`
or change the triggers from the same thread. An exception raised by a
trigger function propagates out of `update`; the queued run-after
functions still run first. An update of zero leaves the value unchanged
but still runs the triggers registered on the current value.

### `IntChan`

```python
from concurrentcounter.int_chan import IntChan

with IntChan(5) as counter:
    counter.set_trigger(0, "done", lambda c, p: print("finished"))
    for _ in range(5):
        counter.update(-1)
    print(counter.value)   # 0
```

- Updates are queued and applied in the order they are sent; `update`
  returns without waiting for them.
- Reading `value` waits until every update sent before it, with its
  trigger functions, has been applied.
- An update of zero changes nothing and runs no triggers.
- Trigger functions run on the counter's value worker thread. An exception
  raised by one is logged through the `concurrentcounter.int_chan` logger
  and does not stop the counter.
- `close()` finishes the queued work and stops the worker threads; calling
  it again does nothing. After it, every other operation raises
  `RuntimeError`. Calling `close()` from inside a trigger function also
  raises `RuntimeError`.