import pytest

from concurrentcounter.int_mutex import IntMutex


def test_default_value_is_zero():
    assert IntMutex().value == 0


def test_update_by_zero_runs_triggers_of_current_value():
    counter = IntMutex(4)
    calls = []
    counter.set_trigger(4, "four", lambda c, p: calls.append((c, p)))
    counter.update(0)
    assert calls == [(4, 4)]


def test_unset_trigger_of_unknown_value_is_harmless():
    counter = IntMutex(0)
    counter.unset_trigger(5, "missing")
    counter.update(5)
    assert counter.value == 5
    assert counter.get_trigger(5, "missing") is None


def test_trigger_error_propagates_and_run_after_still_runs():
    counter = IntMutex(0)
    after = []

    def boom(current, previous):
        raise ValueError("boom")

    counter.set_trigger(1, "boom", boom)
    counter.run_after_triggers(lambda c, p: after.append(c))
    with pytest.raises(ValueError, match="boom"):
        counter.update(1)
    assert after == [1]
    assert counter.value == 1