import pytest

from concurrentcounter.int_chan import IntChan


@pytest.fixture
def counter():
    with IntChan(0) as chan:
        yield chan


def test_update_by_zero_runs_no_trigger(counter):
    calls = []
    counter.set_trigger(0, "zero", lambda c, p: calls.append(c))
    counter.update(0)
    assert counter.value == 0
    assert calls == []


def test_failing_trigger_does_not_stop_counter(counter):
    after = []

    def boom(current, previous):
        raise ValueError("boom")

    counter.set_trigger(1, "boom", boom)
    counter.run_after_triggers(lambda c, p: after.append(c))
    counter.update(1)
    counter.update(1)
    assert counter.value == 2
    assert after == [1]


@pytest.mark.parametrize(
    "operation",
    [
        lambda chan: chan.update(1),
        lambda chan: chan.value,
        lambda chan: chan.set_trigger(1, "x", lambda c, p: None),
    ],
    ids=["update", "value", "set_trigger"],
)
def test_closed_counter_rejects_operations(operation):
    chan = IntChan(1)
    assert chan.value == 1
    chan.close()
    with pytest.raises(RuntimeError):
        operation(chan)


def test_close_finishes_pending_updates():
    calls = []
    chan = IntChan(0)
    chan.set_trigger(3, "three", lambda c, p: calls.append(c))
    for _ in range(3):
        chan.update(1)
    chan.close()
    chan.close()
    assert calls == [3]


def test_context_manager_closes():
    with IntChan(2) as chan:
        assert chan.value == 2
    with pytest.raises(RuntimeError):
        chan.update(1)


def test_close_from_trigger_is_rejected(counter):
    errors = []

    def closer(current, previous):
        try:
            counter.close()
        except RuntimeError as exc:
            errors.append(exc)

    counter.set_trigger(1, "close", closer)
    counter.update(1)
    assert counter.value == 1
    assert len(errors) == 1