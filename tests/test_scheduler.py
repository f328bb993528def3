import pytest

from waiting_interval.scheduler import SimClock, SimScheduler


@pytest.fixture
def scheduler():
    return SimScheduler(SimClock())


def test_runs_due_callbacks_in_time_then_fifo_order(scheduler):
    order = []
    scheduler.call_later(20, lambda: order.append("late"))
    scheduler.call_later(10, lambda: order.append("a"))
    scheduler.call_later(10, lambda: order.append("b"))
    scheduler.clock.advance(15)
    assert scheduler.run_due() == 2
    assert order == ["a", "b"]
    scheduler.clock.advance(5)
    scheduler.run_due()
    assert order == ["a", "b", "late"]


def test_cancel_before_due_and_after_fire(scheduler):
    fired = []
    cancel = scheduler.call_later(5, lambda: fired.append(1))
    cancel()
    cancel()
    scheduler.run_for(10)
    assert fired == []
    cancel = scheduler.call_later(5, lambda: fired.append(2))
    scheduler.run_for(10)
    cancel()
    assert fired == [2]
    assert scheduler.pending() == 0


def test_events_scheduled_during_a_pass_wait_for_the_next(scheduler):
    fired = []

    def again():
        fired.append(scheduler.now_ms())
        scheduler.call_later(0, again)

    scheduler.call_later(0, again)
    assert scheduler.run_due() == 1
    assert scheduler.run_due() == 1
    assert fired == [0, 0]


def test_run_for_stops_when_callbacks_move_the_clock(scheduler):
    scheduler.call_later(1, lambda: scheduler.clock.advance(100))
    scheduler.run_for(10)
    assert scheduler.now_ms() == 101


def test_run_for_rejects_non_positive_step(scheduler):
    with pytest.raises(ValueError):
        scheduler.run_for(10, step_ms=0)


def test_clock_cannot_go_backwards():
    with pytest.raises(ValueError):
        SimClock().advance(-1)


def test_dump_state_lists_queued_events(scheduler):
    def tick():
        pass

    scheduler.call_later(30, tick)
    scheduler.call_later(10, tick)
    out = scheduler.dump_state(n=5)
    lines = out.splitlines()
    assert lines[0] == "SimScheduler @ t = 0ms"
    assert lines[1] == "queued = 2 (showing first 2)"
    assert lines[2].startswith("#00 due @ 10ms")
    assert lines[3].startswith("#01 due @ 30ms")
    assert "cb=tick" in lines[2]
