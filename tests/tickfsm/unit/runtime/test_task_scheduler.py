from __future__ import annotations

import pytest

from tests.tickfsm.fakes import RecordingAction
from tickfsm.runtime.actions import FunctionalAction
from tickfsm.runtime.scheduler import TaskScheduler


def test_scheduler_runs_action_lifecycle_until_finished() -> None:
    scheduler = TaskScheduler()
    action = RecordingAction("a", finish_after=2)
    scheduler.schedule(action)

    assert action.calls == ["start"]
    assert scheduler.run_cycle() == 1
    assert scheduler.is_scheduled(action)
    assert scheduler.run_cycle() == 1
    assert action.calls == ["start", "tick", "tick", "completed"]
    assert not scheduler.is_scheduled(action)
    assert scheduler.run_cycle() == 0
    assert scheduler.cycle == 3


def test_scheduler_ignores_already_scheduled_action() -> None:
    scheduler = TaskScheduler()
    action = RecordingAction("a")
    scheduler.schedule(action)
    scheduler.schedule(action)

    assert action.calls == ["start"]
    assert scheduler.scheduled_count == 1


def test_scheduler_requirement_preempts_holder() -> None:
    scheduler = TaskScheduler()
    first = RecordingAction("first")
    second = RecordingAction("second")
    other = RecordingAction("other")
    scheduler.schedule(first, requires=("arm",))
    scheduler.schedule(other, requires=("leds",))
    scheduler.schedule(second, requires=("arm",))

    assert first.calls == ["start", "interrupted"]
    assert second.calls == ["start"]
    assert other.calls == ["start"]
    assert scheduler.holder_of("arm") is second
    assert scheduler.scheduled_actions == (other, second)


def test_scheduler_cancel_interrupts_only_scheduled_actions() -> None:
    scheduler = TaskScheduler()
    action = RecordingAction("a")
    scheduler.cancel(action)
    assert action.calls == []

    scheduler.schedule(action)
    scheduler.cancel(action)
    scheduler.cancel(action)
    assert action.calls == ["start", "interrupted"]


def test_scheduler_defer_runs_on_next_cycle() -> None:
    scheduler = TaskScheduler()
    calls: list[int] = []

    def _first() -> None:
        calls.append(scheduler.cycle)
        scheduler.defer(lambda: calls.append(scheduler.cycle))

    scheduler.defer(_first)
    assert calls == []
    scheduler.run_cycle()
    assert calls == [1]
    scheduler.run_cycle()
    assert calls == [1, 2]


def test_scheduler_actions_scheduled_mid_cycle_tick_next_cycle() -> None:
    scheduler = TaskScheduler()
    late = RecordingAction("late")
    starter = FunctionalAction(tick_fn=lambda: scheduler.schedule(late), finished_fn=lambda: True)
    scheduler.schedule(starter)

    assert scheduler.run_cycle() == 1
    assert late.calls == ["start"]
    assert scheduler.run_cycle() == 1
    assert late.calls == ["start", "tick"]


def test_scheduler_skips_actions_cancelled_mid_cycle() -> None:
    scheduler = TaskScheduler()
    victim = RecordingAction("victim")
    killer = FunctionalAction(tick_fn=lambda: scheduler.cancel(victim))
    scheduler.schedule(killer)
    scheduler.schedule(victim)

    scheduler.run_cycle()
    assert victim.calls == ["start", "interrupted"]


def test_scheduler_call_later_and_cancel_callback() -> None:
    scheduler = TaskScheduler()
    calls: list[str] = []
    scheduler.call_later(2, lambda: calls.append("later"))
    never = scheduler.call_later(1, lambda: calls.append("never"))
    assert scheduler.queued_task_count == 2

    scheduler.cancel_callback(never)
    assert scheduler.queued_task_count == 1
    scheduler.run_cycle()
    assert calls == []
    scheduler.run_cycle()
    assert calls == ["later"]
    assert scheduler.queued_task_count == 0


def test_scheduler_run_until_idle_stops_when_nothing_left() -> None:
    scheduler = TaskScheduler()
    scheduler.schedule(RecordingAction("a", finish_after=3))

    assert scheduler.run_until_idle(10) == 3
    assert scheduler.scheduled_count == 0

    forever = RecordingAction("forever")
    scheduler.schedule(forever)
    assert scheduler.run_until_idle(5) == 5
    scheduler.cancel_all()
    assert forever.ends == ["interrupted"]


def test_scheduler_validates_arguments() -> None:
    scheduler = TaskScheduler()
    with pytest.raises(ValueError):
        scheduler.call_later(-1, lambda: None)
    with pytest.raises(ValueError):
        scheduler.run_until_idle(0)
