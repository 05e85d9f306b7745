from __future__ import annotations

import logging

import pytest

from tests.tickfsm.fakes import Flag, RecordingAction
from tickfsm.api.state_machine import EXIT, StateMachineStatus
from tickfsm.runtime.errors import ConfigurationError
from tickfsm.runtime.machine import RuntimeStateMachine
from tickfsm.runtime.scheduler import TaskScheduler


def test_single_dead_end_state_finishes_after_deferred_activation_and_one_tick(
    machine: RuntimeStateMachine, scheduler: TaskScheduler
) -> None:
    p_action = RecordingAction("P", finish_after=1)
    machine.add_state("P", p_action)
    scheduler.schedule(machine)
    assert not machine.is_finished()

    scheduler.run_cycle()

    assert p_action.calls == ["start", "tick", "completed"]
    assert machine.is_finished()
    scheduler.run_cycle()
    assert not scheduler.is_scheduled(machine)
    assert machine.status is StateMachineStatus.EXITED


def test_completion_then_condition_round_trip_has_one_tick_latency(
    machine: RuntimeStateMachine, scheduler: TaskScheduler
) -> None:
    a_action, b_action = RecordingAction("A", finish_after=3), RecordingAction("B")
    a = machine.add_state("A", a_action)
    b = machine.add_state("B", b_action)
    cond = Flag()
    a.to(b).on_completion()
    b.to(a).when(cond)
    scheduler.schedule(machine)

    active: dict[int, str | None] = {}
    for tick in range(1, 13):
        scheduler.run_cycle()
        state = machine.active_state
        active[tick] = state.name if state is not None else None
        if tick == 3:
            assert a_action.ends == ["completed"]
        if tick == 10:
            cond.value = True

    assert [active[tick] for tick in (1, 2)] == ["A", "A"]
    assert active[3] is None
    assert all(active[tick] == "B" for tick in range(4, 11))
    assert active[11] == "A"
    assert active[12] == "A"
    assert b_action.ends == ["interrupted"]
    assert not machine.is_finished()


def test_simultaneous_conditions_resolve_in_registration_order(
    machine: RuntimeStateMachine,
    scheduler: TaskScheduler,
    caplog: pytest.LogCaptureFixture,
) -> None:
    a_action, b_action = RecordingAction("A"), RecordingAction("B")
    a = machine.add_state("A", a_action)
    b = machine.add_state("B", b_action)
    c1, c2 = Flag(), Flag()
    a.to(b).when(c1)
    a.to(EXIT).when(c2)
    scheduler.schedule(machine)
    scheduler.run_cycle()

    c1.value = c2.value = True
    with caplog.at_level(logging.WARNING, logger="tickfsm.machine"):
        scheduler.run_cycle()
    for _ in range(3):
        scheduler.run_cycle()

    assert machine.active_state is b
    assert not machine.is_finished()
    assert scheduler.is_scheduled(machine)
    assert a_action.ends == ["interrupted"]
    assert b_action.calls.count("start") == 1
    assert b_action.ticks == 3
    assert any("fired 2 transitions" in record.getMessage() for record in caplog.records)


def test_shared_condition_object_fails_the_build(machine: RuntimeStateMachine) -> None:
    a = machine.add_state("A", RecordingAction("A"))
    b = machine.add_state("B", RecordingAction("B"))
    c = machine.add_state("C", RecordingAction("C"))
    shared = Flag()
    a.to(b).when(shared)

    with pytest.raises(ConfigurationError):
        a.to(c).when(shared)
    assert machine.status is StateMachineStatus.CONFIGURED


def test_independent_machines_share_one_scheduler(scheduler: TaskScheduler) -> None:
    left = RuntimeStateMachine("left", scheduler)
    right = RuntimeStateMachine("right", scheduler)
    left_action, right_action = RecordingAction("l"), RecordingAction("r", finish_after=2)
    left.add_state("l", left_action).to(EXIT).when(Flag())
    right.add_state("r", right_action)
    scheduler.schedule(left)
    scheduler.schedule(right)

    scheduler.run_until_idle(5)

    assert right.status is StateMachineStatus.EXITED
    assert left.status is StateMachineStatus.RUNNING
    assert left_action.ends == []
    assert left.requirement != right.requirement
