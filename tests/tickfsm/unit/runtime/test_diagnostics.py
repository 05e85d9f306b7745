from __future__ import annotations

from tests.tickfsm.fakes import Flag, RecordingAction
from tickfsm.api.state_machine import EXIT, ConditionKind
from tickfsm.runtime.diagnostics import build_report, describe_state_machine
from tickfsm.runtime.machine import RuntimeStateMachine


def _build(machine: RuntimeStateMachine) -> None:
    a = machine.add_state("a", RecordingAction("a"))
    b = machine.add_state("b", RecordingAction("b"))
    machine.add_state("orphan", RecordingAction("orphan"))
    d = machine.add_state("d", RecordingAction("d"))
    x = machine.add_state("x", RecordingAction("x"))
    y = machine.add_state("y", RecordingAction("y"))
    a.to(b).when(Flag())
    a.to(EXIT).when(Flag())
    a.to(d).when(Flag())
    b.to(a).on_completion()
    b.to(a).on_completion()
    x.to(y).when(Flag())
    y.to(x).when(Flag())


def test_report_flags_structure(machine: RuntimeStateMachine) -> None:
    _build(machine)
    report = build_report(machine)

    assert report.machine == "test"
    assert report.unreachable == ("orphan", "x", "y")
    assert report.dead_ends == ("orphan", "d")
    assert report.duplicate_completions == ("b",)
    assert report.exits == ("a",)
    assert report.has_cautions

    a_entry = report.states[0]
    assert a_entry.is_initial
    assert a_entry.inbound == 2
    assert [(t.target, t.kind) for t in a_entry.transitions] == [
        ("b", ConditionKind.EXTERNAL),
        ("EXIT", ConditionKind.EXTERNAL),
        ("d", ConditionKind.EXTERNAL),
    ]
    assert report.states[1].transitions[0].condition is None


def test_initial_state_without_entrances_is_not_flagged(machine: RuntimeStateMachine) -> None:
    machine.add_state("only", RecordingAction("only"))
    report = build_report(machine)

    assert report.unreachable == ()
    assert report.dead_ends == ("only",)
    assert not report.has_cautions


def test_describe_renders_cautions_and_notices(machine: RuntimeStateMachine) -> None:
    _build(machine)
    text = describe_state_machine(machine)

    assert text.startswith("All states for state machine test")
    assert "------- a ------- INITIAL STATE" in text
    assert "transition to b when" in text
    assert "transition to EXIT when" in text
    assert "transition to a on_completion" in text
    assert text.count("Caution - state has no entrances") == 1
    assert text.count("Caution - state is unreachable") == 2
    assert text.count("Notice - state has no exits") == 1
    assert "more than one on_completion" in text
    assert str(machine) == text
