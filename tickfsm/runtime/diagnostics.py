"""Offline validation dump of states, transitions and reachability."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from tickfsm.api.state_machine import EXIT, ConditionKind, Transition

if TYPE_CHECKING:
    from tickfsm.runtime.machine import RuntimeStateMachine


@dataclass(frozen=True, slots=True)
class TransitionEntry:
    target: str
    kind: ConditionKind
    condition: str | None = None


@dataclass(frozen=True, slots=True)
class StateEntry:
    name: str
    is_initial: bool
    transitions: tuple[TransitionEntry, ...]
    inbound: int


@dataclass(frozen=True, slots=True)
class StateMachineReport:
    """Structural summary of one machine."""

    machine: str
    states: tuple[StateEntry, ...]
    unreachable: tuple[str, ...]
    dead_ends: tuple[str, ...]
    duplicate_completions: tuple[str, ...]
    exits: tuple[str, ...]

    @property
    def has_cautions(self) -> bool:
        return bool(self.unreachable or self.duplicate_completions)


def build_report(machine: RuntimeStateMachine) -> StateMachineReport:
    """Collect per-state edges and flag suspicious structure."""
    states = machine.states
    initial = machine.initial_state
    inbound = [0] * len(states)
    for state in states:
        for transition in state.transitions:
            if transition.target is not EXIT:
                inbound[transition.target] += 1

    reachable = _reachable_from(initial.index, machine) if initial is not None else set()
    entries: list[StateEntry] = []
    unreachable: list[str] = []
    dead_ends: list[str] = []
    duplicate_completions: list[str] = []
    exits: list[str] = []

    for state in states:
        is_initial = state is initial
        entries.append(
            StateEntry(
                name=state.name,
                is_initial=is_initial,
                transitions=tuple(_entry(machine, t) for t in state.transitions),
                inbound=inbound[state.index],
            )
        )
        if not is_initial and (inbound[state.index] == 0 or state.index not in reachable):
            unreachable.append(state.name)
        if not state.transitions:
            dead_ends.append(state.name)
        completions = sum(1 for t in state.transitions if t.kind is ConditionKind.ON_COMPLETION)
        if completions > 1:
            duplicate_completions.append(state.name)
        if any(t.target is EXIT for t in state.transitions):
            exits.append(state.name)

    return StateMachineReport(
        machine=machine.name,
        states=tuple(entries),
        unreachable=tuple(unreachable),
        dead_ends=tuple(dead_ends),
        duplicate_completions=tuple(duplicate_completions),
        exits=tuple(exits),
    )


def describe_state_machine(machine: RuntimeStateMachine) -> str:
    """Render the report as human-readable text."""
    report = build_report(machine)
    lines = [f"All states for state machine {report.machine}"]
    for entry in report.states:
        header = f"------- {entry.name} -------"
        if entry.is_initial:
            header += " INITIAL STATE"
        lines.append(header)
        for transition in entry.transitions:
            line = f"transition to {transition.target} {transition.kind.value}"
            if transition.condition is not None:
                line += f" {transition.condition}"
            lines.append(line)
        if entry.name in report.unreachable:
            if entry.inbound == 0:
                lines.append("Caution - state has no entrances and will not be used.")
            else:
                lines.append("Caution - state is unreachable from the initial state.")
        elif entry.name in report.dead_ends:
            lines.append(
                "Notice - state has no exits and if entered will either stop or hang the machine."
            )
        if entry.name in report.duplicate_completions:
            lines.append("Caution - more than one on_completion transition; only the first can fire.")
        lines.append("")
    return "\n".join(lines)


def _entry(machine: RuntimeStateMachine, transition: Transition) -> TransitionEntry:
    if transition.target is EXIT:
        target = "EXIT"
    else:
        target = machine.state_at(transition.target).name
    condition = None
    if transition.condition is not None:
        condition = getattr(transition.condition, "__qualname__", None) or repr(
            transition.condition
        )
    return TransitionEntry(target=target, kind=transition.kind, condition=condition)


def _reachable_from(entry: int, machine: RuntimeStateMachine) -> set[int]:
    visited: set[int] = set()
    stack: list[int] = [entry]
    while stack:
        current = stack.pop()
        if current in visited:
            continue
        visited.add(current)
        for transition in machine.state_at(current).transitions:
            if transition.target is not EXIT:
                stack.append(transition.target)
    return visited
