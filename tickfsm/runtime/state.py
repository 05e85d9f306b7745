"""Engine-owned states and the fluent transition builder."""

from __future__ import annotations

from typing import TYPE_CHECKING

from tickfsm.api.action import Action
from tickfsm.api.state_machine import EXIT, Condition, ConditionKind, Exit, Transition
from tickfsm.runtime.errors import ConfigurationError

if TYPE_CHECKING:
    from tickfsm.runtime.activation import StateActivation
    from tickfsm.runtime.machine import RuntimeStateMachine


class State:
    """FSM node bound to one action and an ordered list of outgoing transitions.

    Created only through `RuntimeStateMachine.add_state`; the machine keeps it in
    its arena for its whole lifetime.
    """

    def __init__(
        self,
        machine: RuntimeStateMachine,
        index: int,
        name: str,
        action: Action,
    ) -> None:
        self._machine = machine
        self._index = index
        self._name = name
        self._action = action
        self._transitions: list[Transition] = []
        self._activation: StateActivation | None = None

    def __repr__(self) -> str:
        return f"State({self._name!r}, index={self._index})"

    @property
    def name(self) -> str:
        return self._name

    @property
    def index(self) -> int:
        return self._index

    @property
    def action(self) -> Action:
        return self._action

    @property
    def machine(self) -> RuntimeStateMachine:
        return self._machine

    @property
    def transitions(self) -> tuple[Transition, ...]:
        return tuple(self._transitions)

    @property
    def is_dead_end(self) -> bool:
        return not self._transitions

    @property
    def activation(self) -> StateActivation:
        if self._activation is None:
            raise ConfigurationError(f"state {self._name!r} has no activation bound")
        return self._activation

    def bind_activation(self, activation: StateActivation) -> None:
        self._activation = activation

    def completed_normally(self) -> bool:
        """Internal condition behind `on_completion` transitions."""
        return self._machine.last_normally_completed is self

    def to(self, target: State | Exit) -> PendingTransition:
        """Start declaring a transition from this state to target."""
        if target is None:
            raise ConfigurationError(
                f"state {self._name!r}: transition target must be a state or EXIT"
            )
        if target is EXIT:
            return PendingTransition(self, EXIT)
        if not isinstance(target, State):
            raise ConfigurationError(
                f"state {self._name!r}: unsupported transition target {target!r}"
            )
        self._machine.require_owned(target)
        return PendingTransition(self, target.index)

    def add_transition(self, transition: Transition) -> None:
        self._machine.require_configurable()
        if transition.kind is ConditionKind.EXTERNAL:
            for existing in self._transitions:
                if existing.condition is transition.condition:
                    raise ConfigurationError(
                        f"state {self._name!r}: condition {transition.condition!r} "
                        "is already registered on this state"
                    )
        self._transitions.append(transition)


class PendingTransition:
    """Single-use builder returned by `State.to`."""

    __slots__ = ("_source", "_target", "_used")

    def __init__(self, source: State, target: int | Exit) -> None:
        self._source = source
        self._target = target
        self._used = False

    def when(self, condition: Condition) -> Transition:
        """Fire when an external condition goes from false to true."""
        if not callable(condition):
            raise ConfigurationError(
                f"state {self._source.name!r}: condition must be callable, got {condition!r}"
            )
        return self._commit(
            Transition(target=self._target, kind=ConditionKind.EXTERNAL, condition=condition)
        )

    def on_completion(self) -> Transition:
        """Fire when the source state's action finishes without being interrupted."""
        return self._commit(Transition(target=self._target, kind=ConditionKind.ON_COMPLETION))

    def _commit(self, transition: Transition) -> Transition:
        if self._used:
            raise ConfigurationError(
                f"state {self._source.name!r}: transition builder already used"
            )
        self._source.add_transition(transition)
        self._used = True
        return transition
