"""Public state-machine API contracts."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum, StrEnum
from typing import TYPE_CHECKING, Protocol, TypeAlias

from tickfsm.api.action import Action, ActionHost

if TYPE_CHECKING:
    from tickfsm.runtime.config import EngineConfig

Condition: TypeAlias = Callable[[], bool]


class Exit(Enum):
    """Reserved transition target that terminates the machine."""

    EXIT = "exit"

    def __repr__(self) -> str:
        return "EXIT"


EXIT = Exit.EXIT


class ConditionKind(StrEnum):
    """How a transition decides to fire."""

    EXTERNAL = "when"
    ON_COMPLETION = "on_completion"


class StateMachineStatus(StrEnum):
    """Machine lifecycle stage."""

    UNCONFIGURED = "unconfigured"
    CONFIGURED = "configured"
    RUNNING = "running"
    EXITED = "exited"


@dataclass(frozen=True, slots=True)
class Transition:
    """Immutable outgoing edge of a state.

    `target` is the arena index of a state owned by the same machine, or `EXIT`.
    `condition` is set only for `ConditionKind.EXTERNAL` transitions.
    """

    target: int | Exit
    kind: ConditionKind
    condition: Condition | None = None

    @property
    def exits(self) -> bool:
        return self.target is EXIT


class TransitionBuilder(Protocol):
    """Second half of the fluent `state.to(target)` chain."""

    def when(self, condition: Condition) -> Transition:
        """Fire when condition goes from false to true."""

    def on_completion(self) -> Transition:
        """Fire when the source state's action ends without interruption."""


class StateHandle(Protocol):
    """Engine-owned state reference returned by `add_state`."""

    @property
    def name(self) -> str:
        """Return state name."""

    @property
    def index(self) -> int:
        """Return arena index inside the owning machine."""

    @property
    def transitions(self) -> tuple[Transition, ...]:
        """Return outgoing transitions in registration order."""

    def to(self, target: StateHandle | Exit) -> TransitionBuilder:
        """Start declaring a transition to target."""


class StateMachine(Action, Protocol):
    """Public tick-driven state-machine contract."""

    @property
    def name(self) -> str:
        """Return machine name."""

    @property
    def status(self) -> StateMachineStatus:
        """Return lifecycle stage."""

    def add_state(self, name: str, action: Action) -> StateHandle:
        """Register a state bound to action."""

    def set_initial_state(self, state: StateHandle) -> None:
        """Override the default initial state."""

    def start(self) -> None:
        """Reset run fields and request deferred activation of the initial state."""

    def tick(self) -> None:
        """Poll armed conditions of the active state once."""

    def shutdown(self, interrupted: bool) -> None:
        """Cancel the active state action."""


def create_state_machine(
    name: str,
    host: ActionHost,
    *,
    config: EngineConfig | None = None,
) -> StateMachine:
    """Create default state-machine implementation bound to a host scheduler."""
    from tickfsm.runtime.machine import RuntimeStateMachine

    return RuntimeStateMachine(name, host, config=config)
