"""Tick-driven finite-state-machine engine."""

from __future__ import annotations

import logging

from tickfsm.api.action import Action, ActionHost, RequirementTag
from tickfsm.api.state_machine import EXIT, StateMachineStatus, Transition
from tickfsm.runtime.activation import StateActivation
from tickfsm.runtime.conditions import EdgeTrigger
from tickfsm.runtime.config import EngineConfig, load_engine_config
from tickfsm.runtime.errors import ConfigurationError, TransitionAmbiguity
from tickfsm.runtime.state import State

_LOG = logging.getLogger("tickfsm.machine")


class RuntimeStateMachine:
    """Sequences state actions on a host scheduler, one active state at a time.

    The machine is itself an `Action`: scheduling it on the host starts it, the
    host ticks it every cycle, and it finishes once an exit is requested.
    """

    def __init__(
        self,
        name: str,
        host: ActionHost,
        *,
        config: EngineConfig | None = None,
    ) -> None:
        if host is None:
            raise ConfigurationError(f"state machine {name!r} requires a host scheduler")
        self._name = name
        self._host = host
        self._config = config if config is not None else load_engine_config()
        self._requirement: RequirementTag = f"tickfsm:{name}:{id(self):x}"
        self._states: list[State] = []
        self._initial: State | None = None
        self._armed: list[tuple[Transition, EdgeTrigger]] = []
        self._armed_for: State | None = None
        self._exit_requested = False
        self._last_normally_completed: State | None = None
        self._active: StateActivation | None = None
        self._started = False
        self._stopped = False
        self._generation = 0

    def __repr__(self) -> str:
        return f"RuntimeStateMachine({self._name!r}, status={self.status.value})"

    def __str__(self) -> str:
        from tickfsm.runtime.diagnostics import describe_state_machine

        return describe_state_machine(self)

    # Configuration

    @property
    def name(self) -> str:
        return self._name

    @property
    def host(self) -> ActionHost:
        return self._host

    @property
    def config(self) -> EngineConfig:
        return self._config

    @property
    def requirement(self) -> RequirementTag:
        """Mutual-exclusion tag shared by every state action of this machine."""
        return self._requirement

    @property
    def states(self) -> tuple[State, ...]:
        return tuple(self._states)

    @property
    def initial_state(self) -> State | None:
        return self._initial

    def add_state(self, name: str, action: Action) -> State:
        """Register a state; the first one added is the default initial state."""
        self.require_configurable()
        if action is None:
            raise ConfigurationError(f"{self._name}: state {name!r} requires an action")
        state = State(self, len(self._states), name, action)
        state.bind_activation(StateActivation(self, state))
        self._states.append(state)
        if self._initial is None:
            self._initial = state
        return state

    def set_initial_state(self, state: State) -> None:
        """Override the default initial state."""
        self.require_configurable()
        if state is None:
            raise ConfigurationError(f"{self._name}: initial state cannot be None")
        self.require_owned(state)
        self._initial = state

    def state_at(self, index: int) -> State:
        return self._states[index]

    def require_owned(self, state: State) -> None:
        if not isinstance(state, State) or state.machine is not self:
            raise ConfigurationError(f"{self._name}: {state!r} does not belong to this machine")

    def require_configurable(self) -> None:
        if self.status is StateMachineStatus.RUNNING:
            raise ConfigurationError(f"{self._name}: cannot reconfigure a running machine")

    # Run state

    @property
    def status(self) -> StateMachineStatus:
        if not self._states:
            return StateMachineStatus.UNCONFIGURED
        if not self._started:
            return StateMachineStatus.CONFIGURED
        if self._stopped or self._exit_requested:
            return StateMachineStatus.EXITED
        return StateMachineStatus.RUNNING

    @property
    def exit_requested(self) -> bool:
        return self._exit_requested

    @property
    def last_normally_completed(self) -> State | None:
        return self._last_normally_completed

    @property
    def active_activation(self) -> StateActivation | None:
        return self._active

    @property
    def active_state(self) -> State | None:
        return self._active.state if self._active is not None else None

    @property
    def armed_conditions(self) -> tuple[EdgeTrigger, ...]:
        return tuple(trigger for _, trigger in self._armed)

    def start(self) -> None:
        """Reset run fields and request activation of the initial state next cycle."""
        if self._initial is None:
            raise ConfigurationError(f"{self._name}: no initial state; add a state first")
        if self._active is not None:
            self._cancel_active()
        self._exit_requested = False
        self._last_normally_completed = None
        self.disarm()
        self._started = True
        self._stopped = False
        self._generation += 1
        generation = self._generation
        initial = self._initial
        if self._config.describe_on_start:
            self.log_description()
        _LOG.debug("%s: started; initial state %r deferred", self._name, initial.name)
        self._host.defer(lambda: self._activate_initial(generation, initial))

    def tick(self) -> None:
        """Poll the active state's armed conditions and dispatch the first that fired."""
        if self.status is not StateMachineStatus.RUNNING or not self._armed:
            return
        fired = [transition for transition, trigger in self._armed if trigger.poll()]
        if not fired:
            return
        if len(fired) > 1 and self._config.warn_ambiguity:
            self._warn_ambiguity(fired)
        self._dispatch(fired[0])

    def is_finished(self) -> bool:
        return self._exit_requested

    def shutdown(self, interrupted: bool) -> None:
        """Cancel the active state's action and stop reacting to conditions."""
        if self._active is not None:
            self._cancel_active()
        self.disarm()
        if self._started:
            self._stopped = True
        _LOG.debug("%s: shut down (interrupted=%s)", self._name, interrupted)

    # Action protocol, so a host can schedule the machine itself.

    def on_start(self) -> None:
        self.start()

    def on_tick(self) -> None:
        self.tick()

    def on_end(self, interrupted: bool) -> None:
        self.shutdown(interrupted)

    # Activation bookkeeping, driven by StateActivation.

    def disarm(self) -> None:
        self._armed.clear()
        self._armed_for = None

    def arm(self, state: State) -> None:
        armed: list[tuple[Transition, EdgeTrigger]] = []
        for transition in state.transitions:
            condition = transition.condition or state.completed_normally
            trigger = EdgeTrigger(condition)
            trigger.arm()
            armed.append((transition, trigger))
        self._armed = armed
        self._armed_for = state

    def clear_completion(self) -> None:
        self._last_normally_completed = None

    def mark_completed(self, state: State) -> None:
        self._last_normally_completed = state

    def set_active(self, activation: StateActivation) -> None:
        self._active = activation

    def release(self, activation: StateActivation) -> None:
        if self._active is activation:
            self._active = None

    def request_exit(self, reason: str) -> None:
        if not self._exit_requested:
            self.trace("%s: exit requested (%s)", self._name, reason)
        self._exit_requested = True

    def trace(self, message: str, *args: object) -> None:
        level = logging.INFO if self._config.trace_transitions else logging.DEBUG
        _LOG.log(level, message, *args)

    def log_description(self) -> None:
        """Log the diagnostic dump of states and transitions."""
        _LOG.info("%s", self)

    # Internals

    def _activate_initial(self, generation: int, initial: State) -> None:
        if generation != self._generation or self.status is not StateMachineStatus.RUNNING:
            return
        self._host.schedule(initial.activation, requires=(self._requirement,))

    def _dispatch(self, transition: Transition) -> None:
        source = self._armed_for.name if self._armed_for is not None else "?"
        if transition.target is EXIT:
            self.request_exit(f"{source!r} transitioned to EXIT")
            return
        target = self._states[transition.target]
        self.trace(
            "%s: %r -> %r (%s)", self._name, source, target.name, transition.kind.value
        )
        self._host.schedule(target.activation, requires=(self._requirement,))

    def _cancel_active(self) -> None:
        active = self._active
        if active is None:
            return
        self._host.cancel(active)
        if self._active is active:
            active.on_end(True)

    def _target_label(self, transition: Transition) -> str:
        if transition.target is EXIT:
            return "EXIT"
        return repr(self._states[transition.target].name)

    def _warn_ambiguity(self, fired: list[Transition]) -> None:
        ambiguity = TransitionAmbiguity(
            machine=self._name,
            state=self._armed_for.name if self._armed_for is not None else "?",
            fired=tuple(self._target_label(transition) for transition in fired),
            dispatched=self._target_label(fired[0]),
        )
        _LOG.warning(ambiguity.describe(), extra=ambiguity.as_log_fields())
