"""Action adapter coupling a state's action to machine bookkeeping."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from tickfsm.api.action import Action

if TYPE_CHECKING:
    from tickfsm.runtime.machine import RuntimeStateMachine
    from tickfsm.runtime.state import State

_LOG = logging.getLogger("tickfsm.activation")


class StateActivation:
    """Wraps a state's action so the host scheduler runs it as that state.

    Every activation of one machine is scheduled under the same requirement tag,
    so the host preempts the previous state when a new one starts. `on_start`
    cancels a still-active previous activation as well, in case the host did not.
    """

    __slots__ = ("_machine", "_state")

    def __init__(self, machine: RuntimeStateMachine, state: State) -> None:
        self._machine = machine
        self._state = state

    def __repr__(self) -> str:
        return f"StateActivation({self._machine.name!r}:{self._state.name!r})"

    @property
    def state(self) -> State:
        return self._state

    @property
    def action(self) -> Action:
        return self._state.action

    def on_start(self) -> None:
        machine = self._machine
        machine.disarm()
        previous = machine.active_activation
        if previous is not None and previous is not self:
            _LOG.debug(
                "%s: cancelling %r still active on entry to %r",
                machine.name,
                previous.state.name,
                self._state.name,
            )
            machine.host.cancel(previous)
            # Host did not know about it; finish the bookkeeping directly.
            if machine.active_activation is previous:
                previous.on_end(True)
        # Cleared before arming so a completion self-loop samples False as its baseline.
        machine.clear_completion()
        machine.arm(self._state)
        machine.set_active(self)
        machine.trace("%s: entered state %r", machine.name, self._state.name)
        self._state.action.on_start()

    def on_tick(self) -> None:
        self._state.action.on_tick()

    def is_finished(self) -> bool:
        return self._state.action.is_finished()

    def on_end(self, interrupted: bool) -> None:
        machine = self._machine
        self._state.action.on_end(interrupted)
        if not interrupted:
            machine.mark_completed(self._state)
        machine.release(self)
        machine.trace(
            "%s: left state %r (interrupted=%s)", machine.name, self._state.name, interrupted
        )
        if self._state.is_dead_end:
            machine.request_exit(f"dead-end state {self._state.name!r} ended")
