"""State-machine error taxonomy."""

from __future__ import annotations

from dataclasses import dataclass


class StateMachineError(Exception):
    """Base class for state-machine failures."""


class ConfigurationError(StateMachineError):
    """Raised while building or starting a machine with invalid configuration."""


@dataclass(frozen=True, slots=True)
class TransitionAmbiguity:
    """More than one transition of the active state fired in the same tick.

    Logged, never raised. The first transition in registration order wins.
    """

    machine: str
    state: str
    fired: tuple[str, ...]
    dispatched: str

    def describe(self) -> str:
        return (
            f"{self.machine}: state {self.state!r} fired {len(self.fired)} transitions "
            f"in one tick ({', '.join(self.fired)}); dispatching {self.dispatched}"
        )

    def as_log_fields(self) -> dict[str, object]:
        return {
            "fsm": self.machine,
            "fsm_state": self.state,
            "fsm_fired": list(self.fired),
            "fsm_dispatched": self.dispatched,
        }
