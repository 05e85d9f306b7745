"""Tick-driven finite-state machines for cooperative actions."""

from tickfsm.api import (
    EXIT,
    Action,
    ActionHost,
    ConditionKind,
    StateMachineStatus,
    Transition,
    create_state_machine,
    create_task_scheduler,
)
from tickfsm.runtime.errors import ConfigurationError, StateMachineError, TransitionAmbiguity

__all__ = [
    "Action",
    "ActionHost",
    "ConditionKind",
    "ConfigurationError",
    "EXIT",
    "StateMachineError",
    "StateMachineStatus",
    "Transition",
    "TransitionAmbiguity",
    "create_state_machine",
    "create_task_scheduler",
]
