"""Public state-machine API contracts."""

from tickfsm.api.action import Action, ActionHost, RequirementTag, create_task_scheduler
from tickfsm.api.logging import LoggingConfig, configure_logging
from tickfsm.api.state_machine import (
    EXIT,
    Condition,
    ConditionKind,
    Exit,
    StateHandle,
    StateMachine,
    StateMachineStatus,
    Transition,
    TransitionBuilder,
    create_state_machine,
)

__all__ = [
    "Action",
    "ActionHost",
    "Condition",
    "ConditionKind",
    "EXIT",
    "Exit",
    "LoggingConfig",
    "RequirementTag",
    "StateHandle",
    "StateMachine",
    "StateMachineStatus",
    "Transition",
    "TransitionBuilder",
    "configure_logging",
    "create_state_machine",
    "create_task_scheduler",
]
