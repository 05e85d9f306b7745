"""State-machine runtime modules."""

from tickfsm.runtime.actions import (
    FunctionalAction,
    WaitCycles,
    idle,
    named,
    none,
    run_once,
    run_repeatedly,
    wait_cycles,
)
from tickfsm.runtime.activation import StateActivation
from tickfsm.runtime.conditions import EdgeTrigger
from tickfsm.runtime.config import EngineConfig, load_engine_config
from tickfsm.runtime.diagnostics import StateMachineReport, build_report, describe_state_machine
from tickfsm.runtime.errors import ConfigurationError, StateMachineError, TransitionAmbiguity
from tickfsm.runtime.logging import setup_logging
from tickfsm.runtime.machine import RuntimeStateMachine
from tickfsm.runtime.scheduler import TaskScheduler
from tickfsm.runtime.state import PendingTransition, State

__all__ = [
    "ConfigurationError",
    "EdgeTrigger",
    "EngineConfig",
    "FunctionalAction",
    "PendingTransition",
    "RuntimeStateMachine",
    "State",
    "StateActivation",
    "StateMachineError",
    "StateMachineReport",
    "TaskScheduler",
    "TransitionAmbiguity",
    "WaitCycles",
    "build_report",
    "describe_state_machine",
    "idle",
    "load_engine_config",
    "named",
    "none",
    "run_once",
    "run_repeatedly",
    "setup_logging",
    "wait_cycles",
]
