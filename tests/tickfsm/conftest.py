from __future__ import annotations

import pytest

from tickfsm.runtime.config import EngineConfig
from tickfsm.runtime.machine import RuntimeStateMachine
from tickfsm.runtime.scheduler import TaskScheduler


@pytest.fixture
def scheduler() -> TaskScheduler:
    return TaskScheduler()


@pytest.fixture
def machine(scheduler: TaskScheduler) -> RuntimeStateMachine:
    return RuntimeStateMachine("test", scheduler, config=EngineConfig())
