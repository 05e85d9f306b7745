"""Public action and host-scheduler API contracts."""

from __future__ import annotations

from collections.abc import Callable, Hashable, Iterable
from typing import Protocol, TypeAlias

RequirementTag: TypeAlias = Hashable
DeferredCallback: TypeAlias = Callable[[], None]


class Action(Protocol):
    """Cooperative long-running task driven entirely by a host scheduler.

    The host calls ``on_start`` once when the action is newly scheduled,
    ``on_tick`` every cycle while it stays scheduled, ``on_end(False)`` once
    ``is_finished`` first reports True, and ``on_end(True)`` when the action is
    cancelled or preempted.
    """

    def on_start(self) -> None:
        """Prepare to run."""

    def on_tick(self) -> None:
        """Do one cycle of work."""

    def is_finished(self) -> bool:
        """Return whether the action ended by itself."""

    def on_end(self, interrupted: bool) -> None:
        """Release whatever the action holds."""


class ActionHost(Protocol):
    """Host scheduler capability set consumed by state machines."""

    def schedule(self, action: Action, *, requires: Iterable[RequirementTag] = ()) -> None:
        """Start an action, preempting any running action holding one of `requires`."""

    def cancel(self, action: Action) -> None:
        """Interrupt a scheduled action."""

    def defer(self, callback: DeferredCallback) -> object:
        """Run callback at the start of the next scheduling cycle."""

    def is_scheduled(self, action: Action) -> bool:
        """Return whether action is currently scheduled."""


def create_task_scheduler() -> ActionHost:
    """Create default in-process host scheduler implementation."""
    from tickfsm.runtime.scheduler import TaskScheduler

    return TaskScheduler()
