"""In-process cooperative host scheduler for actions and deferred callbacks."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from heapq import heappop, heappush

from tickfsm.api.action import Action, DeferredCallback, RequirementTag

_LOG = logging.getLogger("tickfsm.scheduler")


@dataclass(slots=True)
class _Task:
    task_id: int
    due_cycle: int
    callback: DeferredCallback
    cancelled: bool = False


@dataclass(slots=True)
class _Scheduled:
    action: Action
    requirements: frozenset[RequirementTag]


class TaskScheduler:
    """Cycle-based scheduler running actions with requirement-tag preemption.

    One `run_cycle` call is one scheduling period: due callbacks run first, then
    every action scheduled at that point is ticked once in scheduling order.
    """

    def __init__(self) -> None:
        self._cycle = 0
        self._next_task_id = 1
        self._tasks: dict[int, _Task] = {}
        self._queue: list[tuple[int, int]] = []
        self._scheduled: dict[int, _Scheduled] = {}

    @property
    def cycle(self) -> int:
        return self._cycle

    @property
    def scheduled_count(self) -> int:
        return len(self._scheduled)

    @property
    def queued_task_count(self) -> int:
        """Return count of active queued callbacks."""
        return sum(1 for task in self._tasks.values() if not task.cancelled)

    @property
    def scheduled_actions(self) -> tuple[Action, ...]:
        return tuple(entry.action for entry in self._scheduled.values())

    def is_scheduled(self, action: Action) -> bool:
        entry = self._scheduled.get(id(action))
        return entry is not None and entry.action is action

    def holder_of(self, requirement: RequirementTag) -> Action | None:
        """Return the scheduled action holding requirement, if any."""
        for entry in self._scheduled.values():
            if requirement in entry.requirements:
                return entry.action
        return None

    def schedule(self, action: Action, *, requires: Iterable[RequirementTag] = ()) -> None:
        """Start action, cancelling every scheduled action that shares a requirement."""
        if self.is_scheduled(action):
            _LOG.debug("schedule ignored; %r already scheduled", action)
            return
        requirements = frozenset(requires)
        if requirements:
            for entry in list(self._scheduled.values()):
                if entry.requirements & requirements:
                    _LOG.debug("%r preempted by %r", entry.action, action)
                    self.cancel(entry.action)
        self._scheduled[id(action)] = _Scheduled(action=action, requirements=requirements)
        action.on_start()

    def cancel(self, action: Action) -> None:
        """Interrupt action if it is scheduled."""
        if not self.is_scheduled(action):
            return
        del self._scheduled[id(action)]
        action.on_end(True)

    def cancel_all(self) -> None:
        for entry in list(self._scheduled.values()):
            self.cancel(entry.action)

    def defer(self, callback: DeferredCallback) -> int:
        """Run callback at the start of the next cycle."""
        return self.call_later(1, callback)

    def call_later(self, delay_cycles: int, callback: DeferredCallback) -> int:
        """Run callback at the start of the cycle `delay_cycles` from now."""
        if delay_cycles < 0:
            raise ValueError("delay_cycles must be >= 0")
        task_id = self._next_task_id
        self._next_task_id += 1
        due_cycle = self._cycle + delay_cycles
        self._tasks[task_id] = _Task(task_id=task_id, due_cycle=due_cycle, callback=callback)
        heappush(self._queue, (due_cycle, task_id))
        return task_id

    def cancel_callback(self, task_id: int) -> None:
        task = self._tasks.get(task_id)
        if task is not None:
            task.cancelled = True

    def run_cycle(self) -> int:
        """Advance one cycle; returns how many actions were ticked."""
        self._cycle += 1
        self._run_due()
        ticked = 0
        for entry in list(self._scheduled.values()):
            action = entry.action
            if self._scheduled.get(id(action)) is not entry:
                continue
            action.on_tick()
            ticked += 1
            if self._scheduled.get(id(action)) is not entry:
                continue
            if action.is_finished():
                del self._scheduled[id(action)]
                action.on_end(False)
        return ticked

    def run_until_idle(self, max_cycles: int) -> int:
        """Run cycles until nothing is scheduled or queued; returns cycles run."""
        if max_cycles <= 0:
            raise ValueError("max_cycles must be > 0")
        cycles = 0
        while cycles < max_cycles and (self._scheduled or self.queued_task_count):
            self.run_cycle()
            cycles += 1
        return cycles

    def _run_due(self) -> None:
        while self._queue and self._queue[0][0] <= self._cycle:
            _, task_id = heappop(self._queue)
            task = self._tasks.pop(task_id, None)
            if task is None or task.cancelled:
                continue
            task.callback()
