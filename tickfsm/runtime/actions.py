"""Stock action implementations for building states."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field

from tickfsm.api.action import Action


def _noop() -> None:
    return


def _never() -> bool:
    return False


def _ignore_end(interrupted: bool) -> None:
    _ = interrupted


@dataclass(slots=True)
class FunctionalAction:
    """Callable-backed action implementation."""

    start_fn: Callable[[], None] = _noop
    tick_fn: Callable[[], None] = _noop
    finished_fn: Callable[[], bool] = _never
    end_fn: Callable[[bool], None] = _ignore_end
    name: str = "FunctionalAction"

    def __repr__(self) -> str:
        return f"<{self.name}>"

    def on_start(self) -> None:
        self.start_fn()

    def on_tick(self) -> None:
        self.tick_fn()

    def is_finished(self) -> bool:
        return self.finished_fn()

    def on_end(self, interrupted: bool) -> None:
        self.end_fn(interrupted)


@dataclass(slots=True)
class WaitCycles:
    """Finishes on its `cycles`-th tick; restarts counting on every start."""

    cycles: int
    name: str = "WaitCycles"
    elapsed: int = field(default=0, init=False)

    def __post_init__(self) -> None:
        if self.cycles < 1:
            raise ValueError("cycles must be >= 1")

    def __repr__(self) -> str:
        return f"<{self.name}({self.cycles})>"

    def on_start(self) -> None:
        self.elapsed = 0

    def on_tick(self) -> None:
        self.elapsed += 1

    def is_finished(self) -> bool:
        return self.elapsed >= self.cycles

    def on_end(self, interrupted: bool) -> None:
        _ = interrupted


@dataclass(slots=True)
class _Named:
    inner: Action
    name: str

    def __repr__(self) -> str:
        return f"<{self.name}>"

    def on_start(self) -> None:
        self.inner.on_start()

    def on_tick(self) -> None:
        self.inner.on_tick()

    def is_finished(self) -> bool:
        return self.inner.is_finished()

    def on_end(self, interrupted: bool) -> None:
        self.inner.on_end(interrupted)


def run_once(fn: Callable[[], None], *, name: str = "RunOnce") -> FunctionalAction:
    """Run fn on start and finish on the first tick."""
    return FunctionalAction(start_fn=fn, finished_fn=lambda: True, name=name)


def run_repeatedly(fn: Callable[[], None], *, name: str = "Run") -> FunctionalAction:
    """Run fn every tick until interrupted."""
    return FunctionalAction(tick_fn=fn, name=name)


def idle(*, name: str = "Idle") -> FunctionalAction:
    """Do nothing until interrupted."""
    return FunctionalAction(name=name)


def none(*, name: str = "None") -> FunctionalAction:
    """Do nothing and finish on the first tick."""
    return FunctionalAction(finished_fn=lambda: True, name=name)


def wait_cycles(cycles: int, *, name: str = "WaitCycles") -> WaitCycles:
    return WaitCycles(cycles=cycles, name=name)


def named(action: Action, name: str) -> Action:
    """Wrap action so it reports a readable name in logs and diagnostics."""
    return _Named(inner=action, name=name)
