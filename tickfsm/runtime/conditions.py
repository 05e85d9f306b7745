"""Edge-triggered condition evaluation."""

from __future__ import annotations

from tickfsm.api.state_machine import Condition


class EdgeTrigger:
    """Reports a condition only on its false-to-true edge.

    The previous sample is stored explicitly so a condition that stays true
    fires once, not on every poll.
    """

    __slots__ = ("_condition", "_previous")

    def __init__(self, condition: Condition) -> None:
        self._condition = condition
        self._previous = False

    @property
    def condition(self) -> Condition:
        return self._condition

    @property
    def previous(self) -> bool:
        return self._previous

    def arm(self) -> None:
        """Take the baseline sample; a condition already true must drop before it fires."""
        self._previous = bool(self._condition())

    def poll(self) -> bool:
        """Sample once and return whether the condition just became true."""
        current = bool(self._condition())
        fired = current and not self._previous
        self._previous = current
        return fired

    def reset(self) -> None:
        self._previous = False
