"""Run or describe the example state machine from the command line."""

from __future__ import annotations

import argparse
import logging
import sys

from tickfsm.api.logging import LoggingConfig
from tickfsm.runtime.actions import idle, none, run_once, run_repeatedly
from tickfsm.runtime.config import resolve_log_level_name
from tickfsm.runtime.logging import configure_logging, stop_logging
from tickfsm.runtime.machine import RuntimeStateMachine
from tickfsm.runtime.scheduler import TaskScheduler

_LOG = logging.getLogger("tickfsm.example")


def build_example_machine(
    scheduler: TaskScheduler,
    *,
    period: int = 14,
    laps: int = 3,
) -> RuntimeStateMachine:
    """Two states ping-ponging on a cycle-count condition; the dead-end stop state ends it."""
    machine = RuntimeStateMachine("Example FSM", scheduler)
    lap_count = 0

    def _count_lap() -> None:
        nonlocal lap_count
        lap_count += 1
        _LOG.info("state 1 ran once; lap %d", lap_count)

    state1 = machine.add_state("state 1", run_once(_count_lap, name="CountLap"))
    state2 = machine.add_state(
        "state 2",
        run_repeatedly(lambda: _LOG.debug("state 2 cycle %d", scheduler.cycle), name="Loop"),
    )
    stop = machine.add_state("stop state", none(name="Stop"))
    machine.add_state("idle state", idle())
    machine.set_initial_state(state1)

    state1.to(stop).when(lambda: lap_count >= laps)
    state1.to(state2).on_completion()
    state2.to(state1).when(lambda: scheduler.cycle % period == 0)
    return machine


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(prog="tickfsm", description=__doc__)
    parser.add_argument("command", choices=("describe", "run"))
    parser.add_argument("--cycles", type=int, default=200, help="maximum scheduler cycles")
    parser.add_argument("--period", type=int, default=14, help="cycles between laps")
    parser.add_argument("--laps", type=int, default=3)
    parser.add_argument("--log-level", default=resolve_log_level_name())
    parser.add_argument("--log-format", choices=("text", "json"), default="text")
    parser.add_argument("--log-file", default=None)
    args = parser.parse_args(argv)

    configure_logging(
        LoggingConfig(
            level_name=args.log_level,
            console_format=args.log_format,
            file_path=args.log_file,
        )
    )
    try:
        scheduler = TaskScheduler()
        machine = build_example_machine(scheduler, period=args.period, laps=args.laps)
        if args.command == "describe":
            sys.stdout.write(str(machine) + "\n")
            return 0
        scheduler.schedule(machine)
        cycles = scheduler.run_until_idle(args.cycles)
        _LOG.info("%s %s after %d cycles", machine.name, machine.status.value, cycles)
        return 0 if machine.is_finished() else 1
    finally:
        stop_logging()


if __name__ == "__main__":
    raise SystemExit(main())
