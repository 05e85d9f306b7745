"""State-machine configuration sourced from environment."""

from __future__ import annotations

import os
from dataclasses import dataclass


def _flag(name: str, default: bool = False) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


@dataclass(frozen=True, slots=True)
class EngineConfig:
    """Immutable state-machine runtime configuration."""

    log_level: str = "INFO"
    trace_transitions: bool = False
    warn_ambiguity: bool = True
    describe_on_start: bool = False


def resolve_log_level_name(default: str = "INFO") -> str:
    """Resolve log level with package-prefixed override."""
    value = os.getenv("TICKFSM_LOG_LEVEL")
    if value is None:
        value = os.getenv("LOG_LEVEL", default)
    return value.strip().upper()


def load_engine_config() -> EngineConfig:
    """Load immutable configuration from env vars."""
    return EngineConfig(
        log_level=resolve_log_level_name(),
        trace_transitions=_flag("TICKFSM_TRACE_TRANSITIONS", False),
        warn_ambiguity=_flag("TICKFSM_WARN_AMBIGUITY", True),
        describe_on_start=_flag("TICKFSM_DESCRIBE_ON_START", False),
    )
