"""Clock sources for artifact timestamps.

Artifacts carry a timestamp.  In CI the pipeline identifier replaces it so
that two artifacts from the same pipeline diff cleanly.  The clock is
injected through ``AnalyzerConfig`` rather than read from the environment
deep inside the analyzers.
"""

from __future__ import annotations

import os
from datetime import datetime
from typing import Mapping, Protocol

# Environment variable whose value overrides the wall-clock timestamp.
CI_PIPELINE_ENV = "CI_PIPELINE_ID"


class ClockSource(Protocol):
    def timestamp(self) -> str:
        """Return the artifact timestamp string."""
        ...


class SystemClock:
    """Current local time, RFC 3339 with UTC offset (seconds precision)."""

    def timestamp(self) -> str:
        return datetime.now().astimezone().isoformat(timespec="seconds")


class FixedClock:
    """Always returns the same value — for golden artifacts and tests."""

    def __init__(self, value: str):
        self.value = value

    def timestamp(self) -> str:
        return self.value


class EnvOverrideClock:
    """Use ``$CI_PIPELINE_ID`` when set, otherwise delegate to *fallback*."""

    def __init__(
        self,
        fallback: ClockSource | None = None,
        *,
        env: Mapping[str, str] | None = None,
        var: str = CI_PIPELINE_ENV,
    ):
        self.fallback = fallback or SystemClock()
        self._env = env
        self.var = var

    def timestamp(self) -> str:
        env = os.environ if self._env is None else self._env
        override = env.get(self.var, "")
        if override:
            return override
        return self.fallback.timestamp()


def default_clock() -> ClockSource:
    return EnvOverrideClock(SystemClock())
