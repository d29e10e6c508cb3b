"""Engine configuration."""

from __future__ import annotations

import os
from dataclasses import dataclass

TRUTHY = ("1", "true", "yes", "on")


@dataclass
class HooksConfig:
    """Settings applied when hooks are installed on an application.

    Attributes:
        trace: Dump the trace of every outermost call to stderr on completion
    """

    trace: bool = False

    @classmethod
    def from_env(cls) -> HooksConfig:
        """Create config from environment variables.

        Resolution order:
        1. HOOKLINE_TRACE env var
        2. TRACE env var (legacy)
        3. Default: tracing disabled
        """
        value = os.environ.get("HOOKLINE_TRACE")
        if value is None:
            value = os.environ.get("TRACE")
        if value is None:
            return cls()

        return cls(trace=value.strip().lower() in TRUTHY)
