"""
Environment-driven settings.
"""

import os
from dataclasses import dataclass

from .errors import ConfigurationError


DEFAULT_HISTORY_SIZE = 20  # Keep last 20 transitions


@dataclass
class Settings:
    """
    Runtime knobs shared by every machine.

    Environment variables:
        FSM_METRICS_ENABLED: record Prometheus metrics (default: true)
        FSM_HISTORY_SIZE: transitions kept per machine (default: 20)
    """
    metrics_enabled: bool = True
    history_size: int = DEFAULT_HISTORY_SIZE

    @classmethod
    def from_env(cls) -> "Settings":
        metrics_enabled = os.getenv('FSM_METRICS_ENABLED', 'true').lower() == 'true'

        raw_size = os.getenv('FSM_HISTORY_SIZE', str(DEFAULT_HISTORY_SIZE))
        try:
            history_size = int(raw_size)
        except ValueError:
            raise ConfigurationError(f"FSM_HISTORY_SIZE must be an integer, got {raw_size!r}")
        if history_size < 0:
            raise ConfigurationError(f"FSM_HISTORY_SIZE must not be negative, got {history_size}")

        return cls(metrics_enabled=metrics_enabled, history_size=history_size)
