"""
Small helpers shared across fsmkit modules.
"""

from enum import Enum
from typing import Any


def format_token(value: Any) -> str:
    """Render a state/event token for messages and labels (Enum members by name)"""
    if isinstance(value, Enum):
        return value.name
    return str(value)
