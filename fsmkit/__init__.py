"""
fsmkit

A finite state machine engine with async hooks and a registry of named machines.
"""

__version__ = "0.1.0"

from .core import StateMachine
from .errors import (
    FSMError,
    InvalidTransition,
    ReentrantSend,
    DuplicateName,
    NotFound,
    ConfigurationError,
)
from .manager import StateMachineManager
from .models import Hook, MachineConfig, StateDefinition, TransitionRecord
from .parser import ConfigParser
from .settings import Settings

__all__ = [
    "StateMachine",
    "StateMachineManager",
    "MachineConfig",
    "StateDefinition",
    "TransitionRecord",
    "Hook",
    "ConfigParser",
    "Settings",
    "FSMError",
    "InvalidTransition",
    "ReentrantSend",
    "DuplicateName",
    "NotFound",
    "ConfigurationError",
]
