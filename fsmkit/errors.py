"""
Exception types raised by the state machine engine and the manager.
"""

from typing import Any

from .utils import format_token


class FSMError(Exception):
    """Base class for all fsmkit errors"""
    pass


class InvalidTransition(FSMError):
    """
    Raised by ``send`` when the current state has no mapped destination
    for the event. The machine is left untouched.
    """

    def __init__(self, state: Any, event: Any):
        self.state = state
        self.event = event
        super().__init__(
            f'Invalid transition from "{format_token(state)}" with "{format_token(event)}"'
        )


class ReentrantSend(FSMError):
    """Raised when a hook calls ``send`` on the machine that is running it"""

    def __init__(self, name: str, event: Any):
        self.name = name
        self.event = event
        super().__init__(
            f'Hook of FSM "{name}" sent "{format_token(event)}" while a transition is in progress'
        )


class DuplicateName(FSMError):
    """Raised when a machine name is registered twice"""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f'FSM "{name}" already exists')


class NotFound(FSMError):
    """Raised when looking up a machine name that was never registered"""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f'FSM "{name}" not found')


class ConfigurationError(FSMError, ValueError):
    """Raised for malformed machine configurations"""
    pass
