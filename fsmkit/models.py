"""
Data models for machine configurations and transition history.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Awaitable, Callable, Dict, Hashable, List, Optional, Union

from typing_extensions import TypeAlias

from .errors import ConfigurationError
from .utils import format_token


# Zero-argument callback; may return an awaitable the engine waits on
Hook: TypeAlias = Callable[[], Union[None, Awaitable[None]]]


@dataclass
class StateDefinition:
    """Defines a state's outgoing transitions and optional entry/exit hooks"""
    on: Dict[Hashable, Hashable] = field(default_factory=dict)
    on_enter: Optional[Hook] = None
    on_exit: Optional[Hook] = None

    def target_for(self, event: Hashable) -> Optional[Hashable]:
        """Destination state for an event, or None if not mapped"""
        if not self.on:
            return None
        return self.on.get(event)


@dataclass
class MachineConfig:
    """
    Initial state plus the definition of every reachable state.

    The engine holds the configuration by reference; mutating it after a
    machine has been built from it is not supported.
    """
    initial: Hashable
    states: Dict[Hashable, StateDefinition]

    def validate(self) -> None:
        """
        Check that the initial state and every transition target are defined.

        Raises:
            ConfigurationError: if a referenced state is missing
        """
        if self.initial not in self.states:
            raise ConfigurationError(
                f'Initial state "{format_token(self.initial)}" is not defined'
            )

        for state, definition in self.states.items():
            for event, target in (definition.on or {}).items():
                if target not in self.states:
                    raise ConfigurationError(
                        f'Transition "{format_token(state)}" --{format_token(event)}--> '
                        f'"{format_token(target)}" targets an undefined state'
                    )

    @property
    def events(self) -> List[Hashable]:
        """Every event that appears in any state's transition map"""
        seen: Dict[Hashable, None] = {}
        for definition in self.states.values():
            for event in definition.on or {}:
                seen.setdefault(event, None)
        return list(seen)


@dataclass
class TransitionRecord:
    """A completed transition kept in a machine's history"""
    from_state: Any
    to_state: Any
    event: Any
    timestamp: datetime
    latency_ms: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            'timestamp': self.timestamp.isoformat(),
            'from': format_token(self.from_state),
            'to': format_token(self.to_state),
            'event': format_token(self.event),
            'latency_ms': self.latency_ms,
        }
