"""
Core state machine implementation with Prometheus metrics and transition history.
"""

import asyncio
import inspect
import logging
import time
from collections import deque
from datetime import datetime
from typing import Deque, Hashable, List, Optional

from . import metrics
from .errors import ConfigurationError, InvalidTransition, ReentrantSend
from .models import Hook, MachineConfig, TransitionRecord
from .settings import Settings
from .utils import format_token

logger = logging.getLogger(__name__)


class StateMachine:
    """
    A finite state machine driven by events.

    Features:
    - Static transition table from a MachineConfig
    - Sync or async entry/exit hooks, awaited in order
    - Previous-state tracking and reset to the initial state
    - Prometheus metrics and a bounded transition history

    Only one ``send`` runs at a time per instance. ``reset`` must not be
    called while a ``send`` is in flight.
    """

    def __init__(self,
                 config: MachineConfig,
                 name: str = "fsm",
                 history_size: Optional[int] = None,
                 settings: Optional[Settings] = None):
        """
        Initialize state machine.

        The initial state's on-enter hook is not run.

        Args:
            config: Machine configuration, kept by reference
            name: Name used in logs and metric labels
            history_size: Number of transitions to keep (overrides settings)
            settings: Runtime settings, read from the environment if omitted

        Raises:
            ConfigurationError: if the configuration references undefined states
        """
        config.validate()

        self.settings = settings or Settings.from_env()
        self._name = name
        self._config = config
        self._current: Hashable = config.initial
        self._previous: Optional[Hashable] = None

        if history_size is None:
            history_size = self.settings.history_size
        self._history: Deque[TransitionRecord] = deque(maxlen=history_size)

        self._send_lock = asyncio.Lock()
        self._sending_task: Optional[asyncio.Task] = None
        self._state_entry_time = time.monotonic()

        logger.debug(f"Created state machine {name} in state {format_token(self._current)}")

    @property
    def name(self) -> str:
        return self._name

    @property
    def config(self) -> MachineConfig:
        return self._config

    @property
    def state(self) -> Hashable:
        """Current state"""
        return self._current

    @property
    def current(self) -> Hashable:
        """Current state (alias of ``state``)"""
        return self._current

    @property
    def previous(self) -> Optional[Hashable]:
        """State left by the last transition or reset; None before either"""
        return self._previous

    async def send(self, event: Hashable) -> None:
        """
        Feed an event to the machine.

        Runs the current state's on-exit hook, switches state, then runs the
        destination's on-enter hook. Returns once both hooks have completed.
        Hook errors propagate unchanged: a failing exit hook leaves the state
        as it was, a failing enter hook leaves the machine in the destination.

        A hook must not await ``send`` on its own machine; doing so raises
        ReentrantSend instead of waiting on the in-flight transition.

        Raises:
            InvalidTransition: if the event is not mapped from the current state
            ConfigurationError: if the destination is not a defined state
            ReentrantSend: if called from one of this machine's running hooks
        """
        task = asyncio.current_task()
        if self._sending_task is not None and self._sending_task is task:
            raise ReentrantSend(self._name, event)

        async with self._send_lock:
            self._sending_task = task
            try:
                await self._transition(event)
            finally:
                self._sending_task = None

    async def _transition(self, event: Hashable) -> None:
        source = self._current
        states = self._config.states
        logger.debug(f"{self._name}: attempting {format_token(event)} from {format_token(source)}")

        definition = states[source]
        target = definition.target_for(event)

        if target is None:
            logger.debug(f"{self._name}: no transition for {format_token(event)} "
                         f"from {format_token(source)}")
            if self.settings.metrics_enabled:
                # Events outside the configuration share one label value
                known = event in self._config.events
                metrics.REJECTED_EVENTS.labels(
                    machine=self._name,
                    state=format_token(source),
                    event=format_token(event) if known else metrics.UNKNOWN_EVENT
                ).inc()
            raise InvalidTransition(source, event)

        if target not in states:
            raise ConfigurationError(
                f'Transition "{format_token(source)}" --{format_token(event)}--> '
                f'"{format_token(target)}" targets an undefined state'
            )

        started = time.monotonic()

        # Exit current state
        await _run_hook(definition.on_exit)
        self._record_state_duration(source)

        self._previous = source
        self._current = target
        self._state_entry_time = time.monotonic()

        # Enter new state
        await _run_hook(states[target].on_enter)

        self._record_transition(source, target, event, started)
        logger.info(f"{self._name}: transitioned {format_token(source)} -> "
                    f"{format_token(target)} via {format_token(event)}")

    def is_in_state(self, state: Hashable) -> bool:
        """Check whether the machine is currently in ``state``"""
        return self._current == state

    def available_events(self) -> List[Hashable]:
        """
        Events with a mapped destination from the current state.

        Ordered as declared in the configuration.
        """
        return list(self._config.states[self._current].on or {})

    def can_send(self, event: Hashable) -> bool:
        """Check whether ``event`` would be accepted from the current state"""
        return self._config.states[self._current].target_for(event) is not None

    def reset(self) -> None:
        """
        Jump straight back to the initial state.

        ``previous`` becomes the state being left. No hooks are run.
        """
        left = self._current
        self._record_state_duration(left)

        self._previous = left
        self._current = self._config.initial
        self._state_entry_time = time.monotonic()

        if self.settings.metrics_enabled:
            metrics.RESETS.labels(machine=self._name).inc()
        logger.info(f"{self._name}: reset {format_token(left)} -> "
                    f"{format_token(self._current)}")

    def _record_state_duration(self, state: Hashable) -> None:
        if not self.settings.metrics_enabled:
            return
        duration = time.monotonic() - self._state_entry_time
        metrics.STATE_DURATION.labels(
            machine=self._name,
            state=format_token(state)
        ).observe(duration)

    def _record_transition(self,
                           source: Hashable,
                           target: Hashable,
                           event: Hashable,
                           started: float) -> None:
        """Record transition in metrics and history"""
        latency = time.monotonic() - started

        if self.settings.metrics_enabled:
            metrics.TRANSITIONS.labels(
                machine=self._name,
                from_state=format_token(source),
                to_state=format_token(target),
                event=format_token(event)
            ).inc()
            metrics.TRANSITION_LATENCY.labels(
                machine=self._name,
                from_state=format_token(source),
                to_state=format_token(target)
            ).observe(latency)

        self._history.append(TransitionRecord(
            from_state=source,
            to_state=target,
            event=event,
            timestamp=datetime.now(),
            latency_ms=latency * 1000
        ))

    # Public API for introspection
    def get_history(self, limit: int = 10) -> List[TransitionRecord]:
        """Get the most recent transitions, oldest first"""
        if limit <= 0:
            return []
        return list(self._history)[-limit:]

    def visualize(self) -> str:
        """Generate state diagram in PlantUML format"""
        lines = ["@startuml", f"title {self._name} State Machine", ""]

        # Add states
        for state in self._config.states:
            state_name = format_token(state)
            if state == self._current:
                lines.append(f"state {state_name} #yellow : Current State")
            else:
                lines.append(f"state {state_name}")

        lines.append("")
        lines.append(f"[*] --> {format_token(self._config.initial)}")

        # Add transitions
        for state, definition in self._config.states.items():
            for event, target in (definition.on or {}).items():
                lines.append(f"{format_token(state)} --> {format_token(target)} : "
                             f"{format_token(event)}")

        lines.append("@enduml")
        return "\n".join(lines)

    def __repr__(self) -> str:
        return (f"StateMachine(name={self._name!r}, state={self._current!r}, "
                f"previous={self._previous!r})")


async def _run_hook(hook: Optional[Hook]) -> None:
    """Invoke a hook with no arguments, awaiting it if it returns an awaitable"""
    if hook is None:
        return
    result = hook()
    if inspect.isawaitable(result):
        await result
