"""
Registry of named state machine instances.
"""

import logging
import threading
from typing import Any, Dict, List, Mapping, Optional, Union

from .core import StateMachine
from .errors import DuplicateName, NotFound
from .models import MachineConfig
from .parser import ConfigParser
from .settings import Settings

logger = logging.getLogger(__name__)


class StateMachineManager:
    """
    Owns a set of uniquely named state machines.

    Machines are created once per name and live as long as the manager;
    there is no way to unregister one. Registration and lookup are guarded
    by a lock so the manager can be shared between threads.
    """

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or Settings.from_env()
        self._lock = threading.Lock()
        self._machines: Dict[str, StateMachine] = {}

    def create(self,
               name: str,
               config: Union[MachineConfig, Mapping[str, Any]]) -> None:
        """
        Build a machine from ``config`` and register it under ``name``.

        Args:
            name: Unique machine name
            config: MachineConfig, or a dict accepted by ConfigParser.from_dict

        Raises:
            DuplicateName: if ``name`` is already registered (checked first)
            ConfigurationError: if the name is free but the configuration is invalid
        """
        with self._lock:
            if name in self._machines:
                raise DuplicateName(name)
            if not isinstance(config, MachineConfig):
                config = ConfigParser.from_dict(config)
            self._machines[name] = StateMachine(config, name=name, settings=self.settings)

        logger.debug(f"Registered state machine {name}")

    def get(self, name: str) -> StateMachine:
        """
        Return the live machine registered under ``name``.

        Raises:
            NotFound: if no machine has that name
        """
        with self._lock:
            machine = self._machines.get(name)
        if machine is None:
            raise NotFound(name)
        return machine

    def reset_all(self) -> None:
        """Reset every registered machine to its initial state"""
        with self._lock:
            machines = list(self._machines.values())

        for machine in machines:
            machine.reset()

        logger.info(f"Reset {len(machines)} state machines")

    def names(self) -> List[str]:
        """List registered machine names in creation order"""
        with self._lock:
            return list(self._machines)

    def __contains__(self, name: object) -> bool:
        with self._lock:
            return name in self._machines

    def __len__(self) -> int:
        with self._lock:
            return len(self._machines)
