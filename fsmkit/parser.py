"""
Parser for machine configurations written as dictionaries or YAML files.

Expected layout::

    initial: idle
    states:
      idle:
        on:
          START: running
        on_exit: stop_timer
      running:
        on:
          STOP: idle
        on_enter: start_timer

Hooks are either callables (dict input) or names resolved through the
``hooks`` mapping passed to the parser.
"""

import logging
import re
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Union

import yaml

from .errors import ConfigurationError
from .models import Hook, MachineConfig, StateDefinition


logger = logging.getLogger(__name__)

HOOK_KEYS = ('on_enter', 'on_exit')

BOOL_TAG = 'tag:yaml.org,2002:bool'


class ConfigLoader(yaml.SafeLoader):
    """
    SafeLoader that only reads ``true``/``false`` as booleans.

    Plain YAML 1.1 turns ``on``, ``ON``, ``off``, ``yes`` and ``no`` into
    booleans, which are common state and event names.
    """
    yaml_implicit_resolvers = {
        first: [(tag, regexp) for tag, regexp in resolvers if tag != BOOL_TAG]
        for first, resolvers in yaml.SafeLoader.yaml_implicit_resolvers.items()
    }


ConfigLoader.add_implicit_resolver(
    BOOL_TAG,
    re.compile(r'^(?:true|True|TRUE|false|False|FALSE)$'),
    list('tTfF')
)


class ConfigParser:
    """Builds MachineConfig objects"""

    @staticmethod
    def from_file(filepath: Union[str, Path],
                  hooks: Optional[Mapping[str, Hook]] = None) -> MachineConfig:
        """Load a machine configuration from a YAML file"""
        filepath = Path(filepath)

        with open(filepath, 'r') as f:
            try:
                data = yaml.load(f, Loader=ConfigLoader)
            except yaml.YAMLError as e:
                raise ConfigurationError(f"Invalid YAML in {filepath}: {e}") from e

        logger.debug(f"Loaded machine configuration from {filepath}")
        return ConfigParser.from_dict(data, hooks)

    @staticmethod
    def from_dict(data: Any,
                  hooks: Optional[Mapping[str, Hook]] = None) -> MachineConfig:
        """
        Parse a machine configuration from a dictionary.

        Raises:
            ConfigurationError: on missing keys, bad types, unknown hook
                names or references to undefined states
        """
        if not isinstance(data, Mapping):
            raise ConfigurationError("Machine configuration must be a mapping")
        if 'initial' not in data:
            raise ConfigurationError("Machine configuration is missing 'initial'")

        states_data = data.get('states')
        if not isinstance(states_data, Mapping) or not states_data:
            raise ConfigurationError("Machine configuration needs a non-empty 'states' mapping")

        states: Dict[Any, StateDefinition] = {}
        for state, state_data in states_data.items():
            states[state] = ConfigParser._parse_state(
                state, state_data, hooks if hooks is not None else {}
            )

        config = MachineConfig(initial=data['initial'], states=states)
        config.validate()
        return config

    @staticmethod
    def _parse_state(state: Any,
                     data: Any,
                     hooks: Mapping[str, Hook]) -> StateDefinition:
        """Parse a single state definition"""
        # A bare ``state:`` in YAML is a state with no transitions
        if data is None:
            return StateDefinition()
        if isinstance(data, StateDefinition):
            return data
        if not isinstance(data, Mapping):
            raise ConfigurationError(f'State "{state}" must be a mapping')

        unknown = set(data) - {'on', *HOOK_KEYS}
        if unknown:
            raise ConfigurationError(
                f'State "{state}" has unknown keys: {", ".join(sorted(map(str, unknown)))}'
            )

        transitions = data.get('on') or {}
        if not isinstance(transitions, Mapping):
            raise ConfigurationError(f'Transitions of state "{state}" must be a mapping')

        return StateDefinition(
            on=dict(transitions),
            on_enter=ConfigParser._resolve_hook(state, data.get('on_enter'), hooks),
            on_exit=ConfigParser._resolve_hook(state, data.get('on_exit'), hooks),
        )

    @staticmethod
    def _resolve_hook(state: Any,
                      hook: Any,
                      hooks: Mapping[str, Hook]) -> Optional[Hook]:
        """Turn a hook entry into a callable"""
        if hook is None or callable(hook):
            return hook

        if isinstance(hook, str):
            if hook not in hooks:
                raise ConfigurationError(f'State "{state}" references unknown hook "{hook}"')
            return hooks[hook]

        raise ConfigurationError(f'Hook of state "{state}" must be callable or a hook name')
