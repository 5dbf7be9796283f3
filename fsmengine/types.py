"""
FSM data types and structures.

Defines the core types used by the engine:
- StateDefinition: A named state and its outgoing transition table
- Configuration: The full state map plus the initial state
- HistoryMarker: Sentinel values stored in the transition history
- HistoryEntry: One committed transition in the history
"""

import time
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional

from fsmengine.errors import ConfigError, MalformedStateError

StateName = str
EventName = str
Transitions = Mapping[EventName, StateName]


@dataclass(frozen=True)
class StateDefinition:
    """
    A single state and the events that lead out of it.

    The transition table is copied into a read-only mapping on creation,
    so later changes to the dict the caller passed in have no effect.

    Args:
        name: The state's key in the configuration's state mapping.
        transitions: Mapping of event name → target state name.

    Raises:
        MalformedStateError: If transitions is not a mapping.
    """

    name: StateName
    transitions: Transitions = field(default_factory=dict)

    def __post_init__(self):
        if not isinstance(self.transitions, Mapping):
            raise MalformedStateError(
                self.name,
                f"State {self.name!r} transitions must be a mapping, "
                f"got {type(self.transitions).__name__}",
            )
        object.__setattr__(self, "transitions", MappingProxyType(dict(self.transitions)))

    def target(self, event: EventName) -> Optional[StateName]:
        """Return the target state for an event, or None if there is none."""
        return self.transitions.get(event)

    def handles(self, event: EventName) -> bool:
        """True if this state has a transition for the event."""
        return event in self.transitions


@dataclass
class Configuration:
    """
    Declarative description of a state machine.

    Args:
        initial: Name of the state the machine starts in.
        states: Mapping of state name → StateDefinition. Insertion order is
                preserved and used by ``FSM.get_states()``.

    Raises:
        ConfigError: If states is not a mapping, or a key does not match
                     the name of its definition.
        MalformedStateError: If a value is not a StateDefinition.
    """

    initial: StateName
    states: Dict[StateName, StateDefinition] = field(default_factory=dict)

    def __post_init__(self):
        if not isinstance(self.states, Mapping):
            raise ConfigError(
                f"states must be a mapping, got {type(self.states).__name__}"
            )
        self.states = dict(self.states)
        for name, definition in self.states.items():
            if not isinstance(definition, StateDefinition):
                raise MalformedStateError(
                    name,
                    f"State {name!r} must be a StateDefinition, "
                    f"got {type(definition).__name__}",
                )
            if definition.name != name:
                raise ConfigError(
                    f"State key {name!r} does not match definition name {definition.name!r}"
                )

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Configuration":
        """
        Build a Configuration from the plain mapping format.

        Expected shape::

            {
                "initial": "idle",
                "states": {
                    "idle":    {"transitions": {"start": "running"}},
                    "running": {"transitions": {"stop": "idle"}},
                },
            }

        Every state must carry a ``transitions`` mapping, even if empty.

        Raises:
            ConfigError: If data is not a mapping or lacks a required key.
            MalformedStateError: If a state has no transition table.
        """
        if not isinstance(data, Mapping):
            raise ConfigError(
                f"Configuration must be a mapping, got {type(data).__name__}"
            )

        missing = [key for key in ("initial", "states") if key not in data]
        if missing:
            raise ConfigError(f"Configuration missing required field(s): {', '.join(missing)}")

        states = data["states"]
        if not isinstance(states, Mapping):
            raise ConfigError(f"states must be a mapping, got {type(states).__name__}")

        definitions = {}
        for name, definition in states.items():
            if isinstance(definition, StateDefinition):
                definitions[name] = definition
                continue
            if not isinstance(definition, Mapping) or "transitions" not in definition:
                raise MalformedStateError(name)
            definitions[name] = StateDefinition(name=name, transitions=definition["transitions"])

        return cls(initial=data["initial"], states=definitions)

    def validate(self) -> None:
        """
        Check that the initial state and every transition target exist.

        Not run by default: an engine built without ``strict=True`` only
        notices a bad target when a transition to it is attempted.

        Raises:
            ConfigError: On the first missing state found.
        """
        if self.initial not in self.states:
            raise ConfigError(f"Initial state {self.initial!r} not found in states")

        for definition in self.states.values():
            for event, target in definition.transitions.items():
                if target not in self.states:
                    raise ConfigError(
                        f"Transition {definition.name!r} --{event}--> {target!r}: "
                        f"target state not found in states"
                    )

    def state_names(self) -> list:
        """Return all state names in insertion order."""
        return list(self.states)

    @property
    def transition_count(self) -> int:
        return sum(len(d.transitions) for d in self.states.values())

    def to_dict(self) -> dict:
        """Serialise to the plain mapping format accepted by ``from_dict``."""
        return {
            "initial": self.initial,
            "states": {
                name: {"transitions": dict(definition.transitions)}
                for name, definition in self.states.items()
            },
        }


class HistoryMarker(Enum):
    """
    Sentinel values stored in the transition history.

    INITIAL occupies slot 0 once the first transition is committed and
    stands for "the configured initial state" when undo reaches it.
    """

    INITIAL = "initial"


@dataclass
class HistoryEntry:
    """
    Records one committed transition.

    Args:
        state: The state that became active.
        event: The event that caused it, or None for a direct change_state().
        timestamp: Epoch time of the transition (defaults to now).
    """

    state: StateName
    event: Optional[EventName] = None
    timestamp: float = field(default_factory=time.time)

    @property
    def triggered(self) -> bool:
        """True if the transition came from trigger() rather than change_state()."""
        return self.event is not None

    def to_dict(self) -> dict:
        """Serialise to a plain dictionary."""
        return {
            "state": self.state,
            "event": self.event,
            "timestamp": self.timestamp,
        }
