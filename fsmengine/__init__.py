"""
fsmengine
~~~~~~~~~

A small, embeddable finite-state-machine engine with undo/redo history.

Quick start:
    from fsmengine import FSM, build_configuration
    from fsmengine import FSMError, NoTransitionError, UnknownStateError
"""

from fsmengine.machine import FSM
from fsmengine.errors import (
    ConfigError,
    FSMError,
    MalformedStateError,
    NoTransitionError,
    UnknownStateError,
)
from fsmengine.types import (
    Configuration,
    HistoryEntry,
    HistoryMarker,
    StateDefinition,
)
from fsmengine.helpers import (
    build_configuration,
    create_state_definition,
    log_history_navigation,
)

__all__ = [
    "FSM",
    "Configuration",
    "StateDefinition",
    "HistoryEntry",
    "HistoryMarker",
    "FSMError",
    "ConfigError",
    "MalformedStateError",
    "UnknownStateError",
    "NoTransitionError",
    "build_configuration",
    "create_state_definition",
    "log_history_navigation",
]
