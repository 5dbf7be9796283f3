"""
Helper utilities for building state machines.

Provides convenience functions and decorators that reduce boilerplate
when defining states and configurations.
"""

import logging
from functools import wraps
from typing import Dict, Optional

from fsmengine.types import (
    Configuration,
    StateDefinition,
    StateName,
    Transitions,
)

logger = logging.getLogger(__name__)


def create_state_definition(
    name: StateName,
    transitions: Optional[Transitions] = None,
) -> StateDefinition:
    """
    Create a StateDefinition, defaulting to an empty transition table.

    Args:
        name: The state's name.
        transitions: Mapping of event → target state (default: no transitions).

    Returns:
        A StateDefinition instance.

    Example:
        idle = create_state_definition("idle", {"start": "running"})
        done = create_state_definition("done")
    """
    return StateDefinition(name=name, transitions=transitions if transitions is not None else {})


def build_configuration(
    initial: StateName,
    transitions: Dict[StateName, Transitions],
) -> Configuration:
    """
    Build a Configuration from a compact transition map.

    Each state maps straight to its transition table instead of the
    nested ``{"transitions": {...}}`` form used by ``Configuration.from_dict``.

    Args:
        initial: Name of the initial state.
        transitions: Mapping of state → {event: target}. Use an empty dict
                     for states with no outgoing transitions.

    Returns:
        A Configuration with states in the same order as ``transitions``.

    Raises:
        MalformedStateError: If any state maps to something other than a mapping.

    Example:
        config = build_configuration("idle", {
            "idle":    {"start": "running"},
            "running": {"pause": "paused", "stop": "idle"},
            "paused":  {"resume": "running"},
        })
    """
    states = {
        name: StateDefinition(name=name, transitions=table)
        for name, table in transitions.items()
    }
    return Configuration(initial=initial, states=states)


def log_history_navigation(func):
    """
    Decorator that logs the outcome of an undo/redo style method.

    The wrapped method takes no arguments besides ``self`` and returns
    True if it moved through the history. Logs at DEBUG level.

    Usage:
        @log_history_navigation
        def undo(self) -> bool:
            ...
    """

    @wraps(func)
    def wrapper(self) -> bool:
        action = func.__name__.upper()
        before = self.get_state()
        moved = func(self)
        if moved:
            logger.debug(f"{action}: {before} → {self.get_state()} (cursor {self.cursor})")
        else:
            logger.debug(f"{action}: nothing to {func.__name__}")
        return moved

    return wrapper
