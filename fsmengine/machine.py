"""
FSM — an embeddable finite-state-machine engine with undo/redo.

Features:
- Declarative configuration: a state map with per-state event transition tables
- Direct transitions by target state name (``change_state``)
- Event-driven transitions resolved from the active state's table (``trigger``)
- Linear transition history with undo/redo and redo-branch truncation
- History-transparent ``reset`` back to the initial state

Usage:
    from fsmengine import FSM

    fsm = FSM({
        "initial": "idle",
        "states": {
            "idle":    {"transitions": {"start": "running"}},
            "running": {"transitions": {"stop": "idle"}},
        },
    })
    fsm.trigger("start")
    fsm.get_state()   # "running"
    fsm.undo()        # True
    fsm.get_state()   # "idle"
"""

import logging
from typing import Any, Dict, List, Mapping, Optional, Union

from fsmengine.errors import ConfigError, NoTransitionError, UnknownStateError
from fsmengine.helpers import log_history_navigation
from fsmengine.types import (
    Configuration,
    EventName,
    HistoryEntry,
    HistoryMarker,
    StateName,
)

logger = logging.getLogger(__name__)

HistorySlot = Union[HistoryMarker, HistoryEntry]


class FSM:
    """
    Finite state machine driven by a declarative configuration.

    The engine copies the configuration into its own records and never
    mutates the object it was given.

    History layout: empty until the first transition. From then on slot 0
    holds ``HistoryMarker.INITIAL`` and each later slot one committed
    transition. ``cursor`` indexes the slot matching the active state.
    ``reset()`` does not touch the history, so undo/redo after a reset
    navigate as if the reset had not happened.

    Args:
        config: A Configuration, or a mapping in the format accepted by
                ``Configuration.from_dict``.
        strict: If True, check up front that the initial state and every
                transition target exist. Otherwise bad targets are only
                reported when a transition to them is attempted.

    Raises:
        ConfigError: If config is None or invalid.
        MalformedStateError: If a state has no transition table.

    Not thread-safe: guard a shared instance with an external lock.
    """

    def __init__(self, config: Union[Configuration, Mapping[str, Any], None], strict: bool = False):
        self._config: Configuration = self._load_config(config)
        if strict:
            self._config.validate()

        self._states = self._config.states
        self._active: StateName = self._config.initial
        self._history: List[HistorySlot] = []
        self._cursor: int = 0

        logger.info(
            f"{self.__class__.__name__} initialised — "
            f"{len(self._states)} states, "
            f"{self._config.transition_count} transitions, "
            f"starting at {self._active}"
        )

    @staticmethod
    def _load_config(config: Union[Configuration, Mapping[str, Any], None]) -> Configuration:
        """Return an engine-owned copy of the configuration."""
        if config is None:
            raise ConfigError("Configuration is required")
        if isinstance(config, Configuration):
            return Configuration(initial=config.initial, states=config.states)
        if isinstance(config, Mapping):
            return Configuration.from_dict(config)
        raise ConfigError(
            f"Configuration must be a Configuration or mapping, got {type(config).__name__}"
        )

    # ------------------------------------------------------------------
    # State access
    # ------------------------------------------------------------------

    def get_state(self) -> StateName:
        """Return the active state."""
        return self._active

    def get_initial_state(self) -> StateName:
        return self._config.initial

    def get_states(self, event: Optional[EventName] = None) -> List[StateName]:
        """
        Return state names in configuration order.

        Args:
            event: If given, only return states that have a transition
                   for this event.
        """
        if event is None:
            return self._config.state_names()
        return [name for name, definition in self._states.items() if definition.handles(event)]

    def get_transitions(self, state: Optional[StateName] = None) -> Dict[EventName, StateName]:
        """
        Return a copy of a state's transition table.

        Args:
            state: State to inspect (default: the active state).

        Raises:
            UnknownStateError: If the state is not defined.
        """
        name = self._active if state is None else state
        if name not in self._states:
            raise UnknownStateError(name)
        return dict(self._states[name].transitions)

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------

    def change_state(self, state: StateName) -> None:
        """
        Move directly to a state and record it in the history.

        Any redo branch beyond the current cursor is discarded.

        Raises:
            UnknownStateError: If the state is not defined. Nothing changes.
        """
        self._commit(state)

    def trigger(self, event: EventName) -> None:
        """
        Apply an event to the active state and follow its transition.

        Raises:
            NoTransitionError: If the active state is not defined or has no
                               transition for the event. Nothing changes.
            UnknownStateError: If the transition's target is not defined.
        """
        definition = self._states.get(self._active)
        target = definition.target(event) if definition is not None else None
        if target is None:
            logger.warning(f"Trigger {event!r} rejected — no transition from {self._active}")
            raise NoTransitionError(self._active, event)
        self._commit(target, event)

    def _commit(self, state: StateName, event: Optional[EventName] = None) -> None:
        """Single mutation point for recording a new state."""
        if state not in self._states:
            logger.warning(f"Transition to unknown state {state!r} rejected")
            raise UnknownStateError(state)

        previous = self._active
        self._active = state

        if not self._history:
            self._history.append(HistoryMarker.INITIAL)
        del self._history[self._cursor + 1:]
        self._history.append(HistoryEntry(state=state, event=event))
        self._cursor = len(self._history) - 1

        via = f" on {event}" if event is not None else ""
        logger.debug(f"Transition: {previous} → {state}{via}")

    def reset(self) -> None:
        """
        Return to the initial state without touching the history.

        A following undo()/redo() moves relative to the cursor as it was
        before the reset.
        """
        self._active = self._config.initial
        logger.info(f"Reset to {self._active}")

    # ------------------------------------------------------------------
    # History
    # ------------------------------------------------------------------

    @property
    def cursor(self) -> int:
        """Index of the history slot matching the active state."""
        return self._cursor

    def can_undo(self) -> bool:
        return self._cursor - 1 >= 0

    def can_redo(self) -> bool:
        return self._cursor + 1 <= len(self._history) - 1

    @log_history_navigation
    def undo(self) -> bool:
        """
        Go back to the previous state in the history.

        Returns:
            True if the machine moved, False if there is nothing to undo.
        """
        if not self.can_undo():
            return False
        self._cursor -= 1
        self._active = self._resolve(self._history[self._cursor])
        return True

    @log_history_navigation
    def redo(self) -> bool:
        """
        Go forward to the next state in the history.

        Returns:
            True if the machine moved, False if there is nothing to redo.
        """
        if not self.can_redo():
            return False
        self._cursor += 1
        self._active = self._resolve(self._history[self._cursor])
        return True

    def _resolve(self, slot: HistorySlot) -> StateName:
        if slot is HistoryMarker.INITIAL:
            return self._config.initial
        return slot.state

    def clear_history(self) -> None:
        """Forget all recorded transitions. The active state is unchanged."""
        self._cursor = 0
        self._history = []
        logger.info("History cleared")

    def get_history(self, last_n: Optional[int] = None) -> List[HistoryEntry]:
        """
        Return committed transitions in chronological order.

        Entries on the redo branch (beyond the cursor) are included.

        Args:
            last_n: If provided, return only the last N entries.
        """
        history = [slot for slot in self._history if isinstance(slot, HistoryEntry)]
        return history[-last_n:] if last_n is not None else history
