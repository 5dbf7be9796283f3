"""
Exceptions raised by the FSM engine.

All errors derive from FSMError so callers can catch the whole family
with a single ``except`` clause. Each one also inherits from the closest
built-in exception, so existing ``except ValueError`` / ``except KeyError``
handlers keep working.
"""

from typing import Optional


class FSMError(Exception):
    """Base class for every error raised by fsmengine."""


class ConfigError(FSMError, ValueError):
    """Configuration is missing or structurally invalid."""


class MalformedStateError(ConfigError):
    """A state definition has no usable transition table."""

    def __init__(self, state: str, message: Optional[str] = None):
        self.state = state
        super().__init__(message or f"State {state!r} has no transition table")


class UnknownStateError(FSMError, KeyError):
    """A state name is not present in the configuration."""

    def __init__(self, state: str):
        self.state = state
        super().__init__(state)

    def __str__(self) -> str:
        # KeyError would otherwise repr() the args
        return f"Unknown state {self.state!r}"


class NoTransitionError(FSMError, LookupError):
    """No transition exists for an event from the current state."""

    def __init__(self, state: str, event: str):
        self.state = state
        self.event = event
        super().__init__(f"No transition for event {event!r} from state {state!r}")
