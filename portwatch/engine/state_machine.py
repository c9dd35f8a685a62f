"""Poller lifecycle: IDLE -> PROBING -> REPORTING -> SLEEPING -> PROBING ... -> STOPPED."""

import enum
import logging
import threading
from typing import Callable, Optional

logger = logging.getLogger(__name__)


class PollerState(str, enum.Enum):
    """Polling loop states."""

    IDLE = "idle"
    PROBING = "probing"
    REPORTING = "reporting"
    SLEEPING = "sleeping"
    STOPPED = "stopped"


# Valid transitions: from_state -> set of allowed to_states
_TRANSITIONS: dict[PollerState, set[PollerState]] = {
    PollerState.IDLE: {PollerState.PROBING, PollerState.STOPPED},
    PollerState.PROBING: {PollerState.REPORTING},
    PollerState.REPORTING: {PollerState.SLEEPING},
    PollerState.SLEEPING: {PollerState.PROBING, PollerState.STOPPED},
    PollerState.STOPPED: set(),
}


class PollerStateMachine:
    """Tracks the poller's current state; read from other threads for diagnostics."""

    def __init__(
        self,
        on_transition: Optional[Callable[[PollerState, PollerState], None]] = None,
    ):
        self._lock = threading.Lock()
        self._current = PollerState.IDLE
        self._on_transition = on_transition

    @property
    def current(self) -> PollerState:
        with self._lock:
            return self._current

    def can_transition_to(self, to_state: PollerState) -> bool:
        """Check if transition from current state to to_state is valid."""
        with self._lock:
            return to_state in _TRANSITIONS.get(self._current, set())

    def transition(self, to_state: PollerState) -> bool:
        """
        Transition to new state if valid. Returns True on success, False otherwise.
        Calls on_transition(from, to) callback if provided.
        """
        with self._lock:
            allowed = _TRANSITIONS.get(self._current, set())
            if to_state not in allowed:
                logger.warning(
                    "Invalid transition: %s -> %s (allowed: %s)",
                    self._current.value,
                    to_state.value,
                    sorted(s.value for s in allowed),
                )
                return False
            from_state = self._current
            self._current = to_state
        logger.debug("State: %s -> %s", from_state.value, to_state.value)
        if self._on_transition:
            try:
                self._on_transition(from_state, to_state)
            except Exception as e:
                logger.debug("on_transition callback error: %s", e)
        return True

    def is_stopped(self) -> bool:
        return self.current == PollerState.STOPPED
