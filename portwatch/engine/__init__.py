"""Polling engine: prober, status store, lifecycle state machine, and the loop."""

from .prober import Verdict, probe_port
from .store import StatusStore
from .state_machine import PollerState, PollerStateMachine
from .poller import PortPoller

__all__ = [
    "PollerState",
    "PollerStateMachine",
    "PortPoller",
    "StatusStore",
    "Verdict",
    "probe_port",
]
