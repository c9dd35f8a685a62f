"""Application entry: wire config, store, poller and status server."""

from portwatch.app.monitor import main, run_monitor

__all__ = ["main", "run_monitor"]
