"""Colored console logging and structured key=value event lines."""

import logging
import sys
from typing import Any, Optional

logger = logging.getLogger(__name__)

# ANSI color codes
_RESET = "\033[0m"
_BOLD = "\033[1m"
_GRAY = "\033[90m"
_YELLOW = "\033[33m"
_RED = "\033[31m"
_CYAN = "\033[36m"

_LEVEL_COLORS = {
    logging.DEBUG: _GRAY,
    logging.INFO: _CYAN,
    logging.WARNING: _YELLOW,
    logging.ERROR: _RED + _BOLD,
    logging.CRITICAL: _RED + _BOLD,
}

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
LOG_DATEFMT = "%Y-%m-%d %H:%M:%S"


class ColoredFormatter(logging.Formatter):
    """Formatter that adds colors per log level."""

    def format(self, record: logging.LogRecord) -> str:
        color = _LEVEL_COLORS.get(record.levelno, _RESET)
        # Copy so other handlers sharing the record see the plain level name
        record = logging.makeLogRecord(record.__dict__)
        record.levelname = f"{color}[{record.levelname}]{_RESET}"
        return super().format(record)


def setup_logging(debug: bool = False) -> None:
    """Configure colorful logging on stdout; DEBUG when debug=True, else INFO."""
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(ColoredFormatter(fmt=LOG_FORMAT, datefmt=LOG_DATEFMT))
    logging.root.handlers.clear()
    logging.root.addHandler(handler)
    logging.root.setLevel(logging.DEBUG if debug else logging.INFO)


def format_event(event: str, fields: dict) -> str:
    """Render `event k=v k=v` with keys sorted."""
    return event + " " + " ".join(f"{k}={v}" for k, v in sorted(fields.items()))


def log_probe_cycle(
    cycle: int,
    open_count: int,
    closed_count: int,
    duration_ms: float,
    extra: Optional[dict] = None,
    level: int = logging.DEBUG,
) -> None:
    """Log one completed polling cycle as structured key-value."""
    fields: dict[str, Any] = dict(extra or {})
    fields["cycle"] = cycle
    fields["open"] = open_count
    fields["closed"] = closed_count
    fields["duration_ms"] = round(duration_ms, 1)
    logger.log(level, format_event("probe_cycle", fields))


def log_verdict_change(name: str, port: int, previous: Optional[str], current: str) -> None:
    """Log a port whose verdict differs from the previous cycle."""
    if previous is None or previous == current:
        return
    logger.info("Port %s (%s): %s -> %s", name, port, previous, current)
