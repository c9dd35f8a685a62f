"""Colorized per-cycle status block on the console."""

import sys
from datetime import datetime
from typing import Callable, Mapping, Optional, TextIO

# ANSI color codes
_RESET = "\033[0m"
_GREEN = "\033[32m"
_RED = "\033[31m"

# Anything other than Open renders red
_VERDICT_COLORS = {"Open": _GREEN, "Closed": _RED}

SEPARATOR = "----"


class ConsoleReporter:
    """Prints `Port <name>: <verdict>` per entry, then the clock and a separator."""

    def __init__(
        self,
        stream: Optional[TextIO] = None,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self._stream = stream
        self._clock = clock

    def render(self, snapshot: Mapping[str, str]) -> str:
        lines = []
        for name, verdict in snapshot.items():
            color = _VERDICT_COLORS.get(verdict, _RED)
            lines.append(f"Port {name}: {color}{verdict}{_RESET}")
        lines.append(f"Clock: {self._clock().strftime('%H:%M:%S')}")
        lines.append(SEPARATOR)
        return "\n".join(lines) + "\n"

    def report(self, snapshot: Mapping[str, str]) -> None:
        # Resolve stdout per call so redirected/captured stdout is honored
        stream = self._stream or sys.stdout
        stream.write(self.render(snapshot))
        stream.flush()

    __call__ = report
