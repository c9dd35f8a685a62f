"""TCP reachability probe for a single local port."""

import enum
import logging
import socket

logger = logging.getLogger(__name__)

PROBE_HOST = "localhost"
DEFAULT_TIMEOUT_SEC = 1.0


class Verdict(str, enum.Enum):
    """Binary reachability result stored per port."""

    OPEN = "Open"
    CLOSED = "Closed"


def probe_port(port: int, timeout: float = DEFAULT_TIMEOUT_SEC) -> Verdict:
    """One connect attempt to localhost:port. OPEN on connect, CLOSED on any failure.

    The connection is closed immediately; nothing is sent or read.
    """
    try:
        with socket.create_connection((PROBE_HOST, port), timeout=timeout):
            return Verdict.OPEN
    except OSError as e:
        logger.debug("probe %s:%s failed: %s", PROBE_HOST, port, e)
        return Verdict.CLOSED
