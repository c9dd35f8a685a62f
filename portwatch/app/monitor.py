"""Process entry: load config (fail fast), start the poller thread, serve HTTP until shutdown."""

import logging
import sys
from typing import List, Optional

from portwatch.config.settings import ConfigError, load_config
from portwatch.core.logging_utils import setup_logging
from portwatch.engine.poller import PortPoller
from portwatch.engine.store import StatusStore
from portwatch.status_server.app import create_app, run_server

logger = logging.getLogger(__name__)

# How long shutdown waits for an in-flight cycle before leaving the daemon thread behind
_POLLER_JOIN_TIMEOUT_SEC = 2.0


def run_monitor(config_path: Optional[str] = None) -> int:
    """Run until the HTTP server exits. Returns the process exit code."""
    try:
        config = load_config(config_path)
    except ConfigError as e:
        logger.error("Fatal error in config file: %s", e)
        return 1

    store = StatusStore()
    poller = PortPoller(
        store,
        config.targets,
        interval_sec=config.interval_sec,
        timeout_sec=config.timeout_sec,
    )
    app = create_app(store, config.server)

    poller.start()
    try:
        run_server(app, config.server)
    finally:
        if not poller.stop(timeout=_POLLER_JOIN_TIMEOUT_SEC):
            logger.warning("Poller still running after %.1fs; exiting anyway", _POLLER_JOIN_TIMEOUT_SEC)
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """CLI: portwatch [config_path] [--debug]"""
    argv = sys.argv[1:] if argv is None else argv
    setup_logging(debug="--debug" in argv)
    args = [a for a in argv if not a.startswith("--")]
    config_path = args[0] if args else None
    return run_monitor(config_path)


if __name__ == "__main__":
    sys.exit(main())
