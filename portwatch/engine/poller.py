"""Background polling loop: probe every target under one write lock, report, sleep, repeat."""

import logging
import threading
import time
from typing import Callable, Dict, Iterable, Mapping, Optional, Tuple

from portwatch.config.settings import PortTarget
from portwatch.console.reporter import ConsoleReporter
from portwatch.core.logging_utils import log_probe_cycle, log_verdict_change
from portwatch.engine.prober import DEFAULT_TIMEOUT_SEC, Verdict, probe_port
from portwatch.engine.state_machine import PollerState, PollerStateMachine
from portwatch.engine.store import StatusStore

logger = logging.getLogger(__name__)

DEFAULT_INTERVAL_SEC = 5.0

Prober = Callable[[int, float], Verdict]
Reporter = Callable[[Mapping[str, str]], None]


class PortPoller:
    """Single writer of StatusStore. Runs on its own thread until stop() is called."""

    def __init__(
        self,
        store: StatusStore,
        targets: Iterable[PortTarget],
        prober: Prober = probe_port,
        reporter: Optional[Reporter] = None,
        interval_sec: float = DEFAULT_INTERVAL_SEC,
        timeout_sec: float = DEFAULT_TIMEOUT_SEC,
    ):
        self._store = store
        self._targets: Tuple[PortTarget, ...] = tuple(targets)
        self._prober = prober
        self._reporter = reporter if reporter is not None else ConsoleReporter()
        self._interval = interval_sec
        self._timeout = timeout_sec

        self._stop_event = threading.Event()
        self._thread: Optional[threading.Thread] = None
        self._fsm = PollerStateMachine()
        self._cycles = 0
        # Keyed by target, not name: ports sharing a display name must not compare against each other
        self._last_verdicts: Dict[PortTarget, str] = {}

    @property
    def state(self) -> PollerState:
        return self._fsm.current

    @property
    def cycles(self) -> int:
        """Number of completed cycles."""
        return self._cycles

    @property
    def stop_event(self) -> threading.Event:
        return self._stop_event

    def _probe(self, target: PortTarget) -> Verdict:
        try:
            return Verdict(self._prober(target.port, self._timeout))
        except Exception as e:
            logger.warning("Probe of %s (%s) raised %r; recording Closed", target.name, target.port, e)
            return Verdict.CLOSED

    def run_cycle(self) -> Dict[str, str]:
        """Probe all targets under one write lock, then report. Returns the reported snapshot."""
        self._fsm.transition(PollerState.PROBING)
        started = time.monotonic()
        open_count = 0
        with self._store.write_cycle() as writer:
            for target in self._targets:
                verdict = self._probe(target)
                if verdict is Verdict.OPEN:
                    open_count += 1
                writer.write(target.name, verdict)
                log_verdict_change(target.name, target.port, self._last_verdicts.get(target), verdict.value)
                self._last_verdicts[target] = verdict.value
        self._cycles += 1
        log_probe_cycle(
            cycle=self._cycles,
            open_count=open_count,
            closed_count=len(self._targets) - open_count,
            duration_ms=(time.monotonic() - started) * 1000.0,
        )

        self._fsm.transition(PollerState.REPORTING)
        snapshot = self._store.read_all()
        try:
            self._reporter(snapshot)
        except Exception:
            logger.exception("Console report failed (cycle %d)", self._cycles)
        self._fsm.transition(PollerState.SLEEPING)
        return snapshot

    def run(self) -> None:
        """Loop until the stop event is set. The first cycle starts immediately."""
        logger.info(
            "Poller started: %d ports, every %.1fs (timeout %.1fs)",
            len(self._targets),
            self._interval,
            self._timeout,
        )
        try:
            while not self._stop_event.is_set():
                self.run_cycle()
                if self._stop_event.wait(self._interval):
                    break
        finally:
            self._fsm.transition(PollerState.STOPPED)
            logger.info("Poller stopped after %d cycles", self._cycles)

    def start(self) -> threading.Thread:
        """Run the loop on a daemon thread and return its handle."""
        if self._thread is not None:
            raise RuntimeError("poller already started")
        self._thread = threading.Thread(target=self.run, name="port-poller", daemon=True)
        self._thread.start()
        return self._thread

    def stop(self, timeout: Optional[float] = None) -> bool:
        """Signal the loop to exit and wait up to timeout. True if the thread has ended."""
        self._stop_event.set()
        if self._thread is None:
            return True
        self._thread.join(timeout)
        return not self._thread.is_alive()
