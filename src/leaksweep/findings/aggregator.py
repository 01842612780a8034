"""Aggregator — the single consumer that turns submitted leaks into a Report.

Workers hand leaks over through a queue; one consumer thread drains it and
is the only code that appends to the Report, so the Report needs no lock.
"""

from __future__ import annotations

import logging
import queue
import threading
from typing import Callable, Optional

from leaksweep.findings.models import Leak, Report
from leaksweep.findings.redactor import redact as redact_leak

logger = logging.getLogger(__name__)

_DONE = object()


class Aggregator:
    def __init__(
        self,
        repo: str = "",
        *,
        redact: bool = False,
        on_leak: Optional[Callable[[Leak], None]] = None,
    ) -> None:
        self.report = Report(repo=repo)
        self._redact = redact
        self._on_leak = on_leak
        self._inbox: "queue.Queue[object]" = queue.Queue()
        self._consumer: Optional[threading.Thread] = None
        self._callback_error: Optional[BaseException] = None

    def start(self) -> "Aggregator":
        if self._consumer is not None:
            raise RuntimeError("aggregator already started")
        self._consumer = threading.Thread(
            target=self._consume, name="leaksweep-aggregator", daemon=True
        )
        self._consumer.start()
        return self

    def submit(self, leak: Leak) -> None:
        """Hand *leak* to the consumer. Safe to call from any thread."""
        self._inbox.put(leak)

    def _consume(self) -> None:
        while True:
            item = self._inbox.get()
            if item is _DONE:
                return
            leak = redact_leak(item) if self._redact else item
            self.report.append(leak)
            if self._on_leak is not None and self._callback_error is None:
                try:
                    self._on_leak(leak)
                except Exception as exc:
                    self._callback_error = exc

    def close(
        self,
        *,
        commits_scanned: int = 0,
        commits_failed: int = 0,
        duration_ms: float = 0.0,
    ) -> Report:
        """Drain outstanding leaks, freeze and return the Report."""
        if self._consumer is None:
            raise RuntimeError("aggregator was never started")
        self._inbox.put(_DONE)
        self._consumer.join()
        self.report.commits_scanned = commits_scanned
        self.report.commits_failed = commits_failed
        self.report.duration_ms = duration_ms
        self.report.freeze()
        logger.debug("report frozen with %d leak(s)", len(self.report))
        if self._callback_error is not None:
            raise self._callback_error
        return self.report
