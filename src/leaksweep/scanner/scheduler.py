"""Scheduler — a fixed pool of worker threads auditing one commit at a time.

Workers pull CommitTargets from a shared queue, so at most ``concurrency``
diffs are in flight and at most ``concurrency`` tasks are alive, however
long the history is. Each task runs DiffExtractor → Detector →
WhitelistEngine and hands surviving leaks to the Aggregator.
"""

from __future__ import annotations

import logging
import queue
import threading
import time
from typing import Iterable, List, Optional

from leaksweep.findings.aggregator import Aggregator
from leaksweep.findings.models import Leak, Report
from leaksweep.git.adapter import DiffError
from leaksweep.git.extractor import DiffExtractor
from leaksweep.git.models import CommitTarget
from leaksweep.scanner.detector import Detector
from leaksweep.scanner.whitelist import WhitelistEngine

logger = logging.getLogger(__name__)

_STOP = object()


class Scheduler:
    def __init__(
        self,
        extractor: DiffExtractor,
        detector: Detector,
        whitelist: WhitelistEngine,
        *,
        repo_name: str = "",
        concurrency: int = 1,
    ) -> None:
        if concurrency < 1:
            raise ValueError("concurrency must be >= 1")
        self.extractor = extractor
        self.detector = detector
        self.whitelist = whitelist
        self.repo_name = repo_name
        self.concurrency = concurrency
        self._lock = threading.Lock()  # guards the counters and _error
        self._reset()

    def _reset(self) -> None:
        self._work: "queue.Queue[object]" = queue.Queue(maxsize=self.concurrency * 4)
        self._abort = threading.Event()
        self._scanned = 0
        self._failed = 0
        self._error: Optional[BaseException] = None

    # ---- public ----

    def run(self, targets: Iterable[CommitTarget], aggregator: Aggregator) -> Report:
        """Audit every target and return the frozen Report.

        Returns only after every dispatched target has finished. A DiffError
        costs one commit; any other error stops the audit and is re-raised.
        """
        self._reset()
        start = time.perf_counter()
        workers = [
            threading.Thread(
                target=self._worker,
                args=(aggregator,),
                name=f"leaksweep-worker-{i}",
                daemon=True,
            )
            for i in range(self.concurrency)
        ]
        aggregator.start()
        for w in workers:
            w.start()

        dispatched = 0
        try:
            for target in targets:
                if self._abort.is_set():
                    break
                self._work.put(target)
                dispatched += 1
        except BaseException as exc:
            self._fail(exc)
        finally:
            for _ in workers:
                self._work.put(_STOP)
            for w in workers:
                w.join()

        elapsed = (time.perf_counter() - start) * 1000
        logger.debug(
            "dispatched %d commit(s) to %d worker(s) in %.0fms",
            dispatched, self.concurrency, elapsed,
        )
        report = aggregator.close(
            commits_scanned=self._scanned,
            commits_failed=self._failed,
            duration_ms=round(elapsed, 2),
        )
        if self._error is not None:
            raise self._error
        return report

    # ---- workers ----

    def _fail(self, exc: BaseException) -> None:
        with self._lock:
            if self._error is None:
                self._error = exc
        self._abort.set()

    def _worker(self, aggregator: Aggregator) -> None:
        while True:
            target = self._work.get()
            if target is _STOP:
                return
            if self._abort.is_set():
                continue  # drain so the producer never blocks
            try:
                leaks = self.audit_commit(target)
            except DiffError as exc:
                logger.warning(
                    "error retrieving diff for commit %s, skipping it: %s",
                    target.commit.id, exc,
                )
                with self._lock:
                    self._failed += 1
                continue
            except BaseException as exc:
                self._fail(exc)
                continue
            with self._lock:
                self._scanned += 1
            for leak in leaks:
                aggregator.submit(leak)

    def audit_commit(self, target: CommitTarget) -> List[Leak]:
        """Run one commit through extraction, detection and whitelisting."""
        commit = target.commit
        lines = self.extractor.extract(commit)

        leaks: List[Leak] = []
        for added in lines:
            for cand in self.detector.detect(added.text, added.path):
                if self.whitelist.suppresses(
                    cand.offender,
                    commit=commit.id,
                    path=added.path,
                    branch=target.branch,
                    repo=self.repo_name,
                ):
                    continue
                leaks.append(
                    Leak(
                        line=added.text,
                        line_no=added.line_no,
                        commit=commit.id,
                        offender=cand.offender,
                        reason=cand.reason,
                        file=added.path,
                        branch=target.branch,
                        repo=self.repo_name,
                        author=commit.author,
                        email=commit.email,
                        date=commit.date,
                        message=commit.message,
                        tags=cand.tags,
                    )
                )
        return leaks
