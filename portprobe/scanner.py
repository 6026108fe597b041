from __future__ import annotations

import logging
import threading
import time
from concurrent.futures import ThreadPoolExecutor
from typing import Callable, Iterator, Optional, Sequence

from .config import ScanConfig
from .errors import EmptyPortSet, NoTargets
from .models import Address, ScanReport, ScanResult, ScanTask
from .prober import probe
from .results import ResultCollection

log = logging.getLogger(__name__)

Prober = Callable[[Address, int, int], bool]


class WaitGroup:
    """Counting barrier: add() per task, done() when it finishes, wait() for zero."""

    def __init__(self):
        self._cond = threading.Condition()
        self._count = 0

    def add(self, n: int = 1) -> None:
        with self._cond:
            if self._count + n < 0:
                raise ValueError("WaitGroup counter cannot go negative")
            self._count += n
            if self._count == 0:
                self._cond.notify_all()

    def done(self) -> None:
        self.add(-1)

    def wait(self, timeout: Optional[float] = None) -> bool:
        with self._cond:
            return self._cond.wait_for(lambda: self._count == 0, timeout=timeout)

    @property
    def pending(self) -> int:
        with self._cond:
            return self._count


class _Progress:
    def __init__(self, total: int, every: int):
        self.total = total
        self.every = every
        self.scanned = 0
        self.open_count = 0
        self.started = time.perf_counter()
        self._lock = threading.Lock()

    def record(self, is_open: bool) -> None:
        if self.every <= 0:
            return
        with self._lock:
            self.scanned += 1
            if is_open:
                self.open_count += 1
            if self.scanned % self.every != 0 and self.scanned != self.total:
                return
            scanned, open_count = self.scanned, self.open_count
        elapsed = time.perf_counter() - self.started
        rate = scanned / elapsed if elapsed > 0 else 0.0
        log.info("Scanned %d/%d | open=%d | %.0f scans/s", scanned, self.total, open_count, rate)


def iter_tasks(addresses: Sequence[Address], ports: Sequence[int]) -> Iterator[ScanTask]:
    for a in addresses:
        for p in ports:
            yield ScanTask(address=a, port=p)


def _run_task(
    task: ScanTask,
    prober: Prober,
    timeout_ms: int,
    collection: ResultCollection,
    progress: _Progress,
    slots: threading.BoundedSemaphore,
    wg: WaitGroup,
) -> None:
    try:
        try:
            is_open = bool(prober(task.address, task.port, timeout_ms))
        except Exception as e:
            log.debug("probe %s:%d raised %r, counting as closed", task.address, task.port, e)
            is_open = False

        if is_open:
            collection.add(ScanResult(address=task.address, port=task.port))
        progress.record(is_open)
    finally:
        slots.release()
        wg.done()


def scan(
    addresses: Sequence[Address],
    ports: Sequence[int],
    config: Optional[ScanConfig] = None,
    prober: Prober = probe,
) -> ScanReport:
    """
    Probe every (address, port) pair on a bounded thread pool and block until
    all of them have finished. Submission blocks while max_pending tasks are
    in flight, so huge scans never queue millions of futures.
    """
    if not addresses:
        raise NoTargets("No valid targets found")
    if not ports:
        raise EmptyPortSet("No ports to scan")

    config = config or ScanConfig()
    workers = config.pool_size()
    total = len(addresses) * len(ports)
    max_pending = max(workers * 4, 100)

    collection = ResultCollection()
    progress = _Progress(total, config.progress_every)
    slots = threading.BoundedSemaphore(max_pending)
    wg = WaitGroup()

    log.info("Starting scan: %d tasks on %d workers (timeout=%dms)", total, workers, config.timeout_ms)
    start = time.perf_counter()

    with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="probe") as pool:
        for task in iter_tasks(addresses, ports):
            slots.acquire()
            wg.add()
            try:
                pool.submit(_run_task, task, prober, config.timeout_ms, collection, progress, slots, wg)
            except BaseException:
                slots.release()
                wg.done()
                raise
        wg.wait()

    results = collection.finalize()
    elapsed = time.perf_counter() - start
    if collection.dropped:
        log.warning("%d open ports could not be recorded", collection.dropped)
    log.info("Scan finished in %.2fs: %d open of %d probed", elapsed, len(results), total)

    return ScanReport(
        results=results,
        total=total,
        dropped=collection.dropped,
        workers=workers,
        elapsed_s=round(elapsed, 4),
    )
