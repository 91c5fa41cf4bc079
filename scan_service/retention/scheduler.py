import shutil
import threading
import time
from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path

from scan_service.logging.logger import Log
from scan_service.storage.roots import StorageRoots


@dataclass
class PoolSweep:
    """Outcome of clearing one pool directory."""

    pool: Path
    removed: int = 0
    failed: list[str] = field(default_factory=list)


@dataclass
class SweepReport:
    pools: list[PoolSweep] = field(default_factory=list)

    @property
    def removed(self) -> int:
        return sum(p.removed for p in self.pools)

    @property
    def failed(self) -> int:
        return sum(len(p.failed) for p in self.pools)


class RetentionScheduler:
    """Background loop: wait for the next interval boundary -> sweep both pools.

    Sweeps are best-effort. Each pool's children are snapshotted before
    anything is deleted, so entries created while a sweep runs survive
    until the next one. Call stop() to end the loop.
    """

    def __init__(
        self,
        roots: StorageRoots,
        interval_seconds: int = 3600,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._roots = roots
        self._interval_seconds = interval_seconds
        self._clock = clock
        self._stop_event = threading.Event()
        self._thread: threading.Thread | None = None

    @property
    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def next_sweep_at(self, now: float | None = None) -> float:
        """Next multiple of the interval strictly after now (the top of the hour by default)."""
        now = self._clock() if now is None else now
        return now - (now % self._interval_seconds) + self._interval_seconds

    def seconds_until_next_sweep(self, now: float | None = None) -> float:
        now = self._clock() if now is None else now
        return self.next_sweep_at(now) - now

    def start(self) -> None:
        if self.is_running:
            return
        self._stop_event.clear()
        self._thread = threading.Thread(
            target=self.run, name="retention-scheduler", daemon=True
        )
        self._thread.start()

    def stop(self, timeout: float | None = 5.0) -> None:
        """Signal the loop to exit and wait for the thread to finish."""
        self._stop_event.set()
        if self._thread is not None:
            self._thread.join(timeout)
            self._thread = None

    def run(self) -> None:
        """Main loop. Runs until stop() is called."""
        Log.info(
            f"Retention scheduler started, sweeping every {self._interval_seconds}s"
        )
        while not self._wait_for_next_sweep():
            try:
                self.sweep()
            except Exception as exc:
                Log.error(f"Retention sweep aborted: {exc}")
        Log.info("Retention scheduler stopped")

    def _wait_for_next_sweep(self) -> bool:
        """Block until the next boundary has passed. Returns True if stop() was called."""
        deadline = self.next_sweep_at()
        while True:
            remaining = deadline - self._clock()
            if remaining <= 0:
                return self._stop_event.is_set()
            if self._stop_event.wait(remaining):
                return True

    def sweep(self) -> SweepReport:
        """Remove every entry that existed in either pool when the sweep began."""
        snapshots = [(pool, self._snapshot(pool)) for pool in self._roots.pools()]
        report = SweepReport()
        for pool, entries in snapshots:
            outcome = PoolSweep(pool=pool)
            for entry in entries:
                self._remove(entry, outcome)
            report.pools.append(outcome)
            if outcome.failed:
                Log.error(
                    f"Cleared {pool} with errors: {outcome.removed} removed, "
                    f"{len(outcome.failed)} failed"
                )
            else:
                Log.info(f"Cleared {pool}: {outcome.removed} entries removed")
        return report

    def _snapshot(self, pool: Path) -> list[Path]:
        try:
            return list(pool.iterdir())
        except FileNotFoundError:
            Log.debug(f"Pool {pool} does not exist, nothing to clear")
            return []
        except OSError as exc:
            Log.error(f"Failed to list {pool}: {exc}")
            return []

    def _remove(self, entry: Path, outcome: PoolSweep) -> None:
        try:
            if entry.is_dir() and not entry.is_symlink():
                shutil.rmtree(entry)
            else:
                entry.unlink()
        except FileNotFoundError:
            return
        except OSError as exc:
            Log.error(f"Failed to remove {entry}: {exc}")
            outcome.failed.append(str(entry))
            return
        outcome.removed += 1
