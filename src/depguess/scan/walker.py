"""Source tree walking and concurrent extraction.

The walk runs on the calling thread. Every eligible file is submitted to a
thread pool as soon as it is found, and the collector then waits on exactly
the futures that were submitted, so no sentinel is needed and the result
count is known before collection starts.
"""

from __future__ import annotations

import contextvars
import os
import threading
import time
from collections.abc import Callable, Iterator
from concurrent.futures import FIRST_COMPLETED, Future, ThreadPoolExecutor, wait
from dataclasses import dataclass, field
from pathlib import Path

import structlog

from depguess.core.errors import EnumerationError, InternalError
from depguess.scan.backends import LanguageBackend
from depguess.scan.extractor import ImportExtractor
from depguess.scan.models import ExtractionResult, SourceFile

logger = structlog.get_logger()


def _list_dir(path: Path) -> list[os.DirEntry[str]]:
    """List a directory, raising EnumerationError on failure."""
    try:
        with os.scandir(path) as it:
            return list(it)
    except OSError as exc:
        raise EnumerationError.from_os_error(str(path), exc) from exc


@dataclass
class TreeWalker:
    """Yields the files under a root that a backend can extract from."""

    backend: LanguageBackend
    is_ignored: Callable[[str], bool]
    max_file_size_bytes: int | None = None

    def walk(self, root: Path) -> Iterator[SourceFile]:
        """Depth-first walk of *root*.

        Raises:
            EnumerationError: If any visited directory cannot be listed.
        """
        yield from self._visit(root)

    def _visit(self, directory: Path) -> Iterator[SourceFile]:
        if self.is_ignored(directory.name):
            logger.debug("directory_ignored", path=str(directory))
            return

        for entry in _list_dir(directory):
            path = directory / entry.name
            # Symlinked directories are not followed
            if entry.is_dir(follow_symlinks=False):
                yield from self._visit(path)
                continue

            extension = os.path.splitext(entry.name)[1].lower()
            if extension not in self.backend.extensions:
                continue
            if not entry.is_file():
                continue
            if self._too_large(entry):
                logger.debug("file_too_large", path=str(path))
                continue

            yield SourceFile(path=path, extension=extension)

    def _too_large(self, entry: os.DirEntry[str]) -> bool:
        if self.max_file_size_bytes is None:
            return False
        try:
            return entry.stat().st_size > self.max_file_size_bytes
        except OSError:
            # Let the read fail and be reported per file
            return False


@dataclass
class ExtractionScheduler:
    """Dispatches one extraction task per discovered file and fans results in.

    The per-task timeout counts from the moment a worker picks the task up,
    so files queued behind a slow one are never charged for the wait. A
    timed-out task cannot be interrupted: its worker keeps running, work
    still queued behind it moves to a fresh pool, and interpreter exit waits
    for the stuck thread to finish.
    """

    extractor: ImportExtractor
    max_workers: int | None = None
    task_timeout_sec: float | None = None

    _started: dict[Path, float] = field(default_factory=dict, init=False)
    _started_lock: threading.Lock = field(default_factory=threading.Lock, init=False)

    def run(self, sources: Iterator[SourceFile]) -> list[ExtractionResult]:
        """Extract every source and return exactly one result per source.

        Results are returned in completion order.
        """
        self._started = {}
        executors = [self._new_executor()]
        pending: dict[Future[ExtractionResult], SourceFile] = {}
        results: list[ExtractionResult] = []
        try:
            for source in sources:
                pending[self._submit(executors[-1], source)] = source
                logger.debug("file_dispatched", path=str(source.path))

            while pending:
                done, _ = wait(
                    pending, timeout=self._until_next_expiry(pending), return_when=FIRST_COMPLETED
                )
                for future in done:
                    del pending[future]
                    results.append(future.result())

                expired = self._expired(pending)
                if expired:
                    for future in expired:
                        results.append(self._timed_out(pending.pop(future)))
                    executors.append(self._new_executor())
                    pending = self._requeue(pending, executors[-1])
        finally:
            stalled = len(executors) > 1
            for executor in executors:
                executor.shutdown(wait=not stalled, cancel_futures=True)

        return results

    def _new_executor(self) -> ThreadPoolExecutor:
        return ThreadPoolExecutor(
            max_workers=self.max_workers,
            thread_name_prefix="depguess-extract",
        )

    def _submit(
        self, executor: ThreadPoolExecutor, source: SourceFile
    ) -> Future[ExtractionResult]:
        # Each task gets its own copy so worker events carry the scan id
        return executor.submit(contextvars.copy_context().run, self._run_task, source)

    def _run_task(self, source: SourceFile) -> ExtractionResult:
        with self._started_lock:
            self._started[source.path] = time.monotonic()
        return self.extractor.run(source)

    def _start_times(
        self, pending: dict[Future[ExtractionResult], SourceFile]
    ) -> dict[Future[ExtractionResult], float]:
        with self._started_lock:
            return {
                future: self._started[source.path]
                for future, source in pending.items()
                if source.path in self._started
            }

    def _until_next_expiry(
        self, pending: dict[Future[ExtractionResult], SourceFile]
    ) -> float | None:
        if self.task_timeout_sec is None:
            return None
        started = self._start_times(pending)
        if not started:
            return self.task_timeout_sec
        return max(0.0, min(started.values()) + self.task_timeout_sec - time.monotonic())

    def _expired(
        self, pending: dict[Future[ExtractionResult], SourceFile]
    ) -> list[Future[ExtractionResult]]:
        if self.task_timeout_sec is None:
            return []
        now = time.monotonic()
        return [
            future
            for future, start in self._start_times(pending).items()
            if not future.done() and now - start >= self.task_timeout_sec
        ]

    def _timed_out(self, source: SourceFile) -> ExtractionResult:
        timeout = self.task_timeout_sec or 0.0
        err = InternalError.timeout(f"extracting {source.path}", timeout)
        logger.warning("task_timed_out", path=str(source.path), timeout_sec=timeout)
        return ExtractionResult.failed(source.path, str(err))

    def _requeue(
        self,
        pending: dict[Future[ExtractionResult], SourceFile],
        executor: ThreadPoolExecutor,
    ) -> dict[Future[ExtractionResult], SourceFile]:
        """Move tasks no worker has picked up yet onto *executor*."""
        requeued: dict[Future[ExtractionResult], SourceFile] = {}
        for future, source in pending.items():
            if future.cancel():
                requeued[self._submit(executor, source)] = source
            else:
                requeued[future] = source
        return requeued
