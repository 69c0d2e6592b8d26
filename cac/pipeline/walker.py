"""Directory traversal and dispatch.

Traversal runs on the calling thread. Every non-directory entry is classified;
skips are recorded right away and everything else is handed to the worker pool
without waiting for it. Entries that cannot be read are recorded as failures
and the walk carries on. An output directory nested inside the walked tree
is not descended into.
"""

import logging
import os
import stat
from pathlib import Path
from typing import Iterable, Optional

from cac.config.models import JobConfig
from cac.domain.errors import TraversalError
from cac.domain.events import DirectoryEntered, FileClassified
from cac.domain.models import ActionOutcome, Decision, FileCandidate, OutcomeStatus
from cac.infrastructure.event_bus import EventBus
from cac.pipeline.aggregator import ResultAggregator
from cac.pipeline.classifier import classify
from cac.pipeline.executor import ActionExecutor
from cac.pipeline.worker_pool import WorkerPool


class TreeWalker:
    def __init__(
        self,
        config: JobConfig,
        executor: ActionExecutor,
        pool: WorkerPool,
        aggregator: ResultAggregator,
        event_bus: EventBus,
    ):
        self.config = config
        self.executor = executor
        self.pool = pool
        self.aggregator = aggregator
        self.event_bus = event_bus
        self.logger = logging.getLogger(__name__)

    def walk(self, root: Path) -> None:
        """Depth-first walk of root; returns once everything is dispatched."""
        root = Path(root)
        pruned = self._output_dir_under(root)
        stack = [root]
        while stack:
            directory = stack.pop()
            if directory != root:
                self.logger.debug(f"entering directory: {directory}")
            self.event_bus.publish(DirectoryEntered(directory=directory))

            try:
                with os.scandir(directory) as it:
                    entries = sorted(it, key=lambda e: e.name)
            except OSError as e:
                self._record_traversal_error(directory, f"error accessing {directory}: {e}")
                continue

            subdirs = []
            for entry in entries:
                path = Path(entry.path)
                try:
                    # Symlinked directories are not followed (cycles).
                    if entry.is_dir(follow_symlinks=False):
                        if pruned is not None and path.resolve() == pruned:
                            self.logger.debug(f"not descending into output directory: {path}")
                            continue
                        subdirs.append(path)
                        continue
                    if entry.is_symlink() and entry.is_dir():
                        self.logger.debug(f"not following directory symlink: {path}")
                        continue
                    entry.stat()
                except OSError as e:
                    self._record_traversal_error(path, f"error accessing {path}: {e}")
                    continue
                self._handle(FileCandidate.from_path(path))

            # Reversed so the stack pops subdirectories in name order.
            stack.extend(reversed(subdirs))

    def _output_dir_under(self, root: Path) -> Optional[Path]:
        """Resolved output directory when it lies strictly below root.

        Files written there during this run must not be picked up again.
        """
        output_dir = self.config.output_dir.resolve()
        if root.resolve() in output_dir.parents:
            return output_dir
        return None

    def walk_files(self, paths: Iterable[Path]) -> None:
        """Same per-entry handling as walk(), for an explicit list of files."""
        for path in paths:
            path = Path(path)
            try:
                st = os.stat(path)
            except OSError as e:
                self._record_traversal_error(path, f"error accessing {path}: {e}")
                continue
            if stat.S_ISDIR(st.st_mode):
                self._record_traversal_error(path, f"{path} is a directory, use --dir to process directories")
                continue
            self._handle(FileCandidate.from_path(path))

    def _handle(self, candidate: FileCandidate) -> None:
        decision = classify(candidate, self.config)
        self.logger.debug(
            f"found file: {candidate.name} (extension: {candidate.extension or '<none>'}) "
            f"target={self.config.target_extension} decision={decision.value}"
        )
        self.event_bus.publish(FileClassified(candidate=candidate, decision=decision))

        if decision == Decision.SKIP:
            self.aggregator.record(ActionOutcome(path=candidate.path, status=OutcomeStatus.SKIPPED))
            return

        self.pool.submit(self._process, candidate, decision)

    def _process(self, candidate: FileCandidate, decision: Decision) -> None:
        """Runs on a pool thread; always records exactly one outcome."""
        try:
            outcome = self.executor.execute(candidate, decision)
        except Exception as e:
            # Log exception but don't crash the thread
            self.logger.exception(f"Exception processing {candidate.path}: {e}")
            outcome = ActionOutcome.failed(candidate.path, e)
        self.aggregator.record(outcome)

    def _record_traversal_error(self, path: Path, message: str) -> None:
        error = TraversalError(message, path=path)
        self.logger.error(message)
        self.aggregator.record(ActionOutcome.failed(path, error))
