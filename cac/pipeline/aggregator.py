import threading
from typing import List, Optional

from cac.domain.events import FileProcessed
from cac.domain.models import ActionOutcome, FileError, OutcomeStatus, RunSummary
from cac.infrastructure.event_bus import EventBus


class ResultAggregator:
    """Collects outcomes from concurrent workers behind a single lock.

    finalize() freezes the result; recording afterwards is a programming error.
    """

    def __init__(self, event_bus: Optional[EventBus] = None):
        self.event_bus = event_bus
        self._lock = threading.Lock()
        self._counts = {status: 0 for status in OutcomeStatus}
        self._errors: List[FileError] = []
        self._summary: Optional[RunSummary] = None

    def record(self, outcome: ActionOutcome) -> None:
        with self._lock:
            if self._summary is not None:
                raise RuntimeError(f"Outcome for {outcome.path} recorded after the run was finalized")
            self._counts[outcome.status] += 1
            if outcome.status == OutcomeStatus.FAILED:
                self._errors.append(FileError(
                    path=outcome.path,
                    kind=outcome.error_kind or "Error",
                    message=outcome.error_message or "unknown error",
                ))

        if self.event_bus is not None:
            self.event_bus.publish(FileProcessed(outcome=outcome))

    def finalize(self) -> RunSummary:
        with self._lock:
            if self._summary is None:
                self._summary = RunSummary(
                    converted=self._counts[OutcomeStatus.CONVERTED],
                    relocated=self._counts[OutcomeStatus.RELOCATED],
                    skipped=self._counts[OutcomeStatus.SKIPPED],
                    failed=self._counts[OutcomeStatus.FAILED],
                    errors=list(self._errors),
                )
            return self._summary
