"""Domain events for the conversion pipeline.

Events flow through the EventBus, decoupling the pipeline from the console
reporter. Subscribers of FileProcessed may be called from worker threads.

See `infrastructure/event_bus.py` for the pub/sub mechanism.
"""

from pathlib import Path
from typing import Optional
from pydantic import BaseModel
from .models import ActionOutcome, Decision, FileCandidate, RunSummary


class Event(BaseModel):
    """Base class for all domain events."""

    pass


class RunStarted(Event):
    """Emitted once preconditions passed, before traversal begins."""

    source_dir: Optional[Path] = None
    output_dir: Path
    target_extension: str
    workers: int


class DirectoryEntered(Event):
    directory: Path


class FileClassified(Event):
    """Emitted by the walker for every candidate it classifies."""

    candidate: FileCandidate
    decision: Decision


class FileProcessed(Event):
    """Emitted when an outcome has been recorded by the aggregator."""

    outcome: ActionOutcome


class RunFinished(Event):
    """Emitted after the final join, carrying the frozen summary."""

    summary: RunSummary
