"""Job driver: owns the lifecycle of a single conversion run.

Sequence:
- validate preconditions (source exists, output exists or gets created)
- walk the source directory and/or the explicit file list, dispatching work
- join the worker pool
- freeze and return the RunSummary

Only precondition failures raise (ConfigError). Everything that goes wrong for
an individual file ends up in the summary instead.
"""

import logging
from pathlib import Path
from typing import Optional

from cac.config.models import JobConfig
from cac.domain.errors import ConfigError
from cac.domain.events import RunFinished, RunStarted
from cac.domain.models import RunSummary
from cac.infrastructure.command import TranscoderAdapter
from cac.infrastructure.event_bus import EventBus
from cac.pipeline.aggregator import ResultAggregator
from cac.pipeline.executor import ActionExecutor
from cac.pipeline.walker import TreeWalker
from cac.pipeline.worker_pool import WorkerPool


class Orchestrator:
    """Wires classifier, executor, pool, walker and aggregator for one run.

    Args:
        config: Immutable JobConfig for the run.
        event_bus: EventBus for lifecycle events (console reporting subscribes here).
        transcoder: Optional TranscoderAdapter; built from config.command when omitted.
    """

    def __init__(
        self,
        config: JobConfig,
        event_bus: EventBus,
        transcoder: Optional[TranscoderAdapter] = None,
    ):
        self.config = config
        self.event_bus = event_bus
        self.transcoder = transcoder or TranscoderAdapter(config.command, quiet=config.quiet)
        self.logger = logging.getLogger(__name__)

    def validate(self) -> None:
        source_dir = self.config.source_dir
        if source_dir is not None:
            if not source_dir.exists():
                raise ConfigError(f"directory {str(source_dir)!r} does not exist", path=source_dir)
            if not source_dir.is_dir():
                raise ConfigError(f"{str(source_dir)!r} is not a directory", path=source_dir)
        elif not self.config.files:
            raise ConfigError("input directory (--dir) or file(s) (--files) are required")

        output_dir = self.config.output_dir
        if output_dir.exists():
            if not output_dir.is_dir():
                raise ConfigError(f"output path {str(output_dir)!r} is not a directory", path=output_dir)
            return

        if not self.config.create_output_dir:
            raise ConfigError(f"directory {str(output_dir)!r} does not exist", path=output_dir)

        self.logger.info(f"creating output directory: {output_dir}")
        try:
            output_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise ConfigError(f"failed to create output directory: {e}", path=output_dir) from e

    def run(self) -> RunSummary:
        self.validate()

        self.logger.info(
            f"starting conversion: source={self.config.source_dir}, files={len(self.config.files)}, "
            f"target={self.config.target_extension}, output={self.config.output_dir}"
        )
        if self.config.sources:
            self.logger.info(f"source extensions filter: {self.config.sources}")
        elif self.config.excepts:
            self.logger.info(f"exempted extensions: {self.config.excepts}")
        self.logger.info(f"using {self.config.workers} worker threads for parallel processing")

        self.event_bus.publish(RunStarted(
            source_dir=self.config.source_dir,
            output_dir=self.config.output_dir,
            target_extension=self.config.target_extension,
            workers=self.config.workers,
        ))

        aggregator = ResultAggregator(event_bus=self.event_bus)
        executor = ActionExecutor(self.config, self.transcoder)

        with WorkerPool(self.config.workers) as pool:
            walker = TreeWalker(self.config, executor, pool, aggregator, self.event_bus)
            if self.config.source_dir is not None:
                walker.walk(self.config.source_dir)
            if self.config.files:
                walker.walk_files(self.config.files)

            self.logger.info("waiting for all conversions to complete...")
            pool.join()

        summary = aggregator.finalize()
        self.logger.info(
            f"Run finished: converted={summary.converted}, relocated={summary.relocated}, "
            f"skipped={summary.skipped}, failed={summary.failed}"
        )
        self.event_bus.publish(RunFinished(summary=summary))
        return summary
