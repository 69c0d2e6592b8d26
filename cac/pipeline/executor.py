"""Executes a single classified file: convert, relocate or skip."""

import logging
import os
from pathlib import Path

from cac.config.models import JobConfig
from cac.domain.errors import CacError
from cac.domain.models import ActionOutcome, Decision, FileCandidate, OutcomeStatus
from cac.infrastructure import file_ops
from cac.infrastructure.command import TranscoderAdapter


class ActionExecutor:
    """Performs the filesystem mutation or external process for one candidate.

    Expected failures (CacError, OSError) become FAILED outcomes; nothing in
    here raises for a single bad file.
    """

    def __init__(self, config: JobConfig, transcoder: TranscoderAdapter):
        self.config = config
        self.transcoder = transcoder
        self.logger = logging.getLogger(__name__)

    def output_path_for(self, candidate: FileCandidate) -> Path:
        return self.config.output_dir / f"{candidate.stem}{self.config.target_extension}"

    def execute(self, candidate: FileCandidate, decision: Decision) -> ActionOutcome:
        if decision == Decision.SKIP:
            return ActionOutcome(path=candidate.path, status=OutcomeStatus.SKIPPED)

        output_path = self.output_path_for(candidate)
        try:
            if decision == Decision.CONVERT:
                return self._convert(candidate, output_path)
            return self._relocate(candidate, output_path)
        except (CacError, OSError) as e:
            self.logger.error(f"{candidate.path}: {e}")
            return ActionOutcome.failed(candidate.path, e, output_path=output_path)

    def _convert(self, candidate: FileCandidate, output_path: Path) -> ActionOutcome:
        self.logger.info(f"converting: {candidate.path} -> {output_path}")
        self.transcoder.convert(candidate.path, output_path)

        if self.config.delete_original:
            self.logger.info(f"deleting original file: {candidate.path}")
            file_ops.remove_file(candidate.path)

        self.logger.info(f"converted: {candidate.path} -> {output_path}")
        return ActionOutcome(path=candidate.path, status=OutcomeStatus.CONVERTED, output_path=output_path)

    def _relocate(self, candidate: FileCandidate, output_path: Path) -> ActionOutcome:
        if os.path.abspath(candidate.path) == os.path.abspath(output_path):
            self.logger.info(f"already in output directory - skipping: {candidate.path}")
            return ActionOutcome(path=candidate.path, status=OutcomeStatus.SKIPPED, output_path=output_path)

        # Only the rename path removes the source; a copy never does.
        if self.config.delete_original:
            self.logger.info(f"moving: {candidate.path} -> {output_path}")
            file_ops.move_file(candidate.path, output_path)
        else:
            self.logger.info(f"copying: {candidate.path} -> {output_path}")
            file_ops.copy_file(candidate.path, output_path)

        self.logger.info(f"moved/copied: {candidate.path} -> {output_path}")
        return ActionOutcome(path=candidate.path, status=OutcomeStatus.RELOCATED, output_path=output_path)
