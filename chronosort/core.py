"""
Core sorting functionality: drive each file through date resolution,
placement and transfer.
"""

import logging
from pathlib import Path
from typing import List, Optional, Sequence

from .constants import EXIT_FILE_ERRORS, EXIT_OK, get_logger
from .errors import ConfigurationError, SortError
from .file_operations import FileOperations
from .models import OrganizeRequest, PlacementDecision, ProcessingOutcome, SortConfig
from .placement import get_destination_path
from .reporting import Reporter
from .stats import StatsManager
from .timestamps import get_resolver


class MediaSorter:
    """Organizes media files into ``<target>/<year>/<month>`` folders."""

    def __init__(self, config: SortConfig, reporter: Reporter,
                 logger: Optional[logging.Logger] = None):
        self.config = config
        self.reporter = reporter
        self.logger = logger or get_logger()
        self.resolver = get_resolver(config.date_source)
        self.file_ops = FileOperations(action=config.action, dry_run=config.dry_run)
        self.stats_manager = StatsManager()
        self.outcomes: List[ProcessingOutcome] = []

    def place(self, request: OrganizeRequest) -> PlacementDecision:
        """Resolve the date and destination for a file without transferring it."""
        config = request.config
        try:
            timestamp = self.resolver(request.path)
        except SortError as e:
            e.add_context(
                f"failed to determine date of {request.path} using {config.date_source.value}"
            )
            raise

        return get_destination_path(request.path, timestamp, config.target_dir,
                                    config.collision)

    def process_file(self, request: OrganizeRequest) -> PlacementDecision:
        """Process a single file, returning its placement."""
        decision = self.place(request)
        if not request.config.dry_run:
            self.file_ops.execute(decision)
        return decision

    def _process_single_file(self, file_path: Path) -> ProcessingOutcome:
        request = OrganizeRequest(path=file_path, config=self.config)
        try:
            size = file_path.stat().st_size if file_path.is_file() else 0
        except OSError:
            size = 0

        try:
            decision = self.process_file(request)
        except SortError as e:
            error = e
        except Exception as e:
            self.logger.debug(f"Unexpected error processing {file_path}", exc_info=True)
            error = SortError(f"unexpected error: {e}", file_path)
            error.__cause__ = e
        else:
            return ProcessingOutcome(source=file_path, action=self.config.action,
                                     dry_run=self.config.dry_run, decision=decision,
                                     size=size)

        return ProcessingOutcome(source=file_path, action=self.config.action,
                                 dry_run=self.config.dry_run, error=error)

    def process_files(self, files: Sequence[Path]) -> List[ProcessingOutcome]:
        """Process files in order; a failing file never stops the batch."""
        if not files:
            raise ConfigurationError("at least 1 file must be specified")

        self.logger.info(f"Starting to process {len(files)} files")
        outcomes = []
        for file_path in files:
            outcome = self._process_single_file(Path(file_path))
            self.stats_manager.record(outcome)
            self.reporter.report(outcome)
            outcomes.append(outcome)

        self.outcomes.extend(outcomes)
        return outcomes

    def run(self, files: Sequence[Path]) -> int:
        """Process a batch and return the exit status."""
        outcomes = self.process_files(files)
        if any(not outcome.ok for outcome in outcomes):
            self.logger.info(f"{self.stats_manager.get_failed()} of {len(outcomes)} files failed")
            return EXIT_FILE_ERRORS
        return EXIT_OK
