"""
Statistics tracking for sorting runs.
"""

from typing import Dict

from rich.table import Table

from .models import Action, ProcessingOutcome


class StatsManager:
    """Encapsulates statistics tracking for a sorting run."""

    def __init__(self):
        self._stats = {
            'moved': 0,
            'copied': 0,
            'linked': 0,
            'renamed': 0,
            'overwritten': 0,
            'failed': 0,
            'total_size': 0,
        }

    def record(self, outcome: ProcessingOutcome) -> None:
        """Record the outcome of one file."""
        if not outcome.ok:
            self._stats['failed'] += 1
            return

        key = {Action.MOVE: 'moved', Action.COPY: 'copied', Action.HARDLINK: 'linked'}[outcome.action]
        self._stats[key] += 1
        if outcome.decision.renamed:
            self._stats['renamed'] += 1
        if outcome.decision.overwrite:
            self._stats['overwritten'] += 1
        self._stats['total_size'] += outcome.size

    def get_stats(self) -> Dict[str, int]:
        """Get a copy of current statistics."""
        return self._stats.copy()

    def get_processed(self) -> int:
        """Get count of successfully processed files."""
        return self._stats['moved'] + self._stats['copied'] + self._stats['linked']

    def get_failed(self) -> int:
        return self._stats['failed']

    def has_errors(self) -> bool:
        """Check if any file failed."""
        return self._stats['failed'] > 0

    def get_total_size_mb(self) -> float:
        """Get total size in megabytes."""
        return self._stats['total_size'] / (1024 * 1024)

    def summary_table(self, dry_run: bool = False) -> Table:
        """Build a summary table of the run."""
        title = "Processing Summary (dry run)" if dry_run else "Processing Summary"
        table = Table(title=title)
        table.add_column("Category", style="cyan")
        table.add_column("Count", style="green")

        table.add_row("Moved", str(self._stats['moved']))
        table.add_row("Copied", str(self._stats['copied']))
        table.add_row("Hard Linked", str(self._stats['linked']))
        table.add_row("Renamed", str(self._stats['renamed']))
        table.add_row("Overwritten", str(self._stats['overwritten']))
        table.add_row("Failed", str(self._stats['failed']))

        size_mb = self.get_total_size_mb()
        if size_mb > 1024:
            size_str = f"{size_mb/1024:.1f} GB"
        else:
            size_str = f"{size_mb:.1f} MB"
        table.add_row("Total Size", size_str)

        return table
