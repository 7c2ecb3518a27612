"""Per-file result reporting."""

from typing import Optional

from rich.console import Console

from .constants import (DRY_RUN_MARKER, ERROR_DELIMITER, get_console,
                        get_error_console)
from .models import ProcessingOutcome


class Reporter:
    """Writes success lines to stdout and error blocks to stderr."""

    def __init__(self, console: Optional[Console] = None,
                 error_console: Optional[Console] = None):
        self.console = console or get_console()
        self.error_console = error_console or get_error_console()

    def _print(self, console: Console, text: str) -> None:
        # Paths may contain square brackets, so never interpret markup
        console.print(text, markup=False, highlight=False, emoji=False, soft_wrap=True)

    def report(self, outcome: ProcessingOutcome) -> None:
        if outcome.ok:
            self.success(outcome)
        else:
            self.failure(outcome)

    def success(self, outcome: ProcessingOutcome) -> None:
        decision = outcome.decision
        line = f"{outcome.action.label} {decision.source} -> {decision.destination}"
        if outcome.dry_run:
            line = f"{DRY_RUN_MARKER} {line}"
        self._print(self.console, line)

    def failure(self, outcome: ProcessingOutcome) -> None:
        self._print(self.error_console, ERROR_DELIMITER)
        self._print(self.error_console, f"[error] {outcome.source}")
        self._print(self.error_console, outcome.error.render())
        self._print(self.error_console, ERROR_DELIMITER)

    def fatal(self, message: str) -> None:
        """Report a run-level error that stopped the batch before it began."""
        self._print(self.error_console, f"Error: {message}")
