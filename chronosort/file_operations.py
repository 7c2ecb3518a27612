"""
File transfer operations with dry-run support.
"""

import os
import shutil
from pathlib import Path

from .constants import get_logger
from .errors import OperationError
from .models import Action, PlacementDecision


class FileOperations:
    """Performs the configured transfer action for placement decisions."""

    def __init__(self, action: Action, dry_run: bool = False):
        self.action = action
        self.dry_run = dry_run
        self.logger = get_logger()

    def ensure_directory(self, directory: Path) -> None:
        """Create directory and parents if needed, with dry-run support."""
        if self.dry_run:
            return

        try:
            directory.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise OperationError(f"failed to create dirs {directory}", directory) from e

    def execute(self, decision: PlacementDecision) -> None:
        """Transfer ``decision.source`` to ``decision.destination``."""
        self.transfer(decision.source, decision.destination)

    def transfer(self, source: Path, dest: Path) -> None:
        """Move, copy or hard link a file, creating parent directories."""
        if self.dry_run:
            self.logger.debug(f"dry run, not touching {source} -> {dest}")
            return

        self.ensure_directory(dest.parent)

        try:
            if self.action is Action.COPY:
                shutil.copy2(source, dest)
            elif self.action is Action.MOVE:
                os.replace(source, dest)
            elif self.action is Action.HARDLINK:
                self.hard_link(source, dest)
        except OSError as e:
            raise OperationError(
                f"failed to {self.action.value} {source} -> {dest}", source
            ) from e

        self.logger.info(f"{self.action.label} {source} -> {dest}")

    @staticmethod
    def hard_link(source: Path, dest: Path) -> None:
        """Hard link source at dest, replacing an existing entry at dest."""
        if not os.path.lexists(dest):
            os.link(source, dest)
            return

        # dest is already a link to the same data, rename(2) would be a no-op
        if os.path.samestat(os.stat(source), os.lstat(dest)):
            return

        # Link under a free temporary sibling name, then swap it in atomically
        counter = 0
        while True:
            temp_dest = dest.with_name(f".{dest.name}.{os.getpid()}.{counter}.tmp")
            try:
                os.link(source, temp_dest)
                break
            except FileExistsError:
                counter += 1

        try:
            os.replace(temp_dest, dest)
        finally:
            if os.path.lexists(temp_dest):
                temp_dest.unlink()
