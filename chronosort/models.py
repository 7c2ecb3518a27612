"""
Configuration values and per-file records passed between the sorting stages.
"""

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional

from .errors import SortError


class DateSource(Enum):
    """Where the capture timestamp of a file is read from."""
    EXIF = "exif"
    EXIFTOOL = "exiftool"
    FFPROBE = "ffprobe"
    FILE_CREATE = "file-create"
    FILE_MODIFY = "file-modify"


class Collision(Enum):
    """What to do when the destination path is already taken."""
    SKIP = "skip"
    RENAME = "rename"
    OVERWRITE = "overwrite"


class Action(Enum):
    """How a file is transferred to its destination."""
    MOVE = "move"
    COPY = "copy"
    HARDLINK = "hardlink"

    @property
    def label(self) -> str:
        return self.value.capitalize()


def choices(enum_cls) -> list:
    """Command-line values for an enum."""
    return [member.value for member in enum_cls]


@dataclass(frozen=True)
class SortConfig:
    """Run-wide settings, shared read-only by every file in a batch."""
    target_dir: Path = Path(".")
    date_source: DateSource = DateSource.EXIF
    collision: Collision = Collision.SKIP
    action: Action = Action.MOVE
    dry_run: bool = False


@dataclass(frozen=True)
class OrganizeRequest:
    """A single input file paired with the run configuration."""
    path: Path
    config: SortConfig


@dataclass(frozen=True)
class PlacementDecision:
    """Destination chosen for a source file.

    ``copy_index`` is 0 for the plain basename and n for a ``(n) name``
    rename. ``overwrite`` is set when the destination already exists and the
    collision policy allows replacing it.
    """
    source: Path
    destination: Path
    copy_index: int = 0
    overwrite: bool = False

    @property
    def renamed(self) -> bool:
        return self.copy_index > 0


@dataclass(frozen=True)
class ProcessingOutcome:
    """Result of processing one input file."""
    source: Path
    action: Action
    dry_run: bool = False
    decision: Optional[PlacementDecision] = None
    error: Optional[SortError] = None
    size: int = 0

    @property
    def ok(self) -> bool:
        return self.error is None
