"""
Error taxonomy for date resolution, placement and file operations.

Every failure is a ``SortError`` carrying a kind, a message and an ordered
list of context strings (outermost first). Underlying exceptions are chained
with ``raise ... from exc`` and flattened by ``chain()`` when reported.
"""

from enum import Enum
from pathlib import Path
from typing import List, Optional


class ErrorKind(Enum):
    RESOLUTION = "resolution"
    COLLISION = "collision"
    PATH = "path"
    OPERATION = "operation"
    CONFIGURATION = "configuration"


class SortError(Exception):
    """Base error for everything that can fail while sorting a file."""

    kind = ErrorKind.OPERATION

    def __init__(self, message: str, path: Optional[Path] = None):
        super().__init__(message)
        self.message = message
        self.path = path
        self.context: List[str] = []

    def add_context(self, message: str) -> "SortError":
        """Wrap the error in an outer layer of context."""
        self.context.insert(0, message)
        return self

    def chain(self) -> List[str]:
        """Return context, message and causes, outermost first."""
        layers = list(self.context)
        layers.append(self.message)
        cause = self.__cause__
        while cause is not None:
            if isinstance(cause, SortError):
                layers.extend(cause.chain())
                break
            layers.append(str(cause) or type(cause).__name__)
            cause = cause.__cause__
        return layers

    def render(self) -> str:
        """Render the chain the way it appears in error reports."""
        layers = self.chain()
        lines = [layers[0]]
        if len(layers) > 1:
            lines.append("")
            lines.append("Caused by:")
            for index, layer in enumerate(layers[1:]):
                lines.append(f"    {index}: {layer}")
        return "\n".join(lines)

    def __str__(self) -> str:
        return ": ".join(self.chain())


class ResolutionError(SortError):
    """File unreadable, metadata missing or malformed, tool failure."""
    kind = ErrorKind.RESOLUTION


class CollisionError(SortError):
    """Destination already exists under the skip policy."""
    kind = ErrorKind.COLLISION


class PlacementError(SortError):
    """Destination path could not be derived from the source path."""
    kind = ErrorKind.PATH


class OperationError(SortError):
    """Copy, move, link or directory creation failed."""
    kind = ErrorKind.OPERATION


class ConfigurationError(SortError):
    """Run-level configuration problem; aborts before any file is processed."""
    kind = ErrorKind.CONFIGURATION
