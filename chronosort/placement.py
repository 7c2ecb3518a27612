"""
Destination path derivation and collision handling.
"""

import os
from datetime import datetime
from pathlib import Path

from .constants import get_logger
from .errors import CollisionError, PlacementError
from .models import Collision, PlacementDecision


logger = get_logger()


def get_basename(file_path: Path) -> str:
    """Return the final path component as portable text."""
    name = file_path.name
    if name in ("", ".", ".."):
        raise PlacementError(f"failed to extract filename from {str(file_path)!r}", file_path)

    # Undecodable bytes survive as lone surrogates and cannot be encoded
    try:
        name.encode("utf-8")
    except UnicodeEncodeError as e:
        raise PlacementError(f"failed to parse filename {name!r} as valid utf8", file_path) from e

    return name


def get_destination_dir(target_dir: Path, timestamp: datetime) -> Path:
    """Return ``<target>/<year>/<month>`` for a timestamp."""
    return target_dir / str(timestamp.year) / f"{timestamp.month:02d}"


def copy_name(basename: str, copy_index: int) -> str:
    """Name used for the n-th renamed copy of a file."""
    if copy_index > 0:
        return f"({copy_index}) {basename}"
    return basename


def get_destination_path(file_path: Path, timestamp: datetime, target_dir: Path,
                         collision: Collision) -> PlacementDecision:
    """Compute where a file goes, resolving collisions by policy.

    The returned path does not exist at the time of the check unless the
    policy is overwrite. Under rename the first free ``(n) name`` slot wins.
    """
    basename = get_basename(file_path)
    dest_dir = get_destination_dir(target_dir, timestamp)

    copy_index = 0
    while True:
        dest_path = dest_dir / copy_name(basename, copy_index)
        logger.debug(f"trying path {dest_path}")

        if not os.path.lexists(dest_path):
            logger.debug(f"{file_path} -> {dest_path}")
            return PlacementDecision(source=file_path, destination=dest_path,
                                     copy_index=copy_index)

        logger.debug(f"new path {dest_path} exists")
        if collision is Collision.SKIP:
            raise CollisionError(f"{dest_path} already exists, refusing to overwrite", file_path)
        if collision is Collision.OVERWRITE:
            logger.info(f"overwriting {dest_path} with {file_path}")
            return PlacementDecision(source=file_path, destination=dest_path,
                                     copy_index=copy_index, overwrite=True)

        copy_index += 1
