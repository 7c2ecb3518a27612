"""Date resolvers: read a capture timestamp from a file.

Each resolver takes a path and returns a naive ``datetime`` or raises
``ResolutionError``. Exactly one is selected per run via ``get_resolver``.
"""

import re
import subprocess
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Callable, Dict, Sequence

from PIL import Image
from pillow_heif import register_heif_opener

from .constants import (EXIF_DATE_FMT, EXIF_IFD_POINTER, EXIF_TAG_DATETIME,
                        EXIF_TAG_DATETIME_ORIGINAL, EXIFTOOL, EXIFTOOL_ARGS,
                        FFPROBE, FFPROBE_ARGS, get_logger)
from .errors import ResolutionError
from .models import DateSource


logger = get_logger()

# Let Pillow open HEIF/HEIC containers
register_heif_opener()

Resolver = Callable[[Path], datetime]

RFC3339_PATTERN = re.compile(
    r'^(\d{4})-(\d{2})-(\d{2})[Tt ](\d{2}):(\d{2}):(\d{2})(?:\.(\d+))?(Z|z|[+-](\d{2}):(\d{2}))$'
)


@dataclass(frozen=True)
class ToolResult:
    """Exit status and captured output of an external tool."""
    returncode: int
    stdout: str
    stderr: str

    @property
    def success(self) -> bool:
        return self.returncode == 0


def run_tool(cmd: str, args: Sequence[str], file_path: Path) -> ToolResult:
    """Run an external tool on a file and wait for it to finish.

    No timeout is applied; a hung tool blocks the caller.
    """
    try:
        result = subprocess.run(
            [cmd, *args, str(file_path)],
            capture_output=True, text=True, errors="replace", check=False
        )
    except OSError as e:
        raise ResolutionError(f"failed to execute {cmd}", file_path) from e

    logger.debug(f"{file_path} {cmd} status = {result.returncode}")
    return ToolResult(result.returncode, result.stdout, result.stderr)


def _require_success(cmd: str, result: ToolResult, file_path: Path) -> None:
    if not result.success:
        raise ResolutionError(
            f"{cmd} failed with exit status {result.returncode}, stderr\n{result.stderr.rstrip()}",
            file_path
        )


def parse_exif_datetime(date_str: str) -> datetime:
    """Parse ``YYYY:MM:DD HH:MM:SS`` text."""
    try:
        return datetime.strptime(date_str, EXIF_DATE_FMT)
    except ValueError as e:
        raise ResolutionError(
            f"failed to parse date time {date_str!r} as fmt {EXIF_DATE_FMT!r}"
        ) from e


def read_exif_datetime(value) -> datetime:
    """Validate a raw EXIF date field value and parse it."""
    if not isinstance(value, str):
        raise ResolutionError(f"incorrect exif data format: {value!r}")
    if not value:
        raise ResolutionError("empty exif date data found")

    logger.debug(f"exif datetime raw {value!r}")
    return parse_exif_datetime(value)


def get_exif_date(file_path: Path) -> datetime:
    """Get the capture date from the file's embedded EXIF metadata."""
    try:
        fh = open(file_path, 'rb')
    except OSError as e:
        raise ResolutionError(f"failed to open {file_path}", file_path) from e

    with fh:
        try:
            with Image.open(fh) as img:
                exif = img.getexif()
                exif_ifd = exif.get_ifd(EXIF_IFD_POINTER)
        except Exception as e:
            raise ResolutionError("failed to read exif data", file_path) from e

    if not exif:
        raise ResolutionError("no exif data found", file_path)

    # Prefer the original capture time, then the primary IFD timestamp
    if EXIF_TAG_DATETIME_ORIGINAL in exif_ifd:
        value = exif_ifd[EXIF_TAG_DATETIME_ORIGINAL]
    elif EXIF_TAG_DATETIME in exif:
        value = exif[EXIF_TAG_DATETIME]
    else:
        raise ResolutionError("failed to get date exif data", file_path)

    dt = read_exif_datetime(value)
    logger.debug(f"{file_path} -> {dt}")
    return dt


def get_exiftool_date(file_path: Path) -> datetime:
    """Get the capture date using the ``exiftool`` external program."""
    result = run_tool(EXIFTOOL, EXIFTOOL_ARGS, file_path)
    _require_success(EXIFTOOL, result, file_path)

    date_str = result.stdout.strip()
    logger.debug(f"{EXIFTOOL} datetime raw {date_str!r}")

    try:
        return datetime.strptime(date_str, EXIF_DATE_FMT)
    except ValueError as e:
        raise ResolutionError(
            f"failed to parse `{EXIFTOOL}` date time {date_str!r} as fmt {EXIF_DATE_FMT!r}",
            file_path
        ) from e


def parse_rfc3339_datetime(timestamp_str: str) -> datetime:
    """Parse an RFC 3339 timestamp into a naive wall-clock datetime.

    The UTC offset is validated but dropped: the result is the local time in
    whatever offset the timestamp states. A leap second (``:60``) is folded
    into the preceding second.
    """
    match = RFC3339_PATTERN.match(timestamp_str)
    if not match:
        raise ValueError(f"not an RFC 3339 timestamp: {timestamp_str!r}")

    offset_hours, offset_minutes = match.group(9), match.group(10)
    if offset_hours is not None and (int(offset_hours) > 23 or int(offset_minutes) > 59):
        raise ValueError(f"UTC offset out of range: {timestamp_str!r}")

    year, month, day, hour, minute, second = (int(g) for g in match.groups()[:6])
    if second == 60:
        second = 59
    fractional_part = match.group(7)
    microsecond = int(fractional_part.ljust(6, '0')[:6]) if fractional_part else 0
    return datetime(year, month, day, hour, minute, second, microsecond)


def get_ffprobe_date(file_path: Path) -> datetime:
    """Get the first video stream's creation time using ``ffprobe``."""
    result = run_tool(FFPROBE, FFPROBE_ARGS, file_path)
    _require_success(FFPROBE, result, file_path)

    date_str = result.stdout.strip()
    logger.debug(f"{FFPROBE} datetime raw {date_str!r}")

    try:
        return parse_rfc3339_datetime(date_str)
    except ValueError as e:
        raise ResolutionError(
            f"failed to parse {FFPROBE} output {date_str!r} as a date", file_path
        ) from e


def _stat(file_path: Path):
    try:
        return file_path.stat()
    except OSError as e:
        raise ResolutionError(f"failed to stat {file_path}", file_path) from e


def _utc_naive(timestamp: float) -> datetime:
    return datetime.fromtimestamp(timestamp, tz=timezone.utc).replace(tzinfo=None)


def get_file_create_date(file_path: Path) -> datetime:
    """Get the filesystem creation (birth) time, in UTC."""
    stat_result = _stat(file_path)
    birthtime = getattr(stat_result, "st_birthtime", None)
    if birthtime is None:
        raise ResolutionError(
            "file creation time is not available on this platform", file_path
        )
    return _utc_naive(birthtime)


def get_file_modify_date(file_path: Path) -> datetime:
    """Get the filesystem modification time, in UTC."""
    return _utc_naive(_stat(file_path).st_mtime)


RESOLVERS: Dict[DateSource, Resolver] = {
    DateSource.EXIF: get_exif_date,
    DateSource.EXIFTOOL: get_exiftool_date,
    DateSource.FFPROBE: get_ffprobe_date,
    DateSource.FILE_CREATE: get_file_create_date,
    DateSource.FILE_MODIFY: get_file_modify_date,
}


def get_resolver(source: DateSource) -> Resolver:
    """Look up the resolver for a date source."""
    return RESOLVERS[source]
