"""
Program-wide constants, shared logger/console accessors and external tools.
"""

import logging
import subprocess
from typing import Optional

from rich.console import Console

PROGRAM = "chronosort"

# Exit codes
EXIT_OK = 0
EXIT_FILE_ERRORS = 1
EXIT_CONFIG_ERROR = 2

# Date formats
EXIF_DATE_FMT = "%Y:%m:%d %H:%M:%S"
DRY_RUN_MARKER = "[dry-run]"
ERROR_DELIMITER = "-----"

# EXIF tag ids
EXIF_IFD_POINTER = 0x8769
EXIF_TAG_DATETIME = 0x0132
EXIF_TAG_DATETIME_ORIGINAL = 0x9003

# External tools and their fixed argument sets (file path is appended)
EXIFTOOL = "exiftool"
EXIFTOOL_ARGS = ("-T", "-DateTimeOriginal")
FFPROBE = "ffprobe"
FFPROBE_ARGS = (
    "-v", "quiet",
    "-select_streams", "v:0",
    "-show_entries", "stream_tags=creation_time",
    "-of", "default=noprint_wrappers=1:nokey=1",
)

_console: Optional[Console] = None
_error_console: Optional[Console] = None


def get_logger() -> logging.Logger:
    """Return the program logger."""
    return logging.getLogger(PROGRAM)


def get_console() -> Console:
    """Return the shared stdout console."""
    global _console
    if _console is None:
        _console = Console()
    return _console


def get_error_console() -> Console:
    """Return the shared stderr console."""
    global _error_console
    if _error_console is None:
        _error_console = Console(stderr=True)
    return _error_console


def check_tool_availability(cmd: str, version_flag: str = "-ver") -> bool:
    """Check whether an external command can be launched."""
    try:
        subprocess.run([cmd, version_flag], capture_output=True, check=False)
        return True
    except OSError:
        return False
