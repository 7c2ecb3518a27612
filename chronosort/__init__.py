"""
chronosort - Organize photos and videos into year/month folder structure.

Determines each file's capture date from embedded EXIF metadata, exiftool,
ffprobe or filesystem timestamps, and moves, copies or hard links it to
<target>/<year>/<month>/, resolving name collisions by policy.

MIT License.
"""

__version__ = "1.0.0"
__copyright__ = "Copyright (c) 2025 chronosort contributors"


# Public API
from .cli import main
from .config import Config
from .core import MediaSorter
from .errors import SortError
from .file_operations import FileOperations
from .models import Action, Collision, DateSource, SortConfig
from .placement import get_destination_path
from .reporting import Reporter
from .timestamps import get_resolver

__all__ = [ "main", "Config", "MediaSorter", "SortError", "FileOperations", "Action",
            "Collision", "DateSource", "SortConfig", "get_destination_path", "Reporter",
            "get_resolver" ]
