"""
Command-line interface for chronosort.
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from rich.console import Console
from rich.logging import RichHandler

from .config import Config
from .constants import (EXIFTOOL, EXIT_CONFIG_ERROR, EXIT_FILE_ERRORS, FFPROBE, PROGRAM,
                        check_tool_availability, get_console, get_error_console,
                        get_logger)
from .core import MediaSorter
from .errors import ConfigurationError
from .models import Action, Collision, DateSource, SortConfig, choices
from .reporting import Reporter

# External tool each date source depends on, with a harmless probe flag
REQUIRED_TOOLS = {
    DateSource.EXIFTOOL: (EXIFTOOL, "-ver"),
    DateSource.FFPROBE: (FFPROBE, "-version"),
}


def create_parser() -> argparse.ArgumentParser:
    """Create argument parser. Defaults left as None are filled from config."""
    parser = argparse.ArgumentParser(
        prog=PROGRAM,
        description="Organize photos and videos into <target>/<year>/<month> folders",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=f"""
Examples:
  {PROGRAM} -d ~/Pictures/Organized ~/Downloads/*.jpg
  {PROGRAM} --dry-run -g ffprobe -a copy clip.mp4
  {PROGRAM} -c rename -a hardlink -d /srv/photos IMG_0001.JPG
        """
    )

    parser.add_argument(
        "files", nargs="*", type=Path,
        help="Photos and videos to process"
    )
    parser.add_argument(
        "--date-source", "-g", choices=choices(DateSource), metavar="SOURCE",
        help=f"Where to read the capture date from: {', '.join(choices(DateSource))} "
             f"(default: {DateSource.EXIF.value})"
    )
    parser.add_argument(
        "--collision", "-c", choices=choices(Collision), metavar="POLICY",
        help=f"What to do when the destination exists: {', '.join(choices(Collision))} "
             f"(default: {Collision.SKIP.value})"
    )
    parser.add_argument(
        "--action", "-a", choices=choices(Action), metavar="ACTION",
        help=f"Action to take for file organization: {', '.join(choices(Action))} "
             f"(default: {Action.MOVE.value})"
    )
    parser.add_argument(
        "--target-dir", "-d", metavar="DIR",
        help="Directory to output files to (default: .)"
    )
    parser.add_argument(
        "--dry-run", "-n", action="store_true",
        help="Don't actually take any action"
    )
    parser.add_argument(
        "--summary", action="store_true",
        help="Print a summary table when done"
    )
    parser.add_argument(
        "--config", metavar="PATH", type=Path,
        help=f"Defaults file (default: ~/.{PROGRAM}/config.yml)"
    )
    parser.add_argument(
        "--verbose", "-v", action="store_true",
        help="Enable verbose logging"
    )
    parser.add_argument(
        "--version", "-V", action="store_true",
        help=f"Display the version number of {PROGRAM} and exit"
    )

    return parser


def setup_logging(verbose: bool, console: Console) -> logging.Logger:
    """Route the program logger through rich on the given console."""
    logger = get_logger()
    for handler in list(logger.handlers):
        if isinstance(handler, RichHandler):
            logger.removeHandler(handler)

    handler = RichHandler(console=console, show_time=False, show_path=False)
    handler.setFormatter(logging.Formatter("%(message)s"))
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG if verbose else logging.WARNING)
    return logger


def build_sort_config(args: argparse.Namespace, config: Config) -> SortConfig:
    """Merge command-line flags over config file defaults."""
    defaults = SortConfig()

    date_source = (DateSource(args.date_source) if args.date_source
                   else config.get_date_source() or defaults.date_source)
    collision = (Collision(args.collision) if args.collision
                 else config.get_collision() or defaults.collision)
    action = (Action(args.action) if args.action
              else config.get_action() or defaults.action)
    target_dir = args.target_dir or config.get_target_dir()

    return SortConfig(
        target_dir=Path(target_dir).expanduser() if target_dir else defaults.target_dir,
        date_source=date_source,
        collision=collision,
        action=action,
        dry_run=args.dry_run,
    )


def warn_missing_tools(sort_config: SortConfig, logger: logging.Logger) -> None:
    """Warn up front when the selected date source needs a missing tool."""
    if sort_config.date_source not in REQUIRED_TOOLS:
        return

    cmd, probe_flag = REQUIRED_TOOLS[sort_config.date_source]
    if not check_tool_availability(cmd, probe_flag):
        logger.warning(f"{cmd} not found on PATH, every file will fail to resolve a date")


def main(config_path: Optional[Path] = None, argv: Optional[List[str]] = None) -> int:
    """Main entry point.

    Args:
        config_path: Optional path to config file (for testing)
        argv: Optional argument list (defaults to sys.argv)
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    if args.version:
        from . import __version__, __copyright__
        if args.verbose:
            print(f"{PROGRAM} version {__version__} {__copyright__}")
            return 0
        print(__version__)
        return 0

    error_console = get_error_console()
    logger = setup_logging(args.verbose, error_console)

    config = Config(config_path=args.config or config_path)
    sort_config = build_sort_config(args, config)
    logger.debug(f"{sort_config}")

    reporter = Reporter(console=get_console(), error_console=error_console)

    if args.files:
        warn_missing_tools(sort_config, logger)

    sorter = MediaSorter(config=sort_config, reporter=reporter, logger=logger)

    try:
        status = sorter.run(args.files)
    except ConfigurationError as e:
        reporter.fatal(e.render())
        return EXIT_CONFIG_ERROR
    except KeyboardInterrupt:
        error_console.print("\n[red]Operation cancelled by user[/red]")
        return EXIT_FILE_ERRORS

    if args.summary:
        error_console.print(sorter.stats_manager.summary_table(dry_run=sort_config.dry_run))

    if status != 0:
        logger.error("errors seen")
    return status


if __name__ == "__main__":
    sys.exit(main())
