"""
Logging setup for the ``recipes`` command.

The level comes from the command-line flags when one is given and from
``[logging] level`` in recipe_store.toml otherwise. Messages go to stderr;
``[logging] log_file`` adds a timestamped copy on disk.
"""

import logging
import sys
from pathlib import Path
from typing import List, Optional

CONSOLE_FORMAT = "%(message)s"
DETAILED_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

PACKAGE_LOGGER = "recipe_store"


def level_from_name(name: Optional[str], fallback: int = logging.WARNING) -> int:
    """
    Numeric level for a level name such as ``"info"``.

    Unknown or missing names give ``fallback``.
    """
    if not name:
        return fallback
    level = logging.getLevelName(name.upper())
    return level if isinstance(level, int) else fallback


def _console_handler(level: int, format_str: str) -> logging.Handler:
    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(format_str))
    return handler


def _file_handler(level: int, log_file: Path) -> Optional[logging.Handler]:
    """File handler for ``log_file``, or None when it cannot be opened."""
    try:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handler = logging.FileHandler(str(log_file), encoding="utf-8")
    except OSError as e:
        # A read-only location must not stop the command itself
        logging.getLogger(__name__).debug(f"Could not log to {log_file}: {e}")
        return None
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(DETAILED_FORMAT))
    return handler


def configure_logging(
    level: int = logging.WARNING,
    log_file: Optional[Path] = None,
    format_str: Optional[str] = None,
) -> None:
    """
    Install the recipe store's handlers on the root logger.

    Handlers from an earlier call are closed and replaced, so calling this
    again (as tests and repeated ``main()`` calls do) never stacks output.

    Args:
        level: Threshold for every handler.
        log_file: Optional log file; its directory is created when missing.
        format_str: Console format. Defaults to the detailed format at
            DEBUG and to bare messages otherwise.
    """
    if format_str is None:
        format_str = DETAILED_FORMAT if level <= logging.DEBUG else CONSOLE_FORMAT

    handlers: List[logging.Handler] = [_console_handler(level, format_str)]
    if log_file is not None:
        file_handler = _file_handler(level, log_file)
        if file_handler is not None:
            handlers.append(file_handler)

    root = logging.getLogger()
    for old in root.handlers[:]:
        root.removeHandler(old)
        old.close()
    for handler in handlers:
        root.addHandler(handler)
    root.setLevel(level)

    logging.getLogger(PACKAGE_LOGGER).setLevel(level)


def get_log_level_from_flags(
    quiet: bool = False,
    verbose: bool = False,
    debug: bool = False,
    default: int = logging.WARNING,
) -> int:
    """
    Pick the level from ``--debug``, ``--quiet`` and ``--verbose``.

    ``--debug`` wins over ``--quiet``, which wins over ``--verbose``;
    with no flag the ``default`` (normally the config file level) applies.
    """
    if debug:
        return logging.DEBUG
    if quiet:
        return logging.ERROR
    if verbose:
        return logging.INFO
    return default


def setup_logging(
    verbose: bool = False,
    debug: bool = False,
    quiet: bool = False,
    log_file: Optional[Path] = None,
    default_level: str = "WARNING",
) -> None:
    """Configure logging from the CLI flags and the configured level name."""
    level = get_log_level_from_flags(
        quiet=quiet,
        verbose=verbose,
        debug=debug,
        default=level_from_name(default_level),
    )
    configure_logging(level=level, log_file=log_file)
