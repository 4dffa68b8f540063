"""Logging setup for the Beyond Us CLI and server."""

import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Optional

from ..core.config import GameConfig


PACKAGE = "beyondus"
CONSOLE_FORMAT = "%(message)s"
FILE_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

# Set on handlers installed here so a second call replaces only those
_OWNED = "_beyondus_handler"


def session_log_path(log_dir: str, started: Optional[datetime] = None) -> Path:
    """File a session's log is written to, named after its start time."""
    started = started or datetime.now()
    return Path(log_dir) / f"session_{started:%Y%m%d_%H%M%S}.log"


def _console_handler() -> logging.Handler:
    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(logging.INFO)
    handler.setFormatter(logging.Formatter(CONSOLE_FORMAT))
    # Game narration only; library chatter goes to the file
    handler.addFilter(logging.Filter(PACKAGE))
    return handler


def _file_handler(path: Path) -> logging.Handler:
    path.parent.mkdir(parents=True, exist_ok=True)
    handler = logging.FileHandler(path, encoding="utf-8")
    handler.setLevel(logging.DEBUG)
    handler.setFormatter(logging.Formatter(FILE_FORMAT, datefmt="%H:%M:%S"))
    return handler


def setup_logger(config: GameConfig) -> logging.Logger:
    """
    Install console and optional file logging on the root logger.

    The console prints INFO and above from ``beyondus.*`` loggers. With
    ``config.save_to_file`` every record also goes to a timestamped file
    under ``config.log_dir``. Handlers from an earlier call are replaced;
    handlers installed by anyone else are left alone.

    Args:
        config: Session configuration (``verbose``, ``save_to_file``, ``log_dir``)

    Returns:
        The root logger
    """
    root = logging.getLogger()
    root.setLevel(logging.DEBUG if config.verbose else logging.INFO)

    for handler in list(root.handlers):
        if getattr(handler, _OWNED, False):
            root.removeHandler(handler)
            handler.close()

    handlers = [_console_handler()]
    log_file = None
    if config.save_to_file:
        log_file = session_log_path(config.log_dir)
        try:
            handlers.append(_file_handler(log_file))
        except OSError as e:
            log_file = None
            logging.getLogger(__name__).error(f"Cannot write session log under {config.log_dir}: {e}")

    for handler in handlers:
        setattr(handler, _OWNED, True)
        root.addHandler(handler)

    if log_file is not None:
        logging.getLogger(__name__).info(f"Session log: {log_file}")
    return root
