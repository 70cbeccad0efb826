"""Logging setup for **LinkScout**.

All project records go through the ``LinkScout`` logger tree: the crawl
observer writes to ``LinkScout.events``, other components may take their own
child via :func:`get_logger`.  Console output goes to stderr because the CLI
prints JSON reports on stdout; an optional logfile is rotated at 5 MB.

    from link_scout.logger import init_logging, get_logger
    init_logging("DEBUG", log_file="scan.log")
    get_logger("events").info("crawl_started https://example.com/")
"""
from __future__ import annotations

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Final, List, Optional, Union

_DEFAULT_FORMAT: Final[str] = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
_LOGGER_NAME: Final[str] = "LinkScout"
_LOG_MAX_BYTES: Final[int] = 5 * 1024 * 1024
_LOG_BACKUPS: Final[int] = 3

_LevelT = Union[int, str]


def _build_handlers(fmt: str, log_file: Optional[Union[str, Path]]) -> List[logging.Handler]:
    formatter = logging.Formatter(fmt)
    handlers: List[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if log_file is not None:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        handlers.append(
            RotatingFileHandler(
                str(log_file), maxBytes=_LOG_MAX_BYTES, backupCount=_LOG_BACKUPS, encoding="utf-8"
            )
        )
    for handler in handlers:
        handler.setFormatter(formatter)
    return handlers


def get_logger(component: Optional[str] = None) -> logging.Logger:
    """``LinkScout`` itself or its child ``LinkScout.<component>``."""
    if not component:
        return logging.getLogger(_LOGGER_NAME)
    return logging.getLogger(f"{_LOGGER_NAME}.{component}")


def configure(
    *,
    level: _LevelT = "INFO",
    log_file: Union[str, Path, None] = None,
    log_format: str = _DEFAULT_FORMAT,
    replace_handlers: bool = True,
) -> logging.Logger:
    """(Re)configure the ``LinkScout`` logger tree.

    Handlers live on the top logger only; children propagate to it.  With
    *replace_handlers* the previous handlers are closed and dropped, so
    repeated CLI invocations in one process do not duplicate output.
    """
    lg = get_logger()
    lg.setLevel(level)
    if replace_handlers:
        for handler in list(lg.handlers):
            lg.removeHandler(handler)
            handler.close()
    for handler in _build_handlers(log_format, log_file):
        lg.addHandler(handler)
    lg.propagate = False
    return lg


def init_logging(
    level: _LevelT = "INFO",
    log_file: Union[str, Path, None] = None,
    log_format: str = _DEFAULT_FORMAT,
) -> logging.Logger:
    return configure(level=level, log_file=log_file, log_format=log_format, replace_handlers=True)


logger: logging.Logger = get_logger()

__all__ = ["logger", "get_logger", "configure", "init_logging"]
