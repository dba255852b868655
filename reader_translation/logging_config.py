"""
Logging configuration for the translation core.

Files are written under ``READER_TRANSLATION_LOG_DIR`` (default: ``logs/``
next to the package) and carry the current date in their path, so a long
running reader rotates naturally by day.
"""

from __future__ import annotations

import logging
import os
import sys
from datetime import datetime
from pathlib import Path
from typing import Optional

_env_log_dir = os.getenv("READER_TRANSLATION_LOG_DIR")
LOG_DIR = Path(_env_log_dir).expanduser() if _env_log_dir else Path(__file__).parent.parent / "logs"

_FORMATTER = logging.Formatter(
    fmt="%(asctime)s | %(levelname)-7s | %(name)s | %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)

# Third-party loggers that are chatty at INFO
_NOISY_LOGGERS = ("ppocr", "paddlex", "paddle", "PIL", "urllib3", "langdetect")

_FALSY = {"", "0", "false", "off", "no"}


def _fallback_dir() -> Path:
    return Path(os.getenv("READER_TRANSLATION_LOG_DIR_FALLBACK", "/tmp/reader-translation-logs"))


def _writable_log_dir() -> Path:
    """Create LOG_DIR, switching to the fallback directory when it is read-only."""
    global LOG_DIR
    try:
        LOG_DIR.mkdir(parents=True, exist_ok=True)
    except OSError:
        fallback = _fallback_dir()
        if fallback == LOG_DIR:
            raise
        fallback.mkdir(parents=True, exist_ok=True)
        LOG_DIR = fallback
    return LOG_DIR


def _dated_path(log_file: str) -> Path:
    """
    ``app.log`` -> ``<LOG_DIR>/<date>_app.log``;
    ``translator/translator.log`` -> ``<LOG_DIR>/translator/<date>/translator.log``.
    """
    base = _writable_log_dir()
    date_str = datetime.now().strftime("%Y%m%d")
    relative = Path(log_file)
    if relative.parent == Path("."):
        return base / f"{date_str}_{relative.name}"
    return base / relative.parent / date_str / relative.name


def _file_handler(path: Path, level: int) -> Optional[logging.FileHandler]:
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
    except OSError:
        path = _fallback_dir() / path.name
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
        except OSError:
            return None
    try:
        handler = logging.FileHandler(path, encoding="utf-8")
    except OSError:
        return None
    handler.setLevel(level)
    handler.setFormatter(_FORMATTER)
    return handler


def _stdout_handler(level: int) -> logging.StreamHandler:
    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level)
    handler.setFormatter(_FORMATTER)
    return handler


def _env_flag(name: Optional[str]) -> bool:
    if not name:
        return False
    return os.getenv(name, "0").strip().lower() not in _FALSY


def setup_logging(
    level: int = logging.INFO,
    log_file: Optional[str] = None,
    console: bool = True,
) -> logging.Logger:
    """
    Configure the root logger.

    Args:
        level: root log level
        log_file: optional file name (stored with a date prefix)
        console: also log to stdout
    """
    root = logging.getLogger()
    root.setLevel(level)
    root.handlers.clear()

    if console:
        root.addHandler(_stdout_handler(level))
    if log_file:
        handler = _file_handler(_dated_path(log_file), level)
        if handler is not None:
            root.addHandler(handler)

    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
    return root


def setup_module_logger(
    name: str,
    log_file: str,
    level: int = logging.INFO,
    console_env: Optional[str] = None,
) -> logging.Logger:
    """
    Give one module its own log file, independent of the root handlers.

    Args:
        name: logger name
        log_file: file name; nested names get a per-day directory
        level: log level
        console_env: env var that, when truthy, mirrors the logger to stdout
            (``MODULE_LOG_TO_STDOUT`` does so for every module logger)
    """
    logger = logging.getLogger(name)
    logger.setLevel(level)
    logger.propagate = False

    path = _dated_path(log_file)
    already_attached = any(
        isinstance(h, logging.FileHandler) and Path(h.baseFilename) == path
        for h in logger.handlers
    )
    if already_attached:
        return logger

    handler = _file_handler(path, level)
    if handler is not None:
        logger.addHandler(handler)

    if _env_flag("MODULE_LOG_TO_STDOUT") or _env_flag(console_env):
        mirrored = any(
            type(h) is logging.StreamHandler and getattr(h, "stream", None) is sys.stdout
            for h in logger.handlers
        )
        if not mirrored:
            logger.addHandler(_stdout_handler(level))
    return logger


def get_log_level(env_var: str, default: int = logging.INFO) -> int:
    """Level named by ``env_var`` (``DEBUG``, ``INFO``, ...), else ``default``."""
    name = os.getenv(env_var, "").strip().upper()
    level = getattr(logging, name, None) if name else None
    return level if isinstance(level, int) else default


_initialized = False


def init_default_logging(console: bool = True):
    """Configure root logging once per process (level: ``READER_TRANSLATION_LOG_LEVEL``)."""
    global _initialized
    if _initialized:
        return
    setup_logging(
        level=get_log_level("READER_TRANSLATION_LOG_LEVEL"),
        log_file="app.log",
        console=console,
    )
    _initialized = True


__all__ = [
    "LOG_DIR",
    "setup_logging",
    "setup_module_logger",
    "get_log_level",
    "init_default_logging",
]
