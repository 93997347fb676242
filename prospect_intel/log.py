"""Logging for the pipeline.

Console output goes to stdout at ``LOG_LEVEL``. Each discovery batch also
gets its own DEBUG-level file under ``LOG_DIR`` (default ``<root>/logs``)
through :func:`batch_log`, so one run's per-term and per-candidate
diagnostics can be read on their own.
"""
from __future__ import annotations

import logging
import os
import sys
from contextlib import contextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterator

PACKAGE_LOGGER = "prospect_intel"
_DEFAULT_LOG_DIR = Path(__file__).resolve().parent.parent / "logs"
_FORMAT = "%(asctime)s  %(levelname)-8s  %(name)s  %(message)s"
_DATE_FMT = "%Y-%m-%d %H:%M:%S"
_configured = False


def log_dir() -> Path:
    raw = os.environ.get("LOG_DIR", "").strip()
    if not raw:
        return _DEFAULT_LOG_DIR
    path = Path(raw)
    return path if path.is_absolute() else _DEFAULT_LOG_DIR.parent / path


def _level() -> int:
    return getattr(logging, os.environ.get("LOG_LEVEL", "INFO").upper(), logging.INFO)


def get_logger(name: str) -> logging.Logger:
    """Return a named logger; sets up the console handler on first call."""
    global _configured
    if not _configured:
        _configure_console()
        _configured = True
    return logging.getLogger(name)


def _configure_console() -> None:
    root = logging.getLogger()
    root.setLevel(_level())
    if root.handlers:
        return
    console = logging.StreamHandler(sys.stdout)
    console.setLevel(_level())
    console.setFormatter(logging.Formatter(_FORMAT, datefmt=_DATE_FMT))
    root.addHandler(console)


@contextmanager
def batch_log(label: str, directory: Path | None = None) -> Iterator[Path | None]:
    """Capture every package record at DEBUG into ``<label>_<timestamp>.log``.

    Yields the file path, or None when the directory cannot be written; the
    batch runs either way. The console keeps its own level.
    """
    directory = directory or log_dir()
    stamp = datetime.now(timezone.utc).strftime("%Y-%m-%d_%H%M%S")
    path = directory / f"{label}_{stamp}.log"
    try:
        directory.mkdir(parents=True, exist_ok=True)
        handler = logging.FileHandler(path, encoding="utf-8")
    except OSError as exc:
        get_logger(__name__).warning("Batch log disabled (%s): %s", path, exc)
        handler = None
    if handler is None:
        yield None
        return

    handler.setLevel(logging.DEBUG)
    handler.setFormatter(logging.Formatter(_FORMAT, datefmt=_DATE_FMT))
    package = logging.getLogger(PACKAGE_LOGGER)
    previous_level = package.level
    package.setLevel(logging.DEBUG)
    package.addHandler(handler)
    try:
        yield path
    finally:
        package.removeHandler(handler)
        package.setLevel(previous_level)
        handler.close()
