"""Logging initialization utilities using loguru."""

from __future__ import annotations

import os
from pathlib import Path
import subprocess

from loguru import logger

from infrastructure.utils import default_log_dir


def init_logging(log_dir: str | Path | None = None, level: str = "INFO") -> Path:
    """Initialize rotating file logging under the given directory.

    Returns the directory actually used.
    """
    log_path = Path(log_dir) if log_dir else default_log_dir()
    log_path.mkdir(parents=True, exist_ok=True)

    logger.remove()
    logger.add(
        str(log_path / "app_{time:YYYYMMDD}.log"),
        rotation="10 MB",
        retention="10 days",
        compression="zip",
        enqueue=True,
        backtrace=False,
        diagnose=False,
        level=level,
    )
    return log_path


def open_directory_in_explorer(dir_path: str | Path) -> bool:
    """Open a directory in the file explorer."""
    try:
        if os.name == "nt":  # Windows
            os.startfile(str(dir_path))  # pylint: disable=no-member
        else:  # macOS/Linux
            subprocess.run(["xdg-open", str(dir_path)], check=True)
        return True
    except (OSError, subprocess.CalledProcessError):
        return False
