from __future__ import annotations

import getpass
import logging
import os
import tempfile
from pathlib import Path
from typing import Optional

from .lib.env import PATHS

DEFAULT_LOG_PATH = PATHS.log_default


def run_identity() -> str:
    return os.environ.get("USERNAME") or getpass.getuser()


def is_boot_task_context(identity: Optional[str] = None) -> bool:
    """True when running as SYSTEM, which is how the reentry task resumes us."""
    name = (identity or run_identity()).upper()
    return name == "SYSTEM" or name.endswith("$")


def fallback_log_path(identity: Optional[str] = None) -> str:
    # SYSTEM starts in System32; use the temp dir instead of the working directory.
    suffix = "-resumed" if is_boot_task_context(identity) else ""
    return str(Path(tempfile.gettempdir()) / f"wsl-bootstrap{suffix}.log")


def configure_logging(
    log_path: str = DEFAULT_LOG_PATH,
    *,
    install_log: Optional[str] = None,
    dry_run: bool = False,
    level: int = logging.INFO,
    also_console: bool = True,
) -> str:
    """Configure root logging once per process.

    The pre-reboot run and the resumed boot task append to the same file, so
    the startup record names who is running (user or SYSTEM) and where the
    winget output goes. If log_path is not writable we log to a temp file
    named after the run context.

    Returns the actual file path being used.
    """

    logger = logging.getLogger()
    logger.setLevel(level)

    if getattr(logger, "_wsl_bootstrap_configured", False):
        return getattr(logger, "_wsl_bootstrap_log_path", log_path)

    identity = run_identity()
    fmt = logging.Formatter(
        fmt="%(asctime)s %(levelname)s %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S%z",
    )

    try:
        Path(os.path.dirname(log_path) or ".").mkdir(parents=True, exist_ok=True)
        file_handler: logging.Handler = logging.FileHandler(log_path, encoding="utf-8")
        chosen_path = log_path
    except OSError:
        chosen_path = fallback_log_path(identity)
        file_handler = logging.FileHandler(chosen_path, encoding="utf-8")
    file_handler.setFormatter(fmt)
    logger.addHandler(file_handler)

    if also_console:
        console = logging.StreamHandler()
        console.setFormatter(fmt)
        logger.addHandler(console)

    setattr(logger, "_wsl_bootstrap_configured", True)
    setattr(logger, "_wsl_bootstrap_log_path", chosen_path)

    logging.getLogger(__name__).info(
        "Logging initialized (requested=%s, actual=%s, user=%s, context=%s, install_log=%s, dry_run=%s)",
        log_path,
        chosen_path,
        identity,
        "boot-task" if is_boot_task_context(identity) else "interactive",
        install_log or "-",
        dry_run,
    )
    return chosen_path
