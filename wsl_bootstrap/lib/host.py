from __future__ import annotations

import ctypes
import logging
import platform
import sys
from dataclasses import dataclass

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class OsVersion:
    major: int
    build: int

    def __str__(self) -> str:
        return f"{self.major}.0.{self.build}"


def is_windows() -> bool:
    return platform.system().lower() == "windows"


def meets_minimum(version: OsVersion, *, min_major: int = 10, min_build: int = 19041) -> bool:
    """Windows 10 needs build >= min_build; any later major version passes.

    Windows 11 still reports major 10 (with build >= 22000), so it passes on
    the build check.
    """
    if version.major > min_major:
        return True
    return version.major == min_major and version.build >= min_build


class WindowsHost:
    def is_admin(self) -> bool:
        if not is_windows():
            return False
        try:
            return bool(ctypes.windll.shell32.IsUserAnAdmin())  # type: ignore[attr-defined]
        except (AttributeError, OSError):
            logger.debug("IsUserAnAdmin unavailable", exc_info=True)
            return False

    def os_version(self) -> OsVersion:
        if not is_windows():
            return OsVersion(major=0, build=0)
        v = sys.getwindowsversion()  # type: ignore[attr-defined]
        return OsVersion(major=int(v.major), build=int(v.build))
