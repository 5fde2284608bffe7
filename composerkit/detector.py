"""Locating a Composer executable on the local system."""

from __future__ import annotations

import ntpath
import os
import platform
import posixpath
import shutil
import stat
from typing import Iterable, List, Optional

ENV_VARIABLE = "COMPOSER_PATH"


class ExecutableNotFoundError(FileNotFoundError):
    """Raised when no Composer executable can be found."""


def is_executable(path: str) -> bool:
    """Return True if ``path`` is a regular file that can be executed."""
    try:
        info = os.stat(path)
    except (OSError, ValueError):
        return False
    if not stat.S_ISREG(info.st_mode):
        return False
    if os.name == "nt":
        return True
    return bool(stat.S_IMODE(info.st_mode) & 0o111)


def _home_path(relative: str) -> str:
    home = os.environ.get("HOME", "")
    return posixpath.normpath(posixpath.join(home, relative))


def _windows_path(env_name: str) -> str:
    return ntpath.normpath(
        ntpath.join(os.environ.get(env_name, ""), "Composer", "composer.phar")
    )


def platform_specific_paths(system: Optional[str] = None) -> List[str]:
    """Return the usual Composer locations for ``system`` (defaults to this one)."""
    system = (system or platform.system()).lower()
    if system == "windows":
        return [
            _windows_path("APPDATA"),
            _windows_path("ProgramFiles"),
            _windows_path("ProgramFiles(x86)"),
            "composer.phar",
            "composer.bat",
            "composer",
        ]
    paths = ["/usr/local/bin/composer", "/usr/bin/composer"]
    if system == "darwin":
        paths.append("/opt/homebrew/bin/composer")
    paths.append(_home_path(".composer/vendor/bin/composer"))
    paths.append(_home_path("composer.phar"))
    return paths


def default_possible_paths() -> List[str]:
    """Platform locations followed by the current directory."""
    return [*platform_specific_paths(), "./composer", "./composer.phar"]


class Detector:
    """Finds the Composer executable from the environment, known paths or PATH."""

    def __init__(self, possible_paths: Optional[Iterable[str]] = None) -> None:
        self.possible_paths: List[str] = (
            list(possible_paths) if possible_paths is not None else default_possible_paths()
        )

    def add_possible_path(self, path: str) -> None:
        """Append a candidate location."""
        self.possible_paths.append(path)

    def detect(self) -> str:
        """Return the path of the Composer executable.

        Raises ``ExecutableNotFoundError`` when none is found.
        """
        env_path = os.environ.get(ENV_VARIABLE, "")
        if env_path and is_executable(env_path):
            return env_path

        for path in self.possible_paths:
            if is_executable(path):
                return path

        found = shutil.which("composer")
        if found and is_executable(found):
            return found

        raise ExecutableNotFoundError("composer executable not found")

    def is_installed(self) -> bool:
        """Return True if a Composer executable can be found."""
        try:
            self.detect()
        except ExecutableNotFoundError:
            return False
        return True