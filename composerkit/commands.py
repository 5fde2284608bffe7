"""Running Composer commands and version-related helpers."""

from __future__ import annotations

import re
import subprocess
from dataclasses import dataclass
from enum import Enum
from typing import List, Mapping, Optional, Union


def option_args(options: Mapping[str, str]) -> List[str]:
    """Turn ``{"key": "value", "flag": ""}`` into ``["--key=value", "--flag"]``."""
    return [f"--{key}" if value == "" else f"--{key}={value}" for key, value in options.items()]


@dataclass
class CommandRunner:
    """Runs the Composer executable and returns its output."""

    executable_path: str = "composer"
    working_dir: Optional[str] = None
    timeout: Optional[float] = None

    def run(self, *args: str) -> str:
        """Run Composer with ``args`` and return its combined, trimmed output.

        Raises ``subprocess.CalledProcessError`` (carrying the output) when the
        command exits with a non-zero status.
        """
        command = [self.executable_path, *args]
        completed = subprocess.run(
            command,
            cwd=self.working_dir,
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT,
            encoding="utf-8",
            errors="replace",
            timeout=self.timeout,
            check=False,
        )
        output = completed.stdout.strip()
        if completed.returncode != 0:
            raise subprocess.CalledProcessError(completed.returncode, command, output=output)
        return output


class VersionConstraint(str, Enum):
    """Kinds of version constraint understood by Composer."""

    EXACT = "exact"
    CARET = "caret"
    TILDE = "tilde"
    RANGE = "range"
    WILDCARD = "wildcard"


_FIRST_NUMBER = re.compile(r"\d+")


def _next_major(version: str) -> str:
    match = _FIRST_NUMBER.search(version)
    if match is None:
        return "1"
    return str(int(match.group()) + 1)


def format_version_constraint(
    version: str, constraint_type: Union[VersionConstraint, str]
) -> str:
    """Format ``version`` as a constraint string of the given kind."""
    try:
        kind = VersionConstraint(constraint_type)
    except ValueError:
        return version
    if kind is VersionConstraint.CARET:
        return "^" + version
    if kind is VersionConstraint.TILDE:
        return "~" + version
    if kind is VersionConstraint.WILDCARD:
        return version + ".*"
    if kind is VersionConstraint.RANGE:
        return f">={version}.0 <{_next_major(version)}.0.0"
    return version


class VersionCommands(CommandRunner):
    """Commands concerning Composer's own version and package versions."""

    def get_version(self) -> str:
        """Return the Composer version, e.g. ``"2.1.6"``."""
        output = self.run("--version")
        parts = output.split(" ")
        if len(parts) >= 3:
            return parts[2]
        raise ValueError(f"cannot parse version information: {output}")

    def self_update(self) -> None:
        """Update Composer itself to the latest version."""
        self.run("self-update")

    def get_package_versions(self, package_name: str) -> str:
        """Return the output listing all available versions of a package."""
        return self.run("show", "--all", package_name)