"""Managing Composer repositories and related configuration."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional, Union

from .commands import CommandRunner

PACKAGIST_NAME = "packagist.org"
PACKAGIST_URL = "https://repo.packagist.org"
PREFERRED_INSTALL_VALUES = ("dist", "source", "auto")

_GO_ESCAPES = {
    "<": "\\u003c",
    ">": "\\u003e",
    "&": "\\u0026",
    "\u2028": "\\u2028",
    "\u2029": "\\u2029",
}


class RepositoryType(str, Enum):
    """Kinds of Composer repository."""

    VCS = "vcs"
    COMPOSER = "composer"
    PACKAGIST = "packagist"
    PATH = "path"
    ARTIFACT = "artifact"
    PEAR = "pear"


def _sorted_mapping(value: Any) -> Any:
    if isinstance(value, dict):
        return {key: _sorted_mapping(value[key]) for key in sorted(value)}
    if isinstance(value, (list, tuple)):
        return [_sorted_mapping(item) for item in value]
    return value


def _escape(text: str) -> str:
    return "".join(_GO_ESCAPES.get(char, char) for char in text)


@dataclass
class Repository:
    """A single repository entry in composer.json."""

    type: Union[RepositoryType, str]
    url: str = ""
    name: str = ""
    options: Optional[Dict[str, Any]] = field(default=None)

    def to_dict(self) -> Dict[str, Any]:
        """Return the entry as a mapping, leaving out empty fields."""
        kind = self.type.value if isinstance(self.type, RepositoryType) else str(self.type)
        data: Dict[str, Any] = {"type": kind}
        if self.url:
            data["url"] = self.url
        if self.name:
            data["name"] = self.name
        if self.options:
            data["options"] = _sorted_mapping(self.options)
        return data

    def to_json(self) -> str:
        """Return the compact JSON text Composer accepts for this entry."""
        text = json.dumps(self.to_dict(), separators=(",", ":"), ensure_ascii=False)
        return _escape(text)


class RepositoryCommands(CommandRunner):
    """Commands that edit repositories and configuration settings."""

    def add_repository(self, name: str, repo: Repository) -> None:
        """Add a repository to composer.json under ``name``."""
        self.run("config", "repositories." + name, repo.to_json())

    def remove_repository(self, name: str) -> None:
        """Remove the repository called ``name`` from composer.json."""
        self.run("config", "--unset", "repositories." + name)

    def list_repositories(self) -> str:
        """Return the configured repositories."""
        return self.run("config", "repositories")

    def add_packagist_repository(self, url: str) -> None:
        """Add Packagist (or a mirror of it) at ``url``."""
        self.add_repository(
            PACKAGIST_NAME, Repository(type=RepositoryType.PACKAGIST, url=url)
        )

    def disable_packagist_repository(self) -> None:
        """Disable the official Packagist repository."""
        self.run("config", "repositories.packagist.org.url", "false")

    def enable_packagist_repository(self) -> None:
        """Enable the official Packagist repository."""
        self.run("config", "repositories.packagist.org.url", PACKAGIST_URL)

    def add_vcs_repository(self, name: str, url: str) -> None:
        """Add a version-control repository."""
        self.add_repository(name, Repository(type=RepositoryType.VCS, url=url))

    def add_path_repository(
        self, name: str, path: str, options: Optional[Dict[str, Any]] = None
    ) -> None:
        """Add a local path repository with optional settings such as ``symlink``."""
        self.add_repository(
            name, Repository(type=RepositoryType.PATH, url=path, options=options)
        )

    def add_composer_repository(self, name: str, url: str) -> None:
        """Add a Composer-format repository."""
        self.add_repository(name, Repository(type=RepositoryType.COMPOSER, url=url))

    def get_preferred_install(self) -> str:
        """Return the preferred-install setting."""
        return self.run("config", "preferred-install")

    def set_preferred_install(self, value: str) -> None:
        """Set preferred-install to ``dist``, ``source`` or ``auto``.

        Raises ``ValueError`` for any other value.
        """
        if value not in PREFERRED_INSTALL_VALUES:
            raise ValueError(
                f"invalid preferred-install value: {value}, "
                "must be 'dist', 'source' or 'auto'"
            )
        self.run("config", "preferred-install", value)

    def set_minimum_stability(self, stability: str) -> None:
        """Set the minimum stability of installable packages."""
        self.run("config", "minimum-stability", stability)

    def get_minimum_stability(self) -> str:
        """Return the minimum stability setting."""
        return self.run("config", "minimum-stability")

    def get_prefer_stable(self) -> str:
        """Return the prefer-stable setting (``"0"`` or ``"1"``)."""
        return self.run("config", "prefer-stable")

    def set_prefer_stable(self, prefer_stable: bool) -> None:
        """Set whether stable package versions are preferred."""
        self.run("config", "prefer-stable", "1" if prefer_stable else "0")

    def add_artifact_repository(self, name: str, path: str) -> None:
        """Add a directory of package archives as a repository."""
        self.add_repository(name, Repository(type=RepositoryType.ARTIFACT, url=path))

    def set_config_parameter(self, key: str, value: str) -> None:
        """Set the configuration entry ``key`` to ``value``."""
        self.run("config", key, value)

    def get_config_parameter(self, key: str) -> str:
        """Return the value of the configuration entry ``key``."""
        return self.run("config", key)

    def unset_config(self, key: str) -> None:
        """Remove the configuration entry ``key``."""
        self.run("config", "--unset", key)

    def add_global_repository(self, name: str, repo: Repository) -> None:
        """Add a repository to the global configuration."""
        self.run("config", "--global", "repositories." + name, repo.to_json())

    def remove_global_repository(self, name: str) -> None:
        """Remove a repository from the global configuration."""
        self.run("config", "--global", "--unset", "repositories." + name)

    def list_global_repositories(self) -> str:
        """Return the globally configured repositories."""
        return self.run("config", "--global", "repositories")