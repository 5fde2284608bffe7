"""Creating, initialising and scripting Composer projects."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional

from .commands import CommandRunner, option_args


def _string_field(data: Mapping[str, Any], key: str) -> str:
    value = data.get(key)
    if value is None:
        return ""
    if not isinstance(value, str):
        raise ValueError(f"field {key!r} must be a string, got {type(value).__name__}")
    return value


def _string_map(data: Mapping[str, Any], key: str) -> Dict[str, str]:
    value = data.get(key)
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise ValueError(f"field {key!r} must be an object, got {type(value).__name__}")
    result: Dict[str, str] = {}
    for name, constraint in value.items():
        if not isinstance(constraint, str):
            raise ValueError(f"field {key!r} entry {name!r} must be a string")
        result[name] = constraint
    return result


@dataclass
class ComposerJsonInfo:
    """Basic project information from composer.json."""

    name: str = ""
    description: str = ""
    type: str = ""
    require: Dict[str, str] = field(default_factory=dict)
    require_dev: Dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Any) -> "ComposerJsonInfo":
        """Build the information from decoded JSON, ignoring unknown keys."""
        if not isinstance(data, dict):
            raise ValueError("project information must be a JSON object")
        return cls(
            name=_string_field(data, "name"),
            description=_string_field(data, "description"),
            type=_string_field(data, "type"),
            require=_string_map(data, "require"),
            require_dev=_string_map(data, "require-dev"),
        )


def _package_args(package_name: str, directory: str, version: str) -> list:
    target = f"{package_name}:{version}" if version else package_name
    return [target, directory]


class ProjectCommands(CommandRunner):
    """Commands that create, initialise and script projects."""

    def create_project(self, package_name: str, directory: str, version: str = "") -> None:
        """Create a project from ``package_name`` in ``directory``.

        An empty ``version`` means the latest version.
        """
        self.run("create-project", *_package_args(package_name, directory, version))

    def create_project_with_options(
        self,
        package_name: str,
        directory: str,
        version: str = "",
        options: Optional[Mapping[str, str]] = None,
    ) -> None:
        """Create a project, passing extra ``--key[=value]`` options."""
        self.run(
            "create-project",
            *option_args(options or {}),
            *_package_args(package_name, directory, version),
        )

    def init_project(self) -> None:
        """Initialise a new composer.json interactively."""
        self.run("init")

    def init_project_with_options(
        self,
        name: str = "",
        description: str = "",
        author: str = "",
        options: Optional[Mapping[str, str]] = None,
    ) -> None:
        """Initialise a composer.json with the given name, description and author."""
        args = ["init"]
        if name:
            args.append("--name=" + name)
        if description:
            args.append("--description=" + description)
        if author:
            args.append("--author=" + author)
        args.extend(option_args(options or {}))
        self.run(*args)

    def run_script(self, script_name: str, *args: str) -> str:
        """Run a composer.json script with extra arguments and return its output."""
        return self.run("run-script", script_name, *args)

    def execute_script(self, script_name: str) -> str:
        """Run a composer.json script through ``composer run``."""
        return self.run("run", script_name)

    def archive_project(self, directory: str = "", archive_format: str = "") -> None:
        """Create an archive of the project."""
        args = ["archive"]
        if directory:
            args.append("--dir=" + directory)
        if archive_format:
            args.append("--format=" + archive_format)
        self.run(*args)

    def get_project_info(self) -> ComposerJsonInfo:
        """Return the project's basic information.

        Raises ``ValueError`` if the output is not valid project JSON.
        """
        output = self.run("config", "--list", "--json")
        return ComposerJsonInfo.from_dict(json.loads(output))

    def list_scripts(self) -> str:
        """Return the list of scripts defined in composer.json."""
        return self.run("run-script", "--list")