"""Managing Satis repository configuration files."""

from __future__ import annotations

import json
import os
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional

from .commands import CommandRunner
from .fs import create_file_with_content

VALID_STABILITIES = frozenset({"dev", "alpha", "beta", "RC", "stable"})
DEFAULT_SATIS_DIR = "satis"
CONFIG_FILE_NAME = "satis.json"

_HTML_ESCAPES = {"<": "\\u003c", ">": "\\u003e", "&": "\\u0026"}


def _sorted(value: Any) -> Any:
    if isinstance(value, dict):
        return {key: _sorted(value[key]) for key in sorted(value)}
    if isinstance(value, list):
        return [_sorted(item) for item in value]
    return value


def _str(data: Mapping[str, Any], key: str) -> str:
    value = data.get(key)
    if value is None:
        return ""
    if not isinstance(value, str):
        raise ValueError(f"field {key!r} must be a string")
    return value


def _bool(data: Mapping[str, Any], key: str) -> bool:
    value = data.get(key)
    if value is None:
        return False
    if not isinstance(value, bool):
        raise ValueError(f"field {key!r} must be a boolean")
    return value


def _str_map(value: Any, key: str) -> Dict[str, str]:
    if value is None:
        return {}
    if not isinstance(value, dict) or not all(isinstance(v, str) for v in value.values()):
        raise ValueError(f"field {key!r} must be an object of strings")
    return dict(value)


def _any_map(data: Mapping[str, Any], key: str) -> Dict[str, Any]:
    value = data.get(key)
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise ValueError(f"field {key!r} must be an object")
    return dict(value)


@dataclass
class SatisConfig:
    """The contents of a satis.json file."""

    name: str = ""
    homepage: str = ""
    repositories: List[Dict[str, str]] = field(default_factory=list)
    output_dir: str = ""
    require_all: bool = False
    require_dependencies: bool = False
    require_dev_dependencies: bool = False
    require: Dict[str, str] = field(default_factory=dict)
    archive: Dict[str, Any] = field(default_factory=dict)
    minimum_stability: str = ""
    providers: bool = False
    providers_url: str = ""
    config: Dict[str, Any] = field(default_factory=dict)
    notify: Dict[str, Any] = field(default_factory=dict)
    twig_template: str = ""

    @classmethod
    def from_dict(cls, data: Any) -> "SatisConfig":
        """Build a configuration from decoded JSON, ignoring unknown keys."""
        if not isinstance(data, dict):
            raise ValueError("satis configuration must be a JSON object")
        repositories = data.get("repositories") or []
        if not isinstance(repositories, list):
            raise ValueError("field 'repositories' must be an array")
        return cls(
            name=_str(data, "name"),
            homepage=_str(data, "homepage"),
            repositories=[_str_map(repo, "repositories") for repo in repositories],
            output_dir=_str(data, "output-dir"),
            require_all=_bool(data, "require-all"),
            require_dependencies=_bool(data, "require-dependencies"),
            require_dev_dependencies=_bool(data, "require-dev-dependencies"),
            require=_str_map(data.get("require"), "require"),
            archive=_any_map(data, "archive"),
            minimum_stability=_str(data, "minimum-stability"),
            providers=_bool(data, "providers"),
            providers_url=_str(data, "providers-url"),
            config=_any_map(data, "config"),
            notify=_any_map(data, "notify"),
            twig_template=_str(data, "twig-template"),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Return the configuration as satis.json data, leaving out empty optional fields."""
        data: Dict[str, Any] = {
            "name": self.name,
            "homepage": self.homepage,
            "repositories": [_sorted(repo) for repo in self.repositories],
            "output-dir": self.output_dir,
        }
        optional = [
            ("require-all", self.require_all),
            ("require-dependencies", self.require_dependencies),
            ("require-dev-dependencies", self.require_dev_dependencies),
            ("require", _sorted(self.require)),
            ("archive", _sorted(self.archive)),
            ("minimum-stability", self.minimum_stability),
            ("providers", self.providers),
            ("providers-url", self.providers_url),
            ("config", _sorted(self.config)),
            ("notify", _sorted(self.notify)),
            ("twig-template", self.twig_template),
        ]
        data.update((key, value) for key, value in optional if value)
        return data

    def to_json(self) -> str:
        """Return the indented JSON text written to satis.json."""
        text = json.dumps(self.to_dict(), indent=4, ensure_ascii=False)
        return "".join(_HTML_ESCAPES.get(char, char) for char in text)


def _load(config_path: str) -> SatisConfig:
    with open(config_path, encoding="utf-8") as handle:
        return SatisConfig.from_dict(json.load(handle))


def _save(config_path: str, config: SatisConfig) -> None:
    create_file_with_content(config_path, config.to_json(), 0o644)


class SatisCommands(CommandRunner):
    """Commands for creating and building Satis repositories."""

    def create_satis_config(self, config_path: str, name: str, homepage: str) -> None:
        """Write a new satis.json with sensible defaults."""
        config = SatisConfig(
            name=name,
            homepage=homepage,
            repositories=[],
            output_dir="public",
            require_all=True,
        )
        os.makedirs(os.path.dirname(os.fspath(config_path)) or ".", mode=0o755, exist_ok=True)
        _save(config_path, config)

    def add_satis_repository(self, config_path: str, repo_type: str, url: str) -> None:
        """Append a repository entry to the Satis configuration."""
        config = _load(config_path)
        config.repositories.append({"type": repo_type, "url": url})
        _save(config_path, config)

    def build_satis(self, config_path: str, output_dir: str = "") -> str:
        """Build the Satis repository and return the command output."""
        if output_dir:
            return self.run("satis", "build", config_path, output_dir)
        return self.run("satis", "build", config_path)

    def init_satis(self, name: str, homepage: str, directory: Optional[str] = "") -> None:
        """Create ``directory`` (``satis`` by default) holding a new satis.json."""
        directory = directory or DEFAULT_SATIS_DIR
        os.makedirs(directory, mode=0o755, exist_ok=True)
        self.create_satis_config(os.path.join(directory, CONFIG_FILE_NAME), name, homepage)

    def update_satis_stability(self, config_path: str, stability: str) -> None:
        """Set the minimum stability; raises ``ValueError`` for unknown levels."""
        if stability not in VALID_STABILITIES:
            raise ValueError(f"invalid stability: {stability}")
        config = _load(config_path)
        config.minimum_stability = stability
        _save(config_path, config)

    def enable_satis_archive(self, config_path: str, archive_format: str = "") -> None:
        """Turn on archiving into ``dist`` in the given format (``zip`` by default)."""
        config = _load(config_path)
        config.archive["directory"] = "dist"
        config.archive["format"] = archive_format or "zip"
        config.archive["skip-dev"] = False
        _save(config_path, config)

    def add_satis_require(self, config_path: str, package_name: str, version: str) -> None:
        """Require a specific package and switch off require-all."""
        config = _load(config_path)
        config.require[package_name] = version
        config.require_all = False
        _save(config_path, config)