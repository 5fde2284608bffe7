"""Configuration for installing Composer."""

from __future__ import annotations

import os
import platform
from dataclasses import dataclass

DEFAULT_DOWNLOAD_URL = "https://getcomposer.org/installer"
DEFAULT_TIMEOUT_SECONDS = 300


@dataclass
class InstallerConfig:
    """Settings used by the installers."""

    download_url: str = ""
    install_path: str = ""
    use_proxy: bool = False
    proxy_url: str = ""
    timeout_seconds: int = 0
    use_sudo: bool = False
    prefer_brew_on_mac: bool = False


def default_config() -> InstallerConfig:
    """Return the default configuration for the current operating system."""
    config = InstallerConfig(
        download_url=DEFAULT_DOWNLOAD_URL,
        timeout_seconds=DEFAULT_TIMEOUT_SECONDS,
        use_proxy=False,
        prefer_brew_on_mac=True,
    )
    system = platform.system().lower()
    if system == "windows":
        config.install_path = os.path.join(os.environ.get("ProgramFiles", ""), "Composer")
    elif system in ("darwin", "linux"):
        config.install_path = "/usr/local/bin"
    return config