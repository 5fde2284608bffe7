"""Installing Composer on the supported operating systems."""

from __future__ import annotations

import os
import platform
import shutil
import subprocess
import tempfile
from typing import List, Optional, Sequence

from .download import DownloadConfig, download_file
from .fs import check_write_permission, create_file_with_content, ensure_directory_exists
from .install_config import InstallerConfig, default_config

SETUP_SCRIPT_NAME = "composer-setup.php"
PHAR_NAME = "composer.phar"


class InstallationError(Exception):
    """Raised when Composer cannot be installed."""


class InsufficientRightsError(InstallationError):
    """Raised when the install directory is not writable and sudo is not allowed."""


class UnsupportedPlatformError(InstallationError):
    """Raised when there is no installer for the current operating system."""


def _run(command: Sequence[str], **kwargs) -> subprocess.CompletedProcess:
    try:
        return subprocess.run(list(command), check=False, **kwargs)
    except OSError as exc:
        raise InstallationError(f"cannot run {command[0]}: {exc}") from exc


def _decode(output) -> str:
    if isinstance(output, bytes):
        return output.decode("utf-8", errors="replace")
    return output or ""


class PlatformInstaller:
    """Installs Composer by downloading and running the official setup script."""

    def __init__(self, config: InstallerConfig) -> None:
        self.config = config

    @property
    def phar_path(self) -> str:
        return os.path.join(self.config.install_path, PHAR_NAME)

    @property
    def script_path(self) -> str:
        return os.path.join(tempfile.gettempdir(), SETUP_SCRIPT_NAME)

    def _setup_command(self, script_path: str) -> List[str]:
        command = [
            "php",
            script_path,
            f"--install-dir={self.config.install_path}",
            f"--filename={PHAR_NAME}",
        ]
        if self.config.use_sudo:
            command.insert(0, "sudo")
        return command

    def _download_script(self) -> str:
        script_path = self.script_path
        download_file(
            self.config.download_url,
            script_path,
            DownloadConfig(use_proxy=self.config.use_proxy, proxy_url=self.config.proxy_url),
        )
        return script_path

    def _run_setup(self, script_path: str) -> None:
        result = _run(
            self._setup_command(script_path),
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT,
        )
        if result.returncode != 0:
            raise InstallationError(
                f"installation failed: {_decode(result.stdout)}, "
                f"exit status {result.returncode}"
            )

    def _write_launcher(self) -> None:
        bin_path = os.path.join(self.config.install_path, "composer")
        content = f'#!/bin/sh\nphp "{self.phar_path}" "$@"'
        try:
            create_file_with_content(bin_path, content, 0o755)
        except OSError as exc:
            raise InstallationError(f"cannot create executable: {exc}") from exc

    def install(self) -> None:
        """Download the setup script, run it with PHP and write a launcher."""
        script_path = self._download_script()
        try:
            self._run_setup(script_path)
            self._write_launcher()
        finally:
            try:
                os.remove(script_path)
            except OSError:
                pass


class UnixInstaller(PlatformInstaller):
    """Installer for generic Unix-like systems, optionally using sudo."""

    def _write_launcher(self) -> None:
        if not self.config.use_sudo:
            super()._write_launcher()
            return
        bin_path = os.path.join(self.config.install_path, "composer")
        content = f'#!/bin/sh\nphp "{self.phar_path}" "$@"\n'
        tee = _run(
            ["sudo", "tee", bin_path],
            input=content.encode("utf-8"),
            stdout=subprocess.DEVNULL,
        )
        if tee.returncode != 0:
            raise InstallationError(
                f"cannot create executable with sudo: exit status {tee.returncode}"
            )
        chmod = _run(["sudo", "chmod", "755", bin_path])
        if chmod.returncode != 0:
            raise InstallationError(
                f"cannot set executable permission: exit status {chmod.returncode}"
            )

    def install(self) -> None:
        """Install Composer; an unwritable target is only an error without sudo."""
        try:
            check_write_permission(self.config.install_path)
        except OSError as exc:
            if not self.config.use_sudo:
                raise InsufficientRightsError(
                    "insufficient rights, run with administrator/sudo privileges; "
                    f"target path: {self.config.install_path}"
                ) from exc
        super().install()


class LinuxInstaller(UnixInstaller):
    """Installer for Linux."""


class MacOSInstaller(PlatformInstaller):
    """Installer for macOS, trying Homebrew first when configured to."""

    def _try_brew_install(self) -> bool:
        if not self.config.prefer_brew_on_mac:
            return False
        print("Trying to install Composer with Homebrew...")
        if shutil.which("brew") is None:
            print("Homebrew not found, installing Composer the traditional way")
            return False
        result = _run(
            ["brew", "install", "composer"],
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT,
        )
        if result.returncode != 0:
            print(
                f"Homebrew installation failed: {_decode(result.stdout)}, "
                "installing the traditional way"
            )
            return False
        print("Composer installed with Homebrew")
        return True

    def install(self) -> None:
        """Install with Homebrew if possible, otherwise with the setup script."""
        if self._try_brew_install():
            return
        try:
            check_write_permission(self.config.install_path)
        except OSError as exc:
            raise InstallationError(f"install directory is not writable: {exc}") from exc
        super().install()


class WindowsInstaller(PlatformInstaller):
    """Installer for Windows, writing a batch file launcher."""

    def _setup_command(self, script_path: str) -> List[str]:
        return [
            "php",
            script_path,
            f"--install-dir={self.config.install_path}",
            f"--filename={PHAR_NAME}",
        ]

    def _write_launcher(self) -> None:
        bat_path = os.path.join(self.config.install_path, "composer.bat")
        content = f'@php "{self.phar_path}" %*'
        try:
            create_file_with_content(bat_path, content, 0o755)
        except OSError as exc:
            raise InstallationError(f"cannot create batch file: {exc}") from exc

    def install(self) -> None:
        """Install Composer and remind the user to extend PATH."""
        try:
            ensure_directory_exists(self.config.install_path)
        except OSError as exc:
            raise InstallationError(f"cannot create install directory: {exc}") from exc
        super().install()
        print("Installed. Add the following directory to your PATH:")
        print(self.config.install_path)


_UNIX_SYSTEMS = frozenset({"freebsd", "openbsd", "netbsd", "dragonfly"})


def get_platform_installer(
    config: InstallerConfig, system: Optional[str] = None
) -> PlatformInstaller:
    """Return the installer suited to ``system`` (defaults to this one)."""
    name = (system or platform.system()).lower()
    if name == "windows":
        return WindowsInstaller(config)
    if name == "darwin":
        return MacOSInstaller(config)
    if name == "linux":
        return LinuxInstaller(config)
    if name in _UNIX_SYSTEMS:
        return UnixInstaller(config)
    raise UnsupportedPlatformError(f"unsupported operating system: {name}")


class Installer:
    """Installs Composer using the installer for the current platform."""

    def __init__(self, config: Optional[InstallerConfig] = None) -> None:
        self.config = config if config is not None else default_config()

    def install(self) -> None:
        """Install Composer."""
        get_platform_installer(self.config).install()


def default_installer() -> Installer:
    """Return an installer using the default configuration."""
    return Installer(default_config())