# composerkit

A Python library for working with PHP's Composer dependency manager. It
finds a Composer executable on the machine and can install Composer when it
is missing. It also wraps a set of Composer commands in plain Python methods.

## What it covers

- **Detection**: `composerkit.detector` looks in the `COMPOSER_PATH`
  environment variable first. Next it tries a list of platform-specific
  locations plus `./composer` and `./composer.phar`. Last, it searches `PATH`
  with `shutil.which`.
- **Installation**: `composerkit.installer` downloads the official setup
  script and runs it with PHP. On macOS it tries Homebrew first when
  `prefer_brew_on_mac` is set. It then writes a small `composer` launcher
  next to `composer.phar`; on Windows the launcher is `composer.bat`.
  Settings live in `composerkit.install_config.InstallerConfig`.
- **Downloads and files**: `composerkit.download` (`download_file`,
  `DownloadConfig`) and `composerkit.fs` (`check_write_permission`,
  `ensure_directory_exists`, `create_file_with_content`) hold the helpers
  the installer uses.
- **Commands**: each command group is a subclass of
  `composerkit.commands.CommandRunner`. You construct it with
  `executable_path`, `working_dir` and `timeout`.

  | Class | Module | Covers |
  | --- | --- | --- |
  | `VersionCommands` | `composerkit.commands` | `get_version`, `self_update`, `get_package_versions` |
  | `RepositoryCommands` | `composerkit.repository` | Repositories, Packagist, `preferred-install`, stability and other `config` settings |
  | `ProjectCommands` | `composerkit.project` | `create-project`, `init`, scripts, `archive`, project info |
  | `SatisCommands` | `composerkit.satis` | Reading and writing `satis.json`, plus `satis build` |
  | `ValidateCommands` | `composerkit.validate` | The `validate` variants, `outdated`, `check-platform-reqs`, `normalize`, `audit` |

## Finding Composer

```python
from composerkit.detector import Detector, ExecutableNotFoundError

detector = Detector()  # default locations for this platform
try:
    path = detector.detect()
except ExecutableNotFoundError:
    path = None
```

`Detector.is_installed()` returns a boolean instead of raising.
`Detector.add_possible_path()` appends a location to the search list.

## Installing Composer

```python
from composerkit.install_config import default_config
from composerkit.installer import Installer, InsufficientRightsError

config = default_config()
try:
    Installer(config).install()
except InsufficientRightsError:
    ...  # set config.use_sudo = True, or choose another install_path
```

The installer for the current operating system is chosen automatically.
`get_platform_installer(config, system)` returns the installer for a given
system name. It raises `UnsupportedPlatformError` for systems it does not
know.

## Running commands

```python
from composerkit.commands import VersionCommands
from composerkit.repository import RepositoryCommands

print(VersionCommands(executable_path="/usr/local/bin/composer").get_version())

repos = RepositoryCommands(working_dir="my-project")
repos.add_vcs_repository("my-lib", "https://example.com/vendor/package.git")
repos.set_preferred_install("dist")
```

## Version constraints

```python
from composerkit.commands import VersionConstraint, format_version_constraint

format_version_constraint("1.2", VersionConstraint.CARET)     # "^1.2"
format_version_constraint("1.2", VersionConstraint.WILDCARD)  # "1.2.*"
format_version_constraint("1.2", VersionConstraint.RANGE)     # ">=1.2.0 <2.0.0"
```

## Errors

Failures are raised as exceptions; nothing is returned as an error code.

- **Failed Composer command**: a command that exits with a non-zero status
  raises `subprocess.CalledProcessError`. The exception carries the output.
  - Exception: `ValidateCommands.check_for_security_vulnerabilities`. When a
    failing audit reports vulnerabilities, it returns the output and `True`
    instead of raising.
- **Invalid values**: these raise `ValueError`. Examples are an unknown
  `preferred-install` mode, an unknown Satis stability, or version output
  that cannot be parsed.
- **Downloads**: a failed download raises `DownloadError`.
- **Installation**: installation failures raise `InstallationError` or one of
  its subclasses.

## What it does not do

- It has no command-line program; it is a library only.
- There is no single client object that combines the command groups.
- It has no wrappers for `install`, `update`, `require` or `remove`. Use
  `CommandRunner.run(...)` to run those, or any other Composer command,
  directly.

## Running the tests

Install the `test` extra, then run `pytest` from the project root.