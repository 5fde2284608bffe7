"""Validating composer.json and related project checks."""

from __future__ import annotations

import subprocess
from typing import Mapping, Optional, Tuple

from .commands import CommandRunner, option_args


def _reports_vulnerabilities_on_failure(output: str) -> bool:
    return bool(output) and (
        ("Found" in output and "vulnerability" in output)
        or "vulnerabilities" in output
        or "Security vulnerability" in output
    )


def _reports_vulnerabilities(output: str) -> bool:
    return "Found" in output and ("vulnerability" in output or "vulnerabilities" in output)


class ValidateCommands(CommandRunner):
    """Commands that validate and check a Composer project."""

    def validate_strict(self) -> str:
        """Validate composer.json in strict mode."""
        return self.run("validate", "--strict")

    def validate_with_no_check(self) -> str:
        """Validate composer.json without the full set of checks."""
        return self.run("validate", "--no-check-all")

    def validate_with_no_check_publish(self) -> str:
        """Validate composer.json without checking publishing requirements."""
        return self.run("validate", "--no-check-publish")

    def validate_with_check_version(self) -> str:
        """Validate composer.json together with its dependencies."""
        return self.run("validate", "--with-dependencies")

    def check_platform_reqs_lock(self) -> str:
        """Check the platform requirements recorded in composer.lock."""
        return self.run("check-platform-reqs", "--lock")

    def check_for_outdated_packages(
        self, direct: bool = False, minor: bool = False, output_format: str = ""
    ) -> str:
        """List outdated packages, optionally only direct ones or minor updates."""
        args = ["outdated"]
        if direct:
            args.append("--direct")
        if minor:
            args.append("--minor-only")
        if output_format:
            args.extend(["--format", output_format])
        return self.run(*args)

    def validate_schema(self) -> str:
        """Validate only the structure of composer.json and composer.lock."""
        return self.run(
            "validate", "--no-check-all", "--no-check-publish", "--no-check-version"
        )

    def validate_with_options(self, options: Optional[Mapping[str, str]] = None) -> str:
        """Validate composer.json with extra ``--key[=value]`` options."""
        return self.run("validate", *option_args(options or {}))

    def validate_quiet(self) -> str:
        """Validate composer.json, printing only on errors."""
        return self.run("validate", "--quiet")

    def check_normalization(self) -> str:
        """Check whether composer.json is normalized."""
        return self.run("validate", "--no-check-all", "--check-normalized")

    def normalize_composer_json(self) -> str:
        """Normalize composer.json (needs the normalize plugin)."""
        return self.run("normalize")

    def check_for_security_vulnerabilities(self) -> Tuple[str, bool]:
        """Run an audit and return its output and whether vulnerabilities were found.

        A failing audit that reports vulnerabilities is not an error; any other
        failure raises ``subprocess.CalledProcessError``.
        """
        try:
            output = self.run("audit")
        except subprocess.CalledProcessError as exc:
            failed_output = exc.output or ""
            if _reports_vulnerabilities_on_failure(failed_output):
                return failed_output, True
            raise
        return output, _reports_vulnerabilities(output)

    def validate_composer_lock(self) -> str:
        """Check that composer.lock exists and matches composer.json."""
        return self.run("validate", "--check-lock")