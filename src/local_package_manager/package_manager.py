# *******************************************************************************
# Copyright (c) 2025 Contributors to the Eclipse Foundation
#
# See the NOTICE file(s) distributed with this work for additional
# information regarding copyright ownership.
#
# This program and the accompanying materials are made available under the
# terms of the Apache License Version 2.0 which is available at
# https://www.apache.org/licenses/LICENSE-2.0
#
# SPDX-License-Identifier: Apache-2.0
# *******************************************************************************

import json
import subprocess
from collections.abc import Callable
from pathlib import Path
from typing import Any

from .log import Logger

log = Logger(__name__)


class PackageManagerError(RuntimeError):
    """A package-manager command failed or could not be started."""


def tarball_name(package_name: str, version: str) -> str:
    """File name `npm pack` produces, e.g. '@org/ui' 1.0.0 -> 'org-ui-1.0.0.tgz'."""
    return f"{package_name.lstrip('@').replace('/', '-')}-{version}.tgz"


class PackageManager:
    """Wrapper around the package-manager binary (npm by default).

    Every shell-out of the workflows goes through this class; tests replace
    it with a mock. `runner` has the signature of `subprocess.run`.
    """

    def __init__(
        self,
        binary: str = "npm",
        runner: Callable[..., subprocess.CompletedProcess[str]] = subprocess.run,
    ):
        self.binary = binary
        self._runner = runner
        self._versions_cache: dict[str, list[str] | None] = {}

    def _run(self, args: list[str], cwd: Path | None = None) -> str:
        cmd = [self.binary, *args]
        log.debug(f"Running `{' '.join(cmd)}`" + (f" in {cwd}" if cwd else ""))
        try:
            completed = self._runner(
                cmd, cwd=cwd, capture_output=True, text=True, check=True
            )
        except FileNotFoundError as e:
            raise PackageManagerError(f"`{self.binary}` not found: {e}") from e
        except subprocess.CalledProcessError as e:
            details = (e.stderr or e.stdout or "").strip()
            raise PackageManagerError(
                f"`{' '.join(cmd)}` failed with exit code {e.returncode}: {details}"
            ) from e
        return completed.stdout or ""

    def run_script(self, script: str, cwd: Path) -> None:
        self._run(["run", script], cwd)

    def pack(self, cwd: Path) -> str:
        """Pack the package in `cwd`; returns the tarball file name.

        npm prints the notice block on stderr and the file name as the last
        line of stdout.
        """
        lines = [line.strip() for line in self._run(["pack"], cwd).splitlines()]
        lines = [line for line in lines if line]
        if not lines:
            raise PackageManagerError(f"`{self.binary} pack` did not report a tarball")
        return lines[-1]

    def install(self, spec: str, cwd: Path) -> None:
        self._run(["install", spec], cwd)

    def install_all(self, cwd: Path) -> None:
        """Plain `npm install` of everything the manifest lists."""
        self._run(["install"], cwd)

    def clean_cache(self) -> bool:
        """`npm cache clean --force`; a failure is only a warning."""
        try:
            self._run(["cache", "clean", "--force"])
        except PackageManagerError as e:
            log.warning(f"Could not clean the package-manager cache: {e}")
            return False
        return True

    def get_registry_versions(self, package_name: str) -> list[str] | None:
        """All versions the registry knows for a package, in registry order.

        Caches results to avoid redundant registry queries.
        Returns None if the registry cannot be queried.
        """
        if package_name in self._versions_cache:
            return self._versions_cache[package_name]

        result: list[str] | None
        try:
            output = self._run(["view", package_name, "versions", "--json"])
            parsed: Any = json.loads(output) if output.strip() else []
        except (PackageManagerError, json.JSONDecodeError) as e:
            log.warning(f"Error fetching registry versions for {package_name}: {e}")
            result = None
        else:
            # A package with a single version is reported as a plain string
            if isinstance(parsed, str):
                result = [parsed]
            elif isinstance(parsed, list):
                result = [str(v) for v in parsed]
            else:
                log.warning(
                    f"Unexpected registry answer for {package_name}: {output.strip()}"
                )
                result = None

        self._versions_cache[package_name] = result
        return result
