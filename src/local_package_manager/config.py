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

import argparse
import os
from dataclasses import dataclass
from pathlib import Path

from .log import Logger
from .manifest import manifest_path, read_manifest

log = Logger(__name__)

LIBRARY_DIR_ENV = "DEV_PACKAGE_LIBRARY_DIR"
TARGET_DIR_ENV = "DEV_PACKAGE_TARGET_DIR"
NPM_ENV = "DEV_PACKAGE_NPM"

# Removed from the consumer project before installing, so nothing of the
# previous installation survives
DEFAULT_CLEAN_PATHS = ("node_modules", "package-lock.json")


@dataclass(frozen=True)
class WorkflowConfig:
    library_dir: Path
    # Sibling project the library gets installed into; not needed for `sync`
    target_dir: Path | None
    # Read from the library manifest once, when the config is built
    package_name: str
    npm_binary: str = "npm"
    build_script: str = "build"
    clean_paths: tuple[str, ...] = DEFAULT_CLEAN_PATHS

    def require_target_dir(self) -> Path:
        if self.target_dir is None:
            log.fatal(
                f"No target project given; use --target-dir or set ${TARGET_DIR_ENV}."
            )
        if not self.target_dir.is_dir():
            log.fatal(f"Target project {self.target_dir} is not a directory.")
        return self.target_dir


def _resolve(cli_value: str | None, env_name: str) -> str | None:
    """CLI argument first, then environment variable."""
    if cli_value:
        return cli_value
    if value := os.getenv(env_name):
        log.debug(f"Using ${env_name}={value}")
        return value
    return None


def load_config(args: argparse.Namespace) -> WorkflowConfig:
    """Resolve the configuration for one program run.

    Settings come from CLI arguments, then environment variables, then
    defaults. The package name is taken from the library's package.json.
    """
    library_dir = Path(_resolve(args.library_dir, LIBRARY_DIR_ENV) or ".").resolve()
    target = _resolve(args.target_dir, TARGET_DIR_ENV)
    npm_binary = _resolve(args.npm, NPM_ENV) or "npm"

    library = read_manifest(manifest_path(library_dir))
    if not library.name:
        log.fatal(f"{library.path} has no package name", file=library.path)

    return WorkflowConfig(
        library_dir=library_dir,
        target_dir=Path(target).resolve() if target else None,
        package_name=library.name,
        npm_binary=npm_binary,
    )
