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

import os
import re
from pathlib import Path, PurePath

from .cache import clear_caches
from .config import WorkflowConfig
from .log import Logger
from .manifest import manifest_path, read_manifest
from .package_manager import PackageManager, tarball_name
from .version import LOCAL_REFERENCE_PREFIX

log = Logger(__name__)


def package_tarballs(directory: Path, package_name: str) -> list[Path]:
    """Tarballs of this package in `directory`, e.g. 'acme-ui-1.2.0.tgz'."""
    prefix = tarball_name(package_name, "")
    pattern = re.compile(rf"^{re.escape(prefix)}\d.*\.tgz$")
    return [p for p in directory.glob("*.tgz") if pattern.match(p.name)]


def remove_stale_tarballs(library_dir: Path, package_name: str) -> list[Path]:
    """Delete tarballs left over from earlier `npm pack` runs of this package."""
    stale = package_tarballs(library_dir, package_name)
    for path in stale:
        log.debug(f"Removing stale tarball {path.name}")
        path.unlink()
    return stale


def find_built_tarball(tarball_dir: Path, package_name: str) -> Path:
    """The newest tarball of the package the build put into `tarball_dir`."""
    if not tarball_dir.is_dir():
        log.fatal(f"Tarball directory {tarball_dir} does not exist; run the build first.")

    candidates = package_tarballs(tarball_dir, package_name)
    if not candidates:
        log.fatal(f"No {tarball_name(package_name, '*')} found in {tarball_dir}.")

    newest = max(candidates, key=lambda p: p.stat().st_mtime)
    if len(candidates) > 1:
        log.warning(
            f"Found {len(candidates)} tarballs of {package_name} in {tarball_dir}; "
            f"using the newest, {newest.name}."
        )
    return newest


def local_install_spec(tarball: Path, target_dir: Path) -> str:
    """'file:' reference to the tarball, relative to the consumer project."""
    relative = PurePath(os.path.relpath(tarball, target_dir)).as_posix()
    return f"{LOCAL_REFERENCE_PREFIX}{relative}"


def deploy_local_package(
    config: WorkflowConfig,
    pm: PackageManager,
    skip_build: bool = False,
    tarball_dir: Path | None = None,
) -> Path:
    """Build the library, then install its tarball into the target project.

    Without `tarball_dir` the tarball is made with `npm pack` in the library
    directory. With it, the tarball the build wrote there is used.

    Returns the path of the installed tarball.
    """
    target_dir = config.require_target_dir()
    library = read_manifest(manifest_path(config.library_dir))
    if not library.version or not library.version.semver:
        log.warning(
            f"{config.package_name} has version '{library.version}', "
            "which is not a valid semantic version.",
            file=library.path,
        )

    total = 5
    if skip_build:
        log.step(1, total, f"Skipping `{config.build_script}` script")
    else:
        log.step(1, total, f"Building {config.package_name}")
        pm.run_script(config.build_script, config.library_dir)

    if tarball_dir:
        log.step(2, total, f"Looking for the built tarball in {tarball_dir}")
        tarball = find_built_tarball(tarball_dir, config.package_name)
    else:
        log.step(2, total, f"Packing {config.package_name}@{library.version}")
        remove_stale_tarballs(config.library_dir, config.package_name)
        tarball = config.library_dir / pm.pack(config.library_dir)
        if not tarball.is_file():
            log.fatal(f"Expected tarball {tarball} was not created.")

    log.step(3, total, f"Clearing caches in {target_dir}")
    clear_caches(target_dir, pm, config.clean_paths)

    spec = local_install_spec(tarball, target_dir)
    log.step(4, total, f"Installing {spec} into {target_dir}")
    pm.install(spec, target_dir)

    log.step(5, total, "Installing remaining dependencies")
    pm.install_all(target_dir)

    log.ok(f"{config.package_name} deployed from {tarball.name} to {target_dir}")
    return tarball
