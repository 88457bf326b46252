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

"""
Keep the library's peer dependency ranges in line with the workspace root.

The workspace root develops the library against the versions in its
devDependencies; the library's peerDependencies must ask consumers for the
same versions. Only the packages listed in `peers` are synced.
"""

from collections.abc import Iterable
from pathlib import Path

from . import DependencyChange, PackageManifest
from .config import WorkflowConfig
from .log import Logger
from .manifest import manifest_path, read_manifest, write_manifest
from .version import is_local_reference

log = Logger(__name__)

SOURCE_SECTION = "devDependencies"
TARGET_SECTION = "peerDependencies"
DEFAULT_SYNCED_PEERS = ("@angular/material", "@angular/cdk")


def plan_dependency_sync(
    root: PackageManifest, library: PackageManifest, peers: Iterable[str]
) -> list[DependencyChange]:
    """Changes that bring the library's peers to the root's dev versions.

    Peers the root does not declare are reported as warnings and skipped.
    """
    wanted = root.dependencies(SOURCE_SECTION)
    current = library.dependencies(TARGET_SECTION)
    changes: list[DependencyChange] = []

    for name in peers:
        expected = wanted.get(name)
        if expected is None:
            log.warning(
                f"{name} is not in the {SOURCE_SECTION} of {root.path}; not syncing",
                file=root.path,
            )
            continue
        if is_local_reference(expected):
            log.debug(f"Root uses a local reference for {name}; not syncing")
            continue
        if current.get(name) != expected:
            changes.append(
                DependencyChange(TARGET_SECTION, name, current.get(name), expected)
            )

    return changes


def apply_dependency_sync(
    library: PackageManifest, changes: list[DependencyChange]
) -> None:
    if not isinstance(library.data.get(TARGET_SECTION), dict):
        library.data[TARGET_SECTION] = {}
    for change in changes:
        library.data[change.section][change.name] = change.new
    write_manifest(library)


def sync_dependencies(
    config: WorkflowConfig,
    root_dir: Path,
    check: bool = False,
    peers: Iterable[str] = DEFAULT_SYNCED_PEERS,
) -> list[DependencyChange]:
    """Copy root devDependency versions into the library's peerDependencies.

    With `check`, nothing is written and every difference is a warning.
    """
    root = read_manifest(manifest_path(root_dir))
    library = read_manifest(manifest_path(config.library_dir))
    if root.path.resolve() == library.path.resolve():
        log.fatal(f"Workspace root and library are the same manifest ({root.path})")

    changes = plan_dependency_sync(root, library, peers)
    if not changes:
        log.ok(f"{library.name} peer dependencies are in sync with {root.path}")
        return changes

    if check:
        for change in changes:
            log.warning(f"Out of sync: {change}", file=library.path)
        return changes

    for change in changes:
        log.info(f"Updating {change}")
    apply_dependency_sync(library, changes)
    log.ok(f"Updated {len(changes)} peer dependencies in {library.path}")
    return changes
