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
from pathlib import Path
from typing import Any

from . import PackageManifest, Version
from .log import Logger
from .version import is_local_reference

log = Logger(__name__)

MANIFEST_NAME = "package.json"
LOCK_FILE_NAME = "package-lock.json"


def manifest_path(project_dir: Path) -> Path:
    return project_dir / MANIFEST_NAME


def try_read_manifest(path: Path) -> PackageManifest | None:
    """Parse a package.json file; returns None (with a warning) on failure."""
    if not path.exists():
        log.warning(f"{path} does not exist", file=path)
        return None

    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
    except (json.JSONDecodeError, OSError) as e:
        log.warning(f"{path} could not be parsed: {e}", file=path)
        return None

    if not isinstance(data, dict):
        log.warning(f"{path} does not contain a JSON object", file=path)
        return None

    raw_version = data.get("version")
    return PackageManifest(
        path=path,
        name=str(data.get("name", "")),
        version=Version(raw_version) if isinstance(raw_version, str) else None,
        data=data,
    )


def read_manifest(path: Path) -> PackageManifest:
    if m := try_read_manifest(path):
        return m
    log.fatal(f"Could not read manifest {path}", file=path)


def _load_json(path: Path) -> dict[str, Any] | None:
    if not path.is_file():
        return None
    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
    except (json.JSONDecodeError, OSError) as e:
        log.debug(f"Ignoring unreadable {path}: {e}")
        return None
    return data if isinstance(data, dict) else None


def _resolved_from_lock_file(lock: dict[str, Any], package_name: str) -> object:
    # lockfileVersion 1 nests by name, 2 and 3 by install path
    entry = lock.get("dependencies", {}).get(package_name)
    if not isinstance(entry, dict):
        entry = lock.get("packages", {}).get(f"node_modules/{package_name}")
    return entry.get("resolved") if isinstance(entry, dict) else None


def find_local_installation(project_dir: Path, package_name: str) -> str | None:
    """The 'file:' source a package was installed from, or None.

    package.json may still show a registry range after a local tarball was
    installed with --no-save; node_modules and package-lock.json still tell.
    """
    installed = _load_json(project_dir / "node_modules" / package_name / MANIFEST_NAME)
    resolved = installed.get("_resolved") if installed else None
    if isinstance(resolved, str) and is_local_reference(resolved):
        log.debug(f"{package_name} in node_modules resolves to {resolved}")
        return resolved

    lock = _load_json(project_dir / LOCK_FILE_NAME)
    resolved = _resolved_from_lock_file(lock, package_name) if lock else None
    if isinstance(resolved, str) and is_local_reference(resolved):
        log.debug(f"{LOCK_FILE_NAME} resolves {package_name} to {resolved}")
        return resolved

    return None


def write_manifest(manifest: PackageManifest) -> None:
    """Write the manifest the way npm does: two-space indent, trailing newline."""
    with open(manifest.path, "w", encoding="utf-8") as f:
        json.dump(manifest.data, f, indent=2, ensure_ascii=False)
        f.write("\n")
