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

import shutil
from collections.abc import Iterable
from pathlib import Path

from .log import Logger
from .package_manager import PackageManager

log = Logger(__name__)


def clear_caches(
    project_dir: Path, pm: PackageManager, clean_paths: Iterable[str]
) -> list[Path]:
    """Reset the consumer project before a fresh install.

    Cleans the package-manager cache, then deletes `clean_paths` below
    `project_dir` (node_modules and the lock file by default).
    Returns the paths that were actually removed.
    """
    pm.clean_cache()

    removed: list[Path] = []
    for name in clean_paths:
        path = project_dir / name
        if not path.exists():
            continue
        if path.is_dir():
            shutil.rmtree(path)
        else:
            path.unlink()
        log.debug(f"Removed {path}")
        removed.append(path)

    if not removed:
        log.debug(f"Nothing to remove in {project_dir}")
    return removed
