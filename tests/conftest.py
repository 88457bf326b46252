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
from unittest.mock import MagicMock

import pytest

from src.local_package_manager import PackageManifest, Version
from src.local_package_manager.config import WorkflowConfig
from src.local_package_manager.log import Logger
from src.local_package_manager.package_manager import PackageManager

LIBRARY_DIR = Path("/work/ui-lib")
TARGET_DIR = Path("/work/demo-app")
PACKAGE_NAME = "@acme/ui"


@pytest.fixture(autouse=True)
def reset_warnings():
    """Warnings are counted process-wide; start every test from zero."""
    Logger.reset()
    yield
    Logger.reset()


@pytest.fixture
def build_fake_filesystem(fs: Any):
    """Convenience helper to build a fake filesystem from a nested dict."""

    def _build(structure: dict[str, object], base_path: str = "") -> None:
        base = base_path or "/"
        for name, value in structure.items():
            path = f"{base.rstrip('/')}/{name}"
            if isinstance(value, dict):
                fs.makedirs(path, exist_ok=True)
                _build(value, path)
            else:
                fs.create_file(path, contents=value)

    return _build


@pytest.fixture
def workspace_setup(build_fake_filesystem):
    """Library project and a sibling demo app that depends on it."""

    def _setup(
        installed: str | None = "^1.0.0",
        library_version: str = "1.2.0",
        library_deps: dict[str, str] | None = None,
        extra_library_files: dict[str, object] | None = None,
        extra_target_files: dict[str, object] | None = None,
    ) -> None:
        library = {
            "name": PACKAGE_NAME,
            "version": library_version,
            "scripts": {"build": "vite build"},
        }
        if library_deps is not None:
            library["dependencies"] = library_deps

        target: dict[str, object] = {"name": "demo-app", "private": True}
        if installed is not None:
            target["dependencies"] = {PACKAGE_NAME: installed, "react": "^18.2.0"}

        build_fake_filesystem(
            {
                "work": {
                    "ui-lib": {
                        "package.json": json.dumps(library, indent=2),
                        **(extra_library_files or {}),
                    },
                    "demo-app": {
                        "package.json": json.dumps(target, indent=2),
                        **(extra_target_files or {}),
                    },
                }
            }
        )

    return _setup


def make_config(
    target_dir: Path | None = TARGET_DIR,
    package_name: str = PACKAGE_NAME,
) -> WorkflowConfig:
    return WorkflowConfig(
        library_dir=LIBRARY_DIR,
        target_dir=target_dir,
        package_name=package_name,
    )


def make_manifest(
    name: str = PACKAGE_NAME,
    version: str | None = "1.0.0",
    path: Path = LIBRARY_DIR / "package.json",
    **sections: dict[str, str],
) -> PackageManifest:
    data: dict[str, Any] = {"name": name}
    if version is not None:
        data["version"] = version
    data.update(sections)
    return PackageManifest(
        path=path,
        name=name,
        version=Version(version) if version else None,
        data=data,
    )


def make_package_manager(
    registry_versions: list[str] | None = None,
    tarball: str = "acme-ui-1.2.0.tgz",
) -> MagicMock:
    """PackageManager mock; `pack` reports `tarball` as file name."""
    pm = MagicMock(spec=PackageManager)
    pm.get_registry_versions.return_value = registry_versions
    pm.pack.return_value = tarball
    return pm


def read_json(path: Path) -> Any:
    return json.loads(path.read_text())
