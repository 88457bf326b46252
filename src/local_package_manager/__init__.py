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

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from .version import UpdateDecision, UpdateReason, Version

__all__ = [
    "DEPENDENCY_SECTIONS",
    "DependencyChange",
    "PackageManifest",
    "UpdateDecision",
    "UpdateReason",
    "Version",
]

# Lookup order when asking "which version of X does this package use?"
DEPENDENCY_SECTIONS = ("dependencies", "devDependencies", "peerDependencies")


@dataclass
class PackageManifest:
    path: Path
    name: str
    version: Version | None
    # Raw JSON content; key order is kept when writing back
    data: dict[str, Any] = field(default_factory=dict)

    def dependencies(self, section: str) -> dict[str, str]:
        deps = self.data.get(section)
        return deps if isinstance(deps, dict) else {}

    def dependency_spec(self, package_name: str) -> str | None:
        """Returns the version string of a dependency, or None if not declared."""
        for section in DEPENDENCY_SECTIONS:
            if package_name in self.dependencies(section):
                return self.dependencies(section)[package_name]
        return None


@dataclass
class DependencyChange:
    section: str
    name: str
    # None when the library does not declare the dependency yet
    old: str | None
    new: str

    def __str__(self) -> str:
        return f"{self.section}.{self.name}: {self.old or '(missing)'} -> {self.new}"
