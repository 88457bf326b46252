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
Version comparison and the update decision for locally linked packages.

Versions are plain strings as they appear in package.json and in the
registry: "1.2.3", "^1.2.0", "~2.0", "1.0.0-rc.1" or "file:../lib/pkg.tgz".
None of the functions here raise for malformed input; comparisons are
best-effort so that they stay total.
"""

import re
from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum

import semver

LOCAL_REFERENCE_PREFIX = "file:"
RANGE_OPERATORS = ("^", "~")

_PRERELEASE_PATTERNS = (
    re.compile(r"-[A-Za-z]"),
    re.compile(r"-\d+$"),
)
_LEADING_DIGITS = re.compile(r"^\d+")


class MalformedVersionError(ValueError):
    """A version component does not start with a number."""


class Comparison(Enum):
    LESSER = -1
    EQUAL = 0
    GREATER = 1


class UpdateReason(str, Enum):
    LOCAL = "local"
    EXPLICIT = "explicit"
    NEWER = "newer"
    UP_TO_DATE = "up-to-date"


@dataclass(frozen=True)
class UpdateDecision:
    should_update: bool
    reason: UpdateReason
    latest_available: str | None = None

    def install_spec(self, package_name: str) -> str:
        """Argument for `npm install`.

        Without a known version the bare name is returned, which makes the
        package manager pick the registry's default tag.
        """
        if self.latest_available:
            return f"{package_name}@{self.latest_available}"
        return package_name


def strip_range_operator(version: str) -> str:
    if version.startswith(RANGE_OPERATORS):
        return version[1:]
    return version


def is_local_reference(version: str | None) -> bool:
    return version is not None and version.startswith(LOCAL_REFERENCE_PREFIX)


def is_stable(version: str) -> bool:
    """True for release versions, False for e.g. '1.2.3-beta' or '1.2.3-0'."""
    return not any(p.search(version) for p in _PRERELEASE_PATTERNS)


def parse_components(version: str, strict: bool = False) -> list[int]:
    """Split a version into its integer components.

    Each component contributes its leading digits ("3-beta" -> 3). A
    component without leading digits counts as zero, or raises
    MalformedVersionError in strict mode.
    """
    components: list[int] = []
    for part in strip_range_operator(version).split("."):
        if m := _LEADING_DIGITS.match(part):
            components.append(int(m.group(0)))
        elif strict:
            raise MalformedVersionError(
                f"Version '{version}' has a non-numeric component '{part}'"
            )
        else:
            components.append(0)
    return components


def compare(a: str, b: str) -> Comparison:
    """Compare two versions component-wise; missing components count as zero."""
    left = parse_components(a)
    right = parse_components(b)
    width = max(len(left), len(right))
    left += [0] * (width - len(left))
    right += [0] * (width - len(right))

    for x, y in zip(left, right):
        if x > y:
            return Comparison.GREATER
        if x < y:
            return Comparison.LESSER
    return Comparison.EQUAL


def select_latest_stable(versions: Iterable[str]) -> str | None:
    latest: str | None = None
    for candidate in filter(is_stable, versions):
        if latest is None or compare(candidate, latest) is Comparison.GREATER:
            latest = candidate
    return latest


def needs_update(
    installed_version: str | None,
    registry_versions: Iterable[str] | None,
    requested_version: str | None = None,
) -> UpdateDecision:
    """Decide whether the installed package should be replaced by a registry release.

    1. A local reference is always replaced, by the requested version if
       one is given, else by the latest stable release.
    2. An explicitly requested version is always installed, verbatim.
    3. Otherwise only a newer stable registry version triggers an update.

    A missing installed version or an empty/unknown registry list results
    in "no update" unless rule 1 or 2 applies.
    """
    latest = select_latest_stable(registry_versions or [])

    if is_local_reference(installed_version):
        return UpdateDecision(True, UpdateReason.LOCAL, requested_version or latest)

    if requested_version:
        return UpdateDecision(True, UpdateReason.EXPLICIT, requested_version)

    if (
        latest
        and installed_version
        and compare(latest, strip_range_operator(installed_version))
        is Comparison.GREATER
    ):
        return UpdateDecision(True, UpdateReason.NEWER, latest)

    return UpdateDecision(False, UpdateReason.UP_TO_DATE, latest)


class Version:
    def __init__(self, s: str) -> None:
        if not isinstance(s, str):
            raise TypeError("Version must be a string")

        self._raw = s

        try:
            self._semver = semver.Version.parse(
                strip_range_operator(s), optional_minor_and_patch=True
            )
        except ValueError:
            self._semver = None

    @property
    def semver(self) -> semver.Version | None:
        return self._semver

    @property
    def stable(self) -> bool:
        return is_stable(self._raw)

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Version):
            return NotImplemented
        return compare(self._raw, other._raw) is Comparison.LESSER

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Version):
            return NotImplemented
        # "1.0" and "1.0.0" order the same but are
        # different entries in a manifest.
        return self._raw == other._raw

    def __hash__(self) -> int:
        return hash(self._raw)

    def __str__(self) -> str:
        return self._raw

    def __repr__(self) -> str:
        return f"Version({self._raw!r})"
