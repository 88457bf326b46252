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

from .cache import clear_caches
from .config import WorkflowConfig
from .log import Logger
from .manifest import find_local_installation, manifest_path, read_manifest
from .package_manager import PackageManager
from .version import (
    MalformedVersionError,
    UpdateDecision,
    UpdateReason,
    Version,
    is_local_reference,
    needs_update,
    parse_components,
)

log = Logger(__name__)


def list_stable_versions(config: WorkflowConfig, pm: PackageManager) -> list[Version]:
    """Stable registry versions of the package, highest first."""
    versions = [Version(v) for v in pm.get_registry_versions(config.package_name) or []]
    return sorted((v for v in versions if v.stable), reverse=True)


def check_requested_version(requested_version: str) -> None:
    """Warn about requests that are not plain versions; they are still used as is."""
    try:
        parse_components(requested_version, strict=True)
    except MalformedVersionError as e:
        log.warning(
            f"Requested version {requested_version} is not a valid semantic version "
            f"({e}); passing it to the package manager as is."
        )
        return

    if not Version(requested_version).semver:
        log.warning(
            f"Requested version {requested_version} is not a valid semantic version; "
            "passing it to the package manager as is."
        )


def restore_registry_package(
    config: WorkflowConfig,
    pm: PackageManager,
    requested_version: str | None = None,
) -> UpdateDecision:
    """Replace a locally installed build in the target project with a registry release."""
    target_dir = config.require_target_dir()
    name = config.package_name

    target = read_manifest(manifest_path(target_dir))
    installed = target.dependency_spec(name)
    if installed is None:
        log.fatal(
            f"{name} is not a dependency of {target.name or target_dir}; "
            "nothing to restore.",
            file=target.path,
        )

    if not is_local_reference(installed):
        if local := find_local_installation(target_dir, name):
            log.info(f"{name} is declared as {installed} but installed from {local}")
            installed = local

    if requested_version:
        check_requested_version(requested_version)

    registry_versions = pm.get_registry_versions(name)
    if registry_versions is None:
        log.warning(
            f"Registry versions of {name} are unavailable; "
            "only a local installation will be replaced."
        )

    decision = needs_update(installed, registry_versions, requested_version)
    if not decision.should_update:
        log.info(f"{name} {installed} is up to date.")
        return decision

    if decision.reason is UpdateReason.NEWER:
        log.info(f"Updating {name} from {installed} to {decision.latest_available}")
    elif decision.reason is UpdateReason.EXPLICIT:
        log.info(f"Installing requested {name}@{decision.latest_available}")
    else:
        log.info(f"{name} is installed from a local path ({installed})")

    if not decision.latest_available:
        log.warning(
            f"No stable release of {name} found; "
            "installing the registry's default version."
        )

    spec = decision.install_spec(name)
    log.step(1, 3, f"Clearing caches in {target_dir}")
    clear_caches(target_dir, pm, config.clean_paths)

    log.step(2, 3, f"Installing {spec} into {target_dir}")
    pm.install(spec, target_dir)

    log.step(3, 3, "Installing remaining dependencies")
    pm.install_all(target_dir)

    log.ok(f"{target_dir} now uses {spec}")
    return decision
