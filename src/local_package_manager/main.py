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
import sys
from pathlib import Path

from .config import LIBRARY_DIR_ENV, NPM_ENV, TARGET_DIR_ENV, load_config
from .deploy import deploy_local_package
from .log import Logger
from .package_manager import PackageManager, PackageManagerError
from .restore import list_stable_versions, restore_registry_package
from .sync import DEFAULT_SYNCED_PEERS, sync_dependencies

log = Logger(__name__)


def parse_args(args: list[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Try out a local build of the library in a sibling project."
    )
    parser.add_argument(
        "--library-dir",
        type=str,
        default=None,
        help=f"Library project (package.json); defaults to ${LIBRARY_DIR_ENV} "
        "or the current directory.",
    )
    parser.add_argument(
        "--target-dir",
        type=str,
        default=None,
        help=f"Sibling project using the library; defaults to ${TARGET_DIR_ENV}.",
    )
    parser.add_argument(
        "--npm",
        type=str,
        default=None,
        help=f"Package-manager binary; defaults to ${NPM_ENV} or `npm`.",
    )

    commands = parser.add_subparsers(dest="command", required=True)

    deploy = commands.add_parser(
        "deploy", help="Pack the local build and install it into the target project."
    )
    deploy.add_argument(
        "--skip-build",
        action="store_true",
        help="Pack the existing build output without running the build script.",
    )
    deploy.add_argument(
        "--tarball-dir",
        type=str,
        default=None,
        help="Use the newest package tarball the build wrote to this directory "
        "(relative to the library, e.g. `dist`) instead of running `npm pack`.",
    )

    restore = commands.add_parser(
        "restore", help="Install a registry release into the target project again."
    )
    restore.add_argument(
        "--version",
        dest="requested_version",
        type=str,
        default=None,
        help="Install exactly this version instead of the latest stable one.",
    )
    restore.add_argument(
        "--list-versions",
        action="store_true",
        help="Only list the stable registry versions.",
    )

    sync = commands.add_parser(
        "sync",
        help="Copy devDependency versions from the workspace root into the "
        "library's peerDependencies.",
    )
    sync.add_argument(
        "--root",
        type=str,
        default=".",
        help="Workspace root containing the reference package.json.",
    )
    sync.add_argument(
        "--check",
        action="store_true",
        help="Only report differences; exits non-zero if any are found.",
    )
    sync.add_argument(
        "--peer",
        dest="peers",
        action="append",
        default=None,
        help="Peer dependency to sync; may be repeated. Defaults to "
        f"{', '.join(DEFAULT_SYNCED_PEERS)}.",
    )

    return parser.parse_args(args)


def run(p: argparse.Namespace, pm: PackageManager | None = None) -> None:
    config = load_config(p)
    pm = pm or PackageManager(config.npm_binary)

    if p.command == "deploy":
        tarball_dir = config.library_dir / p.tarball_dir if p.tarball_dir else None
        deploy_local_package(
            config, pm, skip_build=p.skip_build, tarball_dir=tarball_dir
        )
    elif p.command == "restore":
        if p.list_versions:
            versions = list_stable_versions(config, pm)
            if not versions:
                log.warning(f"No stable versions of {config.package_name} found.")
            for v in versions:
                print(v)
        else:
            restore_registry_package(config, pm, p.requested_version)
    elif p.command == "sync":
        sync_dependencies(
            config,
            Path(p.root).resolve(),
            check=p.check,
            peers=p.peers or DEFAULT_SYNCED_PEERS,
        )


def main(args: list[str]) -> None:
    """Main entry point.

    Resolves the configuration once and runs the selected workflow.
    """
    p = parse_args(args)
    try:
        run(p)
    except PackageManagerError as e:
        log.fatal(str(e))

    if Logger.warnings:
        # If any warnings were issued, exit with non-zero code
        log.fatal(f"Completed with {len(Logger.warnings)} warnings.")


def cli() -> None:
    main(args=sys.argv[1:])


if __name__ == "__main__":
    cli()
