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
from pathlib import Path
from typing import ClassVar, NoReturn

# level -> (local prefix, GitHub Actions workflow command)
_LEVELS = {
    "debug": ("DEBUG", "debug"),
    "info": ("INFO", "notice"),
    "step": ("STEP", "notice"),
    "success": ("SUCCESS", "notice"),
    "warning": ("WARNING", "warning"),
    "error": ("ERROR", "error"),
}


def is_running_in_github_actions() -> bool:
    return "GITHUB_ACTIONS" in os.environ


class Logger:
    """Minimal logger that prints locally and emits annotations on GitHub Actions.

    Warnings are collected on the class, so the entry point sees warnings
    emitted by every module, not only its own.
    """

    warnings: ClassVar[list[str]] = []

    def __init__(self, name: str):
        self.name = name

    @classmethod
    def reset(cls) -> None:
        cls.warnings.clear()

    def _loc(self, file: Path | None, line: int | None) -> str:
        if file and file.is_absolute():
            try:
                file = file.relative_to(Path.cwd())
            except ValueError:
                pass

        if is_running_in_github_actions():
            if file and line:
                return f" file={file},line={line}"
            if file:
                return f" file={file}"
            return ""

        if file and line:
            return f" {file}:{line}"
        if file:
            return f" {file}"
        return ""

    def _print(
        self, prefix: str, msg: str, file: Path | None = None, line: int | None = None
    ) -> None:
        location = self._loc(file, line)
        pretty, command = _LEVELS.get(prefix, (prefix, prefix))
        if is_running_in_github_actions():
            print(f"::{command}{location}::{self.name} {msg}")
        else:
            print(f"{pretty}:{location} {self.name} {msg}")

    def debug(self, msg: str) -> None:
        self._print("debug", msg)

    def info(self, msg: str) -> None:
        self._print("info", msg)

    def step(self, number: int, total: int, msg: str) -> None:
        self._print("step", f"[{number}/{total}] {msg}")

    def ok(self, msg: str) -> None:
        self._print("success", msg)

    def warning(
        self, msg: str, file: Path | None = None, line: int | None = None
    ) -> None:
        Logger.warnings.append(msg)
        self._print("warning", msg, file, line)

    def fatal(
        self, msg: str, file: Path | None = None, line: int | None = None
    ) -> NoReturn:
        self._print("error", msg, file, line)
        raise SystemExit(1)
