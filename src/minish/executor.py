# minish — Minimal Interactive Command Interpreter
# Copyright (c) 2025
# TriFactoria (Andrew Blankfield)
#
# Licensed under the Business Source License 1.1 (BSL 1.1).
# You may use, modify, and redistribute this file under the terms of the BSL.
# On the Change Date (2029-01-01), this file will be licensed under
# the Apache License, Version 2.0.

"""
Subprocess-backed launcher for external commands.

The child gets the real terminal: stdin/stdout/stderr are inherited and
nothing is captured. argv[0] is the name the user typed, while the binary
is located through the resolved path.
"""

from __future__ import annotations

import os
import subprocess
from dataclasses import dataclass


@dataclass(frozen=True)
class LaunchResult:
    """Result from an external command (no output capture)."""

    exit_code: int
    error: str = ""


class SubprocessLauncher:
    """Subprocess implementation of Launcher protocol."""

    def __init__(self, propagate_path: bool = True):
        """Initialize launcher.

        Args:
            propagate_path: If True, set PATH explicitly in the child
                environment whenever a value is supplied
        """
        self.propagate_path = propagate_path

    def _build_env(self, path_value: str | None) -> dict[str, str]:
        env = os.environ.copy()
        if self.propagate_path and path_value is not None:
            env["PATH"] = path_value
        return env

    def launch(
        self,
        path: str,
        argv0: str,
        args: list[str],
        path_value: str | None = None,
    ) -> LaunchResult:
        """Run a resolved program with full terminal control and wait.

        Args:
            path: resolved executable path (used to locate the binary)
            argv0: display name passed as argv[0]
            args: remaining arguments
            path_value: PATH to propagate into the child

        Returns:
            LaunchResult (exit_code, error)
        """
        try:
            proc = subprocess.Popen(
                [argv0, *args],
                executable=path,
                stdin=None,  # inherit from parent
                stdout=None,  # inherit from parent
                stderr=None,  # inherit from parent
                env=self._build_env(path_value),
            )
        except (OSError, ValueError, subprocess.SubprocessError) as e:
            return LaunchResult(
                exit_code=1,
                error=f"minish: Failed to execute command '{path}': {e}",
            )

        try:
            return LaunchResult(exit_code=proc.wait())
        except OSError as e:
            return LaunchResult(
                exit_code=1,
                error=f"minish: Failed to wait for command '{path}': {e}",
            )
