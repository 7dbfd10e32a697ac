# minish — Minimal Interactive Command Interpreter
# Copyright (c) 2025
# TriFactoria (Andrew Blankfield)
#
# Licensed under the Business Source License 1.1 (BSL 1.1).
# You may use, modify, and redistribute this file under the terms of the BSL.
# On the Change Date (2029-01-01), this file will be licensed under
# the Apache License, Version 2.0.

"""
Protocol definitions for dependency injection.

These interfaces keep the kernel independent of process creation and
of where configuration comes from.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from .executor import LaunchResult  # pragma: no cover


class Launcher(Protocol):
    """Protocol for running a resolved external program."""

    def launch(
        self,
        path: str,
        argv0: str,
        args: list[str],
        path_value: str | None = None,
    ) -> LaunchResult:
        """Spawn path with argv [argv0, *args], inherited stdio, and wait.

        Returns:
            LaunchResult (error is set when spawn or wait failed)
        """
        ...


class ConfigModel(Protocol):
    """Protocol for configuration access."""

    @property
    def system(self) -> dict[str, Any]:
        """System configuration (prompt, welcome)."""
        ...

    @property
    def execution(self) -> dict[str, Any]:
        """External command execution settings."""
        ...

    @property
    def ui(self) -> dict[str, Any]:
        """Interactive UI settings."""
        ...

    def get_path(self, path: str, default: Any = None) -> Any:
        """Nested lookup using a dot-separated path."""
        ...
