# minish — Minimal Interactive Command Interpreter
# Copyright (c) 2025
# TriFactoria (Andrew Blankfield)
#
# Licensed under the Business Source License 1.1 (BSL 1.1).
# You may use, modify, and redistribute this file under the terms of the BSL.
# On the Change Date (2029-01-01), this file will be licensed under
# the Apache License, Version 2.0.

"""
Process environment context handed to the kernel.

The default instance is backed by the real process, so `cd` changes the
process-wide working directory and children inherit it.
"""

from __future__ import annotations

import os
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field


@dataclass
class ShellEnvironment:
    """Variables, working directory and home lookup for one session."""

    variables: Mapping[str, str] = field(default_factory=lambda: os.environ)
    getcwd: Callable[[], str] = os.getcwd
    chdir: Callable[[str], None] = os.chdir
    home_lookup: Callable[[str], str] = os.path.expanduser

    @property
    def path(self) -> str | None:
        """PATH value, or None when unset."""
        return self.variables.get("PATH")

    def home_dir(self) -> str:
        return self.home_lookup("~")

    def current_dir(self) -> str:
        try:
            return self.getcwd()
        except OSError:
            return "."

    def change_dir(self, target: str) -> None:
        """Change the working directory.

        Raises OSError on failure (ValueError for an embedded NUL).
        """
        self.chdir(target)
