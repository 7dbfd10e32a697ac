# minish — Minimal Interactive Command Interpreter
# Copyright (c) 2025
# TriFactoria (Andrew Blankfield)
#
# Licensed under the Business Source License 1.1 (BSL 1.1).
# You may use, modify, and redistribute this file under the terms of the BSL.
# On the Change Date (2029-01-01), this file will be licensed under
# the Apache License, Version 2.0.

"""
PATH search for external commands.

No caching: every lookup rescans the search string, so results always
reflect the filesystem at call time.
"""

from __future__ import annotations

import os
import stat

PATH_SEPARATOR = ":"

# Owner, group or other execute bit
EXECUTE_BITS = stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH


def is_executable_file(path: str) -> bool:
    """Check that path is a regular file with any execute bit set."""
    try:
        st = os.stat(path)
    except (OSError, ValueError):
        # Missing, unreadable, or an embedded NUL in the name
        return False
    return stat.S_ISREG(st.st_mode) and bool(st.st_mode & EXECUTE_BITS)


def find_in_path(name: str, search_path: str | None) -> str | None:
    """Return the first executable `<dir>/<name>` in search_path order.

    Args:
        name: Command name as typed
        search_path: Colon-separated directory list; None always misses

    Returns:
        Candidate path of the first match, or None
    """
    if search_path is None:
        return None

    for directory in search_path.split(PATH_SEPARATOR):
        candidate = os.path.join(directory, name)
        if is_executable_file(candidate):
            return candidate
    return None


def list_executables(search_path: str | None) -> set[str]:
    """Collect executable names reachable through search_path."""
    names: set[str] = set()
    if not search_path:
        return names

    for directory in search_path.split(PATH_SEPARATOR):
        if not directory:
            continue
        try:
            entries = os.listdir(directory)
        except OSError:
            continue
        for entry in entries:
            if is_executable_file(os.path.join(directory, entry)):
                names.add(entry)
    return names
