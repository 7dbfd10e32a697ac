"""
Tests for PATH search (minish.resolver).
Uses real files under tmp_path with explicit permission bits.
"""

from __future__ import annotations

import os
from pathlib import Path

import pytest

from minish.resolver import find_in_path, is_executable_file, list_executables


def _make_file(directory: Path, name: str, mode: int) -> Path:
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / name
    path.write_text("#!/bin/sh\nexit 0\n", encoding="utf-8")
    path.chmod(mode)
    return path


@pytest.fixture
def bin_dirs(tmp_path: Path) -> tuple[Path, Path]:
    return tmp_path / "bin1", tmp_path / "bin2"


# ----------------------------------------------------------------
# is_executable_file
# ----------------------------------------------------------------


@pytest.mark.parametrize("mode", [0o700, 0o610, 0o601, 0o755, 0o100])
def test_is_executable_file_accepts_any_execute_bit(tmp_path: Path, mode: int):
    path = _make_file(tmp_path, "tool", mode)
    assert is_executable_file(str(path)) is True


def test_is_executable_file_rejects_non_executable_file(tmp_path: Path):
    path = _make_file(tmp_path, "notes", 0o644)
    assert is_executable_file(str(path)) is False


def test_is_executable_file_rejects_directory(tmp_path: Path):
    d = tmp_path / "subdir"
    d.mkdir()
    d.chmod(0o755)
    assert is_executable_file(str(d)) is False


def test_is_executable_file_rejects_missing_path(tmp_path: Path):
    assert is_executable_file(str(tmp_path / "nope")) is False


def test_is_executable_file_follows_symlinks(tmp_path: Path):
    target = _make_file(tmp_path, "real", 0o755)
    link = tmp_path / "link"
    link.symlink_to(target)
    assert is_executable_file(str(link)) is True


def test_is_executable_file_rejects_nul_in_name():
    assert is_executable_file("bad\x00name") is False


# ----------------------------------------------------------------
# find_in_path
# ----------------------------------------------------------------


def test_find_in_path_returns_dir_slash_name(bin_dirs):
    bin1, bin2 = bin_dirs
    _make_file(bin2, "mytool", 0o755)
    bin1.mkdir()

    search = f"{bin1}:{bin2}"
    assert find_in_path("mytool", search) == f"{bin2}/mytool"


def test_find_in_path_first_directory_wins(bin_dirs):
    bin1, bin2 = bin_dirs
    _make_file(bin1, "dup", 0o755)
    _make_file(bin2, "dup", 0o755)

    assert find_in_path("dup", f"{bin1}:{bin2}") == f"{bin1}/dup"
    assert find_in_path("dup", f"{bin2}:{bin1}") == f"{bin2}/dup"


def test_find_in_path_skips_non_executable_candidates(bin_dirs):
    bin1, bin2 = bin_dirs
    _make_file(bin1, "tool", 0o644)
    _make_file(bin2, "tool", 0o755)

    assert find_in_path("tool", f"{bin1}:{bin2}") == f"{bin2}/tool"


def test_find_in_path_misses_when_absent(bin_dirs):
    bin1, _ = bin_dirs
    bin1.mkdir()
    assert find_in_path("missing_cmd_xyz", str(bin1)) is None


def test_find_in_path_misses_when_path_unset():
    assert find_in_path("sh", None) is None


def test_find_in_path_empty_entry_means_relative_name(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
):
    _make_file(tmp_path, "local", 0o755)
    monkeypatch.chdir(tmp_path)
    assert find_in_path("local", "") == "local"


def test_find_in_path_does_not_cache(bin_dirs):
    """A file added after a miss is found on the next lookup."""
    bin1, _ = bin_dirs
    bin1.mkdir()
    assert find_in_path("late", str(bin1)) is None

    _make_file(bin1, "late", 0o755)
    assert find_in_path("late", str(bin1)) == os.path.join(str(bin1), "late")


# ----------------------------------------------------------------
# list_executables
# ----------------------------------------------------------------


def test_list_executables_collects_names_across_dirs(bin_dirs):
    bin1, bin2 = bin_dirs
    _make_file(bin1, "alpha", 0o755)
    _make_file(bin1, "readme", 0o644)
    _make_file(bin2, "beta", 0o700)

    names = list_executables(f"{bin1}:{bin2}:/nonexistent/dir")
    assert names == {"alpha", "beta"}


def test_list_executables_empty_path():
    assert list_executables(None) == set()
    assert list_executables("") == set()
