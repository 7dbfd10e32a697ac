# minish — Minimal Interactive Command Interpreter
# Copyright (c) 2025
# TriFactoria (Andrew Blankfield)
#
# Licensed under the Business Source License 1.1 (BSL 1.1).
# You may use, modify, and redistribute this file under the terms of the BSL.
# On the Change Date (2029-01-01), this file will be licensed under
# the Apache License, Version 2.0.

"""
Configuration and data root resolution for minish.

Handles:
- Packaged YAML defaults (minish/defaults/system.yaml)
- The YAMLConfig wrapper handed to the kernel and UI
- Data root + crash log location (MINISH_DATA_HOME, ~/.local/share)
"""

from __future__ import annotations

import os
from importlib import resources as importlib_resources
from pathlib import Path
from typing import Any

import yaml

DEFAULT_PROMPT = "$ "

DATA_HOME_ENV = "MINISH_DATA_HOME"

# Set to "1" to use the plain input() reader instead of prompt_toolkit
LEGACY_UI_ENV = "MINISH_LEGACY_UI"


class YAMLConfig:
    """Read-only view over the loaded YAML mapping (ConfigModel)."""

    def __init__(self, config_dict: dict[str, Any]):
        self._config = config_dict

    def _section(self, name: str) -> dict[str, Any]:
        value = self._config.get(name)
        return value if isinstance(value, dict) else {}

    @property
    def system(self) -> dict[str, Any]:
        return self._section("system")

    @property
    def execution(self) -> dict[str, Any]:
        return self._section("execution")

    @property
    def ui(self) -> dict[str, Any]:
        return self._section("ui")

    def get_path(self, path: str, default: Any = None) -> Any:
        """
        Dot-separated lookup, e.g. get_path("ui.theme.style", {}).
        Any missing or non-mapping step yields default.
        """
        node: Any = self._config
        for key in filter(None, path.split(".")):
            if not isinstance(node, dict) or key not in node:
                return default
            node = node[key]
        return default if node is self._config else node


# -----------------------
# Data root
# -----------------------


def get_data_root() -> Path:
    """MINISH_DATA_HOME when set, otherwise ~/.local/share.

    XDG_DATA_HOME is not consulted and nothing is created here.
    """
    override = os.getenv(DATA_HOME_ENV)
    return Path(override) if override else Path.home() / ".local" / "share"


def crash_log_path(data_root: Path) -> Path:
    return data_root / "minish" / "logs" / "crash.log"


# -----------------------
# Packaged defaults
# -----------------------


def _defaults_dir() -> Path:
    return Path(str(importlib_resources.files("minish.defaults")))


def load_defaults_yaml(filename: str) -> dict[str, Any]:
    """Parse one packaged defaults file into a dict.

    Raises FileNotFoundError when the file is absent and ValueError when
    its top level is not a mapping. An empty file is an empty mapping.
    """
    source = _defaults_dir() / filename
    try:
        text = source.read_text(encoding="utf-8")
    except FileNotFoundError:
        raise FileNotFoundError(
            f"Missing defaults YAML: {filename} (looked in {source.parent})"
        ) from None

    data = yaml.safe_load(text)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError(f"Defaults YAML {filename} must load to a mapping.")
    return data


def load_system_config() -> YAMLConfig:
    return YAMLConfig(load_defaults_yaml("system.yaml"))
