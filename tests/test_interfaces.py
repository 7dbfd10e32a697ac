"""
Tests that verify Protocol definitions are valid and implementations comply.
These tests don't test behavior - just that contracts exist.
"""

from __future__ import annotations

import inspect

from minish import interfaces


def test_launcher_protocol_exists():
    """Launcher Protocol must define launch method."""
    assert hasattr(interfaces, "Launcher")
    assert hasattr(interfaces.Launcher, "launch")


def test_config_model_protocol_exists():
    """ConfigModel Protocol must define required attributes."""
    assert hasattr(interfaces, "ConfigModel")

    protocol = interfaces.ConfigModel

    for attr in ["system", "execution", "ui", "get_path"]:
        assert hasattr(protocol, attr), f"ConfigModel missing {attr}"


def test_subprocess_launcher_conforms_to_launcher_protocol():
    """SubprocessLauncher.launch must take the protocol's parameters."""
    from minish.executor import SubprocessLauncher

    launcher = SubprocessLauncher()
    assert callable(launcher.launch)

    expected = list(inspect.signature(interfaces.Launcher.launch).parameters)
    actual = list(inspect.signature(SubprocessLauncher.launch).parameters)
    assert actual == expected


def test_yaml_config_conforms_to_config_model_protocol():
    from minish.config import YAMLConfig

    cfg = YAMLConfig({})
    assert isinstance(cfg.system, dict)
    assert isinstance(cfg.execution, dict)
    assert isinstance(cfg.ui, dict)
    assert callable(cfg.get_path)
