# minish — Minimal Interactive Command Interpreter
# Copyright (c) 2025
# TriFactoria (Andrew Blankfield)
#
# Licensed under the Business Source License 1.1 (BSL 1.1).
# You may use, modify, and redistribute this file under the terms of the BSL.
# On the Change Date (2029-01-01), this file will be licensed under
# the Apache License, Version 2.0.

"""
minish kernel.

Core implementation of minish:
- tokenizing a command line
- builtin classification + handler table (exit, echo, type, pwd, cd)
- PATH resolution + external command launch

Important boundary:
- Kernel does not read input or load YAML.
- Kernel consumes the injected Launcher, ConfigModel and ShellEnvironment.

Output goes through the streaming hooks (output_fn / error_fn) wired by
the CLI; when unset, kernel writes to sys.stdout / sys.stderr.
"""

from __future__ import annotations

import sys
import traceback
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any

from . import config as cfg_module
from .environment import ShellEnvironment
from .interfaces import ConfigModel, Launcher
from .resolver import find_in_path
from .utils import parse_exit_status, tokenize


def write_crash_log(
    error: Exception,
    raw_command: str = "",
    cwd: str = "",
) -> None:
    """Write an entry to the crash log.

    Logs unhandled exceptions raised while handling a command.
    Only creates the log directory when actually needed.
    Appends to crash.log (never overwrites).
    """
    try:
        crash_log = cfg_module.crash_log_path(cfg_module.get_data_root())

        # Create logs directory only when we need to write
        crash_log.parent.mkdir(parents=True, exist_ok=True)

        timestamp = datetime.now().isoformat()
        lines = [f"{timestamp}"]

        if raw_command:
            lines.append(f"raw={raw_command}")
        if cwd:
            lines.append(f"cwd={cwd}")

        lines.append(f"error={type(error).__name__}: {error}")
        lines.append("traceback:")
        lines.append(traceback.format_exc())
        lines.append("----")

        with crash_log.open("a", encoding="utf-8") as f:
            f.write("\n".join(lines) + "\n")

    except Exception:
        # If we can't write the crash log, fail silently
        # (we're already in an error state)
        pass


class BuiltinKind(Enum):
    """Commands implemented by the kernel itself."""

    EXIT = "exit"
    ECHO = "echo"
    TYPE = "type"
    PWD = "pwd"
    CD = "cd"

    @classmethod
    def from_name(cls, name: str) -> BuiltinKind | None:
        """Exact, case-sensitive lookup; None for anything else."""
        try:
            return cls(name)
        except ValueError:
            return None


BUILTIN_NAMES: tuple[str, ...] = tuple(kind.value for kind in BuiltinKind)


@dataclass(frozen=True)
class ExecutionOutcome:
    """Whether the session goes on, or ends with exit_status."""

    exit_status: int | None = None

    @property
    def terminates(self) -> bool:
        return self.exit_status is not None


CONTINUE = ExecutionOutcome()


@dataclass
class Kernel:
    """minish session engine."""

    launcher: Launcher
    config: ConfigModel
    env: ShellEnvironment = field(default_factory=ShellEnvironment)

    running: bool = False
    exit_status: int = 0

    # Exit code of the most recent external command (UI toolbar only)
    last_status: int | None = None

    # ---- Streaming hooks (wired by UI/CLI) ----
    output_fn: Callable[[str], None] | None = None
    error_fn: Callable[[str], None] | None = None

    _handlers: dict[BuiltinKind, Callable[[list[str]], ExecutionOutcome]] = (
        field(default_factory=dict, init=False, repr=False, compare=False)
    )

    def __post_init__(self) -> None:
        self._handlers = {
            BuiltinKind.EXIT: self._handle_exit,
            BuiltinKind.ECHO: self._handle_echo,
            BuiltinKind.TYPE: self._handle_type,
            BuiltinKind.PWD: self._handle_pwd,
            BuiltinKind.CD: self._handle_cd,
        }

    # -----------------------
    # Session
    # -----------------------

    def start(self) -> str:
        """Start a session; returns the welcome text (may be empty)."""
        self.running = True
        self.exit_status = 0

        sys_cfg = getattr(self.config, "system", {}) or {}
        welcome = sys_cfg.get("welcome") or {}
        if isinstance(welcome, dict):
            msg = welcome.get("message")
            if isinstance(msg, str) and msg.strip():
                return msg.strip() + "\n"
        return ""

    def prompt(self) -> str:
        """Return the prompt string printed before each read."""
        sys_cfg = getattr(self.config, "system", {}) or {}
        value = sys_cfg.get("prompt", cfg_module.DEFAULT_PROMPT)
        return value if isinstance(value, str) else cfg_module.DEFAULT_PROMPT

    def builtin_names(self) -> tuple[str, ...]:
        return BUILTIN_NAMES

    # -----------------------
    # Output
    # -----------------------

    def _write(self, text: str) -> None:
        if self.output_fn is not None:
            self.output_fn(text)
            return
        sys.stdout.write(text)
        sys.stdout.flush()

    def _write_error(self, text: str) -> None:
        if self.error_fn is not None:
            self.error_fn(text)
            return
        sys.stderr.write(text)
        sys.stderr.flush()

    # -----------------------
    # Command handling
    # -----------------------

    def handle_command(self, line: str) -> ExecutionOutcome:
        """Handle a single command line."""
        tokens = tokenize(line)
        if not tokens:
            return CONTINUE
        return self.dispatch(tokens)

    def dispatch(self, tokens: list[str]) -> ExecutionOutcome:
        """Route tokens to a builtin handler or an external program."""
        if not tokens:
            raise ValueError("dispatch requires at least one token")

        command_name, arguments = tokens[0], tokens[1:]

        kind = BuiltinKind.from_name(command_name)
        if kind is not None:
            return self._handlers[kind](arguments)

        path = find_in_path(command_name, self.env.path)
        if path is None:
            self._write(f"{command_name}: command not found\n")
            return CONTINUE

        return self._execute_external(path, command_name, arguments)

    def _execute_external(
        self, path: str, command_name: str, arguments: list[str]
    ) -> ExecutionOutcome:
        """Run a resolved program attached to the terminal."""
        ui = self._hooked_ui()
        if ui is not None and hasattr(ui, "prepare_tty_handoff"):
            ui.prepare_tty_handoff()

        result = self.launcher.launch(
            path, command_name, arguments, path_value=self.env.path
        )

        if ui is not None and hasattr(ui, "restore_after_tty"):
            ui.restore_after_tty()

        self.last_status = result.exit_code
        if result.error:
            self._write_error(result.error + "\n")
        return CONTINUE

    def _hooked_ui(self) -> Any:
        """UI object behind output_fn, if it is a bound method."""
        if self.output_fn is not None and hasattr(self.output_fn, "__self__"):
            return self.output_fn.__self__
        return None

    # -----------------------
    # Builtin handlers
    # -----------------------

    def _handle_exit(self, args: list[str]) -> ExecutionOutcome:
        """Handle exit [n]; extra arguments are ignored."""
        if not args:
            status = 0
        else:
            parsed = parse_exit_status(args[0])
            if parsed is None:
                self._write_error(
                    f"exit: numeric argument required: {args[0]}\n"
                )
                status = 1
            else:
                status = parsed

        self.running = False
        self.exit_status = status
        return ExecutionOutcome(exit_status=status)

    def _handle_echo(self, args: list[str]) -> ExecutionOutcome:
        self._write(" ".join(args) + "\n")
        return CONTINUE

    def _handle_type(self, args: list[str]) -> ExecutionOutcome:
        """Handle type <name>: builtin, PATH hit, or not found."""
        if not args:
            self._write("Usage: type <command>\n")
            return CONTINUE

        name = args[0]
        if BuiltinKind.from_name(name) is not None:
            self._write(f"{name} is a shell builtin\n")
            return CONTINUE

        path = find_in_path(name, self.env.path)
        if path is not None:
            self._write(f"{name} is {path}\n")
        else:
            self._write(f"{name}: not found\n")
        return CONTINUE

    def _handle_pwd(self, args: list[str]) -> ExecutionOutcome:
        return self._handle_echo([self.env.current_dir()])

    def _handle_cd(self, args: list[str]) -> ExecutionOutcome:
        """Handle cd <path>; '~' means the home directory."""
        if not args:
            self._write_error("cd: missing operand\n")
            return CONTINUE

        target = args[0]
        if target == "~":
            target = self.env.home_dir()

        try:
            self.env.change_dir(target)
        except (OSError, ValueError):
            self._write_error(f"cd: {target}: No such file or directory\n")
        return CONTINUE
