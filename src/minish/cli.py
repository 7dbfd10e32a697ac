# minish — Minimal Interactive Command Interpreter
# Copyright (c) 2025
# TriFactoria (Andrew Blankfield)
#
# Licensed under the Business Source License 1.1 (BSL 1.1).
# You may use, modify, and redistribute this file under the terms of the BSL.
# On the Change Date (2029-01-01), this file will be licensed under
# the Apache License, Version 2.0.

"""
minish CLI entry point and REPL loop.

Design:
- CLI owns process startup, UI selection and the process exit status.
- Kernel is the session engine (config+launcher+environment injected).
- UI is terminal-friendly PromptSession; a plain input() reader is used
  when stdin is not a terminal or MINISH_LEGACY_UI=1.
"""

from __future__ import annotations

import os
import sys
from collections.abc import Callable

from . import config
from .environment import ShellEnvironment
from .executor import SubprocessLauncher
from .kernel import Kernel, write_crash_log
from .ui import PromptToolkitUI


def _stderr_write(text: str) -> None:
    sys.stderr.write(text)
    sys.stderr.flush()


def run_repl(
    kernel: Kernel,
    ui: PromptToolkitUI | None = None,
    input_fn: Callable[[str], str] = input,
    error_fn: Callable[[str], None] | None = None,
) -> int:
    """Run the minish REPL loop and return the session exit status."""
    if error_fn is None:
        error_fn = ui.write_error if ui is not None else _stderr_write

    while kernel.running:
        try:
            prompt = kernel.prompt()

            try:
                if ui is not None:
                    line = ui.read(prompt)
                else:
                    line = input_fn(prompt)
            except (OSError, UnicodeDecodeError) as e:
                # No further commands can be read
                error_fn(f"minish: error reading input: {e}\n")
                kernel.running = False
                return 1

            line = line or ""
            if not line.strip():
                continue

            try:
                outcome = kernel.handle_command(line)
            except Exception as e:
                # Unhandled exception - write crash log
                write_crash_log(
                    e,
                    raw_command=line,
                    cwd=kernel.env.current_dir(),
                )
                error_fn(
                    f"[ERROR] Unhandled exception: "
                    f"{type(e).__name__}: {e}\n"
                )
                # Continue session
                continue

            if outcome.terminates:
                assert outcome.exit_status is not None
                return outcome.exit_status

        except (KeyboardInterrupt, EOFError):
            # End of input is a bare `exit`
            kernel.running = False
            return 0

    return kernel.exit_status


def main() -> None:
    """Main entry point for minish CLI."""
    cfg = config.load_system_config()
    launcher = SubprocessLauncher(
        propagate_path=bool(cfg.execution.get("propagate_path", True))
    )
    kernel = Kernel(launcher=launcher, config=cfg, env=ShellEnvironment())

    start_output = kernel.start()

    # Plain reader for pipes, scripts and explicit opt-out
    if os.environ.get(config.LEGACY_UI_ENV) == "1" or not sys.stdin.isatty():
        if start_output:
            sys.stdout.write(start_output)
            sys.stdout.flush()
        sys.exit(run_repl(kernel))

    # Default: PromptToolkitUI (keeps terminal scrollback/copy/select)
    ui = PromptToolkitUI(kernel)

    # Route output through UI (kernel calls these)
    kernel.output_fn = ui.write
    kernel.error_fn = ui.write_error

    ui.write(start_output)

    sys.exit(run_repl(kernel, ui=ui))
