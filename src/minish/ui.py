# minish — Minimal Interactive Command Interpreter
# Copyright (c) 2025
# TriFactoria (Andrew Blankfield)
#
# Licensed under the Business Source License 1.1 (BSL 1.1).
# You may use, modify, and redistribute this file under the terms of the BSL.
# On the Change Date (2029-01-01), this file will be licensed under
# the Apache License, Version 2.0.

from __future__ import annotations

import os
import sys
from collections.abc import Iterable
from typing import TYPE_CHECKING, Any

from prompt_toolkit import PromptSession
from prompt_toolkit.completion import Completer, Completion, merge_completers
from prompt_toolkit.formatted_text import ANSI
from prompt_toolkit.key_binding import KeyBindings
from prompt_toolkit.shortcuts import print_formatted_text
from prompt_toolkit.styles import Style

from .resolver import list_executables

if TYPE_CHECKING:
    from .kernel import Kernel  # pragma: no cover


# ----------------------------
# Settings + style
# ----------------------------

STYLE_DEFAULTS: dict[str, str] = {
    "completion-menu.completion": "bg:#1c1c1c #bcbcbc",
    "completion-menu.completion.current": "bg:#3a3a3a #ffffff bold",
    "completion-menu.meta.completion": "bg:#1c1c1c #767676",
    "bottom-toolbar": "noreverse bg:#121212 #bcbcbc",
    "minish.toolbar.cwd": "#87afd7",
    "minish.toolbar.status": "#d75f5f",
}


def _ui_setting(kernel: Kernel | None, key: str, default: Any) -> Any:
    """Look up ui.<key> through the kernel's config; default on any miss."""
    cfg = getattr(kernel, "config", None)
    if cfg is None:
        return default
    return cfg.get_path(f"ui.{key}", default)


def _build_style(kernel: Kernel | None) -> Style:
    rules = dict(STYLE_DEFAULTS)
    overrides = _ui_setting(kernel, "theme.style", {})
    if isinstance(overrides, dict):
        rules.update(
            (k, v)
            for k, v in overrides.items()
            if isinstance(k, str) and isinstance(v, str)
        )
    return Style.from_dict(rules)


# ----------------------------
# Completion
# ----------------------------


class CommandCompleter(Completer):
    """Completes the first word: builtins and executables on PATH."""

    def __init__(self, kernel: Kernel | None = None) -> None:
        self.kernel = kernel
        self._cache: set[str] | None = None
        self._cache_path: str | None = None

    def _search_path(self) -> str:
        if self.kernel is not None:
            return self.kernel.env.path or ""
        return os.environ.get("PATH", "")

    def _load(self) -> set[str]:
        path_val = self._search_path()
        if self._cache is not None and self._cache_path == path_val:
            return self._cache

        self._cache = list_executables(path_val)
        self._cache_path = path_val
        return self._cache

    def _builtins(self) -> tuple[str, ...]:
        if self.kernel is None:
            return ()
        return self.kernel.builtin_names()

    def get_completions(
        self, document, complete_event
    ) -> Iterable[Completion]:
        before = (document.text_before_cursor or "").lstrip()
        if not before or any(ch.isspace() for ch in before):
            return

        token = before
        builtins = self._builtins()
        for name in sorted(builtins):
            if name.startswith(token):
                yield Completion(
                    name, start_position=-len(token), display_meta="builtin"
                )
        for exe in sorted(self._load()):
            if exe.startswith(token) and exe not in builtins:
                yield Completion(
                    exe, start_position=-len(token), display_meta="exe"
                )


class PathCompleter(Completer):
    """Filesystem path completion for arguments after the first word."""

    def _current_arg_token(self, text_before_cursor: str) -> str | None:
        """Return the word under the cursor, or None on the first word."""
        stripped = text_before_cursor.lstrip()
        if not any(ch.isspace() for ch in stripped):
            return None
        if stripped[-1].isspace():
            return ""
        return stripped.split()[-1]

    def _list_dir(self, directory: str) -> list[str]:
        try:
            return sorted(os.listdir(directory))
        except OSError:
            return []

    def get_completions(
        self, document, complete_event
    ) -> Iterable[Completion]:
        token = self._current_arg_token(document.text_before_cursor or "")
        if token is None:
            return

        expanded = os.path.expanduser(token)

        if token == "~":
            base_dir = expanded
            prefix = ""
            insert_prefix = "~/"
        elif expanded.endswith("/"):
            base_dir = expanded
            prefix = ""
            insert_prefix = token
        else:
            base_dir = os.path.dirname(expanded) or "."
            prefix = os.path.basename(expanded)
            insert_prefix = os.path.dirname(token)
            if insert_prefix and not insert_prefix.endswith("/"):
                insert_prefix += "/"

        for name in self._list_dir(base_dir):
            if not name.startswith(prefix):
                continue
            # Hidden entries only when asked for explicitly
            if name.startswith(".") and not prefix.startswith("."):
                continue
            full = os.path.join(base_dir, name)
            is_dir = os.path.isdir(full)
            ins = f"{insert_prefix}{name}" + ("/" if is_dir else "")
            yield Completion(
                ins,
                start_position=-len(token),
                display_meta="dir" if is_dir else "file",
            )


def build_completer(kernel: Kernel | None) -> Completer:
    """Commands for the first word, filesystem paths after it."""
    return merge_completers([CommandCompleter(kernel), PathCompleter()])


# ----------------------------
# PromptSession UI
# ----------------------------


class PromptToolkitUI:
    """
    Interactive front end used when stdin is a terminal.

    Output is printed straight to the terminal (scrollback and mouse
    selection keep working); only the input line is managed by
    PromptSession. External commands get the terminal between prompts.
    """

    def __init__(self, kernel: Kernel | None = None) -> None:
        self.kernel = kernel
        self.session: PromptSession[str] | None = None
        self._style = _build_style(kernel)

        # True while the cursor sits after text with no trailing newline
        self._mid_line = False

    def _bottom_toolbar(self):
        if self.kernel is None:
            return ""
        fragments: list[tuple[str, str]] = [
            ("class:minish.toolbar.cwd", f" {self.kernel.env.current_dir()} "),
        ]
        if self.kernel.last_status is not None:
            fragments.append(
                ("class:minish.toolbar.status", f" [{self.kernel.last_status}] ")
            )
        return fragments

    def _ensure_session(self) -> PromptSession[str]:
        if self.session is None:
            show_toolbar = bool(_ui_setting(self.kernel, "toolbar", False))
            self.session = PromptSession(
                key_bindings=self.build_key_bindings(),
                completer=build_completer(self.kernel),
                complete_while_typing=bool(
                    _ui_setting(self.kernel, "complete_while_typing", False)
                ),
                style=self._style,
                bottom_toolbar=self._bottom_toolbar if show_toolbar else None,
            )
        return self.session

    def _finish_partial_line(self) -> None:
        if self._mid_line:
            print_formatted_text(ANSI("\n"), style=self._style, end="")
            self._mid_line = False

    def read(self, prompt: str) -> str:
        session = self._ensure_session()
        self._finish_partial_line()
        return session.prompt(ANSI(prompt))

    def write(self, text: str) -> None:
        """Print text as-is; no newline is appended."""
        if not text:
            return
        print_formatted_text(ANSI(text), style=self._style, end="")
        self._mid_line = not text.endswith("\n")

    def write_error(self, text: str) -> None:
        if not text:
            return
        sys.stderr.write(text)
        sys.stderr.flush()
        self._mid_line = not text.endswith("\n")

    def prepare_tty_handoff(self) -> None:
        """Called before an external program takes over the terminal."""
        self._finish_partial_line()
        sys.stdout.flush()

    def restore_after_tty(self) -> None:
        """Called once the program exits; its output is not tracked."""
        self._mid_line = False

    def build_key_bindings(self) -> KeyBindings:
        kb = KeyBindings()

        @kb.add("c-l")
        def _clear_screen(event):
            event.app.renderer.clear()
            event.app.invalidate()

        return kb
