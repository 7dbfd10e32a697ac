# minish — Minimal Interactive Command Interpreter
# Copyright (c) 2025
# TriFactoria (Andrew Blankfield)
#
# Licensed under the Business Source License 1.1 (BSL 1.1).
# You may use, modify, and redistribute this file under the terms of the BSL.
# On the Change Date (2029-01-01), this file will be licensed under
# the Apache License, Version 2.0.

"""
Utility functions for minish.
"""

import re
from enum import Enum, auto

# Unsigned decimal, optional leading '+', no whitespace or underscores.
_EXIT_STATUS_RE = re.compile(r"\+?[0-9]+")

MAX_EXIT_STATUS = 255


class LexerState(Enum):
    """States for the quote-aware tokenizer."""
    NORMAL = auto()
    SINGLE_QUOTE = auto()


def tokenize(line: str) -> list[str]:
    """Split a command line into argument tokens.

    Rules:
    - a single quote toggles literal mode and is never part of a token
    - whitespace separates tokens, except in literal mode where it is kept
    - quoted and unquoted fragments of one word concatenate
    - an unterminated quote closes implicitly at end of line

    Args:
        line: The command line, trailing newline already stripped

    Returns:
        Ordered list of tokens (possibly empty)
    """
    tokens: list[str] = []
    current: list[str] = []
    state = LexerState.NORMAL

    for ch in line:
        if ch == "'":
            state = (
                LexerState.NORMAL
                if state == LexerState.SINGLE_QUOTE
                else LexerState.SINGLE_QUOTE
            )
            continue

        if ch.isspace():
            if state == LexerState.SINGLE_QUOTE:
                current.append(ch)
            elif current:
                tokens.append("".join(current))
                current = []
            continue

        current.append(ch)

    # Flush remaining token (an open quote still yields one, even empty)
    if current or state == LexerState.SINGLE_QUOTE:
        tokens.append("".join(current))

    return tokens


def parse_exit_status(arg: str) -> int | None:
    """Parse an `exit` argument into a status in [0, 255].

    Returns:
        The status, or None if the argument is not an unsigned integer
        in range
    """
    if not _EXIT_STATUS_RE.fullmatch(arg):
        return None
    digits = arg.lstrip("+").lstrip("0") or "0"
    if len(digits) > len(str(MAX_EXIT_STATUS)):
        return None
    value = int(digits)
    if value > MAX_EXIT_STATUS:
        return None
    return value
