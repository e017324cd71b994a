"""Line-oriented front end: interactive REPL and batch-file execution."""

from __future__ import annotations

import os
import sys
from pathlib import Path
from typing import Final, TextIO

from .environment import Environment
from .errors import TokenizeError
from .evaluator import evaluate, is_assignment
from .lexer import tokenize
from .values import format_value

PROMPT: Final[str] = os.environ.get("KSIMPLE_PROMPT", "k)")


def process_line(env: Environment, line: str, out: TextIO | None = None) -> bool:
    """Run one input line. Returns False when the line asks the session to stop.

    ``\\\\`` quits, ``\\w`` prints the workspace byte total and ``\\v`` lists the
    vector-holding globals. Lines starting with ``/`` are comments.
    """
    out = sys.stdout if out is None else out
    trimmed = line.rstrip()
    if not trimmed:
        return True

    if len(trimmed) == 2 and trimmed[0] == "\\":
        command = trimmed[1]
        if command == "\\":
            return False
        if command == "w":
            print(env.workspace_bytes(), file=out)
        elif command == "v":
            print(env.format_globals(), end="", file=out)
        return True

    if trimmed.startswith("/"):
        return True

    try:
        tokens = tokenize(trimmed)
    except TokenizeError:
        env.parse_error("tokenize_line")
        return True

    if not tokens:
        return True

    result = evaluate(tokens, env)
    if is_assignment(tokens):
        return True

    print(format_value(result), file=out)
    return True


def run_repl(env: Environment, stdin: TextIO | None = None, stdout: TextIO | None = None) -> None:
    stdin = sys.stdin if stdin is None else stdin
    stdout = sys.stdout if stdout is None else stdout

    while True:
        print(PROMPT, end="", file=stdout)
        stdout.flush()
        line = stdin.readline()
        if not line:
            break
        if not process_line(env, line, stdout):
            break


def run_batch(env: Environment, path: str | Path, out: TextIO | None = None) -> None:
    try:
        handle = open(path, encoding="utf-8")
    except OSError:
        env.report_error("read_line", str(path))
        return

    with handle:
        try:
            for line in handle:
                if not process_line(env, line, out):
                    break
        except (OSError, UnicodeDecodeError):
            env.report_error("read_line", str(path))
