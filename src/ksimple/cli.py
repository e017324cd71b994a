"""k/simple interpreter: run a file of k code, or start a REPL when no file is given."""

from __future__ import annotations

import argparse

from .environment import Environment
from .repl import run_batch, run_repl

BANNER = "k/simple in Python"


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(prog="ksimple", description=__doc__)
    parser.add_argument("file", nargs="?", help="k source file to run in batch mode")
    args = parser.parse_args(argv)

    env = Environment()
    if args.file is None:
        print(BANNER)
        run_repl(env)
    else:
        run_batch(env, args.file)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
