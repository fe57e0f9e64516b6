"""
Command-line entry point: interactive shell and script runner.

    pydfa                    # interactive prompt
    pydfa model.txt          # replay a script (or restore a .fsm snapshot)
    pydfa -e "EXECUTE 0110"  # run single commands
"""

from __future__ import annotations

import argparse
import logging
import sys
from importlib import metadata
from pathlib import Path
from typing import Optional, TextIO

from pydfa import __version__
from pydfa.config import InterpreterConfig
from pydfa.interpreter.commands import Interpreter
from pydfa.interpreter.source import SEPARATOR, CommandAssembler, iter_commands

logger = logging.getLogger(__name__)


def get_version() -> str:
    """Installed distribution version, or the package version in a checkout."""
    try:
        return metadata.version("pydfa")
    except metadata.PackageNotFoundError:
        return __version__


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="pydfa",
        description="Define and execute deterministic finite automata.",
    )
    p.add_argument("files", nargs="*", metavar="FILE", help="command scripts or .fsm/.bin snapshots to load")
    p.add_argument(
        "-e",
        "--execute",
        dest="commands",
        action="append",
        default=[],
        metavar="COMMAND",
        help="run a single command (repeatable)",
    )
    p.add_argument("--log", metavar="FILE", help="mirror the session to FILE")
    p.add_argument("--work-dir", type=Path, metavar="DIR", help="resolve relative file names against DIR")
    p.add_argument("-v", "--verbose", action="store_true", help="debug logging on stderr")
    p.add_argument("--version", action="version", version=f"%(prog)s {get_version()}")
    return p


def repl(interpreter: Interpreter, stdin: TextIO, stdout: TextIO) -> None:
    """Read commands until EXIT or end of input."""
    prompt = interpreter.config.prompt
    assembler = CommandAssembler(interpreter.config.comment_prefix)
    line_number = 0

    print(f"pydfa {get_version()}", file=stdout)
    while not interpreter.finished:
        stdout.write(prompt if not assembler.pending else " " * len(prompt))
        stdout.flush()
        try:
            raw = stdin.readline()
        except KeyboardInterrupt:
            # Ctrl-C drops the partly typed command, not the session.
            assembler.reset()
            stdout.write("\n")
            continue
        if not raw:
            stdout.write("\n")
            break
        line_number += 1
        for command_line, command in assembler.feed(raw.rstrip("\n"), line_number):
            interpreter.process(command, command_line)
            if interpreter.finished:
                break


def main(argv: Optional[list[str]] = None, stdin: Optional[TextIO] = None, stdout: Optional[TextIO] = None) -> int:
    args = build_parser().parse_args(argv)
    stdin = stdin if stdin is not None else sys.stdin
    stdout = stdout if stdout is not None else sys.stdout

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    config = InterpreterConfig(work_dir=args.work_dir)
    interpreter = Interpreter(config=config, output=lambda line: print(line, file=stdout))

    with interpreter:
        if args.log:
            interpreter.process(f"LOG {args.log}")

        for filename in args.files:
            logger.debug("loading %s", filename)
            interpreter.run_file(filename)
            if interpreter.finished:
                return 0

        # Each -e argument is one line; the separator is optional there.
        scripted = iter_commands(
            (c + SEPARATOR for c in args.commands), comment_prefix=config.comment_prefix
        )
        for command_line, command in scripted:
            interpreter.process(command, command_line)
            if interpreter.finished:
                return 0

        if not args.files and not args.commands:
            repl(interpreter, stdin, stdout)
    return 0


if __name__ == "__main__":
    sys.exit(main())
