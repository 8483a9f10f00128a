#!/usr/bin/env python3
"""
Command-line driver: run a script file, or read lines from a prompt.

Text diagnostics go to stderr as they are produced. With --json they are
collected and printed as a single object once the run is over:

    {"exit_code": 65, "diagnostics": [{"phase": "parse", ...}]}
"""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import List, Optional, TextIO

from . import __version__
from .diagnostics import Diagnostic, diagnostic_to_json
from .interp import Interpreter
from .parser import parse
from .printer import AstPrinter
from .resolver import resolve
from .scanner import scan

EX_OK = 0
EX_USAGE = 64
EX_DATAERR = 65
EX_NOINPUT = 66
EX_SOFTWARE = 70

MODES = ("run", "tokens", "ast")

# Each script-level call costs several interpreter frames.
_RECURSION_LIMIT = 10_000


class Session:
    """One interpreter plus the error state of everything run through it."""

    def __init__(
        self,
        stdout: Optional[TextIO] = None,
        stderr: Optional[TextIO] = None,
        json_output: bool = False,
        mode: str = "run",
    ) -> None:
        if mode not in MODES:
            raise ValueError(f"unknown mode {mode!r}")
        self.stdout = stdout or sys.stdout
        self.stderr = stderr or sys.stderr
        self.json_output = json_output
        self.mode = mode
        self.interpreter = Interpreter(stdout=self.stdout)
        self.diagnostics: List[Diagnostic] = []
        self.source_name: Optional[str] = None
        self.had_error = False
        self.had_runtime_error = False

    def run(self, source: str) -> None:
        scanned = scan(source)
        if self.mode == "tokens":
            for token in scanned.tokens:
                self.stdout.write(f"{token}\n")
            self._report(scanned.diagnostics)
            return

        parsed = parse(scanned.tokens)
        self._report(scanned.diagnostics + parsed.diagnostics)
        if self.had_error:
            return
        if self.mode == "ast":
            self.stdout.write(AstPrinter().print_program(parsed.statements) + "\n")
            return

        resolution = resolve(parsed.statements, known_globals=self.interpreter.globals.values.keys())
        self._report(resolution.diagnostics)
        if self.had_error:
            return

        failure = self.interpreter.interpret(parsed.statements, resolution.locals)
        if failure is not None:
            self._report([failure])

    def run_file(self, path: Path) -> int:
        self.source_name = str(path)
        try:
            source = path.read_text(encoding="utf-8")
        except OSError as exc:
            self.stderr.write(f"qlox: can't read {path}: {exc.strerror or exc}\n")
            return EX_NOINPUT
        self.run(source)
        exit_code = self.exit_code()
        self.flush_json(exit_code)
        return exit_code

    def run_prompt(self, stdin: Optional[TextIO] = None) -> int:
        stdin = stdin or sys.stdin
        while True:
            self.stdout.write("> ")
            self.stdout.flush()
            line = stdin.readline()
            if not line:
                self.stdout.write("\n")
                break
            self.run(line)
            self.flush_json(self.exit_code())
            # A bad line doesn't poison the ones after it.
            self.had_error = False
            self.had_runtime_error = False
        return EX_OK

    def exit_code(self) -> int:
        if self.had_error:
            return EX_DATAERR
        if self.had_runtime_error:
            return EX_SOFTWARE
        return EX_OK

    def flush_json(self, exit_code: int) -> None:
        if not self.json_output or not self.diagnostics:
            return
        payload = {
            "exit_code": exit_code,
            "diagnostics": [diagnostic_to_json(d, self.source_name) for d in self.diagnostics],
        }
        self.stderr.write(json.dumps(payload) + "\n")
        self.diagnostics = []

    def _report(self, diagnostics: List[Diagnostic]) -> None:
        for diag in diagnostics:
            if diag.is_runtime:
                self.had_runtime_error = True
            else:
                self.had_error = True
            if self.json_output:
                self.diagnostics.append(diag)
            else:
                self.stderr.write(diag.render() + "\n")


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="qlox",
        description="Run a qlox script, or start an interactive prompt when no script is given",
    )
    parser.add_argument("script", type=Path, nargs="?", help="Path to a qlox source file")
    parser.add_argument(
        "--tokens",
        dest="mode",
        action="store_const",
        const="tokens",
        default="run",
        help="Print the token stream instead of running",
    )
    parser.add_argument(
        "--ast",
        dest="mode",
        action="store_const",
        const="ast",
        help="Print the parsed syntax tree instead of running",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Emit diagnostics as JSON (phase/message/severity/file/line/where) on stderr",
    )
    parser.add_argument("--version", action="version", version=f"qlox {__version__}")
    args, extra = parser.parse_known_args(argv)
    if extra:
        print("Usage: qlox [script]", file=sys.stderr)
        return EX_USAGE

    sys.setrecursionlimit(max(sys.getrecursionlimit(), _RECURSION_LIMIT))
    session = Session(json_output=args.json, mode=args.mode)
    if args.script is not None:
        return session.run_file(args.script)
    return session.run_prompt()


if __name__ == "__main__":
    raise SystemExit(main())
