"""End-to-end runner: run each tests/e2e/<case>/main.lox through the CLI and compare."""

from __future__ import annotations

import argparse
import json
import os
import subprocess
import sys
from pathlib import Path
from typing import Iterable

ROOT = Path(__file__).resolve().parent.parent
E2E_DIR = ROOT / "tests" / "e2e"
QLOX_MODULE = "qlox"


def case_dirs() -> list[Path]:
    return sorted(d for d in E2E_DIR.iterdir() if (d / "main.lox").exists())


def _run_case(case_dir: Path) -> str:
    expected = json.loads((case_dir / "expected.json").read_text())
    env = dict(os.environ)
    env["PYTHONPATH"] = str(ROOT)
    cmd = [sys.executable, "-m", QLOX_MODULE, *expected.get("args", []), str(case_dir / "main.lox")]
    res = subprocess.run(cmd, cwd=ROOT, capture_output=True, text=True, env=env)

    exit_expected = expected.get("exit_code", 0)
    if res.returncode != exit_expected:
        return f"FAIL (exit {res.returncode}, expected {exit_expected}: {res.stderr})"
    if res.stdout != expected.get("stdout", ""):
        return f"FAIL (stdout mismatch: {res.stdout!r})"
    stderr_expected = expected.get("stderr")
    if stderr_expected is None:
        if res.stderr:
            return f"FAIL (unexpected stderr: {res.stderr!r})"
    elif stderr_expected not in res.stderr:
        return f"FAIL (stderr mismatch; wanted substring {stderr_expected!r}, got {res.stderr!r})"
    return "ok"


def main(argv: Iterable[str] | None = None) -> int:
    ap = argparse.ArgumentParser(description="Run e2e qlox programs")
    ap.add_argument("cases", nargs="*", help="Specific test case names to run (directories under tests/e2e)")
    args = ap.parse_args(argv)

    failures: list[tuple[Path, str]] = []
    dirs = case_dirs()
    if args.cases:
        names = set(args.cases)
        dirs = [d for d in dirs if d.name in names]
    for case_dir in dirs:
        status = _run_case(case_dir)
        print(f"{case_dir.name}: {status}")
        if not status.startswith("ok"):
            failures.append((case_dir, status))
    if failures:
        for case, status in failures:
            print(f"[e2e] {case.name}: {status}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
