"""
Diagnostic records shared by every phase of the pipeline.

Each phase (scan, parse, resolve, runtime) returns its own list of
`Diagnostic` values instead of printing; the driver decides how to render
them (human-readable text or JSON).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

SCAN = "scan"
PARSE = "parse"
RESOLVE = "resolve"
RUNTIME = "runtime"


@dataclass
class Diagnostic:
    """Represents an error found while scanning, parsing, resolving or running."""

    message: str
    phase: str
    line: Optional[int] = None
    # Location context for compile-time errors, e.g. " at 'x'" or " at end".
    where: str = ""
    severity: str = "error"
    file: Optional[str] = None

    @property
    def is_runtime(self) -> bool:
        return self.phase == RUNTIME

    def render(self) -> str:
        if self.is_runtime:
            return f"{self.message}\n[line {self.line}]"
        return f"[line {self.line}] Error{self.where}: {self.message}"


def compile_error(phase: str, line: int, message: str, where: str = "") -> Diagnostic:
    return Diagnostic(message=message, phase=phase, line=line, where=where)


def runtime_error(message: str, line: int) -> Diagnostic:
    return Diagnostic(message=message, phase=RUNTIME, line=line)


def diagnostic_to_json(diag: Diagnostic, source: Optional[str] = None) -> dict:
    """Render a Diagnostic to a structured JSON-friendly dict."""
    return {
        "phase": diag.phase,
        "message": diag.message,
        "severity": diag.severity,
        "file": diag.file or source,
        "line": diag.line,
        "where": diag.where.strip() or None,
    }


__all__ = [
    "Diagnostic",
    "PARSE",
    "RESOLVE",
    "RUNTIME",
    "SCAN",
    "compile_error",
    "diagnostic_to_json",
    "runtime_error",
]
