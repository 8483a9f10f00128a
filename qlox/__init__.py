"""
qlox: a tree-walking interpreter for a small class-based scripting language.

Pipeline: scan -> parse -> resolve -> Interpreter.interpret.
"""

__version__ = "1.0.0"

from .interp import Interpreter  # noqa: E402
from .parser import parse  # noqa: E402
from .resolver import resolve  # noqa: E402
from .scanner import scan  # noqa: E402

__all__ = ["Interpreter", "__version__", "parse", "resolve", "scan"]
