"""
replshell - Interactive command shell with a Python fallback

Commands come from providers that describe themselves through their own
``--help`` usage text. A system registry merges the providers, sends any
line no provider claims to a Python evaluator, and compiles completers and
live hints from the same usage text.

Example usage:
    from replshell import CommandRegistry, PythonEvaluator, SystemRegistry, Value

    commands = CommandRegistry()

    @commands.register("hello", aliases=["hi"])
    def cmd_hello(name, args):
        return Value(f"Hello, {' '.join(args) or 'world'}!")

    registry = SystemRegistry([commands], PythonEvaluator())
"""

__version__ = "0.1.0"

from replshell.core import (
    CommandError,
    CommandProvider,
    CommandRegistry,
    Error,
    HelpDescriptor,
    HelpRequested,
    LineParser,
    Options,
    OptionsError,
    ParsedLine,
    ParseIncomplete,
    Result,
    ShellError,
    SystemRegistry,
    Value,
)
from replshell.engine import PythonEvaluator
from replshell.session import SessionState

__all__ = [
    "__version__",
    "CommandError",
    "CommandProvider",
    "CommandRegistry",
    "Error",
    "HelpDescriptor",
    "HelpRequested",
    "LineParser",
    "Options",
    "OptionsError",
    "ParsedLine",
    "ParseIncomplete",
    "PythonEvaluator",
    "Result",
    "SessionState",
    "ShellError",
    "SystemRegistry",
    "Value",
]
