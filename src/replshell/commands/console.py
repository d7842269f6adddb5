"""Console commands over the evaluator namespace: show and unset."""
from __future__ import annotations

import reprlib

from replshell.core.completers import (
    ArgumentCompleter,
    NullCompleter,
    OptionCompleter,
    StringsCompleter,
)
from replshell.core.datamodels import HelpRequested, Result, Value
from replshell.core.options import Options
from replshell.core.provider import CommandRegistry
from replshell.engine.evaluator import PythonEvaluator

SHOW_USAGE = [
    "show -  list console variables",
    "Usage: show [PATTERN]",
    "  -? --help                       Displays command help",
    "  -a --all                        Include scratch variables",
]

UNSET_USAGE = [
    "unset -  delete console variables",
    "Usage: unset PATTERN...",
    "  -? --help                       Displays command help",
]

_repr = reprlib.Repr()
_repr.maxstring = 60
_repr.maxother = 60


class ConsoleCommands(CommandRegistry):
    """Inspect and delete variables held by the evaluator."""

    def __init__(self, evaluator: PythonEvaluator):
        super().__init__()
        self.evaluator = evaluator
        self.add("show", self.show, completer=self.variable_completer, aliases=["vars"])
        self.add("unset", self.unset, completer=self.variable_completer)

    def show(self, name: str, args: list[str]) -> Result:
        opt = Options.compile(SHOW_USAGE).parse(args)
        if opt.is_set("help"):
            return HelpRequested(opt.usage())

        argv = opt.args()
        pattern = argv[0] if argv else "*"
        variables = self.evaluator.variables(pattern)
        if not opt.is_set("all"):
            variables = {k: v for k, v in variables.items() if not k.startswith("_")}
        if not variables:
            return Value("No variables.")
        width = max(len(k) for k in variables)
        lines = [
            f"{k:<{width}}  {type(v).__name__:<10} {_repr.repr(v)}"
            for k, v in variables.items()
        ]
        return Value("\n".join(lines))

    def unset(self, name: str, args: list[str]) -> Result:
        opt = Options.compile(UNSET_USAGE).parse(args)
        if opt.is_set("help"):
            return HelpRequested(opt.usage())

        argv = opt.args()
        if not argv:
            return Value("Usage: unset PATTERN...")
        removed: list[str] = []
        for pattern in argv:
            removed.extend(self.evaluator.clear(pattern))
        return Value(f"Removed: {', '.join(removed)}" if removed else "Nothing to remove.")

    def variable_completer(self, name: str):
        return ArgumentCompleter(
            NullCompleter(),
            OptionCompleter(
                StringsCompleter(lambda: self.evaluator.variables()),
                lambda: self.options(name),
            ),
        )
