"""Builtin commands: history."""
from __future__ import annotations

import fnmatch

from prompt_toolkit.history import History

from replshell.core.datamodels import HelpRequested, Result, Value
from replshell.core.options import Options
from replshell.core.provider import CommandRegistry

HISTORY_USAGE = [
    "history -  list input history",
    "Usage: history [-r] [-n COUNT] [PATTERN]",
    "  -? --help                       Displays command help",
    "  -r --reverse                    Newest entries first",
    "  -n --count=COUNT                Show at most COUNT entries",
]


class Builtins(CommandRegistry):
    """Commands over the line reader's history."""

    def __init__(self, history: History):
        super().__init__()
        self.history = history
        self.add("history", self.show_history, aliases=["hist"])

    def entries(self) -> list[str]:
        """History entries, oldest first."""
        return list(self.history.load_history_strings())[::-1]

    def show_history(self, name: str, args: list[str]) -> Result:
        opt = Options.compile(HISTORY_USAGE).parse(args)
        if opt.is_set("help"):
            return HelpRequested(opt.usage())

        numbered = list(enumerate(self.entries(), start=1))
        argv = opt.args()
        if argv:
            numbered = [(i, e) for i, e in numbered if fnmatch.fnmatchcase(e, argv[0])]

        count = opt.get("count")
        if count is not None:
            n = int(count)
            numbered = numbered[-n:] if n > 0 else []
        if opt.is_set("reverse"):
            numbered.reverse()

        if not numbered:
            return Value("History is empty.")
        return Value("\n".join(f"{i:>5}  {entry}" for i, entry in numbered))
