"""Terminal commands: tput, testkey and clear."""
from __future__ import annotations

from replshell.cli.terminal import Terminal, display_keys
from replshell.core.completers import (
    ArgumentCompleter,
    NullCompleter,
    OptionCompleter,
    StringsCompleter,
)
from replshell.core.datamodels import HelpRequested, Result, Value
from replshell.core.options import Options
from replshell.core.provider import CommandRegistry


TPUT_USAGE = [
    "tput -  put terminal capability",
    "Usage: tput [CAPABILITY]",
    "  -? --help                       Displays command help",
]

TESTKEY_USAGE = [
    "testkey -  display the key events",
    "Usage: testkey",
    "  -? --help                       Displays command help",
]

CLEAR_USAGE = [
    "clear -  clear terminal",
    "Usage: clear",
    "  -? --help                       Displays command help",
]


class TerminalCommands(CommandRegistry):
    """Commands that talk to the terminal directly."""

    def __init__(self, terminal: Terminal):
        super().__init__()
        self.terminal = terminal
        self.add("tput", self.tput, completer=self.tput_completer)
        self.add("testkey", self.testkey)
        self.add("clear", self.clear, aliases=["cls"])

    def tput(self, name: str, args: list[str]) -> Result:
        opt = Options.compile(TPUT_USAGE).parse(args)
        if opt.is_set("help"):
            return HelpRequested(opt.usage())

        argv = opt.args()
        if len(argv) != 1:
            self.terminal.println("Usage: tput [CAPABILITY]")
            return Value()

        capability = argv[0]
        if self.terminal.puts(capability):
            self.terminal.flush()
            return Value()
        number = self.terminal.numeric_capability(capability)
        if number is not None:
            self.terminal.println(number)
        else:
            self.terminal.println("Unknown capability")
        return Value()

    def testkey(self, name: str, args: list[str]) -> Result:
        opt = Options.compile(TESTKEY_USAGE).parse(args)
        if opt.is_set("help"):
            return HelpRequested(opt.usage())

        self.terminal.write("Input the key event(Enter to complete): ")
        self.terminal.flush()
        keys = self.terminal.read_key_events()
        self.terminal.println(display_keys(keys))
        return Value()

    def clear(self, name: str, args: list[str]) -> Result:
        opt = Options.compile(CLEAR_USAGE).parse(args)
        if opt.is_set("help"):
            return HelpRequested(opt.usage())

        self.terminal.puts("clear_screen")
        self.terminal.flush()
        return Value()

    def tput_completer(self, name: str):
        # Capability names are listed at completion time
        return ArgumentCompleter(
            NullCompleter(),
            OptionCompleter(
                StringsCompleter(self.terminal.capability_names),
                lambda: self.options(name),
            ),
        )
