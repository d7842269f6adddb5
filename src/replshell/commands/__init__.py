"""
Command providers shipped with the shell.
"""

from replshell.commands.builtins import Builtins
from replshell.commands.console import ConsoleCommands
from replshell.commands.terminal import TerminalCommands

__all__ = [
    "Builtins",
    "ConsoleCommands",
    "TerminalCommands",
]
