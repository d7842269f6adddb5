"""
Exception classes for the command shell.
"""


class ShellError(Exception):
    """Base exception for shell-related errors."""


class CommandError(ShellError):
    """Command registration or lookup failed."""


class OptionsError(ShellError):
    """Command options could not be parsed."""


class ParseIncomplete(EOFError):
    """Line has unmatched opening brackets and needs more input.

    Internal to the read loop: it triggers a continuation prompt and is
    never rendered to the user.
    """

    def __init__(self, message: str, missing: str = ""):
        super().__init__(message)
        self.missing = missing
