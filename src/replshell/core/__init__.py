"""
Core module: metadata model, command providers and the system registry.
"""

from replshell.core.completers import (
    ArgumentCompleter,
    NullCompleter,
    OptionCompleter,
    StringsCompleter,
    SystemCompleter,
)
from replshell.core.datamodels import (
    CommandEntry,
    Error,
    HelpDescriptor,
    HelpRequested,
    OptionDescriptor,
    ParsedLine,
    Result,
    Value,
)
from replshell.core.exceptions import (
    CommandError,
    OptionsError,
    ParseIncomplete,
    ShellError,
)
from replshell.core.options import Options, compile_help, highlight_usage
from replshell.core.parser import LineParser, ParseContext
from replshell.core.provider import CommandProvider, CommandRegistry
from replshell.core.registry import SystemRegistry

__all__ = [
    # Completers
    "ArgumentCompleter",
    "NullCompleter",
    "OptionCompleter",
    "StringsCompleter",
    "SystemCompleter",
    # Models
    "CommandEntry",
    "Error",
    "HelpDescriptor",
    "HelpRequested",
    "OptionDescriptor",
    "ParsedLine",
    "Result",
    "Value",
    # Exceptions
    "CommandError",
    "OptionsError",
    "ParseIncomplete",
    "ShellError",
    # Parsing
    "LineParser",
    "Options",
    "ParseContext",
    "compile_help",
    "highlight_usage",
    # Providers
    "CommandProvider",
    "CommandRegistry",
    "SystemRegistry",
]
