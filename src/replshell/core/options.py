"""
Usage-text driven option parsing.

A command declares its interface once, as the usage block it prints for
``--help``::

    tput -  put terminal capability
    Usage: tput [CAPABILITY]
      -? --help                       Displays command help

The same block is compiled into an option parser (``Options``), turned back
into structured metadata for completion and hints (``compile_help``), and
styled for display (``highlight_usage``).
"""

from __future__ import annotations

import re
from typing import Iterable

from prompt_toolkit.formatted_text import FormattedText
from prompt_toolkit.styles import Style

from replshell.core.datamodels import HelpDescriptor, OptionDescriptor
from replshell.core.exceptions import OptionsError

_TITLE_RE = re.compile(r"^(\S+)\s+-\s+(.*)$")
_OPTION_LINE_RE = re.compile(r"^\s+(-\S+(?:[ ,]+-\S+)*)(?:\s{2,}(.*))?$")
_FLAG_RE = re.compile(r"^(--?[^=\s,]+)(?:=(\S+))?$")
_ARG_TOKEN_RE = re.compile(r"(\[[^\]]*\]|<[^>]*>|\.\.\.)")
_USAGE_WORD_RE = re.compile(r"\[[^\]]*\]|<[^>]*>|\S+")


def _option_key(flag: str) -> str:
    return flag.lstrip("-")


def _parse_option_line(line: str) -> OptionDescriptor | None:
    """Parse ``  -n --lines=LINES   description`` into a descriptor."""
    match = _OPTION_LINE_RE.match(line)
    if not match:
        return None
    short: list[str] = []
    long: list[str] = []
    value_name = None
    for token in re.split(r"[ ,]+", match.group(1)):
        flag_match = _FLAG_RE.match(token)
        if not flag_match:
            return None
        flag, value = flag_match.groups()
        if value:
            value_name = value
        (long if flag.startswith("--") else short).append(flag)
    flags = short + long
    return OptionDescriptor(
        flag=flags[-1],
        aliases=flags[:-1],
        description=(match.group(2) or "").strip(),
        value_name=value_name,
    )


def compile_help(usage_text: str) -> HelpDescriptor:
    """Compile printed usage text into a HelpDescriptor."""
    desc = HelpDescriptor()
    for line in usage_text.splitlines():
        if not line.strip():
            continue
        if not desc.name and not desc.usage:
            title = _TITLE_RE.match(line)
            if title and not line.startswith("Usage:"):
                desc.name, desc.synopsis = title.group(1), title.group(2).strip()
                continue
        if line.startswith("Usage:"):
            desc.usage.append(line.strip())
            if not desc.arguments:
                words = _USAGE_WORD_RE.findall(line[len("Usage:"):])
                if not desc.name and words:
                    desc.name = words[0]
                desc.arguments = [w for w in words[1:] if not w.lstrip("[<").startswith("-")]
            continue
        option = _parse_option_line(line)
        if option is not None:
            desc.options.append(option)
        elif desc.usage and not desc.options:
            # Continuation of a multi-line usage section
            desc.usage.append(line.strip())
    return desc


class Options:
    """Option parser compiled from a usage block.

    Example:
        opt = Options.compile(usage).parse(args)
        if opt.is_set("help"):
            return HelpRequested(opt.usage())
    """

    def __init__(self, usage_lines: list[str], descriptor: HelpDescriptor):
        self._usage_lines = usage_lines
        self._descriptor = descriptor
        self._flags: dict[str, OptionDescriptor] = {}
        for option in descriptor.options:
            for flag in option.flags:
                self._flags[flag] = option
        self._set: dict[str, str | bool] = {}
        self._args: list[str] = []

    @classmethod
    def compile(cls, usage: Iterable[str] | str) -> "Options":
        lines = usage.splitlines() if isinstance(usage, str) else list(usage)
        return cls(lines, compile_help("\n".join(lines)))

    @property
    def descriptor(self) -> HelpDescriptor:
        return self._descriptor

    def usage(self) -> str:
        """The usage text exactly as declared."""
        return "\n".join(self._usage_lines)

    def parse(self, args: Iterable[str]) -> "Options":
        """Parse arguments; raises OptionsError unless help was requested."""
        self._set = {}
        self._args = []
        errors: list[str] = []
        remaining = list(args)
        only_args = False
        while remaining:
            arg = remaining.pop(0)
            if only_args or arg == "-" or not arg.startswith("-"):
                self._args.append(arg)
                continue
            if arg == "--":
                only_args = True
                continue
            if arg.startswith("--"):
                flag, _, value = arg.partition("=")
                option = self._flags.get(flag)
                if option is None:
                    errors.append(f"option '{flag}' not recognized")
                    continue
                if option.takes_value():
                    if not value:
                        if not remaining:
                            errors.append(f"option '{flag}' requires an argument")
                            continue
                        value = remaining.pop(0)
                    self._set[_option_key(option.flag)] = value
                else:
                    self._set[_option_key(option.flag)] = True
                continue
            self._parse_short(arg, remaining, errors)

        if errors and not self.is_set("help"):
            raise OptionsError(f"{self._descriptor.name or 'command'}: {errors[0]}")
        return self

    def _parse_short(self, arg: str, remaining: list[str], errors: list[str]) -> None:
        # Clustered short flags: -abc
        chars = arg[1:]
        for i, ch in enumerate(chars):
            option = self._flags.get(f"-{ch}")
            if option is None:
                errors.append(f"option '-{ch}' not recognized")
                return
            if option.takes_value():
                value = chars[i + 1:]
                if not value:
                    if not remaining:
                        errors.append(f"option '-{ch}' requires an argument")
                        return
                    value = remaining.pop(0)
                self._set[_option_key(option.flag)] = value
                return
            self._set[_option_key(option.flag)] = True

    def is_set(self, name: str) -> bool:
        return name in self._set

    def get(self, name: str, default: str | None = None) -> str | None:
        value = self._set.get(name)
        if value is None or value is True:
            return default
        return value

    def args(self) -> list[str]:
        return list(self._args)


# ============================================================================
# Usage highlighting
# ============================================================================

HELP_STYLE = Style.from_dict({
    "help.title": "ansicyan bold",
    "help.keyword": "ansiyellow",
    "help.option": "ansigreen",
    "help.argument": "italic",
})


def _highlight_words(text: str, fragments: list[tuple[str, str]]) -> None:
    pos = 0
    for match in _ARG_TOKEN_RE.finditer(text):
        if match.start() > pos:
            fragments.append(("", text[pos:match.start()]))
        fragments.append(("class:help.argument", match.group(0)))
        pos = match.end()
    if pos < len(text):
        fragments.append(("", text[pos:]))


def highlight_usage(usage_text: str) -> FormattedText:
    """Style usage text for display."""
    fragments: list[tuple[str, str]] = []
    lines = usage_text.splitlines()
    for i, line in enumerate(lines):
        title = _TITLE_RE.match(line)
        option = _OPTION_LINE_RE.match(line)
        if i == 0 and title and not line.startswith("Usage:"):
            fragments.append(("class:help.title", title.group(1)))
            fragments.append(("", line[len(title.group(1)):]))
        elif line.startswith("Usage:"):
            fragments.append(("class:help.keyword", "Usage:"))
            _highlight_words(line[len("Usage:"):], fragments)
        elif option:
            indent = line[:len(line) - len(line.lstrip())]
            fragments.append(("", indent))
            fragments.append(("class:help.option", option.group(1)))
            fragments.append(("", line[len(indent) + len(option.group(1)):]))
        else:
            fragments.append(("", line))
        fragments.append(("", "\n"))
    return FormattedText(fragments)
