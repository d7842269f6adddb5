"""
Data models for commands, parsed lines and help metadata.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Union

from pydantic import BaseModel, Field


# ============================================================================
# Tagged results
# ============================================================================

@dataclass(frozen=True)
class Value:
    """Normal outcome of a command or evaluation. ``None`` renders nothing."""

    value: Any = None


@dataclass(frozen=True)
class HelpRequested:
    """A help flag was supplied; carries the command's usage text."""

    usage: str


@dataclass(frozen=True)
class Error:
    """Command or evaluator failure."""

    cause: BaseException

    def __str__(self) -> str:
        return f"{type(self.cause).__name__}: {self.cause}"


Result = Union[Value, HelpRequested, Error]


# ============================================================================
# Parsed input
# ============================================================================

class ParsedLine(BaseModel):
    """A tokenized input line with cursor information."""

    line: str
    words: list[str] = Field(default_factory=list)
    word_index: int = 0  # Index of the word under the cursor
    word_cursor: int = 0  # Cursor offset inside that word
    cursor: int = 0
    open_brackets: int = 0
    missing: str = ""  # Closing brackets still required, innermost first

    @property
    def word(self) -> str:
        """The word under the cursor (empty when the cursor starts a new word)."""
        if 0 <= self.word_index < len(self.words):
            return self.words[self.word_index]
        return ""

    @property
    def command(self) -> str:
        """First word of the line, or empty string."""
        return self.words[0] if self.words else ""

    @property
    def args(self) -> list[str]:
        return self.words[1:]


# ============================================================================
# Help metadata
# ============================================================================

class OptionDescriptor(BaseModel):
    """A single option parsed from usage text."""

    flag: str  # Preferred spelling: long form when present
    aliases: list[str] = Field(default_factory=list)
    description: str = ""
    value_name: str | None = None  # e.g. "FILE" for --output=FILE

    @property
    def flags(self) -> list[str]:
        """All spellings, short forms first."""
        return [*self.aliases, self.flag]

    def takes_value(self) -> bool:
        return self.value_name is not None


class HelpDescriptor(BaseModel):
    """Structured view of a command's usage text."""

    name: str = ""
    synopsis: str = ""
    usage: list[str] = Field(default_factory=list)
    arguments: list[str] = Field(default_factory=list)  # e.g. ["[CAPABILITY]"]
    options: list[OptionDescriptor] = Field(default_factory=list)

    def option(self, flag: str) -> OptionDescriptor | None:
        """Find an option by any of its spellings."""
        for opt in self.options:
            if flag in opt.flags:
                return opt
        return None


# ============================================================================
# Command table entries
# ============================================================================

@dataclass
class CommandEntry:
    """Entry for a registered command."""

    name: str
    executor: Callable[[str, list[str]], Result]
    completer: Callable[[str], Any] | None = None  # name -> prompt_toolkit Completer
    aliases: list[str] = field(default_factory=list)
