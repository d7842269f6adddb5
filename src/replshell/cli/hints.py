"""
Hint overlay: live argument hints for the command under the cursor.

The overlay is rendered as the prompt's bottom toolbar. It is recomputed
inside prompt_toolkit's redraw after every key press, reads the buffer but
never writes to it, and is removed when the line is accepted.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Callable

from prompt_toolkit.application.current import get_app
from prompt_toolkit.formatted_text import FormattedText
from prompt_toolkit.styles import Style

from replshell.core.datamodels import HelpDescriptor, ParsedLine
from replshell.core.parser import LineParser, ParseContext

logger = logging.getLogger(__name__)

HINT_STYLE = Style.from_dict({
    "bottom-toolbar": "noreverse",
    "hint": "ansibrightblack",
    "hint.current": "ansiyellow bold",
    "hint.option": "ansigreen",
    "hint.title": "ansicyan",
})


def _takes_next_word(desc: HelpDescriptor, word: str) -> bool:
    """Whether an option word leaves its value to the following word."""
    if word.startswith("--"):
        if "=" in word:
            return False
        option = desc.option(word)
        return option is not None and option.takes_value()
    # Short cluster: the first value option consumes the rest of the word
    for i, ch in enumerate(word[1:], start=1):
        option = desc.option(f"-{ch}")
        if option is not None and option.takes_value():
            return i == len(word) - 1
    return False


def _positional_index(desc: HelpDescriptor, words: list[str]) -> int:
    """Count positional arguments among words, skipping options and their values."""
    position = 0
    skip = False
    for word in words:
        if skip:
            skip = False
        elif word.startswith("-") and word != "-":
            skip = _takes_next_word(desc, word)
        else:
            position += 1
    return position


class TipType(Enum):
    """Overlay style."""

    COMPLETER = "completer"  # Remaining arguments or matching options on one line
    USAGE = "usage"  # Full usage panel


class HintOverlay:
    """Render hints from command help metadata.

    Args:
        describe: name -> HelpDescriptor lookup (``SystemRegistry.describe``).
        style: COMPLETER for a compact candidate line, USAGE for a panel.
        max_lines: Upper bound on rendered lines.
        enabled: Initial state; flipped by ``toggle``.
    """

    def __init__(
        self,
        describe: Callable[[str], HelpDescriptor | None],
        style: TipType = TipType.COMPLETER,
        max_lines: int = 5,
        enabled: bool = True,
    ):
        self.describe = describe
        self.style = style
        self.max_lines = max_lines
        self.enabled = enabled
        self._parser = LineParser()

    def toggle(self) -> bool:
        """Flip the overlay on or off. Returns the new state."""
        self.enabled = not self.enabled
        logger.debug(f"Hint overlay {'enabled' if self.enabled else 'disabled'}")
        return self.enabled

    def bottom_toolbar(self) -> FormattedText:
        """prompt_toolkit ``bottom_toolbar`` callback."""
        document = get_app().current_buffer.document
        return self.render(document.text, document.cursor_position)

    def render(self, text: str, cursor: int | None = None) -> FormattedText:
        if not self.enabled:
            return FormattedText([])
        parsed = self._parser.parse(text, cursor, context=ParseContext.COMPLETE)
        if parsed.word_index == 0 or not parsed.command:
            return FormattedText([])
        desc = self.describe(parsed.command)
        if desc is None:
            return FormattedText([])
        if self.style is TipType.USAGE:
            return self._usage_panel(desc)
        return self._candidates(desc, parsed)

    def _candidates(self, desc: HelpDescriptor, parsed: ParsedLine) -> FormattedText:
        word = parsed.word[:parsed.word_cursor]
        fragments: list[tuple[str, str]] = []

        if word.startswith("-"):
            matches = [opt for opt in desc.options if any(f.startswith(word) for f in opt.flags)]
            for opt in matches[:self.max_lines]:
                if fragments:
                    fragments.append(("", "\n"))
                fragments.append(("class:hint.option", " ".join(opt.flags)))
                fragments.append(("class:hint", f"  {opt.description}"))
            return FormattedText(fragments)

        position = _positional_index(desc, parsed.words[1:parsed.word_index])
        fragments.append(("class:hint.title", desc.name))
        for i, argument in enumerate(desc.arguments):
            if i < position:
                continue
            style = "class:hint.current" if i == position else "class:hint"
            fragments.append(("", " "))
            fragments.append((style, argument))
        if desc.options:
            flags = " ".join(opt.flags[0] for opt in desc.options)
            fragments.append(("class:hint.option", f"  [{flags}]"))
        return FormattedText(fragments)

    def _usage_panel(self, desc: HelpDescriptor) -> FormattedText:
        lines: list[tuple[str, str]] = []
        if desc.synopsis:
            lines.append(("class:hint.title", f"{desc.name} - {desc.synopsis}"))
        lines.extend(("class:hint", usage) for usage in desc.usage)
        for opt in desc.options:
            lines.append(("class:hint.option", f"  {' '.join(opt.flags):<16} {opt.description}"))

        fragments: list[tuple[str, str]] = []
        for style, line in lines[:self.max_lines]:
            if fragments:
                fragments.append(("", "\n"))
            fragments.append((style, line))
        return FormattedText(fragments)
