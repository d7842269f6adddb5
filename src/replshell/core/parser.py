"""
Bracket-aware line parser.

Splits an input line into words and tracks open ``{``, ``(`` and ``[``
brackets. When a line is being accepted, unmatched opening brackets mean the
logical line continues on the next physical line.
"""

from __future__ import annotations

from enum import Enum

from replshell.core.datamodels import ParsedLine
from replshell.core.exceptions import ParseIncomplete

BRACKETS = {"{": "}", "(": ")", "[": "]"}
QUOTES = ("'", '"')


class ParseContext(Enum):
    """Why the line is being parsed."""

    ACCEPT_LINE = "accept"  # User pressed Enter
    COMPLETE = "complete"  # Completion or hint lookup; never raises


class LineParser:
    """Tokenizer with quote, escape and bracket handling."""

    def __init__(self, eof_on_unclosed_bracket: bool = True):
        self.eof_on_unclosed_bracket = eof_on_unclosed_bracket

    def parse(
        self,
        line: str,
        cursor: int | None = None,
        context: ParseContext = ParseContext.ACCEPT_LINE,
    ) -> ParsedLine:
        """Parse a line.

        Args:
            line: Raw buffer text (may span several physical lines).
            cursor: Cursor offset; defaults to end of line.
            context: ACCEPT_LINE raises ParseIncomplete on open brackets.

        Returns:
            ParsedLine with words and cursor position.
        """
        if cursor is None:
            cursor = len(line)

        words: list[str] = []
        current: list[str] = []
        in_word = False
        quote: str | None = None
        stack: list[str] = []
        word_index = -1
        word_cursor = 0

        i = 0
        while i < len(line):
            if word_index < 0 and i >= cursor:
                word_index, word_cursor = self._cursor_word(words, current, in_word)
            ch = line[i]
            if ch == "\\" and quote != "'" and i + 1 < len(line):
                current.append(line[i + 1])
                in_word = True
                i += 2
                continue
            if quote:
                if ch == quote:
                    quote = None
                else:
                    current.append(ch)
            elif ch in QUOTES:
                quote = ch
                in_word = True
            elif ch.isspace():
                if in_word:
                    words.append("".join(current))
                    current = []
                    in_word = False
            else:
                if ch in BRACKETS:
                    stack.append(BRACKETS[ch])
                elif stack and ch == stack[-1]:
                    stack.pop()
                current.append(ch)
                in_word = True
            i += 1

        if word_index < 0:
            word_index, word_cursor = self._cursor_word(words, current, in_word)
        if in_word:
            words.append("".join(current))

        missing = "".join(reversed(stack))
        if (
            stack
            and self.eof_on_unclosed_bracket
            and context is ParseContext.ACCEPT_LINE
        ):
            raise ParseIncomplete("Missing closing brackets", missing=missing)

        return ParsedLine(
            line=line,
            words=words,
            word_index=word_index,
            word_cursor=word_cursor,
            cursor=cursor,
            open_brackets=len(stack),
            missing=missing,
        )

    @staticmethod
    def _cursor_word(words: list[str], current: list[str], in_word: bool) -> tuple[int, int]:
        if in_word:
            return len(words), len(current)
        return len(words), 0
