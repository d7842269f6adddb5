#!/usr/bin/env python3
"""
Tests for the bracket-aware line parser.
"""

import pytest

from replshell.core.exceptions import ParseIncomplete
from replshell.core.parser import LineParser, ParseContext


@pytest.fixture
def parser():
    return LineParser()


# ============================================================================
# Tokenizing Tests
# ============================================================================

class TestWords:
    """Tests for word splitting."""

    def test_simple_words(self, parser):
        """Test whitespace separated words."""
        parsed = parser.parse("tput  clear_screen")
        assert parsed.words == ["tput", "clear_screen"]
        assert parsed.command == "tput"
        assert parsed.args == ["clear_screen"]
        assert parsed.line == "tput  clear_screen"

    def test_empty_line(self, parser):
        """Test blank input has no words."""
        parsed = parser.parse("   ")
        assert parsed.words == []
        assert parsed.command == ""

    def test_quotes_group(self, parser):
        """Test quoted text is one word without the quotes."""
        assert parser.parse('echo "a b" \'c d\'').words == ["echo", "a b", "c d"]

    def test_backslash_escape(self, parser):
        r"""Test '\ ' keeps a space inside a word."""
        assert parser.parse(r"cat a\ b").words == ["cat", "a b"]

    def test_brackets_in_quotes_ignored(self, parser):
        """Test a quoted bracket does not open a block."""
        parsed = parser.parse('print("(")')
        assert parsed.open_brackets == 0


# ============================================================================
# Bracket Tests
# ============================================================================

class TestBrackets:
    """Tests for unmatched bracket handling."""

    def test_unclosed_brace_raises(self, parser):
        """Test an open brace on accept needs continuation."""
        with pytest.raises(ParseIncomplete) as exc_info:
            parser.parse("x = {")
        assert exc_info.value.missing == "}"

    def test_missing_is_innermost_first(self, parser):
        """Test nested brackets report closers innermost first."""
        with pytest.raises(ParseIncomplete) as exc_info:
            parser.parse("f([{")
        assert exc_info.value.missing == "}])"

    def test_parse_incomplete_is_eof(self):
        """Test ParseIncomplete is an EOFError subclass."""
        assert issubclass(ParseIncomplete, EOFError)

    def test_balanced_multiline(self, parser):
        """Test a block closed on a later line parses."""
        parsed = parser.parse("x = {\n  'a': 1}")
        assert parsed.open_brackets == 0
        assert parsed.line == "x = {\n  'a': 1}"

    def test_complete_context_never_raises(self, parser):
        """Test completion parsing reports depth instead of raising."""
        parsed = parser.parse("x = {(", context=ParseContext.COMPLETE)
        assert parsed.open_brackets == 2
        assert parsed.missing == ")}"

    def test_disabled_eof(self):
        """Test eof_on_unclosed_bracket=False accepts open brackets."""
        parsed = LineParser(eof_on_unclosed_bracket=False).parse("x = [")
        assert parsed.open_brackets == 1


# ============================================================================
# Cursor Tests
# ============================================================================

class TestCursor:
    """Tests for the word under the cursor."""

    def test_cursor_in_last_word(self, parser):
        """Test cursor at the end of a partial word."""
        parsed = parser.parse("tput cl", context=ParseContext.COMPLETE)
        assert parsed.word_index == 1
        assert parsed.word == "cl"
        assert parsed.word_cursor == 2

    def test_cursor_after_space(self, parser):
        """Test cursor starting a new word."""
        parsed = parser.parse("tput ", context=ParseContext.COMPLETE)
        assert parsed.word_index == 1
        assert parsed.word == ""
        assert parsed.word_cursor == 0

    def test_cursor_in_first_word(self, parser):
        """Test cursor in the middle of the command word."""
        parsed = parser.parse("tput clear", cursor=2, context=ParseContext.COMPLETE)
        assert parsed.word_index == 0
        assert parsed.word == "tput"
        assert parsed.word_cursor == 2


if __name__ == "__main__":
    pytest.main([__file__, "-v", "--tb=short"])
