#!/usr/bin/env python3
"""
Tests for completers compiled from command metadata.
"""

from unittest.mock import MagicMock

import pytest
from prompt_toolkit.completion import CompleteEvent
from prompt_toolkit.document import Document

from replshell.core.completers import (
    ArgumentCompleter,
    NullCompleter,
    OptionCompleter,
    StringsCompleter,
    SystemCompleter,
)
from replshell.core.datamodels import OptionDescriptor


def complete(completer, text):
    """Completion texts for the cursor at the end of text."""
    document = Document(text, len(text))
    return [c.text for c in completer.get_completions(document, CompleteEvent())]


# ============================================================================
# Building Block Tests
# ============================================================================

class TestStringsCompleter:
    """Tests for StringsCompleter."""

    def test_prefix_match(self):
        completer = StringsCompleter(["columns", "clear_screen", "lines"])
        assert complete(completer, "c") == ["clear_screen", "columns"]

    def test_producer_is_lazy(self):
        """Test a candidate producer runs only when completing."""
        producer = MagicMock(return_value=["alpha", "beta"])
        completer = StringsCompleter(producer)
        producer.assert_not_called()
        assert complete(completer, "a") == ["alpha"]
        assert complete(completer, "b") == ["beta"]
        assert producer.call_count == 2

    def test_meta(self):
        completer = StringsCompleter(["tput"], meta={"tput": "put terminal capability"})
        completion = next(completer.get_completions(Document("t", 1), CompleteEvent()))
        assert completion.display_meta_text == "put terminal capability"


class TestOptionCompleter:
    """Tests for OptionCompleter."""

    @pytest.fixture
    def options(self):
        return [
            OptionDescriptor(flag="--help", aliases=["-?"], description="Displays command help"),
            OptionDescriptor(flag="--count", aliases=["-n"], value_name="COUNT"),
        ]

    def test_flags(self, options):
        completer = OptionCompleter(NullCompleter(), lambda: options)
        assert complete(completer, "-") == ["-?", "--help", "-n", "--count="]
        assert complete(completer, "--c") == ["--count="]

    def test_arguments_delegate(self, options):
        """Test non-option words go to the argument completer."""
        completer = OptionCompleter(StringsCompleter(["abc"]), lambda: options)
        assert complete(completer, "a") == ["abc"]

    def test_option_value(self, options):
        """Test --count= values complete from the value completer."""
        completer = OptionCompleter(
            NullCompleter(),
            lambda: options,
            value_completers={"--count": StringsCompleter(["10", "20"])},
        )
        assert complete(completer, "--count=1") == ["--count=10"]

    def test_options_are_lazy(self):
        options = MagicMock(return_value=[])
        OptionCompleter(NullCompleter(), options)
        options.assert_not_called()


class TestArgumentCompleter:
    """Tests for positional stages."""

    def test_stage_per_position(self):
        completer = ArgumentCompleter(
            NullCompleter(),
            StringsCompleter(["first"]),
            StringsCompleter(["second"]),
        )
        assert complete(completer, "cmd f") == ["first"]
        assert complete(completer, "cmd first s") == ["second"]

    def test_last_stage_repeats(self):
        completer = ArgumentCompleter(NullCompleter(), StringsCompleter(["again"]))
        assert complete(completer, "cmd again again a") == ["again"]

    def test_requires_a_stage(self):
        with pytest.raises(ValueError):
            ArgumentCompleter()


class TestSystemCompleter:
    """Tests for the command namespace."""

    def test_first_entry_wins(self):
        system = SystemCompleter()
        first, second = StringsCompleter(["a"]), StringsCompleter(["b"])
        system.add("cmd", first)
        system.add("cmd", second)
        assert system.get("cmd") is first
        assert len(system) == 1

    def test_alias_resolves(self):
        system = SystemCompleter()
        completer = NullCompleter()
        system.add("clear", completer)
        system.add_aliases({"cls": "clear"})
        assert "cls" in system
        assert system.get("cls") is completer
        assert system.names() == {"clear", "cls"}


# ============================================================================
# Compiled Completer Tests
# ============================================================================

class TestCompiledCompleter:
    """Tests for the registry's aggregate completer."""

    @pytest.fixture
    def completer(self, registry):
        return registry.compile_completers()

    def test_command_names(self, completer):
        assert complete(completer, "cl") == ["clear", "cls"]
        assert complete(completer, "sh") == ["show"]
        assert complete(completer, "tp") == ["tput"]

    def test_command_meta(self, completer):
        """Test command names carry their synopsis."""
        completion = next(completer.get_completions(Document("tp", 2), CompleteEvent()))
        assert completion.display_meta_text == "put terminal capability"

    def test_tput_capabilities(self, completer):
        """Test capability names complete after tput."""
        assert complete(completer, "tput clear_s") == ["clear_screen"]
        assert "columns" in complete(completer, "tput co")

    def test_options_from_help(self, completer):
        """Test option flags come from the usage text."""
        assert complete(completer, "tput -") == ["-?", "--help"]
        assert complete(completer, "history --c") == ["--count="]

    def test_alias_uses_command_completer(self, completer):
        assert complete(completer, "cls --h") == ["--help"]

    def test_variables(self, completer, evaluator):
        """Test show completes evaluator variables at completion time."""
        evaluator.bind("alpha", 1)
        assert complete(completer, "show al") == ["alpha"]
        evaluator.bind("alps", 2)
        assert complete(completer, "vars al") == ["alpha", "alps"]

    def test_help_completes_commands(self, completer):
        assert complete(completer, "help tp") == ["tput"]

    def test_unknown_command(self, completer):
        """Test arguments of free-form input get no completions."""
        assert complete(completer, "print x") == []


if __name__ == "__main__":
    pytest.main([__file__, "-v", "--tb=short"])
