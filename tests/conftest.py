"""
Shared fixtures: a terminal writing to a string buffer, a scripted line
reader and a fully wired system registry.
"""

import io

import pytest
from prompt_toolkit.data_structures import Size
from prompt_toolkit.history import InMemoryHistory
from prompt_toolkit.output.color_depth import ColorDepth
from prompt_toolkit.output.vt100 import Vt100_Output

from replshell.cli.main import build_registry
from replshell.cli.terminal import Terminal
from replshell.engine.evaluator import PythonEvaluator
from replshell.session.state import SessionState


class ScriptedReader:
    """LineReader replaying canned input.

    Items are returned in order; exception classes or instances are raised
    instead. EOFError is raised once the script runs out.
    """

    def __init__(self, lines):
        self.lines = list(lines)
        self.prompts = []
        self.defaults = []
        self.history = InMemoryHistory()

    def read_line(self, prompt, default=""):
        self.prompts.append(prompt)
        self.defaults.append(default)
        if not self.lines:
            raise EOFError
        item = self.lines.pop(0)
        if isinstance(item, BaseException) or (
            isinstance(item, type) and issubclass(item, BaseException)
        ):
            raise item
        line = default + item
        self.history.append_string(line)
        return line


@pytest.fixture
def stdout():
    """Buffer receiving everything the terminal writes."""
    return io.StringIO()


@pytest.fixture
def terminal(stdout):
    """Terminal over an 80x24 VT100 output; typed keys are an Up arrow."""
    output = Vt100_Output(
        stdout,
        lambda: Size(rows=24, columns=80),
        default_color_depth=ColorDepth.DEPTH_8_BIT,
    )
    return Terminal(output=output, key_reader=lambda: "\x1b[A")


@pytest.fixture
def evaluator():
    return PythonEvaluator()


@pytest.fixture
def history():
    return InMemoryHistory()


@pytest.fixture
def registry(terminal, evaluator, history):
    """System registry with every shipped provider."""
    return build_registry(terminal, evaluator, history)


@pytest.fixture
def session(evaluator):
    return SessionState(evaluator)


@pytest.fixture
def scripted():
    """Factory for ScriptedReader instances."""
    return ScriptedReader
