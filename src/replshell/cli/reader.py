"""
Line readers for the REPL.

The feature-rich reader uses prompt_toolkit (completion, history, hint
toolbar, Alt-s toggle). The simple reader uses ``input()`` with optional
readline completion.
"""

from __future__ import annotations

from pathlib import Path
from typing import Protocol

from prompt_toolkit import PromptSession
from prompt_toolkit.auto_suggest import AutoSuggestFromHistory
from prompt_toolkit.completion import CompleteEvent, Completer
from prompt_toolkit.document import Document
from prompt_toolkit.history import FileHistory, History, InMemoryHistory
from prompt_toolkit.key_binding import KeyBindings
from prompt_toolkit.styles import Style, merge_styles

from replshell.cli.hints import HINT_STYLE, HintOverlay
from replshell.core.options import HELP_STYLE


# Key sequence toggling the hint overlay (Alt-s)
HINT_TOGGLE_KEYS = ("escape", "s")


class LineReader(Protocol):
    """What the REPL needs from the line-editing layer.

    ``read_line`` raises KeyboardInterrupt on user interrupt and EOFError at
    end of input.
    """

    history: History

    def read_line(self, prompt: str, default: str = "") -> str: ...


def get_style() -> Style:
    """Get the prompt style."""
    return Style.from_dict({
        "prompt": "ansicyan bold",
    })


def create_history(history_file: str | None) -> History:
    """File-backed history, or in-memory when no file is configured."""
    if not history_file:
        return InMemoryHistory()
    path = Path(history_file).expanduser()
    path.parent.mkdir(parents=True, exist_ok=True)
    return FileHistory(str(path))


class PromptToolkitReader:
    """prompt_toolkit based reader with completion and the hint toolbar."""

    def __init__(
        self,
        completer: Completer,
        overlay: HintOverlay | None = None,
        history: History | None = None,
    ):
        self.history = history or InMemoryHistory()
        self.overlay = overlay

        bindings = KeyBindings()

        @bindings.add(*HINT_TOGGLE_KEYS)
        def _(event):
            """Toggle the hint overlay."""
            if self.overlay is not None:
                self.overlay.toggle()
                event.app.invalidate()

        self.session: PromptSession = PromptSession(
            history=self.history,
            completer=completer,
            auto_suggest=AutoSuggestFromHistory(),
            style=merge_styles([get_style(), HELP_STYLE, HINT_STYLE]),
            key_bindings=bindings,
            complete_while_typing=True,
            bottom_toolbar=overlay.bottom_toolbar if overlay is not None else None,
        )

    def read_line(self, prompt: str, default: str = "") -> str:
        return self.session.prompt(prompt, default=default)


class SimpleReader:
    """``input()`` based reader for dumb terminals and pipes."""

    def __init__(self, completer: Completer | None = None, history: History | None = None):
        self.history = history or InMemoryHistory()
        self.completer = completer
        self._matches: list[str] = []
        if completer is not None:
            self._install_readline()

    def _install_readline(self) -> None:
        import readline

        readline.set_completer(self._complete)
        readline.set_completer_delims(" \t\n")
        readline.parse_and_bind("tab: complete")

    def _complete(self, text: str, state: int) -> str | None:
        """readline completer backed by the prompt_toolkit completer."""
        import readline

        if state == 0:
            line = readline.get_line_buffer()[:readline.get_endidx()]
            document = Document(line, len(line))
            self._matches = []
            for completion in self.completer.get_completions(document, CompleteEvent()):
                prefix = text[:len(text) + completion.start_position]
                self._matches.append(prefix + completion.text)
        return self._matches[state] if state < len(self._matches) else None

    def read_line(self, prompt: str, default: str = "") -> str:
        line = default + input(prompt + default)
        if line.strip():
            self.history.append_string(line)
        return line
