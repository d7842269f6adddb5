"""
Read-eval-print loop.

Each iteration resets the session, reads a complete line (asking for
continuation lines while brackets are open), dispatches it through the
system registry and renders the tagged result. Only end of input or a quit
token ends the loop; every other failure is reported and the loop goes on.
"""

from __future__ import annotations

import logging
import pprint
from typing import Any

from replshell.cli.reader import LineReader
from replshell.cli.terminal import Terminal
from replshell.core.datamodels import Error, HelpRequested, ParsedLine, Result, Value
from replshell.core.exceptions import ParseIncomplete
from replshell.core.options import HELP_STYLE, highlight_usage
from replshell.core.parser import LineParser, ParseContext
from replshell.core.registry import SystemRegistry
from replshell.session.logging import log_exception
from replshell.session.state import SessionState

logger = logging.getLogger(__name__)

# Lines that end the loop, compared case-insensitively after trimming
QUIT_TOKENS = ("quit", "exit")


def is_quit(line: str) -> bool:
    return line.strip().lower() in QUIT_TOKENS


def format_value(value: Any) -> str:
    """Strings print as-is, everything else pretty-printed."""
    if isinstance(value, str):
        return value
    return pprint.pformat(value)


class Repl:
    """The read loop.

    Args:
        registry: Dispatch surface for commands and free-form input.
        reader: Line editor.
        terminal: Output for results and the banner.
        parser: Line parser; must report unclosed brackets on accept.
        session: Session state; one is created over the registry's evaluator
            when omitted.
        prompt: Primary prompt.
        secondary_prompt: Continuation prompt template. ``{missing}`` is
            replaced by the closing brackets still required.
        indentation: Spaces pre-filled per open bracket on continuation lines.
    """

    def __init__(
        self,
        registry: SystemRegistry,
        reader: LineReader,
        terminal: Terminal,
        parser: LineParser | None = None,
        session: SessionState | None = None,
        prompt: str = "repl> ",
        secondary_prompt: str = "{missing} > ",
        indentation: int = 2,
    ):
        self.registry = registry
        self.reader = reader
        self.terminal = terminal
        self.parser = parser or LineParser(eof_on_unclosed_bracket=True)
        self.session = session or SessionState(registry.evaluator)
        self.prompt = prompt
        self.secondary_prompt = secondary_prompt
        self.indentation = indentation

    def continuation_prompt(self, missing: str) -> str:
        """Secondary prompt, right-aligned to the primary prompt's width."""
        return self.secondary_prompt.replace("{missing}", missing).rjust(len(self.prompt))

    def read_line(self) -> ParsedLine | None:
        """Read one complete line. Returns None when a quit token was entered.

        Raises:
            KeyboardInterrupt: The user interrupted input; the partial line is discarded.
            EOFError: End of input.
        """
        text = self.reader.read_line(self.prompt).strip()
        if is_quit(text):
            return None
        while True:
            try:
                return self.parser.parse(text, context=ParseContext.ACCEPT_LINE)
            except ParseIncomplete as e:
                indent = " " * (self.indentation * len(e.missing))
                more = self.reader.read_line(self.continuation_prompt(e.missing), default=indent)
                text = f"{text}\n{more}"

    def render(self, result: Result) -> None:
        if isinstance(result, HelpRequested):
            self.terminal.print_formatted(highlight_usage(result.usage), HELP_STYLE)
        elif isinstance(result, Error):
            log_exception(result.cause, context="Command failed")
            self.terminal.println(str(result))
        elif isinstance(result, Value):
            if result.value is not None:
                self.terminal.println(format_value(result.value))

    def step(self) -> bool:
        """Run one iteration. Returns False when the loop should stop."""
        self.session.begin_iteration()
        try:
            parsed = self.read_line()
        except KeyboardInterrupt:
            return True
        except EOFError:
            return False
        if parsed is None:
            return False
        if not parsed.words:
            return True

        try:
            result = self.registry.dispatch(parsed, self.session)
        except KeyboardInterrupt:
            logger.debug(f"Interrupted: {parsed.line!r}")
            return True
        self.render(result)
        return True

    def run(self) -> int:
        """Run until end of input or a quit token. Returns the exit status."""
        self.terminal.println(f"{self.terminal.name}: {self.terminal.type}")
        logger.info("REPL started")
        while self.step():
            pass
        logger.info("REPL stopped")
        return 0
