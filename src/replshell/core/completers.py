"""
Completers compiled from command metadata.

All classes are prompt_toolkit completers. ``SystemCompleter`` owns the
command namespace and hands argument positions to the per-command completer,
usually an ``ArgumentCompleter`` whose stages see only the word under the
cursor.
"""

from __future__ import annotations

import logging
from typing import Callable, Iterable, Union

from prompt_toolkit.completion import CompleteEvent, Completer, Completion
from prompt_toolkit.document import Document

from replshell.core.datamodels import OptionDescriptor
from replshell.core.parser import LineParser, ParseContext

logger = logging.getLogger(__name__)

Candidates = Union[Iterable[str], Callable[[], Iterable[str]]]

_parser = LineParser()


def _word_document(document: Document) -> tuple[int, Document]:
    """Return (word index, document holding the word prefix under the cursor)."""
    parsed = _parser.parse(document.text_before_cursor, context=ParseContext.COMPLETE)
    prefix = parsed.word[:parsed.word_cursor]
    return parsed.word_index, Document(prefix, len(prefix))


class NullCompleter(Completer):
    """Completes nothing."""

    def get_completions(self, document, complete_event):
        return iter(())


class StringsCompleter(Completer):
    """Completes from a fixed list or a zero-argument candidate producer.

    A producer is called on every completion request, so candidate sets
    that are large or change at runtime are never computed up front.
    """

    def __init__(self, candidates: Candidates, meta: dict[str, str] | None = None):
        self._candidates = candidates
        self._meta = meta or {}

    def candidates(self) -> list[str]:
        values = self._candidates() if callable(self._candidates) else self._candidates
        return sorted(set(values))

    def get_completions(self, document, complete_event):
        text = document.text_before_cursor
        for candidate in self.candidates():
            if candidate.startswith(text):
                yield Completion(
                    candidate,
                    start_position=-len(text),
                    display_meta=self._meta.get(candidate),
                )


class OptionCompleter(Completer):
    """Completes option flags, falling back to an argument completer.

    Args:
        args_completer: Completer for words that are not options.
        options: Zero-argument callable returning the command's options. It is
            invoked at completion time, not at construction.
        value_completers: Optional completers for ``--flag=VALUE`` values,
            keyed by any flag spelling.
    """

    def __init__(
        self,
        args_completer: Completer,
        options: Callable[[], list[OptionDescriptor]],
        value_completers: dict[str, Completer] | None = None,
    ):
        self.args_completer = args_completer
        self.options = options
        self.value_completers = value_completers or {}

    def get_completions(self, document, complete_event):
        text = document.text_before_cursor
        if not text.startswith("-"):
            yield from self.args_completer.get_completions(document, complete_event)
            return

        if "=" in text:
            flag, _, value = text.partition("=")
            completer = self.value_completers.get(flag)
            if completer is None:
                return
            for completion in completer.get_completions(Document(value, len(value)), complete_event):
                yield Completion(
                    f"{flag}={completion.text}",
                    start_position=-len(text),
                    display_meta=completion.display_meta,
                )
            return

        for option in self.options() or []:
            for flag in option.flags:
                if not flag.startswith(text):
                    continue
                suffix = "=" if option.takes_value() and flag.startswith("--") else ""
                yield Completion(
                    flag + suffix,
                    start_position=-len(text),
                    display_meta=option.description,
                )


class ArgumentCompleter(Completer):
    """Positional completer: one stage per word, the last stage repeats.

    Stage 0 is the command name position.
    """

    def __init__(self, *stages: Completer):
        if not stages:
            raise ValueError("ArgumentCompleter needs at least one stage")
        self.stages = list(stages)

    def get_completions(self, document, complete_event):
        index, word = _word_document(document)
        stage = self.stages[min(index, len(self.stages) - 1)]
        yield from stage.get_completions(word, complete_event)


class SystemCompleter(Completer):
    """Namespace of command completers keyed by name and alias."""

    def __init__(self, meta: Callable[[str], str | None] | None = None):
        self._completers: dict[str, Completer] = {}
        self._aliases: dict[str, str] = {}
        self._meta = meta

    def add(self, name: str, completer: Completer) -> None:
        """Add a command completer. Earlier entries win on collision."""
        if name in self:
            logger.debug(f"Completer for '{name}' already registered, skipping")
            return
        self._completers[name] = completer

    def add_aliases(self, aliases: dict[str, str]) -> None:
        for alias, command in aliases.items():
            if alias in self:
                logger.debug(f"Alias '{alias}' already registered, skipping")
                continue
            self._aliases[alias] = command

    def merge(self, other: "SystemCompleter") -> None:
        """Merge another namespace into this one; existing entries win.

        Aliases are resolved against ``other`` before merging, so an alias
        keeps the completer of the provider that owns it.
        """
        for name, completer in other._completers.items():
            self.add(name, completer)
        for alias in other._aliases:
            completer = other.get(alias)
            if completer is not None:
                self.add(alias, completer)

    def names(self) -> set[str]:
        """Every completable command word: names and aliases."""
        return set(self._completers) | set(self._aliases)

    def get(self, name: str) -> Completer | None:
        return self._completers.get(self._aliases.get(name, name))

    def __contains__(self, name: str) -> bool:
        return name in self._completers or name in self._aliases

    def __len__(self) -> int:
        return len(self._completers) + len(self._aliases)

    def get_completions(self, document: Document, complete_event: CompleteEvent):
        parsed = _parser.parse(document.text_before_cursor, context=ParseContext.COMPLETE)
        if parsed.word_index == 0:
            prefix = parsed.word[:parsed.word_cursor]
            for name in sorted(self.names()):
                if name.startswith(prefix):
                    yield Completion(
                        name,
                        start_position=-len(prefix),
                        display_meta=self._meta(name) if self._meta else None,
                    )
            return

        completer = self.get(parsed.command)
        if completer is not None:
            yield from completer.get_completions(document, complete_event)
