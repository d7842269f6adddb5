"""
Command providers.

A provider owns a disjoint set of named commands plus the metadata needed to
execute, complete and describe them. ``CommandProvider`` is the capability
interface the aggregator consumes; ``CommandRegistry`` is a table-backed
implementation that concrete command sets build on.

Help metadata is never stored separately. ``description()`` and ``options()``
re-run the command with ``--help`` and compile the returned usage text, so
the printed usage is the only source of truth.
"""

from __future__ import annotations

import logging
from typing import Callable, Protocol, runtime_checkable

from prompt_toolkit.completion import Completer

from replshell.core.completers import (
    ArgumentCompleter,
    NullCompleter,
    OptionCompleter,
    SystemCompleter,
)
from replshell.core.datamodels import (
    CommandEntry,
    Error,
    HelpDescriptor,
    HelpRequested,
    OptionDescriptor,
    Result,
)
from replshell.core.exceptions import CommandError
from replshell.core.options import compile_help

logger = logging.getLogger(__name__)


@runtime_checkable
class CommandProvider(Protocol):
    """Capability set every command source implements."""

    def names(self) -> set[str]: ...

    def aliases(self) -> dict[str, str]: ...

    def has_command(self, name: str) -> bool: ...

    def execute(self, name: str, args: list[str]) -> Result: ...

    def description(self, name: str) -> HelpDescriptor | None: ...

    def options(self, name: str) -> list[OptionDescriptor]: ...

    def compile_completers(self) -> SystemCompleter: ...


class CommandRegistry:
    """Table of commands implementing the CommandProvider capabilities."""

    def __init__(self):
        self._commands: dict[str, CommandEntry] = {}
        self._aliases: dict[str, str] = {}

    def add(
        self,
        name: str,
        executor: Callable[[str, list[str]], Result],
        completer: Callable[[str], Completer] | None = None,
        aliases: list[str] | None = None,
    ) -> CommandEntry:
        """Add a command to the table.

        Args:
            name: Canonical command name, unique within this provider
            executor: Callable (name, args) -> Result
            completer: Optional factory name -> Completer; a default
                option completer is synthesized when omitted
            aliases: Alternative names resolving to ``name``

        Returns:
            The stored CommandEntry
        """
        if name in self._commands or name in self._aliases:
            raise CommandError(f"Command name collision: {name}")

        entry = CommandEntry(
            name=name,
            executor=executor,
            completer=completer,
            aliases=list(aliases or []),
        )
        for alias in entry.aliases:
            if alias in self._commands or alias in self._aliases:
                raise CommandError(f"Alias collision: {alias}")
        self._commands[name] = entry
        for alias in entry.aliases:
            self._aliases[alias] = name
        return entry

    def register(
        self,
        name: str,
        completer: Callable[[str], Completer] | None = None,
        aliases: list[str] | None = None,
    ) -> Callable:
        """Decorator form of ``add``.

        Example:
            @provider.register("hello", aliases=["hi"])
            def cmd_hello(name, args):
                return Value(f"Hello, {' '.join(args) or 'world'}!")
        """
        def decorator(func: Callable) -> Callable:
            self.add(name, func, completer=completer, aliases=aliases)
            return func
        return decorator

    # ------------------------------------------------------------------
    # CommandProvider capabilities
    # ------------------------------------------------------------------

    def names(self) -> set[str]:
        return set(self._commands)

    def aliases(self) -> dict[str, str]:
        return dict(self._aliases)

    def has_command(self, name: str) -> bool:
        return name in self._commands or name in self._aliases

    def resolve(self, name: str) -> str | None:
        """Canonical name for a name or alias."""
        if name in self._commands:
            return name
        return self._aliases.get(name)

    def execute(self, name: str, args: list[str]) -> Result:
        """Run a command. Failures come back as ``Error``, not exceptions."""
        canonical = self.resolve(name)
        if canonical is None:
            return Error(CommandError(f"Unknown command: {name}"))
        entry = self._commands[canonical]
        try:
            return entry.executor(canonical, list(args))
        except KeyboardInterrupt:
            raise
        except Exception as e:
            logger.debug(f"Command '{canonical}' failed", exc_info=True)
            return Error(e)

    def _help_text(self, name: str) -> str | None:
        result = self.execute(name, ["--help"])
        if isinstance(result, HelpRequested):
            return result.usage
        logger.warning(f"Command '{name}' did not answer --help with usage text")
        return None

    def description(self, name: str) -> HelpDescriptor | None:
        text = self._help_text(name)
        if text is None:
            return None
        return compile_help(text)

    def options(self, name: str) -> list[OptionDescriptor]:
        desc = self.description(name)
        return desc.options if desc else []

    def default_completer(self, name: str) -> Completer:
        """Positional stage with no candidates plus lazily listed options."""
        return ArgumentCompleter(
            NullCompleter(),
            OptionCompleter(NullCompleter(), lambda: self.options(name)),
        )

    def compile_completers(self) -> SystemCompleter:
        out = SystemCompleter()
        for name, entry in self._commands.items():
            factory = entry.completer or self.default_completer
            out.add(name, factory(name))
        out.add_aliases(self._aliases)
        return out

    def __iter__(self):
        return iter(self._commands.values())

    def __len__(self) -> int:
        return len(self._commands)
