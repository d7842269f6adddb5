"""
System registry: one dispatch surface over many command providers.

Providers are consulted in the order given at construction; the first one
that owns the first word of a line executes it. Lines no provider claims go
to the evaluator as free-form code.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Sequence

from replshell.core.completers import (
    ArgumentCompleter,
    NullCompleter,
    OptionCompleter,
    StringsCompleter,
    SystemCompleter,
)
from replshell.core.datamodels import (
    Error,
    HelpDescriptor,
    HelpRequested,
    ParsedLine,
    Result,
    Value,
)
from replshell.core.options import Options
from replshell.core.provider import CommandProvider, CommandRegistry

if TYPE_CHECKING:
    from replshell.engine.evaluator import PythonEvaluator
    from replshell.session.state import SessionState

logger = logging.getLogger(__name__)


class SystemCommands(CommandRegistry):
    """Commands the registry answers itself (currently ``help``)."""

    HELP_USAGE = [
        "help -  command help",
        "Usage: help [COMMAND]",
        "  -? --help                       Displays command help",
    ]

    def __init__(self, registry: "SystemRegistry"):
        super().__init__()
        self._registry = registry
        self.add("help", self.help, completer=self._help_completer)

    def help(self, name: str, args: list[str]) -> Result:
        opt = Options.compile(self.HELP_USAGE).parse(args)
        if opt.is_set("help"):
            return HelpRequested(opt.usage())

        argv = opt.args()
        if argv:
            target = argv[0]
            provider = self._registry.provider_for(target)
            if provider is None:
                return Value(f"Unknown command: {target}")
            return provider.execute(target, ["--help"])

        lines = ["Commands:"]
        for command in sorted(self._registry.command_names()):
            desc = self._registry.describe(command)
            synopsis = desc.synopsis if desc else ""
            lines.append(f"  {command:<12} {synopsis}".rstrip())
        aliases = self._registry.command_aliases()
        if aliases:
            lines.append("Aliases:")
            for alias, command in sorted(aliases.items()):
                lines.append(f"  {alias:<12} -> {command}")
        lines.append("Anything else is evaluated as Python.")
        return Value("\n".join(lines))

    def _help_completer(self, name: str):
        return ArgumentCompleter(
            NullCompleter(),
            OptionCompleter(
                StringsCompleter(lambda: self._registry.command_names()),
                lambda: self.options(name),
            ),
        )


class SystemRegistry:
    """Aggregates providers and the fallback evaluator.

    Args:
        providers: Command providers in precedence order.
        evaluator: Receives every line whose first word no provider owns.
    """

    def __init__(self, providers: Sequence[CommandProvider], evaluator: "PythonEvaluator"):
        self._system = SystemCommands(self)
        self._providers: list[CommandProvider] = [self._system, *providers]
        self.evaluator = evaluator
        self._completer: SystemCompleter | None = None
        owners: dict[str, CommandProvider] = {}
        for provider in self._providers:
            for name in [*provider.names(), *provider.aliases()]:
                if name in owners:
                    logger.warning(
                        f"Command '{name}' from {type(provider).__name__} is shadowed "
                        f"by {type(owners[name]).__name__}"
                    )
                    continue
                owners[name] = provider

    @property
    def providers(self) -> list[CommandProvider]:
        return list(self._providers)

    def provider_for(self, name: str) -> CommandProvider | None:
        """First provider that owns name (by name or alias)."""
        for provider in self._providers:
            if provider.has_command(name):
                return provider
        return None

    def has_command(self, name: str) -> bool:
        return self.provider_for(name) is not None

    def command_names(self) -> set[str]:
        names: set[str] = set()
        for provider in self._providers:
            names |= provider.names()
        return names

    def command_aliases(self) -> dict[str, str]:
        aliases: dict[str, str] = {}
        for provider in reversed(self._providers):
            aliases.update(provider.aliases())
        return aliases

    def dispatch(self, parsed_line: ParsedLine, session: "SessionState | None" = None) -> Result:
        """Execute a parsed line and return its tagged result.

        Never raises for command or evaluation failures. ``Error`` results
        are recorded in the session; ``HelpRequested`` leaves it untouched.
        KeyboardInterrupt propagates as the user-interrupt signal.
        """
        command = parsed_line.command
        provider = self.provider_for(command) if command else None
        try:
            if provider is not None:
                logger.debug(f"Dispatching '{command}' to {type(provider).__name__}")
                result = provider.execute(command, parsed_line.args)
            else:
                result = self.evaluator.execute(parsed_line.line)
        except KeyboardInterrupt:
            raise
        except Exception as e:
            logger.exception(f"Unexpected failure dispatching {parsed_line.line!r}")
            result = Error(e)

        if isinstance(result, Error) and session is not None:
            session.record_error(result)
        return result

    def describe(self, name: str) -> HelpDescriptor | None:
        """Help metadata for a command; used by the hint overlay."""
        provider = self.provider_for(name)
        if provider is None:
            return None
        return provider.description(name)

    def compile_completers(self) -> SystemCompleter:
        """Merge every provider's completers into one namespace (built once)."""
        if self._completer is not None:
            return self._completer

        def meta(name: str) -> str | None:
            desc = self.describe(name)
            return desc.synopsis if desc else None

        out = SystemCompleter(meta=meta)
        for provider in self._providers:
            out.merge(provider.compile_completers())
        self._completer = out
        return out
