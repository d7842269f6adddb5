#!/usr/bin/env python3
"""
Entry point for the replshell CLI.
"""

from __future__ import annotations

import argparse
import logging
import sys

from replshell.cli.hints import HintOverlay, TipType
from replshell.cli.reader import LineReader, PromptToolkitReader, SimpleReader, create_history
from replshell.cli.repl import Repl
from replshell.cli.terminal import Terminal
from replshell.commands.builtins import Builtins
from replshell.commands.console import ConsoleCommands
from replshell.commands.terminal import TerminalCommands
from replshell.config import DEFAULTS, Config, get_config_manager
from replshell.core.registry import SystemRegistry
from replshell.engine.evaluator import PythonEvaluator
from replshell.session.logging import (
    close_session_logging,
    configure_session_logging,
    get_current_log_path,
    log_exception,
    new_session_id,
)
from replshell.session.state import SessionState

logger = logging.getLogger(__name__)


def build_registry(terminal: Terminal, evaluator: PythonEvaluator, history) -> SystemRegistry:
    """Assemble the providers in precedence order."""
    providers = [
        ConsoleCommands(evaluator),
        Builtins(history),
        TerminalCommands(terminal),
    ]
    return SystemRegistry(providers, evaluator)


def build_repl(cfg: Config, terminal: Terminal | None = None, simple: bool = False,
               hints: bool = True) -> Repl:
    """Wire the registry, line reader and driver from configuration."""
    terminal = terminal or Terminal()
    evaluator = PythonEvaluator()
    history = create_history(cfg.get("history_file"))
    registry = build_registry(terminal, evaluator, history)
    completer = registry.compile_completers()

    reader: LineReader
    if simple:
        reader = SimpleReader(completer, history=history)
    else:
        overlay = HintOverlay(
            registry.describe,
            style=TipType(cfg.get("hint_style")),
            max_lines=cfg.get("hint_lines"),
            enabled=hints and cfg.get("hint_enabled"),
        )
        reader = PromptToolkitReader(completer, overlay=overlay, history=history)

    return Repl(
        registry,
        reader,
        terminal,
        session=SessionState(evaluator),
        prompt=cfg.get("prompt"),
        secondary_prompt=cfg.get("secondary_prompt"),
        indentation=cfg.get("indentation"),
    )


def print_config():
    """Print current configuration."""
    cfg_mgr = get_config_manager()
    settings = cfg_mgr.list_settings()

    print(f"Config file: {cfg_mgr.CONFIG_FILE}")

    if settings:
        print("\nCustom settings:")
        for key, value in settings.items():
            print(f"  {key}: {value}")

    print("\nDefaults (used when not set):")
    for key, value in DEFAULTS.items():
        if key not in settings:
            print(f"  {key}: {value}")

    print("\nSet with: replshell --set-config key=value")
    print(f"Available keys: {', '.join(DEFAULTS)}")
    print()


def _report(error: BaseException, context: str) -> int:
    """Print a one-line diagnostic for a fatal error and return exit status 1."""
    print(f"Error: {log_exception(error, context=context)}", file=sys.stderr)
    log_path = get_current_log_path()
    if log_path is not None:
        print(f"See {log_path}", file=sys.stderr)
    return 1


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the replshell CLI."""
    try:
        cfg_mgr = get_config_manager()
        cfg = cfg_mgr.config
    except OSError as e:
        print(f"Error: Cannot read configuration: {e}", file=sys.stderr)
        return 1

    parser = argparse.ArgumentParser(
        description="Interactive command shell with a Python fallback",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=f"""
Config file: {cfg_mgr.CONFIG_FILE}

Examples:
    replshell                              # Start the shell
    replshell --simple                     # Plain input() line editing
    replshell --set-config hint_style=usage
    replshell --init-config                # Write a config file with all defaults
        """,
    )
    parser.add_argument("--simple", action="store_true", default=cfg.get("simple"),
                        help="Use plain input() instead of prompt_toolkit")
    parser.add_argument("--no-hints", action="store_true",
                        help="Start with the hint overlay hidden (toggle with Alt-s)")
    parser.add_argument("--debug", action="store_true", default=cfg.get("debug"),
                        help="Mirror debug logging to stderr")
    parser.add_argument("--config", action="store_true",
                        help="Show current configuration")
    parser.add_argument("--set-config", metavar="KEY=VALUE",
                        help="Set a config value")
    parser.add_argument("--unset-config", metavar="KEY",
                        help="Reset a config value to its default")
    parser.add_argument("--init-config", action="store_true",
                        help="Create the config file with default values if missing")
    parser.add_argument("--reset-config", action="store_true",
                        help="Delete the config file, restoring all defaults")
    args = parser.parse_args(argv)

    if args.config:
        print_config()
        return 0

    if args.init_config:
        try:
            cfg_mgr.load(create_if_missing=True)
        except OSError as e:
            print(f"Error: {e}", file=sys.stderr)
            return 1
        print(f"Config file: {cfg_mgr.CONFIG_FILE}")
        return 0

    if args.reset_config:
        try:
            cfg_mgr.reset()
        except OSError as e:
            print(f"Error: {e}", file=sys.stderr)
            return 1
        print(f"Removed {cfg_mgr.CONFIG_FILE}")
        return 0

    if args.set_config:
        try:
            key, value = args.set_config.split("=", 1)
            cfg_mgr.set(key.strip(), value.strip())
            print(f"Set {key.strip()} = {cfg_mgr.get(key.strip())}")
            print(f"Saved to {cfg_mgr.CONFIG_FILE}")
        except (OSError, ValueError) as e:
            print(f"Error: {e}", file=sys.stderr)
            return 1
        return 0

    if args.unset_config:
        try:
            cfg_mgr.unset(args.unset_config)
            print(f"Unset {args.unset_config}")
            print(f"Saved to {cfg_mgr.CONFIG_FILE}")
        except (OSError, ValueError) as e:
            print(f"Error: {e}", file=sys.stderr)
            return 1
        return 0

    try:
        try:
            log_path = configure_session_logging(new_session_id(), debug=args.debug)
            logger.debug(f"Logging to {log_path}")
            repl = build_repl(cfg, simple=args.simple, hints=not args.no_hints)
        except Exception as e:
            return _report(e, "Startup failed")

        try:
            return repl.run()
        except Exception as e:
            return _report(e, "REPL failed")
    finally:
        close_session_logging()


if __name__ == "__main__":
    sys.exit(main())
