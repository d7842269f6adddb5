"""
CLI module for the replshell package.

Provides the terminal, line readers, hint overlay and the read loop.
"""

from replshell.cli.hints import HintOverlay, TipType
from replshell.cli.reader import LineReader, PromptToolkitReader, SimpleReader
from replshell.cli.repl import Repl
from replshell.cli.terminal import Terminal

__all__ = [
    "HintOverlay",
    "LineReader",
    "PromptToolkitReader",
    "Repl",
    "SimpleReader",
    "Terminal",
    "TipType",
]
