"""
Terminal access for commands and the read loop.

Wraps a prompt_toolkit ``Output`` with symbolic capability lookup, so
commands can emit control sequences by terminfo name (``clear_screen``,
``bell``, ...) without hard-coding escape codes.
"""

from __future__ import annotations

import logging
import os
from typing import Any

from prompt_toolkit import print_formatted_text
from prompt_toolkit.formatted_text import FormattedText
from prompt_toolkit.output import Output, create_output
from prompt_toolkit.output.color_depth import ColorDepth
from prompt_toolkit.styles import BaseStyle

logger = logging.getLogger(__name__)

# String capabilities (terminfo long names) for VT100/xterm compatible terminals
STRING_CAPABILITIES: dict[str, str] = {
    "bell": "\a",
    "carriage_return": "\r",
    "clear_screen": "\x1b[H\x1b[2J",
    "clr_bol": "\x1b[1K",
    "clr_eol": "\x1b[K",
    "clr_eos": "\x1b[J",
    "cursor_down": "\n",
    "cursor_home": "\x1b[H",
    "cursor_invisible": "\x1b[?25l",
    "cursor_left": "\b",
    "cursor_normal": "\x1b[?12l\x1b[?25h",
    "cursor_right": "\x1b[C",
    "cursor_up": "\x1b[A",
    "cursor_visible": "\x1b[?12;25h",
    "delete_character": "\x1b[P",
    "delete_line": "\x1b[M",
    "enter_am_mode": "\x1b[?7h",
    "enter_blink_mode": "\x1b[5m",
    "enter_bold_mode": "\x1b[1m",
    "enter_ca_mode": "\x1b[?1049h\x1b[22;0;0t",
    "enter_dim_mode": "\x1b[2m",
    "enter_italics_mode": "\x1b[3m",
    "enter_reverse_mode": "\x1b[7m",
    "enter_standout_mode": "\x1b[7m",
    "enter_underline_mode": "\x1b[4m",
    "exit_am_mode": "\x1b[?7l",
    "exit_attribute_mode": "\x1b(B\x1b[m",
    "exit_ca_mode": "\x1b[?1049l\x1b[23;0;0t",
    "exit_italics_mode": "\x1b[23m",
    "exit_standout_mode": "\x1b[27m",
    "exit_underline_mode": "\x1b[24m",
    "insert_line": "\x1b[L",
    "keypad_local": "\x1b[?1l\x1b>",
    "keypad_xmit": "\x1b[?1h\x1b=",
    "restore_cursor": "\x1b8",
    "save_cursor": "\x1b7",
    "scroll_forward": "\n",
    "scroll_reverse": "\x1bM",
    "tab": "\t",
}

# Numeric capabilities resolved against the live output
NUMERIC_CAPABILITIES = ("columns", "lines", "max_colors")

COLOR_COUNTS = {
    ColorDepth.DEPTH_1_BIT: 2,
    ColorDepth.DEPTH_4_BIT: 16,
    ColorDepth.DEPTH_8_BIT: 256,
    ColorDepth.DEPTH_24_BIT: 1 << 24,
}


class Terminal:
    """Terminal output plus capability lookup.

    Args:
        output: prompt_toolkit Output; defaults to the process stdout.
        name: Display name of the terminal.
        key_reader: Optional callable returning raw key data typed up to
            Enter. Defaults to a prompt_toolkit application on this output.
    """

    def __init__(self, output: Output | None = None, name: str = "replshell", key_reader=None):
        self.output = output or create_output()
        self.name = name
        self.type = os.environ.get("TERM", "dumb")
        self._key_reader = key_reader

    @classmethod
    def capability_names(cls) -> set[str]:
        """All capability names this terminal understands."""
        return set(STRING_CAPABILITIES) | set(NUMERIC_CAPABILITIES)

    def string_capability(self, name: str) -> str | None:
        return STRING_CAPABILITIES.get(name)

    def numeric_capability(self, name: str) -> int | None:
        if name not in NUMERIC_CAPABILITIES:
            return None
        size = self.output.get_size()
        if name == "columns":
            return size.columns
        if name == "lines":
            return size.rows
        return COLOR_COUNTS[self.output.get_default_color_depth()]

    def puts(self, name: str) -> bool:
        """Emit a string capability. Returns False for unknown names."""
        sequence = self.string_capability(name)
        if sequence is None:
            return False
        self.output.write_raw(sequence)
        return True

    def write(self, text: str) -> None:
        self.output.write_raw(text)

    def println(self, obj: Any = "") -> None:
        self.output.write_raw(f"{obj}\n")
        self.output.flush()

    def print_formatted(self, text: FormattedText, style: BaseStyle | None = None) -> None:
        print_formatted_text(text, style=style, output=self.output, end="")
        self.output.flush()

    def flush(self) -> None:
        self.output.flush()

    def read_key_events(self) -> str:
        """Read raw key data until Enter."""
        if self._key_reader is not None:
            return self._key_reader()
        return _read_keys_until_enter(self.output)


def _read_keys_until_enter(output: Output) -> str:
    from prompt_toolkit.application import Application
    from prompt_toolkit.key_binding import KeyBindings
    from prompt_toolkit.keys import Keys
    from prompt_toolkit.layout import Layout
    from prompt_toolkit.layout.containers import Window
    from prompt_toolkit.layout.controls import FormattedTextControl

    pressed: list[str] = []
    bindings = KeyBindings()

    @bindings.add(Keys.Any)
    def _(event):
        pressed.extend(key_press.data for key_press in event.key_sequence)

    @bindings.add("enter")
    def _(event):
        event.app.exit()

    app: Application = Application(
        layout=Layout(Window(FormattedTextControl(""), height=1)),
        key_bindings=bindings,
        output=output,
        full_screen=False,
    )
    app.run()
    return "".join(pressed)


def display_keys(data: str) -> str:
    """Caret-encode control characters: ESC -> ^[, Ctrl-A -> ^A, DEL -> ^?."""
    out = []
    for ch in data:
        code = ord(ch)
        if code < 32:
            out.append("^" + chr(code + 64))
        elif code == 127:
            out.append("^?")
        else:
            out.append(ch)
    return "".join(out)
