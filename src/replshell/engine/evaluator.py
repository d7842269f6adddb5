"""
Fallback evaluator for free-form input.

Lines that no command provider claims are evaluated as Python: expressions
produce a value, statements run for their effect. The evaluator owns the
session namespace where scratch variables and the last error live.
"""

from __future__ import annotations

import fnmatch
import logging
from typing import Any

from replshell.core.datamodels import Error, Result, Value

logger = logging.getLogger(__name__)

SOURCE_NAME = "<repl>"


class PythonEvaluator:
    """Evaluate Python source against a persistent namespace."""

    def __init__(self, namespace: dict[str, Any] | None = None):
        self.namespace: dict[str, Any] = namespace if namespace is not None else {}
        self.namespace.setdefault("__name__", "__repl__")

    def _compile(self, text: str):
        try:
            return compile(text, SOURCE_NAME, "eval"), True
        except SyntaxError:
            return compile(text, SOURCE_NAME, "exec"), False

    def execute(self, text: str) -> Result:
        """Evaluate text; exceptions come back as Error results.

        KeyboardInterrupt is not caught: it is the user-interrupt signal.
        """
        try:
            code, is_expression = self._compile(text)
            if is_expression:
                return Value(eval(code, self.namespace))
            exec(code, self.namespace)
            return Value(None)
        except KeyboardInterrupt:
            raise
        except Exception as e:
            logger.debug(f"Evaluation failed: {text!r}", exc_info=True)
            return Error(e)

    def bind(self, name: str, value: Any) -> None:
        self.namespace[name] = value

    def get(self, name: str, default: Any = None) -> Any:
        return self.namespace.get(name, default)

    def has(self, name: str) -> bool:
        return name in self.namespace

    def variables(self, pattern: str = "*") -> dict[str, Any]:
        """User-visible variables matching a glob pattern."""
        return {
            name: value
            for name, value in sorted(self.namespace.items())
            if not name.startswith("__") and fnmatch.fnmatchcase(name, pattern)
        }

    def clear(self, pattern: str) -> list[str]:
        """Drop variables matching a glob pattern. Returns removed names."""
        removed = list(self.variables(pattern))
        for name in removed:
            del self.namespace[name]
        return removed
