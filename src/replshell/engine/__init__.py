"""Fallback evaluator for lines no command claims."""

from replshell.engine.evaluator import PythonEvaluator

__all__ = ["PythonEvaluator"]
