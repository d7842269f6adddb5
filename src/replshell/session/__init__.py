"""
Session module: per-iteration state and session logging.
"""

from replshell.session.state import ERROR_VARIABLE, SCRATCH_PATTERN, SessionState

__all__ = [
    "ERROR_VARIABLE",
    "SCRATCH_PATTERN",
    "SessionState",
]
