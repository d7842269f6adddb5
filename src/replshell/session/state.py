"""
Per-iteration session state.

The read loop owns one SessionState. It is reset at the top of every
iteration: scratch variables (``_*``) are dropped from the evaluator, and the
error binding survives exactly one further iteration so it can be inspected.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from replshell.core.datamodels import Error

if TYPE_CHECKING:
    from replshell.engine.evaluator import PythonEvaluator

logger = logging.getLogger(__name__)

# Namespace name the last error is bound under
ERROR_VARIABLE = "exception"

# Glob for temporary variables cleared every iteration
SCRATCH_PATTERN = "_*"


class SessionState:
    """Error slot plus scratch namespace, threaded through each dispatch."""

    def __init__(self, evaluator: "PythonEvaluator"):
        self.evaluator = evaluator
        self.error: Error | None = None  # Error produced by the current iteration
        self.iteration = 0
        self._bound: BaseException | None = None  # Cause currently bound as ERROR_VARIABLE

    def _binding_is_ours(self) -> bool:
        return self._bound is not None and self.evaluator.get(ERROR_VARIABLE) is self._bound

    def begin_iteration(self) -> None:
        """Reset transient state before reading the next line.

        The error binding is dropped only while it still holds the recorded
        cause; a user variable of the same name is left alone.
        """
        self.iteration += 1
        self.evaluator.clear(SCRATCH_PATTERN)
        if self.error is None and self._bound is not None:
            if self._binding_is_ours():
                self.evaluator.clear(ERROR_VARIABLE)
            self._bound = None
        self.error = None

    def record_error(self, error: Error) -> None:
        """Store an execution error for inspection on the next iteration."""
        self.error = error
        self._bound = error.cause
        self.evaluator.bind(ERROR_VARIABLE, error.cause)
        logger.debug(f"Recorded error in iteration {self.iteration}: {error}")

    @property
    def last_error(self) -> BaseException | None:
        """The bound error, if any."""
        return self._bound if self._binding_is_ours() else None
