"""Execution state derived from signal file markers."""

from __future__ import annotations

from enum import IntFlag

START_MARKER = "START"
END_MARKER = "END"
FAIL_MARKER = "FAIL"


class ExecutionState(IntFlag):
    """Progress of a command as reported by the helper launcher."""

    NOT_STARTED = 0
    STARTED = 1
    COMPLETED = 2
    ERRORED = 4

    @classmethod
    def from_markers(cls, text: str) -> ExecutionState:
        """Compute the state from the full signal file contents.

        Always recomputed from scratch; content without markers is simply
        NOT_STARTED.
        """
        state = cls.NOT_STARTED
        if START_MARKER in text:
            state |= cls.STARTED
        if END_MARKER in text:
            state |= cls.COMPLETED
        if FAIL_MARKER in text:
            state |= cls.COMPLETED | cls.ERRORED
        return state

    @property
    def is_terminal(self) -> bool:
        return bool(self & ExecutionState.COMPLETED)
