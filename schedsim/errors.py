from __future__ import annotations


class SchedulerError(Exception):
    """Base class for every error raised by the simulator."""


class InvalidInputError(SchedulerError, ValueError):
    """
    The caller supplied a process set or parameter the engine cannot run.

    Raised before any simulation work starts, so no partial timeline exists.
    """


class InconsistentStateError(SchedulerError, RuntimeError):
    """
    A produced timeline violates an engine invariant.

    This points at a defect in an algorithm, not at user input, and is not
    worth retrying.
    """
