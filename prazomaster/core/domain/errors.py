"""Typed errors raised by deadline computations.

Invariants:
  - Store failures surface as DataUnavailable; the engine never fails open.
  - Correctable pipeline conflicts are warnings, not errors.
"""

from __future__ import annotations


class ComputationError(RuntimeError):
    """Base class for every failure a computation can report."""

    kind = "COMPUTATION_ERROR"


class InvalidRequest(ComputationError):
    kind = "INVALID_REQUEST"


class UnknownDeadlineType(ComputationError):
    kind = "UNKNOWN_DEADLINE_TYPE"

    def __init__(self, deadline_type: str) -> None:
        super().__init__(f"Unknown deadline type: {deadline_type}")
        self.deadline_type = deadline_type


class DataUnavailable(ComputationError):
    kind = "DATA_UNAVAILABLE"
