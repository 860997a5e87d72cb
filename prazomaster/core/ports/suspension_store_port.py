from __future__ import annotations

from datetime import date
from typing import Optional, Protocol

from prazomaster.core.domain.models import CourtSuspension


class SuspensionStore(Protocol):
    """Read-only source of court suspension periods.

    Contract: returns every deadline-suspending period overlapping [start, end]
    that applies to all courts, plus those of `court_code` when it is given.
    Failures raise; callers translate them into DataUnavailable.
    """

    def fetch_suspensions(
        self,
        start: date,
        end: date,
        court_code: Optional[str],
    ) -> list[CourtSuspension]:
        ...
