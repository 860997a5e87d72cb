from __future__ import annotations

from datetime import date
from typing import Optional, Protocol

from prazomaster.core.domain.enums import HolidayType


class HolidayStore(Protocol):
    """Read-only source of holiday dates.

    Contract: returns every holiday of the requested types in [start, end].
    STATE holidays are only returned for the given state_code.
    Failures raise; callers translate them into DataUnavailable.
    """

    def fetch_holidays(
        self,
        start: date,
        end: date,
        state_code: Optional[str],
        holiday_types: frozenset[HolidayType],
    ) -> set[date]:
        ...
