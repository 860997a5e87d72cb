from __future__ import annotations

from typing import Optional, Protocol

from prazomaster.core.domain.models import RuleCatalogEntry


class CatalogStore(Protocol):
    def get_entry(self, deadline_type: str) -> Optional[RuleCatalogEntry]:
        ...

    def list_entries(self, category: Optional[str] = None) -> list[RuleCatalogEntry]:
        ...
