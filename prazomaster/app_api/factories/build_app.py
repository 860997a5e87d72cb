"""Construct a fully wired app instance for computing deadlines.

Responsibilities:
  - Assemble holiday and suspension stores, catalog, cache, oracle and calculator from config.
Must not:
  - Implement calendar or rule logic; composition only.
"""

from __future__ import annotations

from typing import Any, Optional

from prazomaster.app_api.facade import PrazoApplication
from prazomaster.core.calendar.holiday_cache import (
    DEFAULT_MAX_ENTRIES,
    DEFAULT_TTL_SECONDS,
    HolidayCache,
)
from prazomaster.core.calendar.oracle import CalendarOracle
from prazomaster.core.calendar.recess import load_recess_config
from prazomaster.core.catalog.catalog import default_catalog
from prazomaster.core.engine.calculator import INTERNAL_MARGIN_BUSINESS_DAYS, DeadlineCalculator
from prazomaster.core.ports.catalog_store_port import CatalogStore
from prazomaster.core.ports.holiday_store_port import HolidayStore
from prazomaster.core.ports.suspension_store_port import SuspensionStore
from prazomaster.infra.sqlite.repos.catalog_repo import SqliteCatalogStore
from prazomaster.infra.sqlite.repos.holiday_repo import SqliteHolidayStore
from prazomaster.infra.sqlite.repos.suspension_repo import SqliteSuspensionStore


def build_prazo_app(
    db_path: Optional[str] = None,
    catalog: Optional[CatalogStore] = None,
    holiday_store: Optional[HolidayStore] = None,
    ttl_seconds: float = DEFAULT_TTL_SECONDS,
    max_entries: int = DEFAULT_MAX_ENTRIES,
    fetch_timeout: Optional[float] = None,
    **kwargs: Any,
) -> PrazoApplication:
    """
    Composition root: build and wire the holiday store, catalog, cache, oracle
    and calculator and return the application facade.
    """
    catalog_from_db = kwargs.pop("catalog_from_db", False)
    recess_path = kwargs.pop("recess_path", None)
    clock = kwargs.pop("clock", None)
    internal_margin = kwargs.pop("internal_margin", INTERNAL_MARGIN_BUSINESS_DAYS)
    suspension_store: Optional[SuspensionStore] = kwargs.pop("suspension_store", None)
    if kwargs:
        raise ValueError(f"Unknown build_prazo_app options: {sorted(kwargs)}")

    if holiday_store is None:
        if db_path is None:
            raise ValueError("db_path or holiday_store must be provided")
        holiday_store = SqliteHolidayStore(db_path)

    if catalog is None:
        if catalog_from_db:
            if db_path is None:
                raise ValueError("catalog_from_db requires db_path")
            catalog = SqliteCatalogStore(db_path)
        else:
            catalog = default_catalog()

    if suspension_store is None and db_path is not None:
        suspension_store = SqliteSuspensionStore(db_path)

    cache = (
        HolidayCache(ttl_seconds=ttl_seconds, max_entries=max_entries, clock=clock)
        if clock is not None
        else HolidayCache(ttl_seconds=ttl_seconds, max_entries=max_entries)
    )
    oracle = CalendarOracle(
        holiday_store,
        recess_config=load_recess_config(recess_path),
        cache=cache,
        fetch_timeout=fetch_timeout,
        suspension_store=suspension_store,
    )
    calculator = DeadlineCalculator(oracle, catalog, internal_margin=internal_margin)
    return PrazoApplication(calculator, catalog)
