"""Catalog presenter: holds the current model list and drives its refresh.

States::

    loading --success--> loaded
    loading --failure--> error
    (any)   --refresh--> loading

The presenter is long-lived for one view. ``start`` performs the initial
fetch and arms the poll timer, ``close`` releases the timer. Responses carry
an issue sequence number; a response older than the one already applied is
dropped, so a slow request can never overwrite a newer list. The timer skips
its tick while a fetch is still in flight.
"""
from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Callable, List, Optional, Protocol

from pydantic import ValidationError

from megallm.schemas.models import Model, ModelListResult
from megallm.services.catalog import CatalogTab, build_tabs
from megallm.services.formatting import LEGEND

logger = logging.getLogger("megallm.catalog")

DEFAULT_REFRESH_INTERVAL = 30.0

MODEL_ID_NOTICE = (
    "Always use the Model ID (not display name) when making API calls. "
    'For example, use `gpt-4o-mini` not "GPT-4o mini".'
)


class CatalogStatus(str, Enum):
    LOADING = "loading"
    LOADED = "loaded"
    ERROR = "error"


class ModelSource(Protocol):
    async def fetch_models(self) -> ModelListResult: ...


@dataclass(frozen=True)
class CatalogView:
    status: CatalogStatus
    error: Optional[str]
    last_updated: Optional[datetime]
    models: List[Model] = field(default_factory=list)
    tabs: List[CatalogTab] = field(default_factory=list)
    auto_refresh: bool = False

    @property
    def total(self) -> int:
        return len(self.models)

    def to_dict(self) -> dict[str, Any]:
        return {
            "status": self.status.value,
            "error": self.error,
            "lastUpdated": self.last_updated.isoformat() if self.last_updated else None,
            "total": self.total,
            "autoRefresh": self.auto_refresh,
            "notice": MODEL_ID_NOTICE,
            "legend": LEGEND,
            "tabs": [t.to_dict() for t in self.tabs],
        }


def parse_models(records: List[dict[str, Any]]) -> List[Model]:
    """Validate upstream records, skipping (and logging) any that cannot be displayed."""
    models: List[Model] = []
    for index, record in enumerate(records):
        try:
            models.append(Model.model_validate(record))
        except ValidationError as e:
            logger.warning(
                "catalog.record.skipped",
                extra={
                    "index": index,
                    "id": record.get("id") if isinstance(record, dict) else None,
                    "errors": e.error_count(),
                },
            )
    return models


class CatalogPresenter:
    def __init__(
        self,
        source: ModelSource,
        refresh_interval: float = DEFAULT_REFRESH_INTERVAL,
        auto_refresh: bool = True,
    ) -> None:
        self._source = source
        self.refresh_interval = refresh_interval
        self._auto_refresh = auto_refresh

        self.status = CatalogStatus.LOADING
        self.models: List[Model] = []
        self.error: Optional[str] = None
        self.last_updated: Optional[datetime] = None

        self._issued = 0
        self._applied = 0
        self._in_flight = 0
        self._timer: Optional[asyncio.Task] = None
        self._timer_fetches: set[asyncio.Task] = set()
        self._listeners: List[Callable[["CatalogPresenter"], None]] = []

    # -- observers --------------------------------------------------------
    def subscribe(self, listener: Callable[["CatalogPresenter"], None]) -> Callable[[], None]:
        """Register ``listener`` for state changes; returns an unsubscribe callable."""
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def _notify(self) -> None:
        for listener in list(self._listeners):
            listener(self)

    # -- lifecycle --------------------------------------------------------
    @property
    def auto_refresh(self) -> bool:
        return self._auto_refresh

    @property
    def in_flight(self) -> bool:
        return self._in_flight > 0

    @property
    def timer_running(self) -> bool:
        return self._timer is not None and not self._timer.done()

    async def start(self) -> None:
        """Initial fetch, then arm the timer if auto-refresh is on."""
        await self.refresh()
        if self._auto_refresh:
            self._start_timer()

    def set_auto_refresh(self, enabled: bool) -> None:
        """Toggle polling. Disabling never cancels a request already in flight."""
        self._auto_refresh = enabled
        if enabled:
            self._start_timer()
        else:
            self._stop_timer()
        self._notify()

    async def close(self) -> None:
        """Release the poll timer and wait for fetches it already issued; safe to call more than once."""
        timer = self._timer
        self._stop_timer()
        if timer is not None:
            try:
                await timer
            except asyncio.CancelledError:
                pass
        if self._timer_fetches:
            await asyncio.gather(*self._timer_fetches, return_exceptions=True)

    def _start_timer(self) -> None:
        if self.timer_running:
            return
        self._timer = asyncio.create_task(self._poll(), name="catalog-poll")

    def _stop_timer(self) -> None:
        if self._timer is not None and not self._timer.done():
            self._timer.cancel()
        self._timer = None

    async def _poll(self) -> None:
        while True:
            await asyncio.sleep(self.refresh_interval)
            if self.in_flight:
                logger.info("catalog.refresh.skipped", extra={"reason": "in_flight"})
                continue
            # own task so cancelling the timer never cancels a fetch in flight
            fetch = asyncio.create_task(self.refresh(), name="catalog-poll-fetch")
            self._timer_fetches.add(fetch)
            fetch.add_done_callback(self._timer_fetches.discard)

    # -- state transitions ------------------------------------------------
    async def refresh(self) -> None:
        """Re-enter ``loading`` and fetch; allowed from any state."""
        self._issued += 1
        seq = self._issued
        self.status = CatalogStatus.LOADING
        self._notify()
        self._in_flight += 1
        try:
            result = await self._source.fetch_models()
        finally:
            self._in_flight -= 1
        self._apply(seq, result)

    def _apply(self, seq: int, result: ModelListResult) -> None:
        if seq < self._applied:
            logger.info("catalog.refresh.stale", extra={"seq": seq, "applied": self._applied})
            return
        self._applied = seq
        if result.success:
            models = parse_models(result.data)
            self.models = models
            self.error = None
            self.last_updated = result.last_updated
            self.status = CatalogStatus.LOADED
            logger.info("catalog.refresh.applied", extra={"seq": seq, "total": len(models)})
        else:
            self._fail(seq, result.error or "An error occurred")
            return
        self._notify()

    def _fail(self, seq: int, message: str) -> None:
        self.models = []
        self.error = message
        self.status = CatalogStatus.ERROR
        logger.warning("catalog.refresh.failed", extra={"seq": seq, "error": message})
        self._notify()

    # -- derived views ----------------------------------------------------
    def view(self) -> CatalogView:
        return CatalogView(
            status=self.status,
            error=self.error,
            last_updated=self.last_updated,
            models=list(self.models),
            tabs=build_tabs(self.models) if self.status is CatalogStatus.LOADED else [],
            auto_refresh=self._auto_refresh,
        )
