"""Background refresh loop that fetches market records and rebuilds the token snapshot."""
from __future__ import annotations

import asyncio
import json
import logging
import time
from datetime import datetime, timezone
from typing import Any

from ..adapters.base import MarketAdapter, ProviderError
from ..config import Settings, get_settings
from ..observability import record_refresh, record_refresh_error, record_refresh_skipped
from ..state import DashboardState

LOGGER = logging.getLogger(__name__)


class Refresher:
    """Owns the periodic refresh task for one adapter and one dashboard state.

    Refreshes are serialised: a tick that arrives while a fetch is still in
    flight is skipped instead of queued behind it.
    """

    def __init__(
        self,
        adapter: MarketAdapter,
        state: DashboardState,
        settings: Settings | None = None,
    ) -> None:
        self.adapter = adapter
        self.state = state
        self.settings = settings or get_settings()
        self._lock = asyncio.Lock()
        self._wake = asyncio.Event()
        self._task: asyncio.Task[None] | None = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def refresh_once(self) -> bool:
        """Run one fetch/derive cycle. Returns True when a new snapshot was stored."""

        if self._lock.locked():
            LOGGER.info("Refresh already in flight; skipping tick")
            record_refresh_skipped(self.settings.metrics_enabled)
            return False

        async with self._lock:
            started = time.perf_counter()
            try:
                records = await self.adapter.fetch_records(self.settings.per_page)
            except ProviderError as exc:
                LOGGER.warning("Refresh failed: %s", exc)
                self.state.record_error(str(exc))
                record_refresh_error(self.settings.metrics_enabled)
                return False

            ts = datetime.now(timezone.utc)
            tokens = self.adapter.strategy.derive_all(records, now=ts)
            self.state.replace_tokens(tokens, ts)
            duration = time.perf_counter() - started
            record_refresh(duration, len(tokens), self.settings.metrics_enabled)

            log_payload = {
                "source": self.adapter.source,
                "strategy": self.adapter.strategy.name,
                "tokens": len(tokens),
                "cycle_ms": round(duration * 1000, 2),
                "timestamp": ts.isoformat(),
            }
            LOGGER.info("refresh_cycle %s", json.dumps(log_payload))
            return True

    async def _run(self) -> None:
        interval = self.settings.refresh_interval_sec
        while True:
            try:
                await self.refresh_once()
            except Exception as exc:
                LOGGER.exception("Unexpected refresh failure")
                self.state.record_error(f"Unexpected refresh failure: {exc}")
                record_refresh_error(self.settings.metrics_enabled)
            try:
                await asyncio.wait_for(self._wake.wait(), timeout=interval)
            except asyncio.TimeoutError:
                pass
            self._wake.clear()

    def start(self) -> None:
        if self.running:
            return
        self._wake.clear()
        self._task = asyncio.create_task(self._run(), name="alphavault-refresh")
        LOGGER.info(
            "Refresh loop started (source=%s, interval=%ss)",
            self.adapter.source,
            self.settings.refresh_interval_sec,
        )

    async def stop(self) -> None:
        task, self._task = self._task, None
        if task is not None:
            task.cancel()
            try:
                await task
            except asyncio.CancelledError:
                pass
        await self.adapter.close()
        LOGGER.info("Refresh loop stopped")

    def request_refresh(self) -> dict[str, Any]:
        """Wake the loop early; the request is dropped when the loop is not running."""

        if not self.running:
            return {"queued": False, "reason": "refresh loop not running"}
        self._wake.set()
        return {"queued": True}
