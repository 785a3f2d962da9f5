"""Refresh-cycle driver.

One cycle walks ``IDLE -> FETCHING -> PROCESSING -> PUBLISHING -> IDLE``:
fetch a raw batch, build a snapshot, render it and replace the whole target
document. The committed snapshot only changes after a successful publish.

Every trigger (bootstrap, periodic timer, "refresh now") goes through
``refresh``. At most one cycle runs at a time; triggers that arrive while a
cycle is in flight collapse into a single follow-up cycle and their callers
wait for it.
"""

from __future__ import annotations

import asyncio
import copy
import datetime
import logging
from enum import Enum
from typing import Callable

from madness.api.client import GameProvider
from madness.api.fallback import seed_games
from madness.config import TrackerConfig
from madness.errors import FetchFailure, PublishFailure
from madness.report.collect import build_snapshot
from madness.report.formatters import render_sections, render_skeleton
from madness.report.models import TournamentSnapshot
from .store import DocumentStore

logger = logging.getLogger(__name__)


class SyncState(str, Enum):
    IDLE = "idle"
    FETCHING = "fetching"
    PROCESSING = "processing"
    PUBLISHING = "publishing"


def _utcnow() -> datetime.datetime:
    return datetime.datetime.now(datetime.timezone.utc)


class SyncController:
    def __init__(
        self,
        provider: GameProvider,
        store: DocumentStore,
        config: TrackerConfig | None = None,
        *,
        fallback: Callable[[], list[dict]] = seed_games,
        clock: Callable[[], datetime.datetime] = _utcnow,
    ) -> None:
        self.provider = provider
        self.store = store
        self.config = config or TrackerConfig()
        self.document_id = self.config.document_id
        self.state = SyncState.IDLE
        self.last_error: str | None = None
        self.cycles_published = 0
        self._fallback = fallback
        self._clock = clock
        self._snapshot: TournamentSnapshot | None = None
        self._last_good_batch: list[dict] | None = None
        self._lock = asyncio.Lock()
        self._inflight: asyncio.Task | None = None
        self._rerun = False
        self._stop: asyncio.Event | None = None

    @property
    def snapshot(self) -> TournamentSnapshot | None:
        """Latest committed snapshot (``None`` until the first successful publish)."""
        return self._snapshot

    @property
    def busy(self) -> bool:
        return self._inflight is not None and not self._inflight.done()

    async def refresh(self, reason: str = "on-demand") -> TournamentSnapshot | None:
        """Run (or join) a refresh cycle and return the committed snapshot."""
        if self.busy:
            self._rerun = True
            logger.info("refresh (%s) queued behind in-flight cycle", reason)
        else:
            self._inflight = asyncio.create_task(self._drain(reason))
        # shield: a cancelled caller must not cancel a cycle other callers wait on
        return await asyncio.shield(self._inflight)

    async def _drain(self, reason: str) -> TournamentSnapshot | None:
        async with self._lock:
            while True:
                self._rerun = False
                await self._run_cycle(reason)
                if not self._rerun:
                    return self._snapshot
                reason = "queued"

    async def _run_cycle(self, reason: str) -> None:
        logger.info("refresh cycle started (%s)", reason)
        try:
            self.state = SyncState.FETCHING
            raw, source = await self._fetch()

            self.state = SyncState.PROCESSING
            snapshot = build_snapshot(raw, self.config, source=source, now=self._clock())
            sections = render_sections(snapshot, self.config)

            self.state = SyncState.PUBLISHING
            try:
                await self._publish(sections)
            except PublishFailure as exc:
                self.last_error = str(exc)
                logger.error("publish failed, keeping previous snapshot: %s", exc)
                return
            self._snapshot = snapshot
            self.cycles_published += 1
            self.last_error = None
            logger.info(
                "tournament data published: %d in progress, %d completed, %d upcoming",
                snapshot.stats.in_progress_games,
                snapshot.stats.completed_games,
                snapshot.stats.upcoming_games,
            )
        except Exception as exc:  # cycle failures are logged, never raised
            self.last_error = f"{type(exc).__name__}: {exc}"
            logger.exception("refresh cycle failed")
        finally:
            self.state = SyncState.IDLE

    async def _fetch(self) -> tuple[list[dict], str]:
        try:
            raw = await asyncio.to_thread(self.provider.fetch_games, self.config.tournament_id)
        except Exception as exc:  # any provider error takes the fallback path
            reason = exc if isinstance(exc, FetchFailure) else f"{type(exc).__name__}: {exc}"
            if self._last_good_batch is not None:
                logger.warning("fetch failed, using last known good batch: %s", reason)
                return copy.deepcopy(self._last_good_batch), "cache"
            logger.warning("fetch failed, using seed data: %s", reason)
            return self._fallback(), "fallback"
        self._last_good_batch = copy.deepcopy(raw)
        return raw, "provider"

    async def _publish(self, sections: list) -> None:
        if not self.document_id and await self.ensure_document() is None:
            raise PublishFailure("no target document")
        await asyncio.to_thread(self.store.replace, self.document_id, sections)

    async def ensure_document(self) -> str | None:
        """Make sure the target document exists, creating a skeleton if needed."""
        if self.document_id and await asyncio.to_thread(self.store.exists, self.document_id):
            logger.info("document %s found", self.document_id)
            return self.document_id
        if self.document_id:
            logger.info("document %s not found, creating a new one", self.document_id)
        try:
            new_id = await asyncio.to_thread(
                self.store.create, self.config.channel_id, self.config.title, render_skeleton(self.config)
            )
        except PublishFailure as exc:
            self.last_error = str(exc)
            logger.error("could not create document: %s", exc)
            return None
        self.document_id = new_id
        logger.info("created document %s; set TRACKER_DOCUMENT_ID=%s to reuse it", new_id, new_id)
        return new_id

    async def bootstrap(self) -> TournamentSnapshot | None:
        await self.ensure_document()
        return await self.refresh("bootstrap")

    async def run_forever(self) -> None:
        """Trigger ``refresh`` every ``refresh_interval_minutes`` until ``stop``."""
        self._stop = asyncio.Event()
        interval = self.config.refresh_interval_minutes * 60
        logger.info("scheduling refresh every %s minutes", self.config.refresh_interval_minutes)
        while not self._stop.is_set():
            try:
                await asyncio.wait_for(self._stop.wait(), timeout=interval)
            except asyncio.TimeoutError:
                await self.refresh("scheduled")

    def stop(self) -> None:
        if self._stop is not None:
            self._stop.set()
