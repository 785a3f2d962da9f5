"""Snapshot assembly: raw batch -> normalized -> classified -> statistics."""

from __future__ import annotations

import datetime
import logging
from typing import Any, Iterable

from madness.compute import classify_games, compute_statistics
from madness.config import TrackerConfig
from .models import TournamentSnapshot
from .normalize import normalize_batch

logger = logging.getLogger(__name__)


def _utcnow() -> datetime.datetime:
    return datetime.datetime.now(datetime.timezone.utc)


def build_snapshot(
    raw_games: Iterable[Any],
    config: TrackerConfig | None = None,
    *,
    source: str = "provider",
    now: datetime.datetime | None = None,
) -> TournamentSnapshot:
    cfg = config or TrackerConfig()
    games, dropped = normalize_batch(raw_games)
    classification, anomalies = classify_games(games, cfg.close_game_threshold)
    stats = compute_statistics(
        classification.completed,
        classification.current,
        classification.upcoming,
        upsets=len(classification.upsets),
        top_n=cfg.top_n,
    )
    snapshot = TournamentSnapshot(
        games=tuple(games),
        current=classification.current,
        completed=classification.completed,
        upcoming=classification.upcoming,
        close=classification.close,
        upsets=classification.upsets,
        stats=stats,
        created_at=now or _utcnow(),
        source=source,
        dropped_records=dropped,
        anomalies=tuple(str(a) for a in anomalies),
    )
    logger.info(
        "snapshot built from %s: %d in progress, %d completed, %d upcoming, %d close, %d upsets (dropped %d)",
        source,
        stats.in_progress_games,
        stats.completed_games,
        stats.upcoming_games,
        len(snapshot.close),
        stats.upsets,
        dropped,
    )
    return snapshot
