from __future__ import annotations

import logging
from typing import Iterable, Sequence

from madness.errors import DataAnomaly
from madness.report.constants import AVG_PLACES, CLOSE_GAME_THRESHOLD, TOP_N
from madness.report.models import (
    Classification,
    ClosestGame,
    GameRecord,
    GameStatus,
    StatisticsSummary,
    TeamAverage,
)

logger = logging.getLogger(__name__)


def is_close(game: GameRecord, threshold: int = CLOSE_GAME_THRESHOLD) -> bool:
    """Live score gap within ``threshold`` points (in-progress games only)."""
    if game.status is not GameStatus.IN_PROGRESS:
        return False
    return abs(game.away.score - game.home.score) <= threshold


def upset_anomaly(game: GameRecord) -> DataAnomaly | None:
    """Reason a final game cannot be judged for an upset, if any."""
    if game.status is not GameStatus.FINAL:
        return None
    if game.away.seed == game.home.seed:
        return DataAnomaly(game.game_id, "equal_seeds", f"both teams seeded {game.away.seed}")
    if game.away.score == game.home.score:
        return DataAnomaly(game.game_id, "tied_final", f"final score {game.away.score}-{game.home.score}")
    return None


def is_upset(game: GameRecord) -> bool:
    """Final game won by the team with the numerically larger seed."""
    if game.status is not GameStatus.FINAL or upset_anomaly(game) is not None:
        return False
    if game.away.seed > game.home.seed:
        return game.away.score > game.home.score
    return game.home.score > game.away.score


def classify_games(
    games: Sequence[GameRecord], close_threshold: int = CLOSE_GAME_THRESHOLD
) -> tuple[Classification, tuple[DataAnomaly, ...]]:
    current = tuple(g for g in games if g.status is GameStatus.IN_PROGRESS)
    completed = tuple(g for g in games if g.status is GameStatus.FINAL)
    upcoming = tuple(g for g in games if g.status is GameStatus.SCHEDULED)
    close = tuple(g for g in current if is_close(g, close_threshold))
    anomalies: list[DataAnomaly] = []
    upsets: list[GameRecord] = []
    for g in completed:
        anomaly = upset_anomaly(g)
        if anomaly is not None:
            # Excluded from upsets; never fatal
            logger.warning("data anomaly, excluded from upsets: %s", anomaly)
            anomalies.append(anomaly)
            continue
        if is_upset(g):
            upsets.append(g)
    return (
        Classification(
            current=current,
            completed=completed,
            upcoming=upcoming,
            close=close,
            upsets=tuple(upsets),
        ),
        tuple(anomalies),
    )


def _avg(total: int, count: int) -> float:
    return round(total / count, AVG_PLACES) if count else 0


def team_averages(completed: Iterable[GameRecord]) -> list[TeamAverage]:
    """Per-team scoring over decided games, in first-encountered order."""
    records: dict[str, dict[str, int]] = {}
    for g in completed:
        if not g.is_decided:
            continue
        for side in (g.away, g.home):
            rec = records.setdefault(side.name, {"points": 0, "games": 0})
            rec["points"] += side.score
            rec["games"] += 1
    return [
        TeamAverage(team=team, avg_points=_avg(rec["points"], rec["games"]), total_points=rec["points"], games=rec["games"])
        for team, rec in records.items()
        if rec["games"] > 0
    ]


def closest_games(completed: Iterable[GameRecord], top_n: int = TOP_N) -> list[ClosestGame]:
    rows = []
    for g in completed:
        pair = g.winner_loser()
        if pair is None:
            continue
        winner, loser = pair
        rows.append(
            ClosestGame(
                winner=winner.name,
                loser=loser.name,
                margin=abs(g.away.score - g.home.score),
                away_score=g.away.score,
                home_score=g.home.score,
            )
        )
    # sorted() is stable: equal margins keep encounter order
    return sorted(rows, key=lambda c: c.margin)[:top_n]


def compute_statistics(
    completed: Sequence[GameRecord],
    current: Sequence[GameRecord],
    upcoming: Sequence[GameRecord],
    *,
    upsets: int = 0,
    top_n: int = TOP_N,
) -> StatisticsSummary:
    decided = [g for g in completed if g.is_decided]
    total_points = sum(g.away.score + g.home.score for g in decided)
    top = sorted(team_averages(decided), key=lambda t: -t.avg_points)[:top_n]
    return StatisticsSummary(
        total_games=len(completed) + len(current) + len(upcoming),
        completed_games=len(completed),
        in_progress_games=len(current),
        upcoming_games=len(upcoming),
        upsets=upsets,
        avg_points_per_game=_avg(total_points, len(decided)),
        top_scoring_teams=tuple(top),
        closest_games=tuple(closest_games(decided, top_n)),
    )
