from __future__ import annotations
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any

from .constants import STATUS_FINAL, STATUS_IN_PROGRESS, STATUS_SCHEDULED


class GameStatus(str, Enum):
    SCHEDULED = STATUS_SCHEDULED
    IN_PROGRESS = STATUS_IN_PROGRESS
    FINAL = STATUS_FINAL


@dataclass(frozen=True, slots=True)
class TeamLine:
    name: str
    seed: int
    score: int = 0


@dataclass(frozen=True, slots=True)
class GameRecord:
    """One normalized tournament game.

    Scores of a scheduled game are placeholders (0) and are never treated as
    real scores; use ``has_score`` before reading them.
    """
    game_id: str
    round: int
    away: TeamLine
    home: TeamLine
    status: GameStatus
    start_time: datetime | None = None
    period: str = ""
    minutes_remaining: int = 0
    seconds_remaining: int = 0

    @property
    def has_score(self) -> bool:
        return self.status is not GameStatus.SCHEDULED

    @property
    def margin(self) -> int | None:
        if not self.has_score:
            return None
        return abs(self.away.score - self.home.score)

    @property
    def total_points(self) -> int | None:
        if not self.has_score:
            return None
        return self.away.score + self.home.score

    @property
    def is_decided(self) -> bool:
        """Final with a winner; equal final scores are indeterminate."""
        return self.status is GameStatus.FINAL and self.away.score != self.home.score

    def winner_loser(self) -> tuple[TeamLine, TeamLine] | None:
        if not self.is_decided:
            return None
        if self.away.score > self.home.score:
            return self.away, self.home
        return self.home, self.away


@dataclass(frozen=True, slots=True)
class TeamAverage:
    team: str
    avg_points: float
    total_points: int
    games: int


@dataclass(frozen=True, slots=True)
class ClosestGame:
    winner: str
    loser: str
    margin: int
    away_score: int
    home_score: int


@dataclass(frozen=True, slots=True)
class StatisticsSummary:
    total_games: int = 0
    completed_games: int = 0
    in_progress_games: int = 0
    upcoming_games: int = 0
    upsets: int = 0
    avg_points_per_game: float = 0
    top_scoring_teams: tuple[TeamAverage, ...] = ()
    closest_games: tuple[ClosestGame, ...] = ()


@dataclass(frozen=True, slots=True)
class Classification:
    current: tuple[GameRecord, ...]
    completed: tuple[GameRecord, ...]
    upcoming: tuple[GameRecord, ...]
    close: tuple[GameRecord, ...]
    upsets: tuple[GameRecord, ...]


@dataclass(frozen=True, slots=True)
class TournamentSnapshot:
    """Fully computed view of one refresh cycle. Replaced, never mutated."""
    games: tuple[GameRecord, ...]
    current: tuple[GameRecord, ...]
    completed: tuple[GameRecord, ...]
    upcoming: tuple[GameRecord, ...]
    close: tuple[GameRecord, ...]
    upsets: tuple[GameRecord, ...]
    stats: StatisticsSummary
    created_at: datetime
    source: str = "provider"
    dropped_records: int = 0
    anomalies: tuple[str, ...] = field(default_factory=tuple)

    def is_upset(self, game: GameRecord) -> bool:
        return any(g.game_id == game.game_id for g in self.upsets)

    def to_json_payload(self) -> dict[str, Any]:
        def _game(g: GameRecord) -> dict[str, Any]:
            return {
                "game_id": g.game_id,
                "round": g.round,
                "status": g.status.value,
                "start_time": g.start_time.isoformat() if g.start_time else None,
                "away": {"team": g.away.name, "seed": g.away.seed, "score": g.away.score if g.has_score else None},
                "home": {"team": g.home.name, "seed": g.home.seed, "score": g.home.score if g.has_score else None},
                "period": g.period or None,
                "time_remaining": (
                    f"{g.minutes_remaining}:{g.seconds_remaining:02d}"
                    if g.status is GameStatus.IN_PROGRESS
                    else None
                ),
            }

        s = self.stats
        return {
            "created_at": self.created_at.isoformat(),
            "source": self.source,
            "dropped_records": self.dropped_records,
            "anomalies": list(self.anomalies),
            "games": [_game(g) for g in self.games],
            "current": [g.game_id for g in self.current],
            "completed": [g.game_id for g in self.completed],
            "upcoming": [g.game_id for g in self.upcoming],
            "close": [g.game_id for g in self.close],
            "upsets": [g.game_id for g in self.upsets],
            "stats": {
                "total_games": s.total_games,
                "completed_games": s.completed_games,
                "in_progress_games": s.in_progress_games,
                "upcoming_games": s.upcoming_games,
                "upsets": s.upsets,
                "avg_points_per_game": s.avg_points_per_game,
                "top_scoring_teams": [
                    {"team": t.team, "avg_points": t.avg_points, "total_points": t.total_points, "games": t.games}
                    for t in s.top_scoring_teams
                ],
                "closest_games": [
                    {
                        "winner": c.winner,
                        "loser": c.loser,
                        "margin": c.margin,
                        "away_score": c.away_score,
                        "home_score": c.home_score,
                    }
                    for c in s.closest_games
                ],
            },
        }


@dataclass(frozen=True, slots=True)
class Section:
    """One named display section; ``title`` is empty for untitled blocks."""
    name: str
    title: str
    body: str
