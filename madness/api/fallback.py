"""Fixed seed dataset used for offline runs and as the last-resort fallback."""

from __future__ import annotations

import copy

SEED_GAMES: tuple[dict, ...] = (
    {
        "GameID": 1001,
        "Season": 2025,
        "Status": "Final",
        "DateTime": "2025-03-19T19:15:00",
        "AwayTeam": "Virginia",
        "HomeTeam": "Colorado",
        "AwayTeamSeed": 9,
        "HomeTeamSeed": 8,
        "AwayTeamScore": 57,
        "HomeTeamScore": 63,
        "TimeRemainingMinutes": 0,
        "TimeRemainingSeconds": 0,
        "Period": "2H",
        "Round": 1,
    },
    {
        "GameID": 1002,
        "Season": 2025,
        "Status": "Final",
        "DateTime": "2025-03-19T12:15:00",
        "AwayTeam": "Duquesne",
        "HomeTeam": "BYU",
        "AwayTeamSeed": 11,
        "HomeTeamSeed": 6,
        "AwayTeamScore": 71,
        "HomeTeamScore": 69,
        "TimeRemainingMinutes": 0,
        "TimeRemainingSeconds": 0,
        "Period": "2H",
        "Round": 1,
    },
    {
        "GameID": 1003,
        "Season": 2025,
        "Status": "InProgress",
        "DateTime": "2025-03-20T14:30:00",
        "AwayTeam": "NC State",
        "HomeTeam": "Texas Tech",
        "AwayTeamSeed": 10,
        "HomeTeamSeed": 7,
        "AwayTeamScore": 45,
        "HomeTeamScore": 42,
        "TimeRemainingMinutes": 12,
        "TimeRemainingSeconds": 34,
        "Period": "2H",
        "Round": 1,
    },
    {
        "GameID": 1004,
        "Season": 2025,
        "Status": "Scheduled",
        "DateTime": "2025-03-20T19:20:00",
        "AwayTeam": "Marquette",
        "HomeTeam": "Western Kentucky",
        "AwayTeamSeed": 2,
        "HomeTeamSeed": 15,
        "AwayTeamScore": 0,
        "HomeTeamScore": 0,
        "TimeRemainingMinutes": None,
        "TimeRemainingSeconds": None,
        "Period": None,
        "Round": 1,
    },
    {
        "GameID": 1005,
        "Season": 2025,
        "Status": "Scheduled",
        "DateTime": "2025-03-20T21:30:00",
        "AwayTeam": "Kentucky",
        "HomeTeam": "Oakland",
        "AwayTeamSeed": 3,
        "HomeTeamSeed": 14,
        "AwayTeamScore": 0,
        "HomeTeamScore": 0,
        "TimeRemainingMinutes": None,
        "TimeRemainingSeconds": None,
        "Period": None,
        "Round": 1,
    },
)


def seed_games() -> list[dict]:
    """Fresh deep copy of the seed dataset."""
    return copy.deepcopy(list(SEED_GAMES))


class SeedDataProvider:
    """Provider that always serves the seed dataset (offline / demo mode)."""

    def fetch_games(self, tournament_id: str) -> list[dict]:
        return seed_games()
