import pytest

from madness.api.fallback import seed_games


def raw_game(
    game_id,
    status="Final",
    away=("Away", 9, 60),
    home=("Home", 8, 55),
    *,
    when="2025-03-19T12:00:00",
    round_=1,
    period=None,
    minutes=None,
    seconds=None,
):
    return {
        "GameID": game_id,
        "Status": status,
        "DateTime": when,
        "AwayTeam": away[0],
        "AwayTeamSeed": away[1],
        "AwayTeamScore": away[2],
        "HomeTeam": home[0],
        "HomeTeamSeed": home[1],
        "HomeTeamScore": home[2],
        "Period": period,
        "TimeRemainingMinutes": minutes,
        "TimeRemainingSeconds": seconds,
        "Round": round_,
    }


@pytest.fixture
def seed_raw():
    return seed_games()


@pytest.fixture
def make_raw():
    return raw_game
