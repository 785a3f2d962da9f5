from . import core

classify_games = core.classify_games
compute_statistics = core.compute_statistics
closest_games = core.closest_games
team_averages = core.team_averages
is_close = core.is_close
is_upset = core.is_upset
upset_anomaly = core.upset_anomaly

__all__ = [
    "classify_games",
    "compute_statistics",
    "closest_games",
    "team_averages",
    "is_close",
    "is_upset",
    "upset_anomaly",
]
