import datetime

import pytest

from madness.errors import MalformedRecord
from madness.report.models import GameStatus
from madness.report.normalize import normalize_batch, normalize_record


def test_in_progress_record_shape(seed_raw):
    game = normalize_record(seed_raw[2])
    assert game.game_id == "1003"
    assert game.status is GameStatus.IN_PROGRESS
    assert (game.away.name, game.away.seed, game.away.score) == ("NC State", 10, 45)
    assert (game.home.name, game.home.seed, game.home.score) == ("Texas Tech", 7, 42)
    assert (game.period, game.minutes_remaining, game.seconds_remaining) == ("2H", 12, 34)
    assert game.start_time == datetime.datetime(2025, 3, 20, 14, 30)


def test_scheduled_record_has_no_real_score(seed_raw):
    game = normalize_record(seed_raw[3])
    assert game.status is GameStatus.SCHEDULED
    assert not game.has_score
    assert game.margin is None and game.total_points is None


def test_null_scores_and_numeric_strings_are_coerced(make_raw):
    raw = make_raw("9", "Scheduled", away=("A", "3", None), home=("B", "14", None), round_="2")
    game = normalize_record(raw)
    assert (game.away.seed, game.home.seed, game.round) == (3, 14, 2)
    assert game.away.score == 0 and game.home.score == 0


@pytest.mark.parametrize(
    "field,value,reason",
    [
        ("HomeTeam", None, "missing required fields: HomeTeam"),
        ("AwayTeamSeed", 0, "outside [1, 16]"),
        ("HomeTeamSeed", 17, "outside [1, 16]"),
        ("AwayTeamScore", -1, "negative AwayTeamScore"),
        ("Status", "Postponed", "unknown status"),
        ("Round", 0, "round must be a positive integer"),
        ("HomeTeamScore", "abc", "non-numeric HomeTeamScore"),
    ],
)
def test_malformed_records_raise(make_raw, field, value, reason):
    raw = make_raw(5)
    raw[field] = value
    with pytest.raises(MalformedRecord) as exc:
        normalize_record(raw)
    assert reason in str(exc.value)
    assert exc.value.game_id == "5"


def test_scheduled_without_datetime_is_malformed(make_raw):
    raw = make_raw(5, "Scheduled", when=None)
    with pytest.raises(MalformedRecord):
        normalize_record(raw)


def test_negative_time_remaining_is_malformed(make_raw):
    raw = make_raw(5, "InProgress", period="1H", minutes=-1, seconds=0)
    with pytest.raises(MalformedRecord):
        normalize_record(raw)


def test_batch_drops_malformed_and_counts(seed_raw, caplog):
    bad = dict(seed_raw[0], AwayTeamSeed=20)
    batch = [seed_raw[1], bad, "not a record", seed_raw[2]]
    games, dropped = normalize_batch(batch)
    assert [g.game_id for g in games] == ["1002", "1003"]
    assert dropped == 2
    assert "dropping malformed record" in caplog.text


@pytest.mark.parametrize(
    "when, expected",
    [
        ("2025-03-19T18:00:00", datetime.datetime(2025, 3, 19, 18, 0)),
        ("2025-03-19T18:00:00Z", datetime.datetime(2025, 3, 19, 18, 0)),
        ("2025-03-19T18:00:00-04:00", datetime.datetime(2025, 3, 19, 18, 0)),
    ],
)
def test_start_times_are_naive_wall_clock(make_raw, when, expected):
    game = normalize_record(make_raw("1", when=when))
    assert game.start_time == expected
    assert game.start_time.tzinfo is None
