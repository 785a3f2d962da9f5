"""Shape raw provider game records into ``GameRecord`` values.

Raw records use the provider's field names (``GameID``, ``AwayTeamSeed``,
``TimeRemainingMinutes`` ...). A record that cannot be trusted raises
``MalformedRecord``; ``normalize_batch`` drops those and keeps going.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Iterable, Mapping

from madness.errors import MalformedRecord
from .constants import MAX_SEED, MIN_SEED
from .models import GameRecord, GameStatus, TeamLine

logger = logging.getLogger(__name__)

_REQUIRED = ("GameID", "Status", "AwayTeam", "HomeTeam", "AwayTeamSeed", "HomeTeamSeed", "Round")
_STATUSES = {s.value: s for s in GameStatus}


def _coerce_int(value: object, default: int | None = None) -> int | None:
    """Best-effort int conversion (supports int, integral float, str of digits)."""
    if value is None or isinstance(value, bool):
        return default
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if value.is_integer() else default
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            return default
    return default


def _parse_datetime(value: object) -> datetime | None:
    """Parse a provider DateTime into a naive wall-clock datetime.

    Any UTC offset is dropped and the clock reading kept, so every start time
    in a batch compares against every other one.
    """
    if isinstance(value, datetime):
        parsed = value
    elif not value or not isinstance(value, str):
        return None
    else:
        try:
            parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError:
            return None
    return parsed.replace(tzinfo=None)


def _team(raw: Mapping[str, Any], side: str, game_id: str) -> TeamLine:
    name = str(raw.get(f"{side}Team") or "").strip()
    if not name:
        raise MalformedRecord(f"missing {side}Team", game_id)
    seed = _coerce_int(raw.get(f"{side}TeamSeed"))
    if seed is None:
        raise MalformedRecord(f"missing or non-numeric {side}TeamSeed", game_id)
    if not MIN_SEED <= seed <= MAX_SEED:
        raise MalformedRecord(f"{side}TeamSeed {seed} outside [{MIN_SEED}, {MAX_SEED}]", game_id)
    score_raw = raw.get(f"{side}TeamScore")
    score = _coerce_int(score_raw, None) if score_raw is not None else 0
    if score is None:
        raise MalformedRecord(f"non-numeric {side}TeamScore {score_raw!r}", game_id)
    if score < 0:
        raise MalformedRecord(f"negative {side}TeamScore {score}", game_id)
    return TeamLine(name=name, seed=seed, score=score)


def normalize_record(raw: Mapping[str, Any]) -> GameRecord:
    if not isinstance(raw, Mapping):
        raise MalformedRecord(f"expected a mapping, got {type(raw).__name__}")
    missing = [k for k in _REQUIRED if raw.get(k) is None]
    game_id_raw = raw.get("GameID")
    game_id = str(game_id_raw) if game_id_raw is not None else None
    if missing:
        raise MalformedRecord(f"missing required fields: {', '.join(missing)}", game_id)

    status = _STATUSES.get(str(raw["Status"]))
    if status is None:
        raise MalformedRecord(f"unknown status {raw['Status']!r}", game_id)

    rnd = _coerce_int(raw.get("Round"))
    if rnd is None or rnd < 1:
        raise MalformedRecord(f"round must be a positive integer, got {raw.get('Round')!r}", game_id)

    away = _team(raw, "Away", game_id)
    home = _team(raw, "Home", game_id)

    start_time = _parse_datetime(raw.get("DateTime"))
    if status is GameStatus.SCHEDULED and start_time is None:
        raise MalformedRecord("scheduled game without a valid DateTime", game_id)

    minutes = seconds = 0
    period = ""
    if status is GameStatus.IN_PROGRESS:
        minutes = _coerce_int(raw.get("TimeRemainingMinutes"), 0) or 0
        seconds = _coerce_int(raw.get("TimeRemainingSeconds"), 0) or 0
        if minutes < 0 or seconds < 0:
            raise MalformedRecord(f"negative time remaining {minutes}:{seconds}", game_id)
        period = str(raw.get("Period") or "").strip()

    return GameRecord(
        game_id=game_id,
        round=rnd,
        away=away,
        home=home,
        status=status,
        start_time=start_time,
        period=period,
        minutes_remaining=minutes,
        seconds_remaining=seconds,
    )


def normalize_batch(raws: Iterable[Any]) -> tuple[list[GameRecord], int]:
    """Normalize every record, dropping malformed ones.

    Returns the kept records in input order and the number dropped.
    """
    records: list[GameRecord] = []
    dropped = 0
    for raw in raws or []:
        try:
            records.append(normalize_record(raw))
        except MalformedRecord as exc:
            dropped += 1
            logger.warning("dropping malformed record: %s", exc)
    if dropped:
        logger.info("normalized %d records, dropped %d malformed", len(records), dropped)
    return records, dropped
