"""Render a tournament snapshot into ordered display sections.

Rendering is a pure function of (snapshot, config): no clock reads, no
locale-dependent formatting, so the same snapshot always renders to the same
sections. Section order:

 1. header
 2. close_alert (only when some live game is within the close-game threshold)
 3. in_progress
 4. completed (most recent start first, truncated)
 5. upcoming (soonest first, truncated)
 6. statistics
 7. footer (snapshot timestamp)

Output helpers turn the section list into whole-document payloads: markdown
text for file stores, block dicts for block-based document APIs, and JSON
for machine consumers.
"""

from __future__ import annotations
import datetime
import json
from typing import Any, Sequence

from madness.config import TrackerConfig
from .constants import (
    CLOSE_ALERT_TITLE,
    EMOJI_FINAL,
    EMOJI_LIVE,
    EMOJI_SCHEDULED,
    STATUS_SCHEDULED,
    UPSET_MARKER,
)
from .models import GameRecord, GameStatus, Section, StatisticsSummary, TournamentSnapshot

_MONTHS = ("Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")

EMPTY_IN_PROGRESS = "No games currently in progress."
EMPTY_COMPLETED = "No completed games yet."
EMPTY_UPCOMING = "No upcoming games scheduled."
LOADING = "Loading tournament data..."


def _clock(dt: datetime.datetime, *, seconds: bool = False) -> str:
    hour12 = dt.hour % 12 or 12
    suffix = "AM" if dt.hour < 12 else "PM"
    if seconds:
        return f"{hour12}:{dt.minute:02d}:{dt.second:02d} {suffix}"
    return f"{hour12}:{dt.minute:02d} {suffix}"


def format_start_time(dt: datetime.datetime, tz_label: str) -> str:
    text = f"{_MONTHS[dt.month - 1]} {dt.day} {_clock(dt)}"
    return f"{text} {tz_label}" if tz_label else text


def format_timestamp(dt: datetime.datetime) -> str:
    """Medium date + time, e.g. ``Mar 20, 2025, 2:30:05 PM UTC``."""
    text = f"{_MONTHS[dt.month - 1]} {dt.day}, {dt.year}, {_clock(dt, seconds=True)}"
    if dt.tzinfo is not None:
        text += f" {dt.tzname()}"
    return text


def _status_text(game: GameRecord, tz_label: str) -> tuple[str, str]:
    if game.status is GameStatus.FINAL:
        return EMOJI_FINAL, "FINAL"
    if game.status is GameStatus.IN_PROGRESS:
        clock = f"{game.minutes_remaining}:{game.seconds_remaining:02d}"
        return EMOJI_LIVE, f"{game.period} {clock}".strip()
    if game.start_time is None:
        return EMOJI_SCHEDULED, STATUS_SCHEDULED
    return EMOJI_SCHEDULED, format_start_time(game.start_time, tz_label)


def format_game_line(game: GameRecord, *, upset: bool = False, tz_label: str = "") -> str:
    emoji, status = _status_text(game, tz_label)
    text = f"{emoji} ({game.away.seed}) *{game.away.name}* "
    if game.has_score:
        text += f"{game.away.score} - {game.home.score} "
    else:
        text += "vs "
    text += f"*{game.home.name}* ({game.home.seed})"
    if upset:
        text += f" {UPSET_MARKER}"
    text += f"\n└ _{status} | Round {game.round}_"
    return text


def format_statistics(stats: StatisticsSummary) -> str:
    lines = [
        f"*Tournament Progress*: {stats.completed_games} completed, "
        f"{stats.in_progress_games} in progress, {stats.upcoming_games} upcoming"
    ]
    if stats.upsets > 0:
        lines.append(f"*Upsets*: {stats.upsets} so far")
    lines.append(f"*Average Points*: {stats.avg_points_per_game} points per game")
    if stats.top_scoring_teams:
        lines.append("")
        lines.append("*Top Scoring Teams (Avg)*:")
        for i, t in enumerate(stats.top_scoring_teams, start=1):
            lines.append(f"{i}. {t.team}: {t.avg_points} ppg")
    if stats.closest_games:
        lines.append("")
        lines.append("*Closest Games*:")
        for i, c in enumerate(stats.closest_games, start=1):
            lines.append(f"{i}. {c.winner} def. {c.loser} by {c.margin} ({c.away_score}-{c.home_score})")
    return "\n".join(lines)


def recent_completed(games: Sequence[GameRecord], limit: int) -> list[GameRecord]:
    """Most recent start first; undated games after dated ones, in batch order."""
    dated = sorted((g for g in games if g.start_time is not None), key=lambda g: g.start_time, reverse=True)
    undated = [g for g in games if g.start_time is None]
    return (dated + undated)[:limit]


def next_upcoming(games: Sequence[GameRecord], limit: int) -> list[GameRecord]:
    dated = sorted((g for g in games if g.start_time is not None), key=lambda g: g.start_time)
    undated = [g for g in games if g.start_time is None]
    return (dated + undated)[:limit]


def _game_list(snapshot: TournamentSnapshot, games: Sequence[GameRecord], empty: str, tz_label: str) -> str:
    if not games:
        return empty
    return "\n\n".join(format_game_line(g, upset=snapshot.is_upset(g), tz_label=tz_label) for g in games)


def _header(cfg: TrackerConfig) -> Section:
    return Section("header", f"{EMOJI_LIVE} {cfg.title} {EMOJI_LIVE}", "")


def render_sections(snapshot: TournamentSnapshot, config: TrackerConfig | None = None) -> list[Section]:
    cfg = config or TrackerConfig()
    tz = cfg.time_zone_label
    sections = [_header(cfg)]
    if snapshot.close:
        body = CLOSE_ALERT_TITLE + "\n" + _game_list(snapshot, snapshot.close, "", tz)
        sections.append(Section("close_alert", "", body))
    sections.extend(
        [
            Section("in_progress", "Games In Progress", _game_list(snapshot, snapshot.current, EMPTY_IN_PROGRESS, tz)),
            Section(
                "completed",
                "Recently Completed Games",
                _game_list(snapshot, recent_completed(snapshot.completed, cfg.recent_limit), EMPTY_COMPLETED, tz),
            ),
            Section(
                "upcoming",
                "Upcoming Games",
                _game_list(snapshot, next_upcoming(snapshot.upcoming, cfg.upcoming_limit), EMPTY_UPCOMING, tz),
            ),
            Section("statistics", "Tournament Statistics", format_statistics(snapshot.stats)),
            Section("footer", "", f"Last updated: {format_timestamp(snapshot.created_at)}"),
        ]
    )
    return sections


def render_skeleton(config: TrackerConfig | None = None) -> list[Section]:
    """Minimal document used when the target document has to be created."""
    cfg = config or TrackerConfig()
    return [_header(cfg), Section("status", "", LOADING)]


def format_markdown(sections: Sequence[Section]) -> str:
    parts: list[str] = []
    for s in sections:
        if s.name == "header":
            parts.append(f"# {s.title}")
        elif s.title:
            parts.append(f"## {s.title}\n\n{s.body}")
        else:
            parts.append(s.body)
    return "\n\n---\n\n".join(parts) + "\n"


def sections_to_blocks(sections: Sequence[Section]) -> list[dict[str, Any]]:
    divider = {"type": "divider"}
    blocks: list[dict[str, Any]] = []
    for s in sections:
        if s.name == "footer":
            blocks.append({"type": "context", "elements": [{"type": "mrkdwn", "text": s.body}]})
            continue
        if s.title:
            blocks.append({"type": "header", "text": {"type": "plain_text", "text": s.title, "emoji": True}})
        if s.body:
            blocks.append({"type": "section", "text": {"type": "mrkdwn", "text": s.body}})
        blocks.append(dict(divider))
    return blocks


def format_json(snapshot: TournamentSnapshot, *, pretty: bool = False) -> str:
    payload = snapshot.to_json_payload()
    if pretty:
        return json.dumps(payload, indent=2, ensure_ascii=False)
    return json.dumps(payload, separators=(",", ":"), ensure_ascii=False)
