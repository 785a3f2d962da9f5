import datetime
import json

from madness.config import TrackerConfig
from madness.report.collect import build_snapshot
from madness.report.formatters import (
    format_game_line,
    format_json,
    format_markdown,
    format_statistics,
    render_sections,
    render_skeleton,
    sections_to_blocks,
)
from madness.report.models import GameRecord, GameStatus, TeamLine

NOW = datetime.datetime(2025, 3, 20, 18, 30, 5, tzinfo=datetime.timezone.utc)


def _snapshot(raws, **cfg):
    return build_snapshot(raws, TrackerConfig(**cfg), now=NOW)


def test_section_order_with_close_alert(seed_raw):
    sections = render_sections(_snapshot(seed_raw))
    assert [s.name for s in sections] == [
        "header",
        "close_alert",
        "in_progress",
        "completed",
        "upcoming",
        "statistics",
        "footer",
    ]
    assert sections[0].title == "🏀 NCAA Tournament Tracker 2025 🏀"
    assert sections[1].body.startswith("🔥 *CLOSE GAME ALERT* 🔥\n🏀 (10) *NC State*")
    assert sections[-1].body == "Last updated: Mar 20, 2025, 6:30:05 PM UTC"


def test_close_alert_omitted_without_close_games(seed_raw):
    seed_raw[2]["AwayTeamScore"] = 60
    sections = render_sections(_snapshot(seed_raw))
    assert "close_alert" not in [s.name for s in sections]
    assert sections[1].name == "in_progress"


def test_game_lines(seed_raw):
    snap = _snapshot(seed_raw)
    by_id = {g.game_id: g for g in snap.games}
    assert format_game_line(by_id["1002"], upset=snap.is_upset(by_id["1002"])) == (
        "🏁 (11) *Duquesne* 71 - 69 *BYU* (6) 🚨 UPSET! 🚨\n└ _FINAL | Round 1_"
    )
    assert format_game_line(by_id["1001"], upset=snap.is_upset(by_id["1001"])) == (
        "🏁 (9) *Virginia* 57 - 63 *Colorado* (8)\n└ _FINAL | Round 1_"
    )
    assert format_game_line(by_id["1003"]) == (
        "🏀 (10) *NC State* 45 - 42 *Texas Tech* (7)\n└ _2H 12:34 | Round 1_"
    )
    assert format_game_line(by_id["1004"], tz_label="ET") == (
        "📅 (2) *Marquette* vs *Western Kentucky* (15)\n└ _Mar 20 7:20 PM ET | Round 1_"
    )


def test_completed_most_recent_first_and_truncated(make_raw):
    raws = [
        make_raw(i, away=(f"A{i}", 9, 70), home=(f"H{i}", 8, 60), when=f"2025-03-{10 + i:02d}T12:00:00")
        for i in range(7)
    ]
    raws.append(make_raw(99, away=("Undated", 9, 70), home=("Other", 8, 60), when=None))
    cfg = TrackerConfig(recent_limit=3)
    sections = {s.name: s for s in render_sections(build_snapshot(raws, cfg, now=NOW), cfg)}
    body = sections["completed"].body
    assert body.count("🏁") == 3
    assert body.index("*A6*") < body.index("*A5*") < body.index("*A4*")
    assert "Undated" not in body


def test_upcoming_soonest_first(seed_raw):
    seed_raw[3]["DateTime"], seed_raw[4]["DateTime"] = seed_raw[4]["DateTime"], seed_raw[3]["DateTime"]
    sections = {s.name: s for s in render_sections(_snapshot(seed_raw))}
    body = sections["upcoming"].body
    assert body.index("Kentucky* vs") < body.index("Marquette")


def test_empty_snapshot_placeholders():
    sections = {s.name: s for s in render_sections(_snapshot([]))}
    assert sections["in_progress"].body == "No games currently in progress."
    assert sections["completed"].body == "No completed games yet."
    assert sections["upcoming"].body == "No upcoming games scheduled."
    assert "0 completed, 0 in progress, 0 upcoming" in sections["statistics"].body
    assert "*Average Points*: 0 points per game" in sections["statistics"].body


def test_statistics_text(seed_raw):
    text = format_statistics(_snapshot(seed_raw).stats)
    assert text.splitlines()[:3] == [
        "*Tournament Progress*: 2 completed, 1 in progress, 2 upcoming",
        "*Upsets*: 1 so far",
        "*Average Points*: 130.0 points per game",
    ]
    assert "1. Duquesne: 71.0 ppg" in text
    assert "1. Duquesne def. BYU by 2 (71-69)" in text
    assert "2. Colorado def. Virginia by 6 (57-63)" in text


def test_rendering_is_idempotent(seed_raw):
    snap = _snapshot(seed_raw)
    assert render_sections(snap) == render_sections(snap)
    assert format_markdown(render_sections(snap)) == format_markdown(render_sections(snap))


def test_markdown_and_blocks(seed_raw):
    sections = render_sections(_snapshot(seed_raw))
    md = format_markdown(sections)
    assert md.startswith("# 🏀 NCAA Tournament Tracker 2025 🏀\n\n---\n\n🔥")
    assert "## Games In Progress" in md
    blocks = sections_to_blocks(sections)
    assert blocks[0]["type"] == "header"
    assert blocks[1] == {"type": "divider"}
    assert blocks[-1] == {
        "type": "context",
        "elements": [{"type": "mrkdwn", "text": "Last updated: Mar 20, 2025, 6:30:05 PM UTC"}],
    }


def test_skeleton():
    skeleton = render_skeleton(TrackerConfig(title="Test Tracker"))
    assert [s.name for s in skeleton] == ["header", "status"]
    assert skeleton[1].body == "Loading tournament data..."


def test_json_export(seed_raw):
    payload = json.loads(format_json(_snapshot(seed_raw)))
    assert payload["upsets"] == ["1002"]
    assert payload["stats"]["avg_points_per_game"] == 130.0
    scheduled = next(g for g in payload["games"] if g["game_id"] == "1004")
    assert scheduled["away"]["score"] is None


def test_mixed_offset_and_naive_start_times_render(make_raw):
    raws = [
        make_raw(1, away=("Early", 9, 70), home=("E2", 8, 60), when="2025-03-19T12:00:00"),
        make_raw(2, away=("Late", 9, 70), home=("L2", 8, 60), when="2025-03-19T18:00:00Z"),
        make_raw(3, "Scheduled", away=("Next", 3, 0), home=("N2", 14, 0), when="2025-03-21T12:00:00+00:00"),
        make_raw(4, "Scheduled", away=("Soon", 3, 0), home=("S2", 14, 0), when="2025-03-20T19:00:00"),
    ]
    sections = {s.name: s for s in render_sections(build_snapshot(raws, now=NOW))}
    completed = sections["completed"].body
    assert completed.index("*Late*") < completed.index("*Early*")
    upcoming = sections["upcoming"].body
    assert upcoming.index("*Soon*") < upcoming.index("*Next*")


def test_scheduled_game_without_start_time_uses_plain_label():
    game = GameRecord("7", 2, TeamLine("Auburn", 1), TeamLine("Creighton", 9), GameStatus.SCHEDULED)
    assert format_game_line(game, tz_label="ET") == (
        "📅 (1) *Auburn* vs *Creighton* (9)\n└ _Scheduled | Round 2_"
    )
