from madness.cli.tracker import build_controller, run_once
from madness.config import TrackerConfig
from madness.sync.store import FileDocumentStore


def test_run_once_offline_markdown(tmp_path):
    ctl = build_controller(TrackerConfig(), store_dir=str(tmp_path), offline=True)
    code, output = run_once(ctl)
    assert code == 0
    assert output.startswith("# 🏀 NCAA Tournament Tracker 2025 🏀")
    assert "🚨 UPSET! 🚨" in output
    assert isinstance(ctl.store, FileDocumentStore)
    assert (tmp_path / f"{ctl.document_id}.md").read_text(encoding="utf-8") == output


def test_run_once_offline_json_in_memory():
    ctl = build_controller(TrackerConfig(), store_dir=None, offline=True)
    code, output = run_once(ctl, output_format="json")
    assert code == 0
    assert '"avg_points_per_game": 130.0' in output
