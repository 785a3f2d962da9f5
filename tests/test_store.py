import json

import pytest

from madness.errors import PublishFailure
from madness.report.models import Section
from madness.sync.store import FileDocumentStore, InMemoryDocumentStore

SECTIONS = [
    Section("header", "Tracker", ""),
    Section("in_progress", "Games In Progress", "No games currently in progress."),
    Section("footer", "", "Last updated: now"),
]


def test_file_store_create_and_replace(tmp_path):
    store = FileDocumentStore(tmp_path / "docs")
    doc_id = store.create("C42", "NCAA Tournament Tracker", SECTIONS[:1])
    assert doc_id.startswith("c42-ncaa-tournament-tracker-")
    assert store.exists(doc_id)
    store.replace(doc_id, SECTIONS)
    md = (tmp_path / "docs" / f"{doc_id}.md").read_text(encoding="utf-8")
    assert md == "# Tracker\n\n---\n\n## Games In Progress\n\nNo games currently in progress.\n\n---\n\nLast updated: now\n"
    blocks = json.loads((tmp_path / "docs" / f"{doc_id}.json").read_text(encoding="utf-8"))
    assert blocks[-1]["type"] == "context"
    assert not list((tmp_path / "docs").glob("*.tmp"))


def test_replace_unknown_document(tmp_path):
    with pytest.raises(PublishFailure):
        FileDocumentStore(tmp_path).replace("missing", SECTIONS)
    with pytest.raises(PublishFailure):
        InMemoryDocumentStore().replace("missing", SECTIONS)


def test_file_store_write_error_is_publish_failure(tmp_path):
    blocker = tmp_path / "file"
    blocker.write_text("x", encoding="utf-8")
    with pytest.raises(PublishFailure):
        FileDocumentStore(blocker / "docs").create(None, "t", SECTIONS)
