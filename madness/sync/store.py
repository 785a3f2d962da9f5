"""Document-store collaborators.

A document store holds one rendered document per id and only supports
whole-document replacement; there is no per-section update.
"""

from __future__ import annotations

import json
import logging
import os
import re
import uuid
from pathlib import Path
from typing import Protocol, Sequence

from madness.errors import PublishFailure
from madness.report.formatters import format_markdown, sections_to_blocks
from madness.report.models import Section

logger = logging.getLogger(__name__)


class DocumentStore(Protocol):
    def exists(self, document_id: str) -> bool: ...
    def create(self, channel_id: str | None, title: str, initial_sections: Sequence[Section]) -> str: ...
    def replace(self, document_id: str, sections: Sequence[Section]) -> None: ...


class InMemoryDocumentStore:
    """Process-local store; keeps every replace for inspection."""

    def __init__(self) -> None:
        self.documents: dict[str, list[Section]] = {}
        self.titles: dict[str, str] = {}
        self.replace_count = 0

    def exists(self, document_id: str) -> bool:
        return document_id in self.documents

    def create(self, channel_id: str | None, title: str, initial_sections: Sequence[Section]) -> str:
        document_id = f"doc-{uuid.uuid4().hex[:10]}"
        self.documents[document_id] = list(initial_sections)
        self.titles[document_id] = title
        return document_id

    def replace(self, document_id: str, sections: Sequence[Section]) -> None:
        if document_id not in self.documents:
            raise PublishFailure(f"document {document_id} does not exist")
        self.documents[document_id] = list(sections)
        self.replace_count += 1


def _slug(text: str) -> str:
    s = re.sub(r"[^a-z0-9]+", "-", text.lower()).strip("-")
    return s or "tracker"


class FileDocumentStore:
    """Writes each document as ``<id>.md`` plus ``<id>.json`` (block form).

    Writes go to a temporary file first and are swapped in with ``os.replace``
    so readers never see a half-written document.
    """

    def __init__(self, root: str | Path) -> None:
        self.root = Path(root)

    def _md_path(self, document_id: str) -> Path:
        return self.root / f"{document_id}.md"

    def _json_path(self, document_id: str) -> Path:
        return self.root / f"{document_id}.json"

    def exists(self, document_id: str) -> bool:
        return self._md_path(document_id).is_file()

    def create(self, channel_id: str | None, title: str, initial_sections: Sequence[Section]) -> str:
        prefix = _slug(channel_id) + "-" if channel_id else ""
        document_id = f"{prefix}{_slug(title)}-{uuid.uuid4().hex[:8]}"
        self._write(document_id, initial_sections)
        return document_id

    def replace(self, document_id: str, sections: Sequence[Section]) -> None:
        if not self.exists(document_id):
            raise PublishFailure(f"document {document_id} does not exist under {self.root}")
        self._write(document_id, sections)

    def _write(self, document_id: str, sections: Sequence[Section]) -> None:
        try:
            self.root.mkdir(parents=True, exist_ok=True)
            self._atomic_write(self._json_path(document_id), json.dumps(sections_to_blocks(sections), indent=2, ensure_ascii=False))
            self._atomic_write(self._md_path(document_id), format_markdown(sections))
        except OSError as exc:
            raise PublishFailure(f"writing document {document_id} failed: {exc}") from exc
        logger.debug("wrote document %s (%d sections)", document_id, len(sections))

    @staticmethod
    def _atomic_write(path: Path, content: str) -> None:
        tmp = path.with_name(path.name + ".tmp")
        tmp.write_text(content, encoding="utf-8")
        os.replace(tmp, path)
