"""Error kinds raised at the tracker's collaborator boundaries.

None of these is fatal to the process: the sync controller recovers from each
one (fallback data, dropped record, retained snapshot) and logs it.
"""

from __future__ import annotations

from dataclasses import dataclass


class TrackerError(Exception):
    """Base class for tracker errors."""


class FetchFailure(TrackerError):
    """The data provider could not deliver a batch (network or parse error)."""


class MalformedRecord(TrackerError):
    """A raw game record failed validation and must be dropped."""

    def __init__(self, reason: str, game_id: object = None) -> None:
        self.reason = reason
        self.game_id = game_id
        label = f"game {game_id}" if game_id is not None else "record"
        super().__init__(f"{label}: {reason}")


class PublishFailure(TrackerError):
    """The document store rejected or failed a whole-document replace."""


@dataclass(frozen=True, slots=True)
class DataAnomaly:
    """A record excluded from a derived subset because its data is inconsistent."""

    game_id: str
    kind: str
    detail: str

    def __str__(self) -> str:
        return f"game {self.game_id}: {self.kind} ({self.detail})"
