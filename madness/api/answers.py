"""Q&A style helpers over the committed tournament snapshot.

These back the chat interface: every read goes to the controller's latest
committed snapshot, so answers stay available while a refresh is failing.
"""
from __future__ import annotations

import logging

from madness.sync.controller import SyncController

logger = logging.getLogger(__name__)

HELP_TEXT = (
    "Hi there! I'm tracking the NCAA tournament. Here's what you can ask me:\n"
    "• *current games*: to see games in progress\n"
    "• *close games*: to see tight matchups\n"
    "• *upsets*: to see any upsets so far\n"
    "• *refresh*: to force a data update"
)
LOADING_TEXT = "Tournament data is still loading. Please try again in a moment."
ERROR_TEXT = "Sorry, I encountered an error processing your request. Please try again."


def _plural(n: int, word: str) -> str:
    return f"{n} {word}" if n == 1 else f"{n} {word}s"


def _verb(n: int, one: str = "is", many: str = "are") -> str:
    return one if n == 1 else many


class TournamentAnswers:
    def __init__(self, controller: SyncController) -> None:
        self.controller = controller

    def in_progress_count(self) -> int | None:
        snap = self.controller.snapshot
        return None if snap is None else len(snap.current)

    def close_game_count(self) -> int | None:
        snap = self.controller.snapshot
        return None if snap is None else len(snap.close)

    def upset_count(self) -> int | None:
        snap = self.controller.snapshot
        return None if snap is None else len(snap.upsets)

    async def refresh_now(self) -> bool:
        """Force a refresh cycle; True when it committed a snapshot."""
        before = self.controller.cycles_published
        await self.controller.refresh("refresh now")
        return self.controller.cycles_published > before

    async def answer(self, text: str) -> str:
        q = (text or "").lower()
        try:
            if "current" in q or "in progress" in q:
                n = self.in_progress_count()
                return LOADING_TEXT if n is None else f"There {_verb(n)} {_plural(n, 'game')} in progress right now."
            if "close" in q:
                n = self.close_game_count()
                return LOADING_TEXT if n is None else f"There {_verb(n)} {_plural(n, 'close game')} right now."
            if "upset" in q:
                n = self.upset_count()
                return LOADING_TEXT if n is None else f"There {_verb(n, 'has been', 'have been')} {_plural(n, 'upset')} in the tournament so far."
            if "refresh" in q or "update" in q:
                if await self.refresh_now():
                    return "Tournament data has been refreshed! Check the tracker document for updates."
                return "Couldn't refresh the tournament data right now. Please try again in a few minutes."
            return HELP_TEXT
        except Exception:
            logger.exception("error answering %r", text)
            return ERROR_TEXT
