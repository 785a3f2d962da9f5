"""Tournament scores provider over HTTP.

``SportsDataClient`` spaces its requests with a ``RateLimiter``, retries
quota and gateway errors on its ``requests`` session, and turns whatever is
left (transport errors, bad JSON, an unexpected payload shape) into
``FetchFailure``.

The sync controller only sees ``fetch_games``; it runs it off the event loop.
"""

from __future__ import annotations

import logging
import time
from typing import Any, Protocol

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from madness.config import TrackerConfig
from madness.errors import FetchFailure
from madness.report.constants import DEFAULT_MIN_INTERVAL_SEC, DEFAULT_TIMEOUT_SEC

logger = logging.getLogger(__name__)


class GameProvider(Protocol):
    """Source of raw game records for one tournament."""

    def fetch_games(self, tournament_id: str) -> list[dict]: ...


class RateLimiter:
    """Spaces out provider requests so the scores API quota is not exhausted.

    ``wait()`` sleeps until ``min_interval_sec`` has passed since the previous
    request went out. One limiter is shared by every request a client makes.
    """

    def __init__(self, min_interval_sec: float | None = None) -> None:
        self.min_interval = float(min_interval_sec or DEFAULT_MIN_INTERVAL_SEC)
        self._last_request: float | None = None

    def wait(self) -> None:
        if self._last_request is not None:
            remaining = self.min_interval - (time.monotonic() - self._last_request)
            if remaining > 0:
                time.sleep(remaining)
        self._last_request = time.monotonic()


# Tournament scores are read-only GETs; the provider answers 429 when the
# per-key quota is spent and 5xx during score-feed restarts.
_RETRY_STATUSES = (408, 429, 500, 502, 503, 504)


def _mount_retries(session: requests.Session) -> None:
    """Retry provider GETs with exponential backoff before giving up."""
    adapter = HTTPAdapter(
        max_retries=Retry(
            total=4,
            connect=2,
            read=2,
            backoff_factor=1.0,
            status_forcelist=_RETRY_STATUSES,
            allowed_methods=frozenset({"GET"}),
            respect_retry_after_header=True,
            raise_on_status=False,
        )
    )
    for prefix in ("https://", "http://"):
        session.mount(prefix, adapter)


class SportsDataClient:
    """Reads tournament games from the SportsDataIO college basketball feed.

    - base_url: provider JSON root (``/Tournament/{id}`` is appended)
    - api_key: sent as ``Ocp-Apim-Subscription-Key`` when set
    - rpm_limit: translated to a minimum interval of 60 / rpm seconds
    - min_interval_ms: explicit minimum interval in milliseconds (wins if larger)
    """

    def __init__(
        self,
        base_url: str,
        api_key: str | None = None,
        rpm_limit: float | None = None,
        min_interval_ms: float | None = None,
        timeout: float = DEFAULT_TIMEOUT_SEC,
        session: requests.Session | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        intervals = []
        if rpm_limit and rpm_limit > 0:
            intervals.append(60.0 / rpm_limit)
        if min_interval_ms and min_interval_ms > 0:
            intervals.append(float(min_interval_ms) / 1000.0)
        self.rate = RateLimiter(max(intervals, default=None))

        self.session = session or requests.Session()
        self.session.headers.update({"User-Agent": "madness-tracker/1.0"})
        if api_key:
            self.session.headers["Ocp-Apim-Subscription-Key"] = api_key
        _mount_retries(self.session)

    @classmethod
    def from_config(cls, config: TrackerConfig) -> "SportsDataClient":
        return cls(
            config.api_base_url,
            api_key=config.api_key,
            rpm_limit=config.rpm_limit,
            min_interval_ms=config.min_interval_ms,
            timeout=config.request_timeout,
        )

    def get_json(self, path: str) -> Any:
        """GET ``base_url + path`` and return decoded JSON.

        Raises requests.HTTPError on non-2xx responses (after retries).
        """
        self.rate.wait()
        r = self.session.get(self.base_url + path, timeout=self.timeout)
        r.raise_for_status()
        return r.json()

    def fetch_games(self, tournament_id: str) -> list[dict]:
        path = f"/Tournament/{tournament_id}"
        try:
            data = self.get_json(path)
        except requests.RequestException as exc:
            raise FetchFailure(f"GET {path} failed: {exc}") from exc
        except ValueError as exc:
            raise FetchFailure(f"GET {path} returned invalid JSON: {exc}") from exc
        if isinstance(data, dict):
            data = data.get("Games")
        if not isinstance(data, list):
            raise FetchFailure(f"GET {path} returned {type(data).__name__}, expected a list of games")
        logger.debug("fetched %d raw games for tournament %s", len(data), tournament_id)
        return data
