"""Runtime configuration for the tracker.

All knobs the pipeline consumes live on ``TrackerConfig``; nothing below the
CLI reads the environment directly. Values come from (lowest to highest
precedence) the dataclass defaults, an optional YAML file, then ``TRACKER_*``
environment variables.
"""

from __future__ import annotations

import dataclasses
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping

import yaml

from madness.report import constants as C

DEFAULT_BASE_URL = "https://api.sportsdata.io/v3/cbb/scores/json"


@dataclass(frozen=True, slots=True)
class TrackerConfig:
    tournament_id: str = "2025"
    # Periodic trigger fires no more often than this
    refresh_interval_minutes: float = C.REFRESH_INTERVAL_MINUTES
    # In-progress games within this many points are "close"
    close_game_threshold: int = C.CLOSE_GAME_THRESHOLD
    recent_limit: int = C.RECENT_LIMIT
    upcoming_limit: int = C.UPCOMING_LIMIT
    top_n: int = C.TOP_N
    title: str = C.TITLE
    time_zone_label: str = C.TIME_ZONE_LABEL
    document_id: str | None = None
    channel_id: str | None = None
    api_base_url: str = DEFAULT_BASE_URL
    api_key: str | None = None
    rpm_limit: float | None = None
    min_interval_ms: float | None = None
    request_timeout: float = C.DEFAULT_TIMEOUT_SEC

    def validate(self) -> "TrackerConfig":
        if self.refresh_interval_minutes <= 0:
            raise ValueError("refresh_interval_minutes must be positive")
        if self.close_game_threshold < 0:
            raise ValueError("close_game_threshold must be >= 0")
        for name in ("recent_limit", "upcoming_limit"):
            val = getattr(self, name)
            if not 1 <= val <= C.MAX_LIST_LIMIT:
                raise ValueError(f"{name} must be between 1 and {C.MAX_LIST_LIMIT}, got {val}")
        if self.top_n < 1:
            raise ValueError("top_n must be >= 1")
        if self.request_timeout <= 0:
            raise ValueError("request_timeout must be positive")
        return self

    def replace(self, **overrides: Any) -> "TrackerConfig":
        return dataclasses.replace(self, **overrides)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any] | None, base: "TrackerConfig | None" = None) -> "TrackerConfig":
        base = base or cls()
        known = {f.name: f for f in dataclasses.fields(cls)}
        unknown = sorted(set(data or {}) - set(known))
        if unknown:
            raise ValueError(f"Unknown config keys: {', '.join(unknown)}")
        overrides = {k: _convert(known[k].type, v) for k, v in (data or {}).items()}
        return base.replace(**overrides).validate()

    @classmethod
    def from_yaml(cls, path: str | Path, base: "TrackerConfig | None" = None) -> "TrackerConfig":
        with open(path, encoding="utf-8") as f:
            try:
                data = yaml.safe_load(f) or {}
            except yaml.YAMLError as exc:
                raise ValueError(f"{path}: invalid YAML: {exc}") from exc
        if not isinstance(data, dict):
            raise ValueError(f"{path}: expected a mapping at top level")
        return cls.from_mapping(data, base)

    @classmethod
    def from_env(cls, env: Mapping[str, str] | None = None, base: "TrackerConfig | None" = None) -> "TrackerConfig":
        env = os.environ if env is None else env
        base = base or cls()
        overrides: dict[str, Any] = {}
        for f in dataclasses.fields(cls):
            raw = env.get(f"TRACKER_{f.name.upper()}")
            if raw is None or raw == "":
                continue
            try:
                overrides[f.name] = _convert(f.type, raw)
            except ValueError:
                # Same policy as the rate-limit variables: bad numbers keep the default
                continue
        if "api_key" not in overrides and env.get("SPORTS_API_KEY"):
            overrides["api_key"] = env["SPORTS_API_KEY"]
        return base.replace(**overrides).validate()


def _convert(type_name: Any, value: Any) -> Any:
    # Annotations are strings under ``from __future__ import annotations``
    t = str(type_name)
    if value is None:
        return None
    if t.startswith("int"):
        return int(value)
    if t.startswith("float"):
        return float(value)
    if t.startswith("str"):
        return str(value)
    return value


def load_config(path: str | Path | None = None, env: Mapping[str, str] | None = None) -> TrackerConfig:
    cfg = TrackerConfig.from_yaml(path) if path else TrackerConfig()
    return TrackerConfig.from_env(env, base=cfg)
