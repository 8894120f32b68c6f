"""User settings shared by the CLI, the API and the suggestion filter.

There is exactly one Settings structure; the stores, the CLI and the API all
read it by value instead of keeping their own default dictionaries.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field, replace
from enum import Enum
from pathlib import Path


class SuggestionLevel(str, Enum):
    BASIC = "basic"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"


DEFAULT_LEVEL = SuggestionLevel.INTERMEDIATE

NETWORK_THROTTLING_PRESETS = {
    "none": {"offline": False, "latency": 0, "download_throughput": 0, "upload_throughput": 0},
    "slow-3g": {"offline": False, "latency": 400, "download_throughput": 500 * 1024 // 8, "upload_throughput": 500 * 1024 // 8},
    "fast-3g": {"offline": False, "latency": 150, "download_throughput": int(1.5 * 1024 * 1024 / 8), "upload_throughput": 750 * 1024 // 8},
    "regular-4g": {"offline": False, "latency": 100, "download_throughput": 4 * 1024 * 1024 // 8, "upload_throughput": 2 * 1024 * 1024 // 8},
}

_METRIC_TOGGLES = ("pageLoad", "domContentLoaded", "fcp", "lcp", "tti", "tbt")


def _default_show_metrics() -> dict[str, bool]:
    return {name: True for name in _METRIC_TOGGLES}


@dataclass(frozen=True)
class Settings:
    """User preferences.

    `show_metrics` selects the rows of the terminal report's metrics table.
    `auto_analysis` is persisted for clients that analyze on page load; the
    CLI and the API only analyze on request and never read it.
    """

    auto_analysis: bool = True
    network_throttling: str = "none"
    show_metrics: dict[str, bool] = field(default_factory=_default_show_metrics)
    suggestion_level: str = DEFAULT_LEVEL.value

    @classmethod
    def from_dict(cls, raw: dict | None) -> Settings:
        """Build settings from stored camelCase keys, ignoring unknown or bad values."""
        if not raw:
            return cls()
        settings = cls()

        if isinstance(raw.get("autoAnalysis"), bool):
            settings = replace(settings, auto_analysis=raw["autoAnalysis"])

        throttling = raw.get("networkThrottling")
        if throttling in NETWORK_THROTTLING_PRESETS:
            settings = replace(settings, network_throttling=throttling)

        show = raw.get("showMetrics")
        if isinstance(show, dict):
            merged = _default_show_metrics()
            merged.update({k: bool(v) for k, v in show.items() if k in merged})
            settings = replace(settings, show_metrics=merged)

        level = normalize_level(raw.get("suggestionLevel"))
        if level:
            settings = replace(settings, suggestion_level=level.value)

        return settings

    def to_dict(self) -> dict:
        return {
            "autoAnalysis": self.auto_analysis,
            "networkThrottling": self.network_throttling,
            "showMetrics": dict(self.show_metrics),
            "suggestionLevel": self.suggestion_level,
        }

    def merged(self, updates: dict) -> Settings:
        """Return a copy with the given camelCase updates applied on top."""
        data = self.to_dict()
        data.update(updates or {})
        return Settings.from_dict(data)


DEFAULT_SETTINGS = Settings()


def normalize_level(raw) -> SuggestionLevel | None:
    if isinstance(raw, SuggestionLevel):
        return raw
    value = (raw or "").strip().lower() if isinstance(raw, str) else ""
    try:
        return SuggestionLevel(value)
    except ValueError:
        return None


def store_dir() -> Path:
    """Directory holding settings.json and saved sessions."""
    env_path = os.environ.get("PAGEPERF_HOME")
    if env_path:
        return Path(env_path).expanduser()
    return Path.home() / ".pageperf"
