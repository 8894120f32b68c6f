"""JSON-file stores for settings and saved analysis sessions."""

from __future__ import annotations

import json
import logging
import re
from pathlib import Path

from pageperf.models.settings import DEFAULT_SETTINGS, Settings, store_dir

logger = logging.getLogger("pageperf.storage")

_SAFE_KEY = re.compile(r"[^A-Za-z0-9._-]+")


def _read_json(path: Path):
    if not path.exists():
        return None
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as e:
        logger.warning("could not read %s: %s", path, e)
        return None


def _write_json(path: Path, data) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp = path.with_suffix(path.suffix + ".tmp")
    tmp.write_text(json.dumps(data, indent=2), encoding="utf-8")
    tmp.replace(path)


class SettingsStore:
    """Settings persisted as one JSON document, merged over the defaults."""

    def __init__(self, root: Path | str | None = None):
        self.root = Path(root) if root else store_dir()
        self.path = self.root / "settings.json"
        self._settings: Settings | None = None

    def load(self) -> Settings:
        raw = _read_json(self.path)
        self._settings = Settings.from_dict(raw if isinstance(raw, dict) else None)
        return self._settings

    def get(self) -> Settings:
        if self._settings is None:
            return self.load()
        return self._settings

    def save(self, updates: dict) -> Settings:
        settings = self.get().merged(updates)
        _write_json(self.path, settings.to_dict())
        self._settings = settings
        return settings

    def reset(self) -> Settings:
        _write_json(self.path, DEFAULT_SETTINGS.to_dict())
        self._settings = DEFAULT_SETTINGS
        return self._settings


class SessionStore:
    """Analysis snapshots keyed by a logical session (page, tab, run label)."""

    def __init__(self, root: Path | str | None = None):
        self.root = (Path(root) if root else store_dir()) / "sessions"

    def _path(self, key: str) -> Path:
        safe = _SAFE_KEY.sub("_", str(key)).strip("._")
        if not safe:
            raise ValueError(f"invalid session key: {key!r}")
        return self.root / f"{safe}.json"

    def save(self, key: str, data: dict) -> dict:
        _write_json(self._path(key), data)
        return data

    def get(self, key: str) -> dict | None:
        data = _read_json(self._path(key))
        return data if isinstance(data, dict) else None

    def clear(self, key: str) -> bool:
        path = self._path(key)
        if not path.exists():
            return False
        path.unlink()
        return True

    def keys(self) -> list[str]:
        if not self.root.exists():
            return []
        return sorted(p.stem for p in self.root.glob("*.json"))
