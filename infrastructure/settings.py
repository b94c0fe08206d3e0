"""Settings access helpers for JSON-based configuration."""

from __future__ import annotations

import copy
import json
from pathlib import Path
from typing import Any

from loguru import logger

DEFAULT_SETTINGS: dict[str, Any] = {
    "storage": {
        "private_dir": None,
        "external_dir": None,
        "jpeg_quality": 95,
        "scoped_storage": True,
    },
    "capture": {"refresh_on_failed_private_save": True},
    "workers": {"max_workers": 2},
    "ui": {"thumbnail_size": 160, "grid_rows": 3},
    "logging": {"dir": None, "level": "INFO"},
}


def _merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Recursively overlay `override` onto a copy of `base`."""
    out = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(out.get(key), dict):
            out[key] = _merge(out[key], value)
        else:
            out[key] = value
    return out


class JsonSettings:
    """JSON settings reader with dotted-key access over built-in defaults."""

    def __init__(self, settings_path: str | Path | None = None) -> None:
        self._path = Path(settings_path) if settings_path else None
        data: dict[str, Any] = {}
        if self._path is not None:
            if self._path.exists():
                with self._path.open("r", encoding="utf-8") as f:
                    loaded = json.load(f)
                if isinstance(loaded, dict):
                    data = loaded
                else:
                    logger.warning("Ignoring non-object settings file: {}", self._path)
            else:
                logger.info("settings.json not found, using defaults: {}", self._path)
        self._data = _merge(DEFAULT_SETTINGS, data)

    def get(self, key: str, default: Any | None = None) -> Any:
        """Return value for dotted `key`, or `default` if not present or null."""
        parts = key.split(".")
        node: Any = self._data
        for part in parts:
            if isinstance(node, dict) and part in node:
                node = node[part]
            else:
                return default
        return default if node is None else node

    def get_int(self, key: str, default: int) -> int:
        """Return `key` as int, falling back to `default` on bad values."""
        try:
            return int(self.get(key, default))
        except (ValueError, TypeError):
            logger.warning("Invalid integer setting {}, using {}", key, default)
            return default

    def get_bool(self, key: str, default: bool) -> bool:
        """Return `key` as bool; accepts JSON booleans and "true"/"false" strings."""
        value = self.get(key, default)
        if isinstance(value, str):
            return value.strip().lower() in {"1", "true", "yes", "on"}
        return bool(value)
