"""
Local UI preferences kept in a small JSON file.

Keys are the ones the browser app keeps in local storage. There is no schema
version: unknown keys found in the file are ignored, unknown keys sent by a
caller are rejected.
"""
import json
import logging
import os
from typing import Any, Dict, Optional

from followuply.config import config
from followuply.constants import LANGUAGES, STORAGE_KEYS
from followuply.errors import ValidationError

logger = logging.getLogger(__name__)

DEFAULTS = {
    "dark_mode": False,
    "language": "en",
    "language_selected": False,
    "cached_profile": None,
}


class PreferencesStore:
    def __init__(self, path: Optional[str] = None):
        self.path = path or config.PREFERENCES_PATH
        self._values: Dict[str, Any] = self._read()

    def _read(self) -> Dict[str, Any]:
        if not os.path.exists(self.path):
            return {}
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            logger.warning(f"Ignoring unreadable preferences file {self.path}: {e}")
            return {}
        if not isinstance(data, dict):
            return {}
        return {k: v for k, v in data.items() if k in STORAGE_KEYS.values()}

    def _write(self):
        tmp_path = f"{self.path}.tmp"
        with open(tmp_path, "w", encoding="utf-8") as f:
            json.dump(self._values, f, indent=2, default=str)
        os.replace(tmp_path, self.path)

    def get(self, name: str) -> Any:
        if name not in STORAGE_KEYS:
            raise ValidationError([f"Unknown preference: {name}"])
        return self._values.get(STORAGE_KEYS[name], DEFAULTS[name])

    def as_dict(self) -> Dict[str, Any]:
        return {name: self.get(name) for name in STORAGE_KEYS}

    def update(self, changes: Dict[str, Any]) -> Dict[str, Any]:
        unknown = [name for name in changes if name not in STORAGE_KEYS]
        if unknown:
            raise ValidationError([f"Unknown preference: {name}" for name in unknown])
        if "language" in changes and changes["language"] not in LANGUAGES:
            raise ValidationError(["Invalid language"])

        for name, value in changes.items():
            self._values[STORAGE_KEYS[name]] = value
        self._write()
        return self.as_dict()

    def clear(self, name: str):
        if name not in STORAGE_KEYS:
            raise ValidationError([f"Unknown preference: {name}"])
        if self._values.pop(STORAGE_KEYS[name], None) is not None:
            self._write()


_store: Optional[PreferencesStore] = None


def get_preferences_store() -> PreferencesStore:
    global _store
    if _store is None:
        _store = PreferencesStore()
    return _store
