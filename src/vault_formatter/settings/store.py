from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Optional, Protocol

from pydantic import ValidationError

from vault_formatter.settings.models import PluginSettings

logger = logging.getLogger(__name__)


class SettingsStore(Protocol):
    """Host primitives that persist the plugin's settings blob verbatim."""

    async def load_data(self) -> Optional[dict[str, Any]]:
        ...

    async def save_data(self, data: dict[str, Any]) -> None:
        ...


class JsonSettingsStore:
    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    async def load_data(self) -> Optional[dict[str, Any]]:
        if not self._path.exists():
            return None
        data = json.loads(self._path.read_text(encoding="utf-8"))
        if data is None:
            return None
        if not isinstance(data, dict):
            raise ValueError(f"Settings file must contain a JSON object, got: {type(data).__name__}")
        return data

    async def save_data(self, data: dict[str, Any]) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self._path.with_suffix(self._path.suffix + ".tmp")
        tmp_path.write_text(json.dumps(data, indent=2, sort_keys=True), encoding="utf-8")
        tmp_path.replace(self._path)


class MemorySettingsStore:
    """Keeps the settings blob in memory. Used for tests and dry runs."""

    def __init__(self, data: Optional[dict[str, Any]] = None) -> None:
        self.data = dict(data) if data is not None else None
        self.save_count = 0

    async def load_data(self) -> Optional[dict[str, Any]]:
        return dict(self.data) if self.data is not None else None

    async def save_data(self, data: dict[str, Any]) -> None:
        self.data = dict(data)
        self.save_count += 1


async def load_plugin_settings(store: SettingsStore) -> PluginSettings:
    try:
        data = await store.load_data()
    except Exception:
        logger.exception("Failed to read plugin settings, using defaults.")
        return PluginSettings()

    if not data:
        return PluginSettings()

    try:
        return PluginSettings.model_validate(data)
    except ValidationError:
        logger.exception("Persisted plugin settings are invalid, using defaults.")
        return PluginSettings()


async def save_plugin_settings(store: SettingsStore, settings: PluginSettings) -> None:
    await store.save_data(settings.to_data())
