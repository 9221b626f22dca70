from __future__ import annotations

import inspect
import logging
from typing import Any, Optional, Sequence

from vault_formatter.autoformat.scheduler import AutoFormatScheduler, OutcomeListener, run_format
from vault_formatter.config.cascade import DEFAULT_CANDIDATES, ConfigCandidate, ConfigCascade
from vault_formatter.engine.interfaces import FormattingEngine
from vault_formatter.errors import FormatError
from vault_formatter.formatting.coordinator import FormatCoordinator
from vault_formatter.formatting.types import FormatOutcome, FormatReport
from vault_formatter.host.events import EventBus, EventManager
from vault_formatter.host.notices import LogNotifier, Notifier
from vault_formatter.logging import apply_log_level
from vault_formatter.settings.descriptors import baseline_options, get_descriptor, set_setting_value
from vault_formatter.settings.models import PluginSettings
from vault_formatter.settings.store import SettingsStore, load_plugin_settings, save_plugin_settings
from vault_formatter.vault.filesystem import normalize_path
from vault_formatter.vault.interfaces import VaultStorage

logger = logging.getLogger(__name__)


class FormatterPlugin:
    """
    Wires settings, option resolution, formatting and auto-format scheduling to a host.

    Lifecycle: `load` registers event handlers; `unload` (also triggered by the
    host's shutdown event) removes them and flushes pending auto formats.
    """

    def __init__(
        self,
        *,
        storage: VaultStorage,
        engine: FormattingEngine,
        settings_store: SettingsStore,
        bus: EventBus,
        notifier: Optional[Notifier] = None,
        candidates: Sequence[ConfigCandidate] = DEFAULT_CANDIDATES,
        on_outcome: Optional[OutcomeListener] = None,
    ) -> None:
        self._settings_store = settings_store
        self._notifier = notifier or LogNotifier()
        self._on_outcome = on_outcome
        self._settings = PluginSettings()
        self._events = EventManager(bus)
        self._loaded = False

        self._cascade = ConfigCascade(storage, candidates)
        self._coordinator = FormatCoordinator(
            storage=storage,
            engine=engine,
            resolver=self._cascade,
            baseline=lambda: baseline_options(self._settings),
        )
        self._scheduler = AutoFormatScheduler(
            coordinator=self._coordinator,
            storage=storage,
            settings=lambda: self._settings,
            on_outcome=self._report_outcome,
        )

    @property
    def settings(self) -> PluginSettings:
        return self._settings

    @property
    def cascade(self) -> ConfigCascade:
        return self._cascade

    @property
    def scheduler(self) -> AutoFormatScheduler:
        return self._scheduler

    @property
    def loaded(self) -> bool:
        return self._loaded

    async def load(self) -> None:
        await self.load_settings()
        self._events.on_active_document_changed(self._scheduler.on_active_document_changed)
        self._events.on_shutdown_requested(self.unload)
        self._loaded = True
        logger.info("Plugin loaded")

    async def unload(self) -> None:
        if not self._loaded:
            return
        self._loaded = False
        self._events.clear_events()
        await self._scheduler.shutdown()
        logger.info("Plugin unloaded")

    async def load_settings(self) -> None:
        self._settings = await load_plugin_settings(self._settings_store)
        self._apply_settings()

    async def save_settings(self) -> None:
        await save_plugin_settings(self._settings_store, self._settings)
        self._apply_settings()

    async def update_settings(self, **changes: Any) -> PluginSettings:
        """Change settings by descriptor key and persist them. Raises ValueError on invalid values."""
        settings = self._settings
        for key, value in changes.items():
            settings = set_setting_value(settings, get_descriptor(key), value)
        was_enabled = self._settings.auto_format
        self._settings = settings
        await self.save_settings()
        if was_enabled and not settings.auto_format:
            self._scheduler.cancel_all()
        return settings

    async def effective_options(self) -> dict[str, Any]:
        return await self._cascade.resolve_effective_options(baseline_options(self._settings))

    async def format_current_document(self) -> Optional[FormatReport]:
        """The user-facing "format current document" command."""
        path = self._scheduler.active_path
        if path is None:
            self._notifier.notify("No active document to format.", error=True)
            return None
        return await self.format_document(path)

    async def format_document(self, path: str) -> FormatReport:
        try:
            path = normalize_path(path)
        except ValueError as e:
            report = FormatReport(
                path=path,
                outcome=FormatOutcome.FAILED,
                trigger="manual",
                error=FormatError(path, str(e)),
            )
            await self._report_outcome(report)
            return report
        if self._scheduler.cancel(path):
            logger.debug("Manual format replaced a pending auto format. path=%s", path)
        return await run_format(self._coordinator, path, trigger="manual", on_outcome=self._report_outcome)

    def _apply_settings(self) -> None:
        apply_log_level(self._settings.log_level)

    async def _report_outcome(self, report: FormatReport) -> None:
        show = self._settings.show_notices
        if report.outcome == FormatOutcome.CHANGED and show:
            self._notifier.notify(f"Formatted {report.path}")
        elif report.outcome == FormatOutcome.UNCHANGED and show:
            self._notifier.notify(f"{report.path} is already formatted")
        elif report.outcome == FormatOutcome.FAILED:
            self._notifier.notify(str(report.error), error=True)
        elif report.outcome == FormatOutcome.SKIPPED and report.trigger == "manual":
            self._notifier.notify(f"Document not found: {report.path}", error=True)

        if self._on_outcome is not None:
            result = self._on_outcome(report)
            if inspect.isawaitable(result):
                await result
