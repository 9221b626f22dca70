"""
Deferred auto-format of documents the user has navigated away from.

Each document is either idle (no entry) or pending (one armed timer task). Leaving
an eligible document arms a timer; returning to it before the timer fires cancels
it. When a timer fires the entry is removed before formatting starts, and the
attempt is never retried. `shutdown` formats everything still pending and waits
for in-flight work before returning.
"""

from __future__ import annotations

import asyncio
import inspect
import logging
import time
from dataclasses import dataclass, replace
from typing import Awaitable, Callable, Optional, Sequence, Union

from vault_formatter.errors import DocumentNotFoundError, FormatError
from vault_formatter.formatting.coordinator import FormatCoordinator
from vault_formatter.formatting.types import FormatOutcome, FormatReport, Trigger
from vault_formatter.settings.models import PluginSettings
from vault_formatter.vault.filesystem import normalize_path
from vault_formatter.vault.interfaces import VaultStorage

logger = logging.getLogger(__name__)

OutcomeListener = Callable[[FormatReport], Union[Awaitable[None], None]]
SettingsProvider = Callable[[], PluginSettings]


@dataclass
class _ScheduledFormat:
    task: asyncio.Task[None]
    generation: int


async def run_format(
    coordinator: FormatCoordinator,
    path: str,
    *,
    trigger: Trigger,
    on_outcome: Optional[OutcomeListener] = None,
) -> FormatReport:
    """Run one format attempt and turn its result into a report. Never raises."""
    started = time.perf_counter()
    try:
        outcome = await coordinator.format_document(path)
        report = FormatReport(path=path, outcome=outcome, trigger=trigger)
    except DocumentNotFoundError as e:
        logger.debug("Skipping format, document is gone. path=%s trigger=%s", path, trigger)
        report = FormatReport(path=path, outcome=FormatOutcome.SKIPPED, trigger=trigger, error=e)
    except FormatError as e:
        logger.warning("Format failed. path=%s trigger=%s reason=%s", path, trigger, e.reason)
        report = FormatReport(path=path, outcome=FormatOutcome.FAILED, trigger=trigger, error=e)
    except Exception as e:
        logger.exception("Unexpected error while formatting. path=%s trigger=%s", path, trigger)
        report = FormatReport(
            path=path,
            outcome=FormatOutcome.FAILED,
            trigger=trigger,
            error=FormatError(path, f"{type(e).__name__}: {e}"),
        )

    elapsed_ms = int((time.perf_counter() - started) * 1000)
    report = replace(report, elapsed_ms=elapsed_ms)

    if on_outcome is not None:
        try:
            result = on_outcome(report)
            if inspect.isawaitable(result):
                await result
        except Exception:
            logger.exception("Format outcome listener failed. path=%s", path)
    return report


class AutoFormatScheduler:
    def __init__(
        self,
        *,
        coordinator: FormatCoordinator,
        storage: VaultStorage,
        settings: SettingsProvider,
        on_outcome: Optional[OutcomeListener] = None,
    ) -> None:
        self._coordinator = coordinator
        self._storage = storage
        self._settings = settings
        self._on_outcome = on_outcome
        self._pending: dict[str, _ScheduledFormat] = {}
        self._in_flight: set[asyncio.Task[None]] = set()
        self._active_path: Optional[str] = None
        self._generation = 0
        self._closed = False

    @property
    def active_path(self) -> Optional[str]:
        return self._active_path

    @property
    def pending_paths(self) -> Sequence[str]:
        return sorted(self._pending)

    def is_pending(self, path: str) -> bool:
        return normalize_path(path) in self._pending

    async def on_active_document_changed(self, path: Optional[str]) -> None:
        if self._closed:
            return

        new_path = normalize_path(path) if path else None
        previous = self._active_path
        self._active_path = new_path

        if new_path is not None and self.cancel(new_path):
            logger.debug("Cancelled pending auto format, document is active again. path=%s", new_path)

        if previous is None or previous == new_path:
            return
        if not await self._is_eligible(previous):
            return
        # Focus may have moved back while the storage check was suspended.
        if self._closed or self._active_path == previous:
            return
        self._schedule(previous)

    def cancel(self, path: str) -> bool:
        """Cancel the pending entry for `path`. Returns False if there was none."""
        entry = self._pending.pop(normalize_path(path), None)
        if entry is None:
            return False
        entry.task.cancel()
        return True

    def cancel_all(self) -> None:
        for path in list(self._pending):
            self.cancel(path)

    async def flush(self) -> list[FormatReport]:
        """Format every pending document now and wait for in-flight formats to finish."""
        entries = list(self._pending.items())
        self._pending.clear()
        for _, entry in entries:
            entry.task.cancel()
        if entries:
            await asyncio.gather(*(entry.task for _, entry in entries), return_exceptions=True)

        reports = []
        for path, _ in entries:
            reports.append(
                await run_format(self._coordinator, path, trigger="flush", on_outcome=self._on_outcome)
            )

        if self._in_flight:
            await asyncio.gather(*list(self._in_flight), return_exceptions=True)
        if entries:
            logger.info("Flushed pending auto formats. count=%d", len(entries))
        return reports

    async def shutdown(self) -> list[FormatReport]:
        self._closed = True
        return await self.flush()

    async def _is_eligible(self, path: str) -> bool:
        settings = self._settings()
        if not settings.auto_format:
            return False
        if not settings.is_extension_eligible(path):
            return False
        try:
            return await self._storage.exists(path)
        except Exception:
            logger.exception("Failed to check document existence. path=%s", path)
            return False

    def _schedule(self, path: str) -> None:
        self.cancel(path)
        self._generation += 1
        generation = self._generation
        delay_seconds = self._settings().debounce_seconds
        task = asyncio.create_task(self._format_after_wait(path=path, generation=generation, delay_seconds=delay_seconds))
        self._pending[path] = _ScheduledFormat(task=task, generation=generation)
        logger.debug("Auto format scheduled. path=%s delay_seconds=%s", path, delay_seconds)

    async def _format_after_wait(self, *, path: str, generation: int, delay_seconds: float) -> None:
        try:
            await asyncio.sleep(delay_seconds)
        except asyncio.CancelledError:
            return

        entry = self._pending.get(path)
        if entry is None or entry.generation != generation:
            return
        del self._pending[path]

        task = asyncio.current_task()
        if task is not None:
            self._in_flight.add(task)
        try:
            await run_format(self._coordinator, path, trigger="scheduled", on_outcome=self._on_outcome)
        finally:
            if task is not None:
                self._in_flight.discard(task)
