from __future__ import annotations

import asyncio
import logging

from vault_formatter.config import YamlConfigLoader
from vault_formatter.config.models import ConfigLoadRequest
from vault_formatter.engine import build_engine
from vault_formatter.host import ACTIVE_DOCUMENT_CHANGED, SHUTDOWN_REQUESTED, EventBus, StreamNotifier
from vault_formatter.logging import init_logging
from vault_formatter.plugin import FormatterPlugin
from vault_formatter.settings import MemorySettingsStore
from vault_formatter.vault import FileSystemVault


async def main() -> None:
    config = await YamlConfigLoader().load(ConfigLoadRequest(yaml_path="examples/config.yaml"))
    init_logging(config.logging)
    logger = logging.getLogger("smoke")

    bus = EventBus()
    plugin = FormatterPlugin(
        storage=FileSystemVault(config.vault.root),
        engine=build_engine(config.engine),
        settings_store=MemorySettingsStore({"autoFormat": True, "autoFormatDebounceMs": 200}),
        bus=bus,
        notifier=StreamNotifier(),
    )
    await plugin.load()
    logger.info("Effective options=%s", await plugin.effective_options())

    await bus.emit(ACTIVE_DOCUMENT_CHANGED, "notes.md")
    await bus.emit(ACTIVE_DOCUMENT_CHANGED, "other.md")
    logger.info("Pending=%s", list(plugin.scheduler.pending_paths))

    await bus.emit(SHUTDOWN_REQUESTED)


if __name__ == "__main__":
    asyncio.run(main())
