from __future__ import annotations

import argparse
import asyncio
import json
import logging
import os
import stat
import sys
from pathlib import Path
from typing import AsyncIterator, Optional

from vault_formatter.config import YamlConfigLoader
from vault_formatter.config.models import AppConfig, ConfigLoadRequest
from vault_formatter.engine import build_engine
from vault_formatter.formatting.types import FormatOutcome
from vault_formatter.host import ACTIVE_DOCUMENT_CHANGED, SHUTDOWN_REQUESTED, EventBus, StreamNotifier
from vault_formatter.logging import init_logging
from vault_formatter.plugin import FormatterPlugin
from vault_formatter.settings import SECTIONS, JsonSettingsStore, descriptors_for_section, get_setting_value
from vault_formatter.vault import FileSystemVault

logger = logging.getLogger(__name__)

FORMAT_COMMAND = "!format"


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="vault-formatter", description="Prettier formatting for a document vault")
    parser.add_argument(
        "--config",
        default="vault-formatter.yaml",
        help="Path to the YAML config file (default: vault-formatter.yaml)",
    )
    parser.add_argument(
        "--vault",
        default=None,
        help="Vault root directory (overrides vault.root from the config file)",
    )
    parser.add_argument(
        "--no-dotenv",
        action="store_true",
        help="Disable loading .env (env overrides still apply)",
    )
    subparsers = parser.add_subparsers(dest="command", required=True, help="Command to run")

    # Command: format
    format_parser = subparsers.add_parser("format", help="Format documents now")
    format_parser.add_argument("paths", nargs="+", help="Vault-relative document paths")

    # Command: options
    subparsers.add_parser("options", help="Print the effective formatting options as JSON")

    # Command: settings
    subparsers.add_parser("settings", help="List plugin settings and their current values")

    # Command: run
    run_parser = subparsers.add_parser(
        "run",
        help="Read active-document changes from stdin and auto format documents left behind",
    )
    run_parser.add_argument(
        "--run-seconds",
        type=float,
        default=None,
        help="Stop after N seconds even if stdin is still open (useful for smoke testing).",
    )

    return parser


async def _load_config(args: argparse.Namespace) -> AppConfig:
    loader = YamlConfigLoader()
    request = ConfigLoadRequest(
        yaml_path=args.config,
        dotenv_path=None if args.no_dotenv else ".env",
    )
    return await loader.load(request)


def _build_plugin(config: AppConfig, args: argparse.Namespace, bus: EventBus) -> FormatterPlugin:
    root = Path(args.vault or config.vault.root)
    settings_path = Path(config.vault.settings_path)
    if not settings_path.is_absolute():
        settings_path = root / settings_path
    return FormatterPlugin(
        storage=FileSystemVault(root),
        engine=build_engine(config.engine),
        settings_store=JsonSettingsStore(settings_path),
        bus=bus,
        notifier=StreamNotifier(),
    )


async def _format(plugin: FormatterPlugin, args: argparse.Namespace) -> int:
    await plugin.load_settings()
    failed = 0
    for path in args.paths:
        report = await plugin.format_document(path)
        if report.outcome in (FormatOutcome.FAILED, FormatOutcome.SKIPPED):
            failed += 1
    return 1 if failed else 0


async def _options(plugin: FormatterPlugin) -> int:
    await plugin.load_settings()
    options = await plugin.effective_options()
    print(json.dumps(options, indent=2, sort_keys=True))
    return 0


async def _settings(plugin: FormatterPlugin) -> int:
    await plugin.load_settings()
    for section in SECTIONS:
        print(f"[{section}]")
        for descriptor in descriptors_for_section(section):
            value = get_setting_value(plugin.settings, descriptor)
            print(f"  {descriptor.key} = {json.dumps(value)}  # {descriptor.description}")
    return 0


async def _stdin_lines() -> AsyncIterator[str]:
    # Pipe transports reject regular files, so redirected files are read in a worker thread.
    if stat.S_ISREG(os.fstat(sys.stdin.fileno()).st_mode):
        while True:
            line = await asyncio.to_thread(sys.stdin.readline)
            if not line:
                return
            yield line

    loop = asyncio.get_running_loop()
    reader = asyncio.StreamReader()
    await loop.connect_read_pipe(lambda: asyncio.StreamReaderProtocol(reader), sys.stdin)
    while True:
        raw = await reader.readline()
        if not raw:
            return
        yield raw.decode("utf-8")


async def _read_stdin_lines(bus: EventBus, plugin: FormatterPlugin) -> None:
    async for raw in _stdin_lines():
        line = raw.strip()
        if not line:
            continue
        if line == FORMAT_COMMAND:
            await plugin.format_current_document()
            continue
        await bus.emit(ACTIVE_DOCUMENT_CHANGED, line)


async def _run(plugin: FormatterPlugin, bus: EventBus, args: argparse.Namespace) -> int:
    await plugin.load()
    logger.info(
        "Watching stdin for active document changes. auto_format=%s debounce_ms=%s extensions=%s",
        plugin.settings.auto_format,
        plugin.settings.auto_format_debounce_ms,
        ",".join(plugin.settings.auto_format_extensions),
    )
    try:
        if args.run_seconds is not None:
            try:
                await asyncio.wait_for(_read_stdin_lines(bus, plugin), timeout=args.run_seconds)
            except asyncio.TimeoutError:
                logger.info("Run time elapsed. run_seconds=%s", args.run_seconds)
        else:
            await _read_stdin_lines(bus, plugin)
    finally:
        await bus.emit(SHUTDOWN_REQUESTED)
        # No-op when the shutdown handler already unloaded the plugin.
        await plugin.unload()
    return 0


async def _main_async(argv: Optional[list[str]] = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    config = await _load_config(args)
    init_logging(config.logging)

    bus = EventBus()
    plugin = _build_plugin(config, args, bus)

    if args.command == "format":
        return await _format(plugin, args)
    if args.command == "options":
        return await _options(plugin)
    if args.command == "settings":
        return await _settings(plugin)
    if args.command == "run":
        return await _run(plugin, bus, args)
    return 2


def main() -> None:
    try:
        code = asyncio.run(_main_async())
    except KeyboardInterrupt:
        logger.info("Interrupted by user.")
        code = 130
    raise SystemExit(code)


if __name__ == "__main__":
    main()
