"""Formatting engine contracts and adapters."""

from vault_formatter.config.models import EngineSettings
from vault_formatter.engine.cli import PrettierCliEngine
from vault_formatter.engine.http import PrettierHttpEngine
from vault_formatter.engine.interfaces import FormattingEngine, parser_for_path
from vault_formatter.engine.mock import MockFormattingEngine


def build_engine(settings: EngineSettings) -> FormattingEngine:
    if settings.kind == "http":
        return PrettierHttpEngine(url=settings.service_url, timeout_seconds=settings.timeout_seconds)
    if settings.kind == "mock":
        return MockFormattingEngine()
    return PrettierCliEngine(command=settings.command, timeout_seconds=settings.timeout_seconds)


__all__ = [
    "FormattingEngine",
    "MockFormattingEngine",
    "PrettierCliEngine",
    "PrettierHttpEngine",
    "build_engine",
    "parser_for_path",
]
