"""Deferred auto-format scheduling."""

from vault_formatter.autoformat.scheduler import AutoFormatScheduler, run_format

__all__ = ["AutoFormatScheduler", "run_format"]
