"""Single-document formatting."""

from vault_formatter.formatting.coordinator import FormatCoordinator
from vault_formatter.formatting.types import FormatOutcome, FormatReport

__all__ = ["FormatCoordinator", "FormatOutcome", "FormatReport"]
