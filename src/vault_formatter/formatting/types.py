from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Literal, Optional

from vault_formatter.errors import VaultFormatterError

Trigger = Literal["manual", "scheduled", "flush"]


class FormatOutcome(str, Enum):
    CHANGED = "changed"
    UNCHANGED = "unchanged"
    FAILED = "failed"
    SKIPPED = "skipped"


@dataclass(frozen=True, slots=True)
class FormatReport:
    """Result of one formatting attempt, as delivered to outcome listeners."""

    path: str
    outcome: FormatOutcome
    trigger: Trigger
    error: Optional[VaultFormatterError] = None
    elapsed_ms: int = 0
