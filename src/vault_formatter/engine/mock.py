from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Optional


@dataclass(frozen=True, slots=True)
class MockFormattingEngine:
    """
    A deterministic engine for smoke runs without prettier installed.

    Strips trailing whitespace from every line and ends the text with exactly one
    newline. Idempotent, like a real formatter.
    """

    async def format(
        self,
        text: str,
        options: Mapping[str, Any],
        *,
        parser: Optional[str],
        filepath: str,
    ) -> str:
        lines = [line.rstrip() for line in text.splitlines()]
        while lines and lines[-1] == "":
            lines.pop()
        if not lines:
            return ""
        return "\n".join(lines) + "\n"
