from __future__ import annotations

import asyncio
import logging
from typing import Any, Mapping, Optional

import aiohttp

from vault_formatter.errors import EngineError

logger = logging.getLogger(__name__)


class PrettierHttpEngine:
    """
    Formats through a long-running prettier service.

    Request body: {"text", "options", "parser", "filepath"}. A 2xx response carries
    {"text": <formatted>}; anything else carries {"error": <message>}.
    """

    def __init__(self, *, url: str, timeout_seconds: float = 10) -> None:
        self._url = url
        self._timeout = aiohttp.ClientTimeout(total=timeout_seconds)

    async def format(
        self,
        text: str,
        options: Mapping[str, Any],
        *,
        parser: Optional[str],
        filepath: str,
    ) -> str:
        payload = {"text": text, "options": dict(options), "parser": parser, "filepath": filepath}
        try:
            async with aiohttp.ClientSession(timeout=self._timeout) as session:
                async with session.post(self._url, json=payload) as response:
                    body = await response.json(content_type=None)
                    status = response.status
        except asyncio.TimeoutError:
            raise EngineError(filepath, "formatting service timed out") from None
        except aiohttp.ClientError as e:
            raise EngineError(filepath, f"formatting service request failed: {e}") from e
        except ValueError as e:
            raise EngineError(filepath, f"formatting service returned invalid JSON: {e}") from e

        if not isinstance(body, dict):
            raise EngineError(filepath, f"unexpected response from formatting service: {body!r}")
        if status >= 300:
            raise EngineError(filepath, str(body.get("error") or f"HTTP {status}"))
        formatted = body.get("text")
        if not isinstance(formatted, str):
            raise EngineError(filepath, "formatting service response has no text")
        return formatted
