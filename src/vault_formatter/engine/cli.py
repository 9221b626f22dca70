from __future__ import annotations

import asyncio
import logging
import re
import shlex
from typing import Any, Mapping, Optional, Sequence

from vault_formatter.errors import EngineError

logger = logging.getLogger(__name__)

_CAMEL_BOUNDARY = re.compile(r"(?<!^)(?=[A-Z])")

# Options that only make sense to the in-process API.
_SKIPPED_OPTIONS = frozenset({"plugins", "parser", "filepath", "overrides"})


def _option_flag(name: str) -> str:
    return "--" + _CAMEL_BOUNDARY.sub("-", name).lower()


def build_cli_args(options: Mapping[str, Any], *, parser: Optional[str], filepath: str) -> list[str]:
    """Translate prettier options into CLI flags."""
    args = ["--no-config", "--stdin-filepath", filepath]
    if parser:
        args.extend(["--parser", parser])
    for name in sorted(options):
        if name in _SKIPPED_OPTIONS:
            continue
        value = options[name]
        if value is None:
            continue
        flag = _option_flag(name)
        if isinstance(value, bool):
            args.append(flag if value else "--no-" + flag[2:])
        elif isinstance(value, (int, float, str)):
            args.append(f"{flag}={value}")
        else:
            logger.debug("Ignoring non-scalar prettier option for CLI. option=%s", name)
    return args


class PrettierCliEngine:
    """Formats by piping content through the prettier command line."""

    def __init__(self, *, command: str | Sequence[str] = "prettier", timeout_seconds: float = 10) -> None:
        self._command = shlex.split(command) if isinstance(command, str) else list(command)
        self._timeout_seconds = timeout_seconds

    async def format(
        self,
        text: str,
        options: Mapping[str, Any],
        *,
        parser: Optional[str],
        filepath: str,
    ) -> str:
        args = [*self._command, *build_cli_args(options, parser=parser, filepath=filepath)]
        try:
            proc = await asyncio.create_subprocess_exec(
                *args,
                stdin=asyncio.subprocess.PIPE,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as e:
            raise EngineError(filepath, f"could not start {self._command[0]}: {e}") from e

        try:
            stdout, stderr = await asyncio.wait_for(
                proc.communicate(text.encode("utf-8")),
                timeout=self._timeout_seconds,
            )
        except asyncio.TimeoutError:
            proc.kill()
            await proc.wait()
            raise EngineError(filepath, f"prettier timed out after {self._timeout_seconds}s") from None

        if proc.returncode != 0:
            message = stderr.decode("utf-8", errors="replace").strip() or f"exit code {proc.returncode}"
            raise EngineError(filepath, message)
        return stdout.decode("utf-8")
