from __future__ import annotations

import logging
import time
from typing import Any, Callable

from vault_formatter.config.interfaces import OptionsResolver
from vault_formatter.engine.interfaces import FormattingEngine, parser_for_path
from vault_formatter.errors import (
    DocumentNotFoundError,
    DocumentReadError,
    DocumentWriteError,
    EngineError,
    FormatError,
)
from vault_formatter.formatting.types import FormatOutcome
from vault_formatter.vault.filesystem import normalize_path
from vault_formatter.vault.interfaces import VaultStorage

logger = logging.getLogger(__name__)

BaselineProvider = Callable[[], dict[str, Any]]


class FormatCoordinator:
    """
    Formats one document end to end.

    Options are resolved fresh on every call since vault config files can change
    between calls. The document is written only when the engine output differs.
    """

    def __init__(
        self,
        *,
        storage: VaultStorage,
        engine: FormattingEngine,
        resolver: OptionsResolver,
        baseline: BaselineProvider,
    ) -> None:
        self._storage = storage
        self._engine = engine
        self._resolver = resolver
        self._baseline = baseline

    async def format_document(self, path: str) -> FormatOutcome:
        """
        Return CHANGED or UNCHANGED.

        Raises DocumentNotFoundError if the document is gone, or a FormatError
        subclass for read, engine and write failures.
        """
        path = normalize_path(path)
        started = time.perf_counter()

        if not await self._storage.exists(path):
            raise DocumentNotFoundError(path)

        try:
            original = await self._storage.read(path)
        except FileNotFoundError:
            raise DocumentNotFoundError(path) from None
        except (OSError, UnicodeDecodeError) as e:
            raise DocumentReadError(path, str(e)) from e

        options = await self._resolver.resolve_effective_options(self._baseline())
        parser = parser_for_path(path)

        try:
            formatted = await self._engine.format(original, options, parser=parser, filepath=path)
        except FormatError:
            raise
        except Exception as e:
            raise EngineError(path, f"{type(e).__name__}: {e}") from e

        elapsed_ms = int((time.perf_counter() - started) * 1000)
        if formatted == original:
            logger.debug("Document already formatted. path=%s latency_ms=%s", path, elapsed_ms)
            return FormatOutcome.UNCHANGED

        try:
            await self._storage.write(path, formatted)
        except OSError as e:
            raise DocumentWriteError(path, str(e)) from e

        logger.info("Document formatted. path=%s parser=%s latency_ms=%s", path, parser, elapsed_ms)
        return FormatOutcome.CHANGED
